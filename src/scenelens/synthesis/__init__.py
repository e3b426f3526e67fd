"""Scene context synthesis from provider tag, color and object results."""

from scenelens.synthesis.context import SynthesisOptions, build_scene_context

__all__ = ["SynthesisOptions", "build_scene_context"]
