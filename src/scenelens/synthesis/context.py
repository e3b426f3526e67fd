"""Scene context synthesis.

Pipeline:
    normalize confidence -> classify per item -> aggregate metrics -> assemble

Every function here is synchronous and side-effect free. ``colors`` and
``objects`` may be ``None`` when the provider call for that section failed;
they are treated as empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scenelens.synthesis.classify import categorize_tags, classify_objects, truncate_categories
from scenelens.synthesis.colors import DEFAULT_PALETTE, ColorPalette, analyze_colors
from scenelens.synthesis.confidence import DEFAULT_THRESHOLDS, LevelThresholds, average_confidence, rate
from scenelens.synthesis.scene import (
    composition_metrics,
    describe_scene,
    dominant_theme,
    scene_mood,
    scene_setting,
    scene_type,
)
from scenelens.synthesis.types import SceneAnalysis, SceneContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scenelens.config import Settings
    from scenelens.synthesis.types import ColorResult, ObjectResult, TagResult

TAG_LIMIT = 20
CATEGORY_LIMIT = 8


@dataclass(frozen=True)
class SynthesisOptions:
    """Tunables for one synthesis run."""

    palette: ColorPalette = DEFAULT_PALETTE
    thresholds: LevelThresholds = DEFAULT_THRESHOLDS
    object_confidence_threshold: float = 0.5

    @classmethod
    def from_settings(cls, settings: Settings) -> SynthesisOptions:
        return cls(
            thresholds=LevelThresholds(
                high=settings.high_level_threshold,
                medium=settings.medium_level_threshold,
            ),
            object_confidence_threshold=settings.object_confidence_threshold,
        )


def build_scene_context(
    tags: Sequence[TagResult],
    colors: Sequence[ColorResult] | None = None,
    objects: Sequence[ObjectResult] | None = None,
    *,
    options: SynthesisOptions | None = None,
) -> SceneContext:
    """Combine tag, color and object results into one ``SceneContext``."""
    opts = options or SynthesisOptions()
    tags = list(tags[:TAG_LIMIT])
    colors = list(colors or ())
    objects = list(objects or ())

    color_analysis = analyze_colors(colors, opts.palette)
    categories = categorize_tags(tags, opts.thresholds)

    return SceneContext(
        objects_detected=classify_objects(objects, opts.object_confidence_threshold, opts.thresholds),
        color_analysis=color_analysis,
        tags_by_category=truncate_categories(categories, CATEGORY_LIMIT),
        scene_analysis=SceneAnalysis(
            description=describe_scene(tags, objects, color_analysis.dominant),
            type=scene_type(tags),
            setting=scene_setting(tags),
            mood=scene_mood(color_analysis.dominant, tags),
            dominant_theme=dominant_theme(tags),
        ),
        composition_metrics=composition_metrics(
            tag_count=len(tags),
            object_count=len(objects),
            color_count=len(colors),
            vibrancy=color_analysis.vibrancy,
        ),
        overall_confidence=round(average_confidence(tags), 2),
        all_tags=tuple(rate(t.label, t.confidence, opts.thresholds) for t in tags),
    )
