"""Scene heuristics and composition metrics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scenelens.synthesis.colors import NEUTRAL_BRIGHTNESS
from scenelens.synthesis.rules import MOOD_TAG_RULES, SCENE_TYPE_RULES, SETTING_RULES, first_match
from scenelens.synthesis.types import CompositionMetrics

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scenelens.synthesis.types import DominantColor, ObjectResult, TagResult

UNKNOWN_THEME = "Unknown"
DIVERSITY_CAP = 10


def _labels(tags: Sequence[TagResult]) -> list[str]:
    return [t.label for t in tags]


def scene_type(tags: Sequence[TagResult]) -> str:
    return first_match(SCENE_TYPE_RULES, _labels(tags), default="General")


def scene_setting(tags: Sequence[TagResult]) -> str:
    return first_match(SETTING_RULES, _labels(tags), default="Unspecified")


def scene_mood(dominant: Sequence[DominantColor], tags: Sequence[TagResult]) -> str:
    """Derive the mood from the top three dominant colors, then from tags."""
    top = dominant[:3]
    level = sum(c.brightness for c in top) / len(top) if top else NEUTRAL_BRIGHTNESS

    if level > 70:
        return "Joyful and Luminous"
    if level < 30:
        return "Dark and Mysterious"
    return first_match(MOOD_TAG_RULES, _labels(tags), default="Neutral")


def dominant_theme(tags: Sequence[TagResult]) -> str:
    return tags[0].label if tags else UNKNOWN_THEME


def describe_scene(
    tags: Sequence[TagResult],
    objects: Sequence[ObjectResult],
    dominant: Sequence[DominantColor],
) -> str:
    """Fill the fixed description template from the top tags, objects and colors."""
    top_tags = ", ".join(t.label for t in tags[:6]) or "no recognizable content"
    sentences = [f"Image containing: {top_tags}."]
    if objects:
        sentences.append(f"Main objects: {', '.join(o.label for o in objects[:3])}.")
    if dominant:
        sentences.append(f"Color tones: {', '.join(c.name for c in dominant[:3])}.")
    return " ".join(sentences)


def complexity(tag_count: int, object_count: int, color_count: int) -> str:
    score = (tag_count * 0.4 + object_count * 0.3 + color_count * 0.3) / 2
    if score > 7:
        return "Very High"
    if score > 5:
        return "High"
    if score > 3:
        return "Medium"
    return "Low"


def composition_metrics(tag_count: int, object_count: int, color_count: int, vibrancy: str) -> CompositionMetrics:
    return CompositionMetrics(
        object_diversity=min(object_count, DIVERSITY_CAP),
        color_diversity=min(color_count, DIVERSITY_CAP),
        tag_diversity=min(tag_count, DIVERSITY_CAP),
        complexity=complexity(tag_count, object_count, color_count),
        vibrancy=vibrancy,
    )
