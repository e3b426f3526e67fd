"""Keyword rule tables for tag categorization and scene heuristics.

Each table is an ordered tuple of ``Rule`` values evaluated first-match-wins
against lower-cased tag labels using substring matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@dataclass(frozen=True)
class Rule:
    keywords: tuple[str, ...]
    label: str

    def matches(self, text: str) -> bool:
        return any(kw in text for kw in self.keywords)

    def matches_any(self, texts: Iterable[str]) -> bool:
        return any(self.matches(t) for t in texts)


def first_match(rules: Sequence[Rule], texts: Iterable[str], default: str) -> str:
    """Return the label of the first rule matching any of ``texts``."""
    lowered = [t.lower() for t in texts]
    for rule in rules:
        if rule.matches_any(lowered):
            return rule.label
    return default


# -- Tag categories ---------------------------------------------------------

CATEGORY_RULES: tuple[Rule, ...] = (
    Rule(
        (
            "person", "people", "man", "woman", "child", "animal", "dog",
            "cat", "bird", "car", "building", "tree", "flower", "plant",
        ),
        "entities",
    ),
    Rule(
        ("beautiful", "dark", "bright", "color", "colorful", "monochrome", "small", "large", "old", "new"),
        "attributes",
    ),
    Rule(
        (
            "outdoor", "indoor", "nature", "mountain", "sea", "beach",
            "forest", "city", "street", "sky", "water", "ground",
        ),
        "environment",
    ),
    Rule(
        ("running", "walking", "sitting", "standing", "playing", "sleeping", "eating", "jumping", "flying", "swimming"),
        "actions",
    ),
    Rule(
        ("love", "happy", "sad", "beautiful", "ugly", "fun", "serious", "calm", "exciting", "peaceful"),
        "concepts",
    ),
)

DEFAULT_CATEGORY = "concepts"

# -- Scene heuristics -------------------------------------------------------

SCENE_TYPE_RULES: tuple[Rule, ...] = (
    Rule(("portrait", "person"), "Portrait"),
    Rule(("landscape", "mountain"), "Landscape"),
    Rule(("food", "drink"), "Food"),
    Rule(("animal",), "Wildlife"),
    Rule(("building", "architecture"), "Architecture"),
    Rule(("nature", "outdoor"), "Nature"),
)

SETTING_RULES: tuple[Rule, ...] = (
    Rule(("indoor",), "Indoor"),
    Rule(("outdoor", "sky"), "Outdoor"),
    Rule(("night",), "Night"),
    Rule(("day",), "Day"),
)

# Consulted only when brightness alone does not decide the mood.
MOOD_TAG_RULES: tuple[Rule, ...] = (
    Rule(("nature", "calm"), "Calm and Serene"),
    Rule(("action", "sport"), "Dynamic and Energetic"),
)
