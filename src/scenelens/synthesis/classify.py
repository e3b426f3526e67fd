"""Per-item classification of tags and objects."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from scenelens.synthesis.confidence import DEFAULT_THRESHOLDS, LevelThresholds, normalize_confidence, rate
from scenelens.synthesis.rules import CATEGORY_RULES, DEFAULT_CATEGORY, Rule
from scenelens.synthesis.types import ObjectsDetected, RatedItem, TagCategories

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scenelens.synthesis.types import ObjectResult, TagResult

HIGH_CONFIDENCE_OBJECT_LIMIT = 5
ALL_OBJECTS_LIMIT = 10


def categorize_tags(
    tags: Sequence[TagResult],
    thresholds: LevelThresholds = DEFAULT_THRESHOLDS,
    rules: Sequence[Rule] = CATEGORY_RULES,
) -> TagCategories:
    """Partition tags into the five categories, keeping every match.

    A tag goes to the first category whose keywords it contains; tags
    matching nothing land in ``concepts``.
    """
    buckets: dict[str, list[RatedItem]] = defaultdict(list)
    for tag in tags:
        name = tag.label.lower()
        category = next((r.label for r in rules if r.matches(name)), DEFAULT_CATEGORY)
        buckets[category].append(rate(tag.label, tag.confidence, thresholds))

    return TagCategories(
        entities=tuple(buckets["entities"]),
        attributes=tuple(buckets["attributes"]),
        environment=tuple(buckets["environment"]),
        actions=tuple(buckets["actions"]),
        concepts=tuple(buckets["concepts"]),
    )


def truncate_categories(categories: TagCategories, limit: int) -> TagCategories:
    return TagCategories(
        entities=categories.entities[:limit],
        attributes=categories.attributes[:limit],
        environment=categories.environment[:limit],
        actions=categories.actions[:limit],
        concepts=categories.concepts[:limit],
    )


def classify_objects(
    objects: Sequence[ObjectResult],
    high_confidence_threshold: float = 0.5,
    thresholds: LevelThresholds = DEFAULT_THRESHOLDS,
) -> ObjectsDetected:
    """Split objects into a high-confidence view and an unfiltered view.

    ``high_confidence_threshold`` is a 0-1 fraction compared against the
    normalized confidence; it is independent of the display levels.
    """
    confident = [o for o in objects if normalize_confidence(o.confidence) / 100 >= high_confidence_threshold]
    return ObjectsDetected(
        high_confidence=tuple(
            rate(o.label, o.confidence, thresholds) for o in confident[:HIGH_CONFIDENCE_OBJECT_LIMIT]
        ),
        all_objects=tuple(rate(o.label, o.confidence, thresholds) for o in objects[:ALL_OBJECTS_LIMIT]),
    )
