"""Confidence normalization, level classification and aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from scenelens.synthesis.types import ConfidenceLevel, RatedItem

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scenelens.synthesis.types import TagResult


@dataclass(frozen=True)
class LevelThresholds:
    """Lower bounds (as fractions of 1.0) for the HIGH and MEDIUM levels."""

    high: float = 0.8
    medium: float = 0.5


DEFAULT_THRESHOLDS = LevelThresholds()


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


def normalize_confidence(value: float) -> float:
    """Return ``value`` on the 0-100 scale.

    Values up to 1 are read as fractions, anything above as a percentage.
    A genuine 1% confidence is therefore indistinguishable from 1.0 and
    comes back as 100.
    """
    scaled = value * 100 if value <= 1 else value
    return _clamp(float(scaled))


def classify_confidence(fraction: float, thresholds: LevelThresholds = DEFAULT_THRESHOLDS) -> ConfidenceLevel:
    """Bucket a 0-1 confidence into HIGH, MEDIUM or LOW."""
    if fraction >= thresholds.high:
        return ConfidenceLevel.HIGH
    if fraction >= thresholds.medium:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def rate(name: str, raw_confidence: float, thresholds: LevelThresholds = DEFAULT_THRESHOLDS) -> RatedItem:
    """Build the display item for one tag or object."""
    normalized = normalize_confidence(raw_confidence)
    return RatedItem(
        name=name,
        confidence=round(normalized, 2),
        level=classify_confidence(normalized / 100, thresholds),
    )


def average_confidence(tags: Sequence[TagResult]) -> float:
    """Mean tag confidence on the 0-100 scale.

    The unit is decided once from the first tag and applied to the whole
    list, so a mixed list is never re-guessed item by item.
    """
    if not tags:
        return 0.0

    is_fraction = tags[0].confidence <= 1
    total = sum(t.confidence * 100 if is_fraction else t.confidence for t in tags)
    return _clamp(total / len(tags))
