"""Typed inputs and outputs of the scene context synthesizer.

Inputs are defaulted at the upstream boundary (see ``scenelens.upstream.payloads``),
so nothing in the synthesis package checks for missing fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ConfidenceLevel(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TagResult:
    """A provider tag. ``confidence`` may be on a 0-1 or a 0-100 scale."""

    label: str
    confidence: float = 0.0


@dataclass(frozen=True)
class ColorResult:
    """A provider color with its share of the image, in dominance order."""

    hex: str
    percentage: float = 0.0


@dataclass(frozen=True)
class ObjectResult:
    """A provider object. Same confidence scale ambiguity as ``TagResult``."""

    label: str
    confidence: float = 0.0


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rgb:
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class RatedItem:
    """A tag or object with its normalized (0-100) confidence and level."""

    name: str
    confidence: float
    level: ConfidenceLevel


@dataclass(frozen=True)
class DominantColor:
    hex: str
    rgb: Rgb | None
    percentage: float
    name: str
    brightness: int


@dataclass(frozen=True)
class ColorAnalysis:
    dominant: tuple[DominantColor, ...]
    palette: tuple[str, ...]
    color_harmony: str
    avg_brightness: float
    vibrancy: str


@dataclass(frozen=True)
class TagCategories:
    entities: tuple[RatedItem, ...] = ()
    attributes: tuple[RatedItem, ...] = ()
    environment: tuple[RatedItem, ...] = ()
    actions: tuple[RatedItem, ...] = ()
    concepts: tuple[RatedItem, ...] = ()


@dataclass(frozen=True)
class ObjectsDetected:
    high_confidence: tuple[RatedItem, ...]
    all_objects: tuple[RatedItem, ...]


@dataclass(frozen=True)
class SceneAnalysis:
    description: str
    type: str
    setting: str
    mood: str
    dominant_theme: str


@dataclass(frozen=True)
class CompositionMetrics:
    object_diversity: int
    color_diversity: int
    tag_diversity: int
    complexity: str
    vibrancy: str


@dataclass(frozen=True)
class SceneContext:
    """Synthesized summary of one image analysis."""

    objects_detected: ObjectsDetected
    color_analysis: ColorAnalysis
    tags_by_category: TagCategories
    scene_analysis: SceneAnalysis
    composition_metrics: CompositionMetrics
    overall_confidence: float
    all_tags: tuple[RatedItem, ...]
