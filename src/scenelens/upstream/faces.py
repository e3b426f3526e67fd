"""Shaping of face recognition results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from scenelens.synthesis.types import ConfidenceLevel

MATCH_THRESHOLD = 80.0


@dataclass(frozen=True)
class FaceMatch:
    person_id: str
    confidence: float
    level: ConfidenceLevel


def match_level(score: float) -> ConfidenceLevel:
    """Bucket a 0-100 similarity score. Bounds are exclusive."""
    if score > MATCH_THRESHOLD:
        return ConfidenceLevel.HIGH
    if score > 50:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def extract_matches(data: dict[str, Any]) -> list[FaceMatch]:
    """Read ``result.people`` from a recognition response, best match first."""
    people = (data.get("result") or {}).get("people") or []
    return [
        FaceMatch(
            person_id=str(p.get("id")),
            confidence=round(float(p.get("score") or 0.0), 2),
            level=match_level(float(p.get("score") or 0.0)),
        )
        for p in people
    ]


def extract_faces(data: dict[str, Any]) -> list[dict[str, Any]]:
    faces = (data.get("result") or {}).get("faces") or []
    return list(faces)
