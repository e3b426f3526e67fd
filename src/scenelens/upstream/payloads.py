"""Pydantic models for provider responses and their conversion to core inputs.

Missing fields are defaulted here so the synthesis package never sees a
partially-populated record. Wrongly-typed payloads raise
``MalformedPayloadError``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from scenelens.synthesis.types import ColorResult, ObjectResult, TagResult
from scenelens.upstream.errors import MalformedPayloadError

UNKNOWN_LABEL = "Unknown"


class LocalizedLabel(BaseModel):
    en: str | None = None


class ProviderTag(BaseModel):
    """A tag as returned by ``/v2/tags`` and ``/v2/auto_tagging``."""

    tag: LocalizedLabel | None = None
    confidence: float | None = None

    @property
    def label(self) -> str:
        if self.tag is None or not self.tag.en:
            return UNKNOWN_LABEL
        return self.tag.en


class ProviderColor(BaseModel):
    """A color entry; accepts both ``hex``/``percentage`` and ``html_code``/``percent``."""

    hex: str | None = None
    percentage: float | None = None
    html_code: str | None = None
    percent: float | None = None

    def to_color(self) -> ColorResult:
        value = self.hex or self.html_code or ""
        share = self.percentage if self.percentage is not None else self.percent
        return ColorResult(hex=value, percentage=share or 0.0)


class ImaggaColorSet(BaseModel):
    image_colors: list[ProviderColor] = Field(default_factory=list)


class TagsResult(BaseModel):
    tags: list[ProviderTag] = Field(default_factory=list)


class ColorsResult(BaseModel):
    colors: list[ProviderColor] | ImaggaColorSet | None = None

    def entries(self) -> list[ProviderColor]:
        if self.colors is None:
            return []
        if isinstance(self.colors, ImaggaColorSet):
            return self.colors.image_colors
        return self.colors


class TagsPayload(BaseModel):
    result: TagsResult = Field(default_factory=TagsResult)


class ColorsPayload(BaseModel):
    result: ColorsResult = Field(default_factory=ColorsResult)


def _validate(model: type[BaseModel], data: Any, section: str) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedPayloadError(f"Malformed {section} payload from provider", body=data) from exc


def parse_tags(data: dict[str, Any] | None) -> list[TagResult]:
    if data is None:
        return []
    payload: TagsPayload = _validate(TagsPayload, data, "tags")
    return [TagResult(label=t.label, confidence=t.confidence or 0.0) for t in payload.result.tags]


def parse_objects(data: dict[str, Any] | None) -> list[ObjectResult] | None:
    if data is None:
        return None
    payload: TagsPayload = _validate(TagsPayload, data, "objects")
    return [ObjectResult(label=t.label, confidence=t.confidence or 0.0) for t in payload.result.tags]


def parse_colors(data: dict[str, Any] | None) -> list[ColorResult] | None:
    if data is None:
        return None
    payload: ColorsPayload = _validate(ColorsPayload, data, "colors")
    return [c.to_color() for c in payload.result.entries()]
