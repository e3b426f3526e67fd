"""Pydantic request/response schemas for the SceneLens API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from scenelens.synthesis.types import ConfidenceLevel


class _FromCore(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class RgbOut(_FromCore):
    r: int
    g: int
    b: int


class RatedItemOut(_FromCore):
    """A detected object with confidence normalized to 0-100."""

    name: str
    confidence: float = Field(ge=0.0, le=100.0)
    level: ConfidenceLevel


class TagItemOut(_FromCore):
    """A tag, keyed by ``tag`` rather than ``name``."""

    tag: str = Field(validation_alias=AliasChoices("name", "tag"))
    confidence: float = Field(ge=0.0, le=100.0)
    level: ConfidenceLevel


class DominantColorOut(_FromCore):
    hex: str
    rgb: RgbOut | None = Field(description="None when the provider hex is malformed")
    percentage: float
    name: str
    brightness: int = Field(description="Perceived luma (0-255)")


class ColorAnalysisOut(_FromCore):
    dominant: list[DominantColorOut]
    palette: list[str]
    color_harmony: str
    avg_brightness: float


class TagCategoriesOut(_FromCore):
    entities: list[TagItemOut]
    attributes: list[TagItemOut]
    environment: list[TagItemOut]
    actions: list[TagItemOut]
    concepts: list[TagItemOut]


class ObjectsDetectedOut(_FromCore):
    high_confidence: list[RatedItemOut]
    all_objects: list[RatedItemOut]


class SceneAnalysisOut(_FromCore):
    description: str
    type: str
    setting: str
    mood: str
    dominant_theme: str


class CompositionMetricsOut(_FromCore):
    object_diversity: int
    color_diversity: int
    tag_diversity: int
    complexity: str
    vibrancy: str


class SceneContextOut(_FromCore):
    """Synthesized scene summary."""

    objects_detected: ObjectsDetectedOut
    color_analysis: ColorAnalysisOut
    tags_by_category: TagCategoriesOut
    scene_analysis: SceneAnalysisOut
    composition_metrics: CompositionMetricsOut
    overall_confidence: float = Field(ge=0.0, le=100.0)
    all_tags: list[TagItemOut]


class RawAnalysisOut(BaseModel):
    """Unmodified provider responses; ``colors``/``objects`` are None when unavailable."""

    tags: dict[str, Any]
    colors: dict[str, Any] | None
    objects: dict[str, Any] | None


class AnalyzeResponse(BaseModel):
    source: Literal["url", "upload"]
    data: RawAnalysisOut
    context: SceneContextOut


class DetectFacesResponse(BaseModel):
    source: Literal["url", "upload"]
    faces: list[dict[str, Any]]
    raw: dict[str, Any]


class CreateIndexRequest(BaseModel):
    """Body of the index creation endpoint: person name -> face ids."""

    model_config = ConfigDict(populate_by_name=True)

    index_id: str = Field(alias="indexId", min_length=1)
    people: dict[str, list[str]]


class CreateIndexResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    index_id: str = Field(alias="indexId")
    result: Any = None
    message: str


class FaceMatchOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    person_id: str = Field(alias="personId")
    confidence: float
    level: ConfidenceLevel


class TopMatchOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    person_id: str = Field(alias="personId")
    confidence: float
    is_match: bool = Field(alias="isMatch")


class RecognizeFaceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    index_id: str = Field(alias="indexId")
    face_id: str = Field(alias="faceId")
    matches: list[FaceMatchOut]
    top_match: TopMatchOut | None = Field(alias="topMatch")
    raw: dict[str, Any]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    provider_configured: bool
    provider_endpoint: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    message: str | None = None
    upstream: Any = None
