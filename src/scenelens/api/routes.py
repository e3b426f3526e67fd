"""API route definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Depends, Form, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse

from scenelens.api.deps import get_provider, get_settings
from scenelens.api.middleware import verify_api_key
from scenelens.api.schemas import (
    AnalyzeResponse,
    CreateIndexRequest,
    CreateIndexResponse,
    DetectFacesResponse,
    ErrorResponse,
    FaceMatchOut,
    HealthResponse,
    RawAnalysisOut,
    RecognizeFaceResponse,
    SceneContextOut,
    TopMatchOut,
)
from scenelens.synthesis import SynthesisOptions, build_scene_context
from scenelens.upstream.client import ImageSource
from scenelens.upstream.errors import MalformedPayloadError, ProviderNotConfiguredError, UpstreamError
from scenelens.upstream.faces import MATCH_THRESHOLD, extract_faces, extract_matches
from scenelens.upstream.payloads import parse_colors, parse_objects, parse_tags

if TYPE_CHECKING:
    from collections.abc import Callable

    from scenelens.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", dependencies=[Depends(verify_api_key)])

_MISSING_IMAGE = "Provide image_url or upload an image file (form field: image)"

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_413_CONTENT_TOO_LARGE: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
}


def _error(status_code: int, detail: str, message: str | None = None, upstream: Any = None) -> JSONResponse:
    body = ErrorResponse(detail=detail, message=message, upstream=upstream)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _provider_failure(detail: str, exc: Exception) -> JSONResponse:
    """Map a provider-side exception to an error response."""
    if isinstance(exc, ProviderNotConfiguredError):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, message=str(exc))
    if isinstance(exc, MalformedPayloadError):
        return _error(status.HTTP_502_BAD_GATEWAY, detail, message=str(exc), upstream=exc.body)
    if isinstance(exc, UpstreamError):
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail,
            message=exc.provider_message or str(exc),
            upstream=exc.body,
        )
    raise exc


def _parse_optional(section: str, parse: Callable[[Any], list[Any] | None], data: Any) -> list[Any] | None:
    """Parse an optional section; a malformed one counts as absent."""
    try:
        return parse(data)
    except MalformedPayloadError as exc:
        logger.warning("Ignoring malformed %s section: %s", section, exc)
        return None


async def _read_upload(image: UploadFile, settings: Settings) -> bytes | None:
    if image.size is not None and image.size > settings.max_file_size:
        return None
    content = await image.read()
    if len(content) > settings.max_file_size:
        return None
    return content


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses=_ERROR_RESPONSES,
    summary="Analyze an image and synthesize its scene context",
)
async def analyze(
    request: Request,
    image_url: Annotated[str | None, Form()] = None,
    image: UploadFile | None = None,
) -> AnalyzeResponse | JSONResponse:
    """Run tags, colors and objects analysis on an image URL or upload."""
    settings = get_settings(request)
    provider = get_provider(request)

    try:
        if image_url:
            source = ImageSource(kind="url", value=image_url)
            raw = await provider.analyze(source)
        elif image is not None:
            content = await _read_upload(image, settings)
            if content is None:
                return _error(status.HTTP_413_CONTENT_TOO_LARGE, "Image exceeds the configured size limit")
            source = await provider.upload(content, image.filename or "upload.jpg")
            raw = await provider.analyze_with_retry(source)
        else:
            return _error(status.HTTP_400_BAD_REQUEST, _MISSING_IMAGE)

        context = build_scene_context(
            parse_tags(raw.tags),
            _parse_optional("colors", parse_colors, raw.colors),
            _parse_optional("objects", parse_objects, raw.objects),
            options=SynthesisOptions.from_settings(settings),
        )
    except (UpstreamError, ProviderNotConfiguredError) as exc:
        logger.error("Analysis failed: %s", exc)
        return _provider_failure("Analysis failed", exc)

    logger.info(
        "Analyzed %s image: type=%s, tags=%d",
        source.kind,
        context.scene_analysis.type,
        len(context.all_tags),
    )
    return AnalyzeResponse(
        source=source.kind,
        data=RawAnalysisOut(tags=raw.tags, colors=raw.colors, objects=raw.objects),
        context=SceneContextOut.model_validate(context),
    )


@router.post(
    "/detect-faces",
    response_model=DetectFacesResponse,
    responses=_ERROR_RESPONSES,
    summary="Detect faces in an image",
)
async def detect_faces(
    request: Request,
    image_url: Annotated[str | None, Form()] = None,
    image: UploadFile | None = None,
) -> DetectFacesResponse | JSONResponse:
    """Detect faces and return provider face ids for later recognition."""
    settings = get_settings(request)
    provider = get_provider(request)

    try:
        if image_url:
            source = ImageSource(kind="url", value=image_url)
            not_found = "No faces detected in URL image"
        elif image is not None:
            content = await _read_upload(image, settings)
            if content is None:
                return _error(status.HTTP_413_CONTENT_TOO_LARGE, "Image exceeds the configured size limit")
            source = await provider.upload(content, image.filename or "upload.jpg")
            not_found = "No faces detected in uploaded image"
        else:
            return _error(status.HTTP_400_BAD_REQUEST, _MISSING_IMAGE)
    except (UpstreamError, ProviderNotConfiguredError) as exc:
        logger.error("Face detection failed: %s", exc)
        return _provider_failure("Face detection failed", exc)

    try:
        data = await provider.detect_faces(source)
    except ProviderNotConfiguredError as exc:
        return _provider_failure("Face detection failed", exc)
    except UpstreamError as exc:
        logger.warning("Face detection rejected by provider: %s", exc)
        return _error(status.HTTP_400_BAD_REQUEST, not_found, message=exc.provider_message, upstream=exc.body)

    return DetectFacesResponse(source=source.kind, faces=extract_faces(data), raw=data)


@router.put(
    "/create-index",
    response_model=CreateIndexResponse,
    responses=_ERROR_RESPONSES,
    summary="Create or update a face recognition index",
)
async def create_index(request: Request, body: CreateIndexRequest) -> CreateIndexResponse | JSONResponse:
    """Register people and their face ids under ``indexId``."""
    provider = get_provider(request)
    try:
        data = await provider.save_index(body.index_id, body.people)
    except (UpstreamError, ProviderNotConfiguredError) as exc:
        logger.error("Index creation failed: %s", exc)
        return _provider_failure("Index creation failed", exc)

    logger.info("Saved index %s with %d people", body.index_id, len(body.people))
    return CreateIndexResponse(
        index_id=body.index_id,
        result=data.get("result"),
        message=f'Index "{body.index_id}" created/updated successfully',
    )


@router.get(
    "/recognize-face/{index_id}",
    response_model=RecognizeFaceResponse,
    responses=_ERROR_RESPONSES,
    summary="Match a detected face against an index",
)
async def recognize_face(
    request: Request,
    index_id: str,
    face_id: Annotated[str, Query(alias="faceId", min_length=1)],
) -> RecognizeFaceResponse | JSONResponse:
    """Return the people in ``index_id`` ranked by similarity to ``faceId``."""
    provider = get_provider(request)
    try:
        data = await provider.recognize_face(index_id, face_id)
    except (UpstreamError, ProviderNotConfiguredError) as exc:
        logger.error("Face recognition failed: %s", exc)
        return _provider_failure("Face recognition failed", exc)

    matches = extract_matches(data)
    top_match = None
    if matches:
        best = matches[0]
        top_match = TopMatchOut(
            person_id=best.person_id,
            confidence=best.confidence,
            is_match=best.confidence > MATCH_THRESHOLD,
        )

    return RecognizeFaceResponse(
        index_id=index_id,
        face_id=face_id,
        matches=[FaceMatchOut(person_id=m.person_id, confidence=m.confidence, level=m.level) for m in matches],
        top_match=top_match,
        raw=data,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    settings = get_settings(request)
    return HealthResponse(
        status="ok",
        provider_configured=settings.provider_configured,
        provider_endpoint=settings.imagga_endpoint,
    )
