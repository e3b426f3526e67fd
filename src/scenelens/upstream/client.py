"""Async client for the Imagga recognition API.

Architecture:
    route -> ImaggaClient -> httpx.AsyncClient (shared, created in lifespan)

Analysis fans out to tags, colors and auto-tagging concurrently. Only the
tags call is mandatory; the other two degrade to ``None`` on failure.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

import httpx

from scenelens.upstream.errors import MalformedPayloadError, ProviderNotConfiguredError, UpstreamError

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from scenelens.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSource:
    """Either a public image URL or an id returned by ``/v2/uploads``."""

    kind: Literal["url", "upload"]
    value: str

    @property
    def params(self) -> dict[str, str]:
        if self.kind == "url":
            return {"image_url": self.value}
        return {"image_upload_id": self.value}


@dataclass(frozen=True)
class RawAnalysis:
    """Provider responses for one image; absent sections are ``None``."""

    tags: dict[str, Any]
    colors: dict[str, Any] | None
    objects: dict[str, Any] | None


class ImaggaClient:
    """Thin wrapper over the provider's REST endpoints."""

    def __init__(self, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    # -- Public API ---------------------------------------------------------

    async def upload(self, content: bytes, filename: str) -> ImageSource:
        """Upload raw image bytes and return a source usable by other calls."""
        data = await self._request("POST", "/v2/uploads", files={"image": (filename, content)})
        upload_id = (data.get("result") or {}).get("upload_id")
        if not upload_id:
            raise UpstreamError("No upload_id returned from provider", body=data)
        logger.info("Uploaded %s (%d bytes) as %s", filename, len(content), upload_id)
        return ImageSource(kind="upload", value=upload_id)

    async def analyze(self, source: ImageSource) -> RawAnalysis:
        """Fetch tags, colors and objects concurrently."""
        tags, colors, objects = await asyncio.gather(
            self._request("GET", "/v2/tags", params=source.params),
            self._optional("colors", self._request("GET", "/v2/colors", params=source.params)),
            self._optional("objects", self._request("GET", "/v2/auto_tagging", params=source.params)),
        )
        return RawAnalysis(tags=tags, colors=colors, objects=objects)

    async def analyze_with_retry(self, source: ImageSource) -> RawAnalysis:
        """Like ``analyze``, retried once when the provider returns a 5xx."""
        try:
            return await self.analyze(source)
        except UpstreamError as exc:
            if not exc.is_server_error:
                raise
            logger.warning("Provider returned %s during analysis, retrying once", exc.status_code)
            return await self.analyze(source)

    async def detect_faces(self, source: ImageSource) -> dict[str, Any]:
        params = {**source.params, "return_face_id": "1"}
        return await self._request("GET", "/v2/faces/detection", params=params)

    async def save_index(self, index_id: str, people: dict[str, list[str]]) -> dict[str, Any]:
        """Create or update a face recognition index."""
        return await self._request("PUT", f"/v2/faces/recognition/{index_id}", json={"people": people})

    async def recognize_face(self, index_id: str, face_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/v2/faces/recognition/{index_id}", params={"face_id": face_id})

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    # -- Internal -----------------------------------------------------------

    def _auth(self) -> httpx.BasicAuth:
        key = self._settings.imagga_api_key
        secret = self._settings.imagga_api_secret
        if not key or not secret:
            raise ProviderNotConfiguredError("Missing SCENELENS_IMAGGA_API_KEY/SCENELENS_IMAGGA_API_SECRET")
        return httpx.BasicAuth(key, secret)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        auth = self._auth()
        try:
            response = await self._http.request(method, path, auth=auth, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = _response_body(exc.response)
            logger.error("Provider error on %s %s: status=%s body=%s", method, path, exc.response.status_code, body)
            raise UpstreamError(
                f"Provider returned {exc.response.status_code} for {path}",
                status_code=exc.response.status_code,
                body=body,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Provider request %s %s failed: %s", method, path, exc)
            raise UpstreamError(f"Provider request to {path} failed: {exc}") from exc

        body = _response_body(response)
        if not isinstance(body, dict):
            raise MalformedPayloadError(f"Provider returned a non-object body for {path}", body=body)
        return body

    @staticmethod
    async def _optional(section: str, call: Awaitable[dict[str, Any]]) -> dict[str, Any] | None:
        try:
            return await call
        except UpstreamError as exc:
            logger.warning("Optional %s analysis unavailable: %s", section, exc)
            return None


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
