"""Tests for the provider client."""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from scenelens.config import Settings
from scenelens.upstream.client import ImageSource, ImaggaClient
from scenelens.upstream.errors import ProviderNotConfiguredError, UpstreamError

if TYPE_CHECKING:
    from collections.abc import Callable

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

TAGS = {"result": {"tags": [{"confidence": 92.5, "tag": {"en": "mountain"}}]}}
COLORS = {"result": {"colors": [{"hex": "#ffffff", "percentage": 60.0}]}}
OBJECTS = {"result": {"tags": [{"confidence": 88.0, "tag": {"en": "peak"}}]}}


def _make_settings(**overrides: object) -> Settings:
    defaults: dict[str, object] = {
        "imagga_api_key": "key",
        "imagga_api_secret": "secret",
        "imagga_endpoint": "https://provider.test",
    }
    defaults.update(overrides)
    return Settings(**defaults)  # type: ignore[arg-type]


def _make_client(handler: Callable[[httpx.Request], httpx.Response], **overrides: object) -> ImaggaClient:
    settings = _make_settings(**overrides)
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=settings.imagga_endpoint)
    return ImaggaClient(settings, http)


def _routes(responses: dict[str, httpx.Response], seen: list[httpx.Request] | None = None) -> Any:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return responses.get(request.url.path, httpx.Response(404, json={"status": {"text": "not found"}}))

    return handler


URL_SOURCE = ImageSource(kind="url", value="https://example.com/cat.jpg")


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


class TestAnalyze:
    async def test_all_sections(self) -> None:
        seen: list[httpx.Request] = []
        client = _make_client(
            _routes(
                {
                    "/v2/tags": httpx.Response(200, json=TAGS),
                    "/v2/colors": httpx.Response(200, json=COLORS),
                    "/v2/auto_tagging": httpx.Response(200, json=OBJECTS),
                },
                seen,
            )
        )

        raw = await client.analyze(URL_SOURCE)

        assert raw.tags == TAGS
        assert raw.colors == COLORS
        assert raw.objects == OBJECTS
        assert {r.url.params["image_url"] for r in seen} == {"https://example.com/cat.jpg"}

    async def test_sends_basic_auth(self) -> None:
        seen: list[httpx.Request] = []
        client = _make_client(_routes({"/v2/tags": httpx.Response(200, json=TAGS)}, seen))

        await client.analyze(URL_SOURCE)

        expected = "Basic " + base64.b64encode(b"key:secret").decode()
        assert all(r.headers["Authorization"] == expected for r in seen)

    async def test_optional_sections_degrade_to_none(self) -> None:
        client = _make_client(
            _routes(
                {
                    "/v2/tags": httpx.Response(200, json=TAGS),
                    "/v2/colors": httpx.Response(500, json={"status": {"text": "boom"}}),
                    "/v2/auto_tagging": httpx.Response(403, json={"status": {"text": "not in plan"}}),
                }
            )
        )

        raw = await client.analyze(URL_SOURCE)

        assert raw.tags == TAGS
        assert raw.colors is None
        assert raw.objects is None

    async def test_tags_failure_propagates(self) -> None:
        client = _make_client(
            _routes(
                {
                    "/v2/tags": httpx.Response(400, json={"status": {"text": "Invalid image URL", "type": "error"}}),
                    "/v2/colors": httpx.Response(200, json=COLORS),
                    "/v2/auto_tagging": httpx.Response(200, json=OBJECTS),
                }
            )
        )

        with pytest.raises(UpstreamError) as excinfo:
            await client.analyze(URL_SOURCE)

        assert excinfo.value.status_code == 400
        assert excinfo.value.provider_message == "Invalid image URL"
        assert not excinfo.value.is_server_error

    async def test_retry_once_on_server_error(self) -> None:
        calls = {"tags": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v2/tags":
                calls["tags"] += 1
                if calls["tags"] == 1:
                    return httpx.Response(503, json={"status": {"text": "busy"}})
                return httpx.Response(200, json=TAGS)
            return httpx.Response(200, json=COLORS)

        client = _make_client(handler)
        raw = await client.analyze_with_retry(ImageSource(kind="upload", value="i123"))

        assert raw.tags == TAGS
        assert calls["tags"] == 2

    async def test_no_retry_on_client_error(self) -> None:
        calls = {"tags": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v2/tags":
                calls["tags"] += 1
                return httpx.Response(401, json={"status": {"text": "bad credentials"}})
            return httpx.Response(200, json=COLORS)

        client = _make_client(handler)
        with pytest.raises(UpstreamError):
            await client.analyze_with_retry(URL_SOURCE)
        assert calls["tags"] == 1

    async def test_transport_failure_is_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _make_client(handler)
        with pytest.raises(UpstreamError) as excinfo:
            await client.analyze(URL_SOURCE)
        assert excinfo.value.status_code is None

    async def test_missing_credentials(self) -> None:
        client = _make_client(_routes({}), imagga_api_key=None)
        with pytest.raises(ProviderNotConfiguredError, match="SCENELENS_IMAGGA_API_KEY"):
            await client.analyze(URL_SOURCE)


# ---------------------------------------------------------------------------
# Uploads, faces and indexes
# ---------------------------------------------------------------------------


class TestUpload:
    async def test_returns_upload_source(self) -> None:
        seen: list[httpx.Request] = []
        client = _make_client(
            _routes({"/v2/uploads": httpx.Response(200, json={"result": {"upload_id": "i05e1"}})}, seen)
        )

        source = await client.upload(b"\xff\xd8fake", "photo.jpg")

        assert source == ImageSource(kind="upload", value="i05e1")
        assert source.params == {"image_upload_id": "i05e1"}
        assert seen[0].method == "POST"
        assert b"photo.jpg" in seen[0].content

    async def test_missing_upload_id(self) -> None:
        client = _make_client(_routes({"/v2/uploads": httpx.Response(200, json={"result": {}})}))
        with pytest.raises(UpstreamError, match="upload_id"):
            await client.upload(b"data", "photo.jpg")


class TestFaces:
    async def test_detect_faces_requests_face_ids(self) -> None:
        seen: list[httpx.Request] = []
        client = _make_client(
            _routes({"/v2/faces/detection": httpx.Response(200, json={"result": {"faces": []}})}, seen)
        )

        await client.detect_faces(URL_SOURCE)

        assert seen[0].url.params["return_face_id"] == "1"

    async def test_save_index_puts_people(self) -> None:
        seen: list[httpx.Request] = []
        client = _make_client(
            _routes({"/v2/faces/recognition/celebs": httpx.Response(200, json={"result": {"ticket_id": "t1"}})}, seen)
        )

        data = await client.save_index("celebs", {"ada": ["f1", "f2"]})

        assert data == {"result": {"ticket_id": "t1"}}
        assert seen[0].method == "PUT"
        assert json.loads(seen[0].content) == {"people": {"ada": ["f1", "f2"]}}

    async def test_recognize_face_passes_face_id(self) -> None:
        seen: list[httpx.Request] = []
        client = _make_client(
            _routes({"/v2/faces/recognition/celebs": httpx.Response(200, json={"result": {"people": []}})}, seen)
        )

        await client.recognize_face("celebs", "f9")

        assert seen[0].url.params["face_id"] == "f9"
