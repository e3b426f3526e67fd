"""Tests for provider payload parsing."""

from __future__ import annotations

import pytest

from scenelens.synthesis.types import ColorResult, ObjectResult, TagResult
from scenelens.upstream.errors import MalformedPayloadError
from scenelens.upstream.payloads import parse_colors, parse_objects, parse_tags


class TestParseTags:
    def test_reads_label_and_confidence(self) -> None:
        data = {"result": {"tags": [{"confidence": 61.4, "tag": {"en": "mountain"}}]}}
        assert parse_tags(data) == [TagResult(label="mountain", confidence=61.4)]

    def test_defaults_missing_fields(self) -> None:
        data = {"result": {"tags": [{"confidence": None}, {"tag": {}}, {"tag": {"en": "sky"}}]}}
        assert parse_tags(data) == [
            TagResult(label="Unknown", confidence=0.0),
            TagResult(label="Unknown", confidence=0.0),
            TagResult(label="sky", confidence=0.0),
        ]

    def test_missing_result_is_empty(self) -> None:
        assert parse_tags({}) == []
        assert parse_tags(None) == []

    def test_wrong_type_is_rejected(self) -> None:
        with pytest.raises(MalformedPayloadError):
            parse_tags({"result": {"tags": "mountain"}})


class TestParseObjects:
    def test_absent_section_stays_none(self) -> None:
        assert parse_objects(None) is None

    def test_reads_auto_tagging_shape(self) -> None:
        data = {"result": {"tags": [{"confidence": 88.0, "tag": {"en": "peak"}}]}}
        assert parse_objects(data) == [ObjectResult(label="peak", confidence=88.0)]


class TestParseColors:
    def test_absent_section_stays_none(self) -> None:
        assert parse_colors(None) is None

    def test_flat_shape(self) -> None:
        data = {"result": {"colors": [{"hex": "#ff0000", "percentage": 40.0}, {"hex": "00ff00"}]}}
        assert parse_colors(data) == [
            ColorResult(hex="#ff0000", percentage=40.0),
            ColorResult(hex="00ff00", percentage=0.0),
        ]

    def test_imagga_nested_shape(self) -> None:
        data = {
            "result": {
                "colors": {
                    "background_colors": [],
                    "image_colors": [{"html_code": "#3a5f8c", "percent": 45.1, "closest_palette_color": "blue"}],
                }
            }
        }
        assert parse_colors(data) == [ColorResult(hex="#3a5f8c", percentage=45.1)]

    def test_missing_hex_becomes_empty_string(self) -> None:
        assert parse_colors({"result": {"colors": [{"percentage": 12.0}]}}) == [ColorResult(hex="", percentage=12.0)]

    def test_wrong_type_is_rejected(self) -> None:
        with pytest.raises(MalformedPayloadError):
            parse_colors({"result": {"colors": [{"hex": ["#fff"]}]}})
