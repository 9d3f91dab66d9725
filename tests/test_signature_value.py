import json

import pytest

from fieldpress.errors import MalformedSignatureError
from fieldpress.model.signature import (
    Point,
    RasterSignature,
    TextSignature,
    VectorSignature,
    parse_signature_value,
)


class TestParseSignatureValue:
    @pytest.mark.parametrize(
        "value",
        [
            "data:image/png;base64,iVBORw0KGgo=",
            "blob:https://app.example/1234",
            "https://cdn.example/sig.png",
            "/api/files/sig.png",
        ],
    )
    def test_urls_are_raster(self, value):
        assert parse_signature_value(value) == RasterSignature(url=value)

    def test_stroke_json_is_vector(self):
        value = json.dumps([[{"x": 1, "y": 2}, {"x": 3, "y": 4}], [{"x": 5, "y": 6}]])
        result = parse_signature_value(value)
        assert isinstance(result, VectorSignature)
        assert result.groups == ((Point(1, 2), Point(3, 4)), (Point(5, 6),))

    def test_bare_base64_becomes_png_data_url(self):
        payload = "A" * 120 + "=="
        result = parse_signature_value(payload)
        assert result == RasterSignature(url=f"data:image/png;base64,{payload}")

    def test_short_base64_like_text_is_text(self):
        assert parse_signature_value("Alice") == TextSignature(text="Alice")

    @pytest.mark.parametrize("value", ["/s/ Alice Example", "/Alice/"])
    def test_slash_prefixed_typed_text_is_text(self, value):
        assert parse_signature_value(value) == TextSignature(text=value)

    @pytest.mark.parametrize("value", ["[]", "[1, 2]", '[[{"x": "a", "y": 1}]]', "{not json"])
    def test_other_values_are_text(self, value):
        assert parse_signature_value(value) == TextSignature(text=value)


class TestVectorSignature:
    def test_bounds(self):
        signature = VectorSignature.from_points([[Point(10, 10), Point(110, 60)]])
        bounds = signature.bounds()
        assert (bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y) == (10, 10, 110, 60)
        assert (bounds.width, bounds.height) == (100, 50)

    def test_empty_groups_are_malformed(self):
        with pytest.raises(MalformedSignatureError):
            VectorSignature.from_points([]).bounds()

    def test_single_point_is_degenerate(self):
        with pytest.raises(MalformedSignatureError):
            VectorSignature.from_points([[Point(5, 5)]]).bounds()

    def test_to_json_parses_back(self):
        signature = VectorSignature.from_points([[Point(0, 0), Point(4, 2)]])
        assert parse_signature_value(signature.to_json()) == signature
