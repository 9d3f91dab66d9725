import json

import pytest

from fieldpress.model.field import FieldType, FormField
from fieldpress.model.position import FieldPosition
from fieldpress.model.signature import VectorSignature
from fieldpress.render import renderer
from fieldpress.render.renderer import (
    GlyphDrawable,
    ImageDrawable,
    TextDrawable,
    VectorDrawable,
    is_visible,
    render_field,
)


def _field(field_type, field_id="f1", name="", **options):
    return FormField(
        id=field_id,
        name=name,
        field_type=FieldType(field_type),
        position=FieldPosition(0.1, 0.1, 0.3, 0.05),
        options=options,
    )


def test_every_field_type_has_a_handler():
    assert set(renderer._HANDLERS) == set(FieldType)


def test_empty_value_renders_nothing():
    assert render_field(_field("text"), "", 100, 20) is None


@pytest.mark.parametrize("field_type", ["text", "date", "number", "radio", "select"])
def test_text_like_fields(field_type):
    drawable = render_field(_field(field_type), "Alice", 180, 40)
    assert isinstance(drawable, TextDrawable)
    assert drawable.text == "Alice"
    assert drawable.font_size == 12
    assert drawable.baseline_offset == pytest.approx(12)


def test_font_size_follows_small_boxes():
    drawable = render_field(_field("text"), "x", 100, 10)
    assert drawable.font_size == pytest.approx(6)
    assert drawable.baseline_offset == pytest.approx(3)


class TestCheckbox:
    def test_checked(self):
        drawable = render_field(_field("checkbox"), "true", 20, 10)
        assert isinstance(drawable, GlyphDrawable)
        assert drawable.size == pytest.approx(8)

    @pytest.mark.parametrize("value", ["false", "True", "yes"])
    def test_anything_else_is_unchecked(self, value):
        assert render_field(_field("checkbox"), value, 20, 20) is None


class TestSignature:
    def test_vector_value(self):
        value = json.dumps([[{"x": 0, "y": 0}, {"x": 10, "y": 5}]])
        drawable = render_field(_field("signature"), value, 200, 100, metadata_lines=["ID: X"])
        assert isinstance(drawable, VectorDrawable)
        assert isinstance(drawable.signature, VectorSignature)
        assert drawable.metadata_lines == ("ID: X",)

    def test_raster_value(self):
        drawable = render_field(_field("initials"), "https://cdn.example/i.png", 50, 20)
        assert drawable == ImageDrawable(source="https://cdn.example/i.png", target_width=50, target_height=20)

    def test_typed_value(self):
        drawable = render_field(_field("signature"), "Jane Roe", 200, 30)
        assert isinstance(drawable, TextDrawable)
        assert drawable.text == "Jane Roe"

    def test_conformed_signature_is_typed_text(self):
        drawable = render_field(_field("signature"), "/s/ Alice Example", 200, 30)
        assert isinstance(drawable, TextDrawable)
        assert drawable.text == "/s/ Alice Example"


class TestImageAndFile:
    def test_image_requires_url(self):
        assert render_field(_field("image"), "not a url", 50, 50) is None
        assert isinstance(render_field(_field("image"), "data:image/png;base64,AAAA", 50, 50), ImageDrawable)

    def test_service_path_is_an_image(self):
        assert isinstance(render_field(_field("image"), "/api/files/photo.png", 50, 50), ImageDrawable)
        assert render_field(_field("image"), "/photo.png", 50, 50) is None

    def test_file_carries_label(self):
        drawable = render_field(_field("file"), "https://files.example/a/Tax%20Form.pdf?sig=1", 50, 50)
        assert drawable.label == "Tax Form.pdf"


def test_multiple_joins_choices():
    drawable = render_field(_field("multiple"), json.dumps(["Red", "Blue"]), 100, 20)
    assert drawable.text == "Red, Blue"
    assert render_field(_field("multiple"), "Green", 100, 20).text == "Green"


class TestCells:
    def test_truncated_to_columns(self):
        drawable = render_field(_field("cells", columns=4), "ABCDEFG", 100, 20)
        assert drawable.text == "ABCD"
        assert drawable.columns == 4

    def test_grid_cells_alias(self):
        assert FieldType("grid-cells") is FieldType.CELLS
        assert render_field(_field("grid-cells"), "ABCDE", 60, 20).columns == 3


class TestVisibility:
    def _fields(self, reference, predicate):
        trigger = _field("text", field_id="10", name="company")
        dependent = _field(
            "text",
            field_id="11",
            condition={"dependentField": reference, "condition": predicate},
        )
        return trigger, dependent

    @pytest.mark.parametrize("reference", ["company", "10", "field-10"])
    def test_not_empty(self, reference):
        trigger, dependent = self._fields(reference, "not_empty")
        fields = [trigger, dependent]
        assert not is_visible(dependent, fields, {"11": "x"})
        assert is_visible(dependent, fields, {"10": "Acme", "11": "x"})

    def test_empty_predicate_and_dashed_alias(self):
        trigger, dependent = self._fields("company", "empty")
        assert is_visible(dependent, [trigger, dependent], {})
        trigger, dependent = self._fields("company", "not-empty")
        assert not is_visible(dependent, [trigger, dependent], {})

    def test_unresolved_reference_is_visible(self):
        _, dependent = self._fields("nobody", "not_empty")
        assert is_visible(dependent, [dependent], {})
