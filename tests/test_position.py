import pytest

from fieldpress.model.position import (
    FieldPosition,
    FractionalPosition,
    normalize,
    to_page_box,
)


class TestNormalize:
    def test_pixel_position_divides_by_reference_size(self):
        result = normalize(FieldPosition(x=60, y=80, width=150, height=40, page=2))
        assert result == FractionalPosition(x=0.1, y=0.1, width=0.25, height=0.05, page=2)

    def test_fractional_position_passes_through(self):
        result = normalize(FieldPosition(x=0.1, y=0.2, width=0.3, height=0.05))
        assert result == FractionalPosition(x=0.1, y=0.2, width=0.3, height=0.05, page=1)

    def test_any_component_above_one_marks_pixel_space(self):
        result = normalize(FieldPosition(x=0.5, y=0.5, width=120, height=0.5))
        assert result.width == pytest.approx(0.2)
        assert result.x == pytest.approx(0.5 / 600)

    def test_idempotent(self):
        once = normalize(FieldPosition(x=300, y=400, width=60, height=20))
        assert normalize(once) is once
        assert normalize(normalize(once)) == once

    def test_custom_reference_size(self):
        result = normalize(FieldPosition(x=100, y=100, width=100, height=100), 1000, 500)
        assert (result.x, result.y, result.width, result.height) == (0.1, 0.2, 0.1, 0.2)


class TestToPageBox:
    def test_flips_to_bottom_left_origin(self):
        box = to_page_box(FractionalPosition(0.1, 0.1, 0.3, 0.05), 600, 800)
        assert box.x == pytest.approx(60)
        assert box.width == pytest.approx(180)
        assert box.height == pytest.approx(40)
        assert box.y == pytest.approx(800 - 80 - 40)
        assert box.top == pytest.approx(720)

    def test_uses_actual_page_size(self):
        box = to_page_box(FractionalPosition(0.5, 0.5, 0.1, 0.1), 595, 842)
        assert box.x == pytest.approx(297.5)
        assert box.y == pytest.approx(842 - 421 - 84.2)

    def test_clamps_out_of_range_fractions(self):
        box = to_page_box(FractionalPosition(1.4, -0.2, 0.5, 2.0), 600, 800)
        assert box.width == pytest.approx(300)
        assert box.height == pytest.approx(800)
        assert box.x == pytest.approx(300)
        assert box.y == 0

    def test_box_stays_on_page(self):
        box = to_page_box(FractionalPosition(0.95, 0.98, 0.2, 0.1), 600, 800)
        assert box.x + box.width <= 600
        assert box.y >= 0


class TestFieldPosition:
    def test_from_dict_defaults_page(self):
        position = FieldPosition.from_dict({"x": 1, "y": "2", "width": 3, "height": 4})
        assert position.page == 1
        assert position.y == 2.0

    def test_to_dict_round_trip(self):
        position = FieldPosition(0.1, 0.2, 0.3, 0.4, page=3)
        assert FieldPosition.from_dict(position.to_dict()) == position
