"""Field geometry: legacy pixel/fractional positions and page-space boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_REFERENCE_WIDTH = 600.0
DEFAULT_REFERENCE_HEIGHT = 800.0


@dataclass(frozen=True, slots=True)
class FieldPosition:
    """Stored geometry, either all fractional or all pixels against the reference size."""

    x: float
    y: float
    width: float
    height: float
    page: int = 1

    @property
    def is_pixel_space(self) -> bool:
        return any(value > 1 for value in (self.x, self.y, self.width, self.height))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldPosition:
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            width=float(data.get("width", 0.0)),
            height=float(data.get("height", 0.0)),
            page=int(data.get("page", 1)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "page": self.page,
        }


@dataclass(frozen=True, slots=True)
class FractionalPosition:
    """Canonical geometry as ratios of the page, top-left origin. Not clamped."""

    x: float
    y: float
    width: float
    height: float
    page: int = 1


@dataclass(frozen=True, slots=True)
class PageBox:
    """A field box in page points with a bottom-left origin."""

    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y + self.height


def normalize(
    position: FieldPosition | FractionalPosition,
    reference_width: float = DEFAULT_REFERENCE_WIDTH,
    reference_height: float = DEFAULT_REFERENCE_HEIGHT,
) -> FractionalPosition:
    if isinstance(position, FractionalPosition):
        return position

    if not position.is_pixel_space:
        return FractionalPosition(
            x=position.x,
            y=position.y,
            width=position.width,
            height=position.height,
            page=position.page,
        )

    return FractionalPosition(
        x=position.x / reference_width,
        y=position.y / reference_height,
        width=position.width / reference_width,
        height=position.height / reference_height,
        page=position.page,
    )


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def to_page_box(position: FractionalPosition, page_width: float, page_height: float) -> PageBox:
    x = _clamp_unit(position.x) * page_width
    y = _clamp_unit(position.y) * page_height
    width = _clamp_unit(position.width) * page_width
    height = _clamp_unit(position.height) * page_height

    # Capture is top-left origin, PDF pages are bottom-left origin.
    return PageBox(
        x=max(0.0, min(page_width - width, x)),
        y=max(0.0, page_height - y - height),
        width=width,
        height=height,
    )
