"""Freehand stroke capture and replay onto drawing surfaces."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Protocol, Sequence

from PIL import Image, ImageDraw, ImageFont

from fieldpress.model.signature import Point, StrokeBounds, VectorSignature

FIT_PADDING = 5.0
METADATA_FONT_SIZE = 8
METADATA_LINE_HEIGHT = 8
METADATA_MARGIN = 2
DEFAULT_STROKE_WIDTH = 2.5


class DrawingSurface(Protocol):
    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def stroke(self) -> None: ...


class RasterSurface(DrawingSurface, Protocol):
    def draw_text_lines(self, lines: Sequence[str]) -> None: ...

    def to_image(self) -> bytes: ...


class StrokeRecorder:
    """Turns pointer events into ordered stroke groups."""

    def __init__(self) -> None:
        self._groups: list[list[Point]] = []
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_empty(self) -> bool:
        return not any(self._groups)

    @property
    def groups(self) -> list[list[Point]]:
        return [list(group) for group in self._groups]

    def pointer_down(self, x: float, y: float) -> None:
        self._groups.append([Point(x, y)])
        self._active = True

    def pointer_move(self, x: float, y: float) -> None:
        if not self._active:
            return
        self._groups[-1].append(Point(x, y))

    def pointer_up(self) -> None:
        self._active = False

    def clear(self) -> None:
        self._groups.clear()
        self._active = False

    def load(self, signature: VectorSignature) -> None:
        self._groups = [list(group) for group in signature.groups]
        self._active = False

    def to_signature(self) -> VectorSignature:
        return VectorSignature.from_points(group for group in self._groups if group)


@dataclass(frozen=True, slots=True)
class StrokeTransform:
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def apply(self, point: Point) -> tuple[float, float]:
        return point.x * self.scale + self.offset_x, point.y * self.scale + self.offset_y


def fit_transform(
    bounds: StrokeBounds,
    width: float,
    height: float,
    *,
    padding: float = FIT_PADDING,
    reserved_bottom: float = 0.0,
) -> StrokeTransform:
    drawable_height = height - reserved_bottom
    scale_x = (width - padding * 2) / bounds.width
    scale_y = (drawable_height - padding * 2) / bounds.height
    scale = max(min(scale_x, scale_y), 0.0)
    return StrokeTransform(
        scale=scale,
        offset_x=(width - bounds.width * scale) / 2 - bounds.min_x * scale,
        offset_y=(drawable_height - bounds.height * scale) / 2 - bounds.min_y * scale,
    )


def trace_strokes(
    groups: Sequence[Sequence[Point]],
    surface: DrawingSurface,
    transform: StrokeTransform = StrokeTransform(),
) -> None:
    for group in groups:
        if not group:
            continue
        surface.move_to(*transform.apply(group[0]))
        for point in group[1:]:
            surface.line_to(*transform.apply(point))
        surface.stroke()


def replay_to_image(
    groups: Sequence[Sequence[Point]],
    surface: RasterSurface,
    transform: StrokeTransform,
    metadata_lines: Sequence[str] = (),
) -> bytes:
    trace_strokes(groups, surface, transform)
    if metadata_lines:
        surface.draw_text_lines(metadata_lines)
    return surface.to_image()


def metadata_band_height(line_count: int) -> float:
    if line_count <= 0:
        return 0.0
    return (line_count - 1) * METADATA_LINE_HEIGHT + METADATA_FONT_SIZE + METADATA_MARGIN


class PillowSurface:
    """Off-screen transparent RGBA bitmap."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        stroke_width: float = DEFAULT_STROKE_WIDTH,
        color: tuple[int, int, int, int] = (0, 0, 0, 255),
    ) -> None:
        self.image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        self._draw = ImageDraw.Draw(self.image)
        self._width = max(1, round(stroke_width))
        self._color = color
        self._path: list[tuple[float, float]] = []

    def move_to(self, x: float, y: float) -> None:
        self._path = [(x, y)]

    def line_to(self, x: float, y: float) -> None:
        self._path.append((x, y))

    def stroke(self) -> None:
        if not self._path:
            return
        if len(self._path) >= 2:
            self._draw.line(self._path, fill=self._color, width=self._width, joint="curve")
        # round caps
        radius = self._width / 2
        for x, y in (self._path[0], self._path[-1]):
            self._draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=self._color)
        self._path = []

    def draw_text_lines(self, lines: Sequence[str]) -> None:
        font = ImageFont.load_default()
        baseline = self.image.height - METADATA_MARGIN
        for line in reversed(lines):
            self._draw.text((FIT_PADDING, baseline - METADATA_LINE_HEIGHT), line, fill=self._color, font=font)
            baseline -= METADATA_LINE_HEIGHT

    def to_image(self) -> bytes:
        buffer = BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()


def rasterize_signature(
    signature: VectorSignature,
    width: float,
    height: float,
    *,
    metadata_lines: Sequence[str] = (),
    stroke_width: float = DEFAULT_STROKE_WIDTH,
) -> bytes:
    """Render strokes into a PNG of exactly the target pixel size.

    Raises MalformedSignatureError for empty or degenerate stroke data.
    """
    bounds = signature.bounds()
    pixel_width = max(1, round(width))
    pixel_height = max(1, round(height))

    surface: RasterSurface = PillowSurface(pixel_width, pixel_height, stroke_width=stroke_width)
    transform = fit_transform(
        bounds,
        pixel_width,
        pixel_height,
        reserved_bottom=metadata_band_height(len(metadata_lines)),
    )
    return replay_to_image(signature.groups, surface, transform, metadata_lines)
