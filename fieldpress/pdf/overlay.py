"""Per-page drawing overlays built with reportlab, bottom-left origin."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from reportlab.pdfgen import canvas

from fieldpress.pdf.images import EmbeddedImage

Color = tuple[float, float, float]
BLACK: Color = (0.0, 0.0, 0.0)


@dataclass(frozen=True, slots=True)
class PageSize:
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class DrawOperation:
    kind: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    text: str = ""
    font: str = ""
    size: float = 0.0


class OverlayPage:
    """Drawing surface for one page; merged onto the real page when the document is saved."""

    def __init__(self, index: int, width: float, height: float) -> None:
        self.index = index
        self._size = PageSize(width=width, height=height)
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=(width, height))
        self._finished = False
        self.operations: list[DrawOperation] = []

    @property
    def is_empty(self) -> bool:
        return not self.operations

    def get_size(self) -> PageSize:
        return self._size

    def draw_text(
        self,
        text: str,
        *,
        x: float,
        y: float,
        size: float,
        font: str = "Helvetica",
        color: Color = BLACK,
    ) -> None:
        self._ensure_open()
        self._canvas.setFillColorRGB(*color)
        self._canvas.setFont(font, size)
        self._canvas.drawString(x, y, text)
        self.operations.append(DrawOperation("text", x, y, text=text, font=font, size=size))

    def draw_image(
        self,
        image: EmbeddedImage,
        *,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        self._ensure_open()
        self._canvas.drawImage(image.reader(), x, y, width=width, height=height, mask="auto")
        self.operations.append(DrawOperation("image", x, y, width=width, height=height))

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        thickness: float = 1.0,
        color: Color = BLACK,
    ) -> None:
        self._ensure_open()
        self._canvas.setStrokeColorRGB(*color)
        self._canvas.setLineWidth(thickness)
        self._canvas.line(x1, y1, x2, y2)
        self.operations.append(DrawOperation("line", x1, y1, width=x2 - x1, height=y2 - y1))

    def finish(self) -> bytes:
        if not self._finished:
            self._canvas.showPage()
            self._canvas.save()
            self._finished = True
        return self._buffer.getvalue()

    def _ensure_open(self) -> None:
        if self._finished:
            raise RuntimeError(f"Overlay for page {self.index + 1} is already finalized")
