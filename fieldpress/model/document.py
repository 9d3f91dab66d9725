"""Working document owned by a single composition run."""

from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO

from pypdf import PdfReader, PdfWriter, Transformation

from fieldpress.errors import PageIndexOutOfRange
from fieldpress.pdf.overlay import OverlayPage


@dataclass(slots=True)
class WorkingDocument:
    writer: PdfWriter
    overlays: dict[int, OverlayPage] = field(default_factory=dict)
    saved: bool = False

    @property
    def page_count(self) -> int:
        return len(self.writer.pages)

    def get_page(self, index: int) -> OverlayPage:
        if index < 0 or index >= self.page_count:
            raise PageIndexOutOfRange(index, self.page_count)

        overlay = self.overlays.get(index)
        if overlay is None:
            box = self.writer.pages[index].mediabox
            overlay = OverlayPage(index, float(box.width), float(box.height))
            self.overlays[index] = overlay
        return overlay

    def get_pages(self) -> list[OverlayPage]:
        return [self.get_page(index) for index in range(self.page_count)]

    def add_page(self, width: float, height: float) -> OverlayPage:
        self._ensure_not_saved()
        self.writer.add_blank_page(width=width, height=height)
        return self.get_page(self.page_count - 1)

    def to_bytes(self) -> bytes:
        self._ensure_not_saved()
        for index, overlay in sorted(self.overlays.items()):
            if overlay.is_empty:
                continue
            stamp = PdfReader(BytesIO(overlay.finish())).pages[0]
            page = self.writer.pages[index]
            box = page.mediabox
            page.merge_transformed_page(
                stamp,
                Transformation().translate(float(box.left), float(box.bottom)),
            )

        buffer = BytesIO()
        self.writer.write(buffer)
        self.saved = True
        return buffer.getvalue()

    def _ensure_not_saved(self) -> None:
        if self.saved:
            raise RuntimeError("Working document has already been saved")
