"""PDF page previews using PyMuPDF."""

from __future__ import annotations

import fitz


class PdfRenderError(RuntimeError):
    """Raised when a page cannot be rendered."""


def open_pdf_bytes(data: bytes) -> fitz.Document:
    try:
        return fitz.open(stream=data, filetype="pdf")
    except Exception as exc:  # PyMuPDF raises its own error types
        raise PdfRenderError("Failed to open PDF for rendering") from exc


def render_page_png(data: bytes, page_index: int, zoom: float = 1.25) -> bytes:
    document = open_pdf_bytes(data)
    try:
        if page_index < 0 or page_index >= document.page_count:
            raise PdfRenderError(f"Page index out of range: {page_index}")

        try:
            page = document.load_page(page_index)
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False, annots=False)
        except Exception as exc:  # PyMuPDF raises its own error types
            raise PdfRenderError(f"Failed to render page {page_index + 1}") from exc
        return pix.tobytes("png")
    finally:
        document.close()


def page_text(data: bytes, page_index: int) -> str:
    document = open_pdf_bytes(data)
    try:
        if page_index < 0 or page_index >= document.page_count:
            raise PdfRenderError(f"Page index out of range: {page_index}")
        return document.load_page(page_index).get_text()
    finally:
        document.close()
