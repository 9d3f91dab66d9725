"""PDF loading helpers."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from fieldpress.model.document import WorkingDocument


class PdfLoadError(RuntimeError):
    """Raised when a PDF cannot be opened."""


def load_pdf_bytes(data: bytes) -> WorkingDocument:
    if not data:
        raise PdfLoadError("Source document is empty")

    try:
        reader = PdfReader(BytesIO(data))
        if reader.is_encrypted:
            reader.decrypt("")
        writer = PdfWriter(clone_from=reader)
    except (PdfReadError, ValueError, OSError) as exc:
        raise PdfLoadError(f"Failed to open PDF: {exc}") from exc

    if not writer.pages:
        raise PdfLoadError("Source document has no pages")
    return WorkingDocument(writer=writer)


def load_pdf(path: str | Path) -> WorkingDocument:
    source_path = Path(path)
    if not source_path.exists():
        raise PdfLoadError(f"File not found: {source_path}")
    return load_pdf_bytes(source_path.read_bytes())
