"""Font selection: standard Type 1 fonts or registered TrueType fonts."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from fieldpress.pdf.text import sanitize_text

logger = logging.getLogger(__name__)

CHECK_FONT = "ZapfDingbats"
CHECK_GLYPH = "4"


@dataclass(frozen=True, slots=True)
class FontSet:
    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    unicode: bool = False

    def prepare(self, text: str) -> str:
        return text if self.unicode else sanitize_text(text)

    def width(self, text: str, size: float, *, bold: bool = False) -> float:
        return pdfmetrics.stringWidth(text, self.bold if bold else self.regular, size)


STANDARD_FONTS = FontSet()


def resolve_fonts(font_path: str | None = None, bold_font_path: str | None = None) -> FontSet:
    if not font_path:
        return STANDARD_FONTS

    try:
        pdfmetrics.registerFont(TTFont("Fieldpress-Regular", font_path))
        bold = "Fieldpress-Regular"
        if bold_font_path:
            pdfmetrics.registerFont(TTFont("Fieldpress-Bold", bold_font_path))
            bold = "Fieldpress-Bold"
    except (TTFError, OSError) as exc:
        logger.warning("Failed to register font %s, falling back to Helvetica: %s", font_path, exc)
        return STANDARD_FONTS

    return FontSet(regular="Fieldpress-Regular", bold=bold, unicode=True)
