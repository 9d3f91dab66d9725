"""Field composition: draws captured values onto the source pages via reportlab overlays."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import threading
from typing import Mapping, Sequence, assert_never

from fieldpress.config import SignatureSettings
from fieldpress.errors import (
    CompositionCancelled,
    EmbedFailure,
    MalformedSignatureError,
    PageIndexOutOfRange,
)
from fieldpress.model.document import WorkingDocument
from fieldpress.model.field import FormField
from fieldpress.model.position import (
    DEFAULT_REFERENCE_HEIGHT,
    DEFAULT_REFERENCE_WIDTH,
    PageBox,
    normalize,
    to_page_box,
)
from fieldpress.pdf.fonts import CHECK_FONT, CHECK_GLYPH, STANDARD_FONTS, FontSet
from fieldpress.pdf.images import ImageFetcher, embed_image
from fieldpress.pdf.loader import load_pdf_bytes
from fieldpress.pdf.overlay import OverlayPage
from fieldpress.render.renderer import (
    Drawable,
    GlyphDrawable,
    ImageDrawable,
    RenderContext,
    TextDrawable,
    VectorDrawable,
    is_visible,
    render_field,
    text_drawable,
)
from fieldpress.signature.metadata import SignerStamp, metadata_lines
from fieldpress.signature.strokes import DEFAULT_STROKE_WIDTH, rasterize_signature

logger = logging.getLogger(__name__)

SIGNATURE_PLACEHOLDER = "[Signature]"
MISSING_PLACEHOLDER = "[missing]"


class PdfWriteError(RuntimeError):
    """Raised when output generation fails."""


@dataclass(slots=True)
class CompositionReport:
    drawn: list[str] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    attachments: list[tuple[str, str]] = field(default_factory=list)


@dataclass(slots=True)
class CompositionOptions:
    fetcher: ImageFetcher = field(default_factory=ImageFetcher)
    fonts: FontSet = STANDARD_FONTS
    settings: SignatureSettings = field(default_factory=SignatureSettings)
    stamp: SignerStamp | None = None
    stroke_width: float = DEFAULT_STROKE_WIDTH
    reference_width: float = DEFAULT_REFERENCE_WIDTH
    reference_height: float = DEFAULT_REFERENCE_HEIGHT
    cancel: threading.Event | None = None


def check_cancelled(cancel: threading.Event | None, step: str) -> None:
    if cancel is not None and cancel.is_set():
        raise CompositionCancelled(f"Composition cancelled before {step}")


def compose_pdf(
    source_bytes: bytes,
    fields: Sequence[FormField],
    values: Mapping[str, str],
    options: CompositionOptions | None = None,
) -> bytes:
    document = load_pdf_bytes(source_bytes)
    compose_document(document, fields, values, options)
    try:
        return document.to_bytes()
    except (OSError, ValueError) as exc:
        raise PdfWriteError(f"Failed to write composed PDF: {exc}") from exc


def compose_document(
    document: WorkingDocument,
    fields: Sequence[FormField],
    values: Mapping[str, str],
    options: CompositionOptions | None = None,
) -> CompositionReport:
    options = options or CompositionOptions()
    report = CompositionReport()

    for form_field in fields:
        check_cancelled(options.cancel, f"field {form_field.id}")

        value = values.get(form_field.id) or ""
        if not value:
            continue
        if not is_visible(form_field, fields, values):
            report.skipped.append((form_field.id, "hidden by condition"))
            continue

        try:
            page = document.get_page(form_field.position.page - 1)
        except PageIndexOutOfRange as exc:
            logger.debug("Skipping field %s: %s", form_field.id, exc)
            report.skipped.append((form_field.id, str(exc)))
            continue

        size = page.get_size()
        fractional = normalize(form_field.position, options.reference_width, options.reference_height)
        box = to_page_box(fractional, size.width, size.height)
        drawable = render_field(
            form_field,
            value,
            box.width,
            box.height,
            metadata_lines=metadata_lines(form_field.field_type, options.stamp, options.settings),
        )
        if drawable is None:
            continue

        if isinstance(drawable, ImageDrawable) and drawable.label:
            report.attachments.append((form_field.id, drawable.label))

        try:
            _draw(page, drawable, box, options)
        except MalformedSignatureError as exc:
            logger.warning("Error rendering vector signature for field %s: %s", form_field.id, exc)
            report.failed.append((form_field.id, str(exc)))
            _draw_placeholder(page, SIGNATURE_PLACEHOLDER, box, options.fonts)
            continue
        except EmbedFailure as exc:
            logger.warning("Error embedding image for field %s: %s", form_field.id, exc)
            report.failed.append((form_field.id, str(exc)))
            if form_field.field_type.is_signature:
                _draw_placeholder(page, MISSING_PLACEHOLDER, box, options.fonts)
            continue

        report.drawn.append(form_field.id)

    return report


def _draw(page: OverlayPage, drawable: Drawable, box: PageBox, options: CompositionOptions) -> None:
    match drawable:
        case TextDrawable():
            _draw_text(page, drawable, box, options.fonts)
        case GlyphDrawable():
            page.draw_text(
                CHECK_GLYPH,
                x=box.x + (box.width - drawable.size) / 2,
                y=box.y + (box.height - drawable.size) / 2,
                size=drawable.size,
                font=CHECK_FONT,
            )
        case ImageDrawable():
            image = embed_image(options.fetcher.fetch(drawable.source))
            width, height = image.fit_within(box.width, box.height)
            # anchored at the box's top-left corner
            page.draw_image(image, x=box.x, y=box.top - height, width=width, height=height)
        case VectorDrawable():
            png = rasterize_signature(
                drawable.signature,
                drawable.target_width,
                drawable.target_height,
                metadata_lines=drawable.metadata_lines,
                stroke_width=options.stroke_width,
            )
            page.draw_image(embed_image(png), x=box.x, y=box.y, width=box.width, height=box.height)
        case _:
            assert_never(drawable)


def _draw_text(page: OverlayPage, drawable: TextDrawable, box: PageBox, fonts: FontSet) -> None:
    text = fonts.prepare(drawable.text)
    baseline = box.y + drawable.baseline_offset
    if drawable.columns <= 1:
        page.draw_text(text, x=box.x, y=baseline, size=drawable.font_size, font=fonts.regular)
        return

    cell_width = box.width / drawable.columns
    for index, char in enumerate(text[: drawable.columns]):
        char_width = fonts.width(char, drawable.font_size)
        page.draw_text(
            char,
            x=box.x + index * cell_width + (cell_width - char_width) / 2,
            y=baseline,
            size=drawable.font_size,
            font=fonts.regular,
        )


def _draw_placeholder(page: OverlayPage, text: str, box: PageBox, fonts: FontSet) -> None:
    drawable = text_drawable(text, RenderContext(target_width=box.width, target_height=box.height))
    _draw_text(page, drawable, box, fonts)

