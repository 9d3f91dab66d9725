"""Audit trail pages appended after the composited document."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Iterable

from fieldpress.model.audit import AuditLogEntry
from fieldpress.model.document import WorkingDocument
from fieldpress.pdf.compositor import check_cancelled
from fieldpress.pdf.fonts import STANDARD_FONTS, FontSet
from fieldpress.pdf.images import EmbeddedImage
from fieldpress.pdf.overlay import Color, OverlayPage
from fieldpress.pdf.text import truncate, wrap_words

logger = logging.getLogger(__name__)

PAGE_WIDTH = 595.0
PAGE_HEIGHT = 842.0
MARGIN = 50.0
LINE_HEIGHT = 15.0
INDENT = 10.0
DETAILS_WIDTH = PAGE_WIDTH - 2 * MARGIN - 20

ENTRY_BREAK = 120.0
DETAILS_BREAK = 40.0
METADATA_BREAK = 20.0

TITLE = "Audit Log"
TITLE_SIZE = 18
COMPANY_SIZE = 16
LOGO_HEIGHT = 60.0
TIMESTAMP_SIZE = 10
BODY_SIZE = 9
METADATA_SIZE = 7
METADATA_STEP = 12.0
ENTRY_SPACING = 10.0
USER_AGENT_LIMIT = 50
USER_AGENT_KEEP = 47

USER_COLOR: Color = (0.2, 0.2, 0.2)
DETAILS_COLOR: Color = (0.3, 0.3, 0.3)
METADATA_COLOR: Color = (0.5, 0.5, 0.5)
SEPARATOR_COLOR: Color = (0.7, 0.7, 0.7)


@dataclass(frozen=True, slots=True)
class Letterhead:
    logo: EmbeddedImage | None = None
    company_name: str | None = None
    title: str = TITLE


class _AuditCursor:
    """Current page and baseline; appends a fresh A4 page on demand."""

    def __init__(self, document: WorkingDocument, cancel: threading.Event | None = None) -> None:
        self._document = document
        self._cancel = cancel
        self.page = self._new_page()
        self.y = PAGE_HEIGHT - MARGIN
        self.pages = 1

    def _new_page(self) -> OverlayPage:
        check_cancelled(self._cancel, "audit page")
        return self._document.add_page(PAGE_WIDTH, PAGE_HEIGHT)

    def ensure(self, threshold: float) -> None:
        if self.y < MARGIN + threshold:
            self.page = self._new_page()
            self.y = PAGE_HEIGHT - MARGIN
            self.pages += 1


def entry_metadata(entry: AuditLogEntry) -> list[str]:
    lines = []
    if entry.ip:
        lines.append(f"IP: {entry.ip}")
    if entry.session_id:
        lines.append(f"Session: {entry.session_id}")
    if entry.timezone:
        lines.append(f"Timezone: {entry.timezone}")
    if entry.user_agent:
        lines.append(f"User Agent: {truncate(entry.user_agent, USER_AGENT_LIMIT, USER_AGENT_KEEP)}")
    return lines


def append_audit_pages(
    document: WorkingDocument,
    entries: Iterable[AuditLogEntry],
    letterhead: Letterhead | None = None,
    fonts: FontSet | None = None,
    cancel: threading.Event | None = None,
) -> int:
    """Append A4 audit pages and return how many were added.

    ``cancel`` is checked before every page is added; a set event raises
    CompositionCancelled and leaves the pages appended so far in place.
    """
    fonts = fonts or STANDARD_FONTS
    cursor = _AuditCursor(document, cancel)
    _draw_header(cursor, letterhead or Letterhead(), fonts)

    for entry in entries:
        if not entry.is_complete:
            logger.warning("Skipping invalid audit log entry: %r", entry)
            continue
        _draw_entry(cursor, entry, fonts)

    return cursor.pages


def _draw_header(cursor: _AuditCursor, letterhead: Letterhead, fonts: FontSet) -> None:
    page = cursor.page
    title_width = fonts.width(letterhead.title, TITLE_SIZE, bold=True)
    title_x = PAGE_WIDTH - MARGIN - title_width

    if letterhead.logo is not None:
        logo_width, _ = letterhead.logo.scale(LOGO_HEIGHT / letterhead.logo.height)
        page.draw_image(
            letterhead.logo,
            x=MARGIN,
            y=cursor.y - LOGO_HEIGHT,
            width=logo_width,
            height=LOGO_HEIGHT,
        )
        title_y = cursor.y - LOGO_HEIGHT / 2 - 9
        if letterhead.company_name:
            page.draw_text(
                fonts.prepare(letterhead.company_name),
                x=MARGIN + logo_width + 20,
                y=title_y,
                size=COMPANY_SIZE,
                font=fonts.bold,
            )
            title_y -= 25
        page.draw_text(letterhead.title, x=title_x, y=title_y, size=TITLE_SIZE, font=fonts.bold)
        cursor.y -= LOGO_HEIGHT + 20
    else:
        title_y = cursor.y
        if letterhead.company_name:
            page.draw_text(
                fonts.prepare(letterhead.company_name),
                x=MARGIN,
                y=title_y,
                size=COMPANY_SIZE,
                font=fonts.bold,
            )
            title_y -= 25
        page.draw_text(letterhead.title, x=title_x, y=title_y, size=TITLE_SIZE, font=fonts.bold)
        cursor.y -= 30

    page.draw_line(MARGIN, cursor.y, PAGE_WIDTH - MARGIN, cursor.y, thickness=1)
    cursor.y -= 20


def _draw_entry(cursor: _AuditCursor, entry: AuditLogEntry, fonts: FontSet) -> None:
    cursor.ensure(ENTRY_BREAK)

    cursor.page.draw_text(
        fonts.prepare(entry.timestamp), x=MARGIN, y=cursor.y, size=TIMESTAMP_SIZE, font=fonts.bold
    )
    cursor.y -= LINE_HEIGHT
    cursor.page.draw_text(
        f"Action: {fonts.prepare(entry.action)}",
        x=MARGIN + INDENT,
        y=cursor.y,
        size=BODY_SIZE,
        font=fonts.regular,
    )
    cursor.y -= LINE_HEIGHT
    cursor.page.draw_text(
        f"User: {fonts.prepare(entry.user)}",
        x=MARGIN + INDENT,
        y=cursor.y,
        size=BODY_SIZE,
        font=fonts.regular,
        color=USER_COLOR,
    )
    cursor.y -= LINE_HEIGHT

    if entry.details:
        details = f"Details: {fonts.prepare(entry.details)}"
        lines = wrap_words(details, DETAILS_WIDTH, lambda text: fonts.width(text, BODY_SIZE))
        for index, line in enumerate(lines):
            if index:
                cursor.ensure(DETAILS_BREAK)
            cursor.page.draw_text(
                line,
                x=MARGIN + INDENT,
                y=cursor.y,
                size=BODY_SIZE,
                font=fonts.regular,
                color=DETAILS_COLOR,
            )
            cursor.y -= LINE_HEIGHT

    for line in entry_metadata(entry):
        cursor.ensure(METADATA_BREAK)
        cursor.page.draw_text(
            fonts.prepare(line),
            x=MARGIN + INDENT,
            y=cursor.y,
            size=METADATA_SIZE,
            font=fonts.regular,
            color=METADATA_COLOR,
        )
        cursor.y -= METADATA_STEP

    cursor.y -= ENTRY_SPACING
    if cursor.y > MARGIN + METADATA_BREAK:
        cursor.page.draw_line(
            MARGIN, cursor.y, PAGE_WIDTH - MARGIN, cursor.y, thickness=0.5, color=SEPARATOR_COLOR
        )
        cursor.y -= LINE_HEIGHT
