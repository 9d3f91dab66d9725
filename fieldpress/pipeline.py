"""
Signed Document Pipeline

Composition run from source bytes to the final download: field overlays,
optional audit trail, remote signing with visual-only fallback and the
download filename.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
import threading
from typing import Sequence

from fieldpress.config import Config, SignatureSettings
from fieldpress.errors import EmbedFailure
from fieldpress.filenames import download_filename
from fieldpress.model.audit import AuditLogEntry
from fieldpress.pdf.audit import Letterhead, append_audit_pages
from fieldpress.pdf.compositor import (
    CompositionOptions,
    CompositionReport,
    PdfWriteError,
    check_cancelled,
    compose_document,
)
from fieldpress.pdf.fonts import FontSet, resolve_fonts
from fieldpress.pdf.images import ImageFetcher, embed_image
from fieldpress.pdf.loader import load_pdf_bytes
from fieldpress.remote.client import ServiceClient
from fieldpress.signing.handoff import SignerIdentity, try_sign
from fieldpress.state.session import SigningSession

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CompositionResult:
    data: bytes
    filename: str
    signed: bool
    report: CompositionReport = field(default_factory=CompositionReport)
    audit_pages: int = 0
    unsigned_reason: str | None = None


def load_letterhead(settings: SignatureSettings, fetcher: ImageFetcher) -> Letterhead:
    logo = None
    if settings.logo_url:
        try:
            logo = embed_image(fetcher.fetch(settings.logo_url))
        except EmbedFailure as exc:
            logger.warning("Logo not found, continuing without logo: %s", exc)
    return Letterhead(logo=logo, company_name=settings.company_name)


def build_signed_pdf(
    source: bytes,
    session: SigningSession,
    *,
    client: ServiceClient | None = None,
    settings: SignatureSettings | None = None,
    fonts: FontSet | None = None,
    audit_entries: Sequence[AuditLogEntry] | None = None,
    letterhead: Letterhead | None = None,
    filename_format: str | None = None,
    sign: bool = True,
    signed_at: datetime | None = None,
    cancel: threading.Event | None = None,
) -> CompositionResult:
    settings = settings or SignatureSettings.from_config()
    fetcher = ImageFetcher(client)
    options = CompositionOptions(
        fetcher=fetcher,
        fonts=fonts or resolve_fonts(Config.FONT_PATH, Config.BOLD_FONT_PATH),
        settings=settings,
        stamp=session.stamp(signed_at),
        stroke_width=Config.STROKE_WIDTH,
        reference_width=Config.REFERENCE_WIDTH,
        reference_height=Config.REFERENCE_HEIGHT,
        cancel=cancel,
    )

    document = load_pdf_bytes(source)
    report = compose_document(document, session.fields, session.values, options)
    logger.info(
        "Composed %d field(s), %d skipped, %d failed",
        len(report.drawn),
        len(report.skipped),
        len(report.failed),
    )

    audit_pages = 0
    with_audit = bool(audit_entries)
    if audit_entries:
        check_cancelled(cancel, "audit pages")
        audit_pages = append_audit_pages(
            document,
            audit_entries,
            letterhead or load_letterhead(settings, fetcher),
            options.fonts,
            cancel,
        )

    try:
        composited = document.to_bytes()
    except (OSError, ValueError) as exc:
        raise PdfWriteError(f"Failed to write composed PDF: {exc}") from exc

    filename = download_filename(
        session.document_name,
        fmt=filename_format,
        submitter_email=session.submitter_email,
        submission_status=session.status,
        completed_at=session.completed_at or datetime.now().isoformat(),
        with_audit=with_audit,
    )

    if not sign:
        return CompositionResult(composited, filename, False, report, audit_pages, "signing disabled")

    check_cancelled(cancel, "signing")
    outcome = try_sign(
        composited,
        SignerIdentity.for_submitter(session.submitter_id, session.submitter_email),
        client,
        filename=filename,
    )
    if not outcome.signed:
        logger.warning("Downloaded visual-only PDF (digital signature not added): %s", outcome.reason)
    return CompositionResult(outcome.data, filename, outcome.signed, report, audit_pages, outcome.reason)


def download_signed_pdf(
    client: ServiceClient,
    file_path: str,
    session: SigningSession,
    *,
    audit_token: str | None = None,
    sign: bool = True,
    cancel: threading.Event | None = None,
) -> CompositionResult:
    """Fetch the source document and account preferences, then build the signed PDF."""
    source = client.fetch_source_pdf(file_path)
    settings = SignatureSettings.from_dict(client.fetch_settings())
    entries = client.fetch_audit_log(audit_token) if audit_token else []

    return build_signed_pdf(
        source,
        session,
        client=client,
        settings=settings,
        audit_entries=entries,
        filename_format=client.fetch_filename_format(),
        sign=sign,
        cancel=cancel,
    )
