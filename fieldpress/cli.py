"""CLI entrypoint.

Commands:
- `fieldpress compose --source doc.pdf --fields fields.json --values values.json [--audit audit.json] [--sign]`
- `fieldpress preview --pdf doc.pdf --page 1 --out page.png`
- `fieldpress pad [--initials]`
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import replace

from fieldpress.config import Config, SignatureSettings
from fieldpress.errors import CompositionError
from fieldpress.logging_ import setup_logging
from fieldpress.model.audit import AuditLogEntry
from fieldpress.model.field import FieldType, FormField
from fieldpress.pdf.audit import Letterhead
from fieldpress.pdf.images import embed_image
from fieldpress.pdf.loader import PdfLoadError
from fieldpress.pdf.renderer import PdfRenderError, render_page_png
from fieldpress.pipeline import build_signed_pdf
from fieldpress.remote.client import ENVELOPE_RECORD_TYPE, ServiceClient
from fieldpress.state.session import SigningSession

logger = logging.getLogger(__name__)


def _load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _compose(args: argparse.Namespace) -> int:
    session = SigningSession(
        fields=[FormField.from_dict(raw) for raw in _load_json(args.fields)],
        values={str(k): "" if v is None else str(v) for k, v in _load_json(args.values).items()},
        document_name=args.document_name or os.path.splitext(os.path.basename(args.source))[0],
        submitter_id=args.submitter_id,
        submitter_email=args.submitter_email,
        reason=args.reason,
    )
    for form_field in session.missing_required():
        logger.warning("Required field %s (%s) has no value", form_field.id, form_field.name)

    entries = None
    if args.audit:
        entries = [
            AuditLogEntry.from_dict(record)
            for record in _load_json(args.audit)
            if isinstance(record, dict) and record.get("type") != ENVELOPE_RECORD_TYPE
        ]

    settings = SignatureSettings.from_config()
    if args.company_name:
        settings = replace(settings, company_name=args.company_name)
    letterhead = None
    if args.logo:
        letterhead = Letterhead(logo=embed_image(_read_bytes(args.logo)), company_name=settings.company_name)

    client = ServiceClient.from_config() if args.sign else None
    result = build_signed_pdf(
        _read_bytes(args.source),
        session,
        client=client,
        settings=settings,
        audit_entries=entries,
        letterhead=letterhead,
        filename_format=client.fetch_filename_format() if client else None,
        sign=args.sign,
    )

    os.makedirs(args.out_dir, exist_ok=True)
    out_path = os.path.join(args.out_dir, result.filename)
    if os.path.abspath(out_path) == os.path.abspath(args.source):
        logger.error("Refusing to overwrite the source document: %s", out_path)
        return 1
    with open(out_path, "wb") as f:
        f.write(result.data)

    state = "signed" if result.signed else f"unsigned ({result.unsigned_reason})"
    print(f"{out_path} [{state}]")
    return 0


def _preview(args: argparse.Namespace) -> int:
    png = render_page_png(_read_bytes(args.pdf), args.page - 1, zoom=args.zoom)
    with open(args.out, "wb") as f:
        f.write(png)
    print(args.out)
    return 0


def _pad(args: argparse.Namespace) -> int:
    from PySide6.QtWidgets import QApplication, QDialog

    from fieldpress.ui.signature_dialog import SignatureDialog

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("fieldpress")
    dialog = SignatureDialog(FieldType.INITIALS if args.initials else FieldType.SIGNATURE)
    if dialog.exec() != QDialog.DialogCode.Accepted:
        return 1
    print(dialog.value())
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="fieldpress")
    p.add_argument("--log-level", default=Config.LOG_LEVEL)
    p.add_argument("--log-file")
    sub = p.add_subparsers(dest="cmd", required=True)

    pc = sub.add_parser("compose", help="Draw field values onto a PDF")
    pc.add_argument("--source", required=True)
    pc.add_argument("--fields", required=True, help="JSON list of field definitions")
    pc.add_argument("--values", required=True, help="JSON object of field id -> value")
    pc.add_argument("--audit", help="JSON list of audit log entries to append")
    pc.add_argument("--company-name")
    pc.add_argument("--logo", help="Letterhead logo image for the audit pages")
    pc.add_argument("--document-name")
    pc.add_argument("--submitter-id", type=int)
    pc.add_argument("--submitter-email")
    pc.add_argument("--reason")
    pc.add_argument("--out-dir", default=".")
    pc.add_argument("--sign", action="store_true", help="Send the result to the signing service")

    pp = sub.add_parser("preview", help="Render a PDF page to PNG")
    pp.add_argument("--pdf", required=True)
    pp.add_argument("--page", type=int, default=1)
    pp.add_argument("--zoom", type=float, default=1.25)
    pp.add_argument("--out", required=True)

    pd = sub.add_parser("pad", help="Capture a signature and print its value")
    pd.add_argument("--initials", action="store_true")

    args = p.parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        if args.cmd == "compose":
            return _compose(args)
        if args.cmd == "preview":
            return _preview(args)
        return _pad(args)
    except (CompositionError, PdfLoadError, PdfRenderError, OSError, ValueError) as exc:
        logger.error("%s failed: %s", args.cmd, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
