"""Download filename generation from the account's filename format."""

from __future__ import annotations

from datetime import datetime
import re

DEFAULT_FORMAT = "{document.name}"
AUDIT_SUFFIX = "_with_audit"
SIGNED_STATUSES = {"completed", "signed"}

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


def strip_pdf_suffix(name: str) -> str:
    return _PDF_SUFFIX.sub("", name)


def format_completed_at(value: datetime | str | None) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return ""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def apply_filename_format(
    fmt: str,
    *,
    document_name: str,
    submission_status: str = "signed",
    submitter_emails: list[str] | None = None,
    completed_at: datetime | str | None = None,
) -> str:
    status = "Signed" if submission_status in SIGNED_STATUSES else "Completed"
    submitters = submitter_emails[0] if submitter_emails else "unknown"

    result = (
        fmt.replace("{document.name}", strip_pdf_suffix(document_name))
        .replace("{submission.status}", status)
        .replace("{submission.submitters}", submitters)
        .replace("{submission.completed_at}", format_completed_at(completed_at))
    )

    # dangling separators left by empty placeholders
    result = result.replace(" - -", " -").replace("- -", "-")
    result = re.sub(r" - $", "", result)
    result = re.sub(r" -$", "", result)
    result = re.sub(r"-$", "", result).strip()

    if not result.endswith(".pdf"):
        result += ".pdf"
    return result


def download_filename(
    document_name: str,
    *,
    fmt: str | None = None,
    submitter_email: str | None = None,
    submission_status: str = "signed",
    completed_at: datetime | str | None = None,
    with_audit: bool = False,
) -> str:
    if fmt:
        filename = apply_filename_format(
            fmt,
            document_name=document_name,
            submission_status=submission_status,
            submitter_emails=[submitter_email] if submitter_email else [],
            completed_at=completed_at,
        )
        if with_audit:
            return _PDF_SUFFIX.sub(f"{AUDIT_SUFFIX}.pdf", filename)
        return filename

    suffix = AUDIT_SUFFIX if with_audit else ""
    return f"signed_{strip_pdf_suffix(document_name)}{suffix}.pdf"
