"""Identification lines stamped beneath drawn signatures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import hashlib
import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fieldpress.config import SignatureSettings
from fieldpress.model.field import FieldType

logger = logging.getLogger(__name__)

STAMP_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"

# Display names offered by the settings screen.
_TIMEZONE_ALIASES = {
    "Midway Island": "Pacific/Midway",
    "Hawaii": "Pacific/Honolulu",
    "Alaska": "America/Anchorage",
    "Pacific": "America/Los_Angeles",
    "Mountain": "America/Denver",
    "Central": "America/Chicago",
    "Eastern": "America/New_York",
    "Atlantic": "America/Halifax",
    "Newfoundland": "America/St_Johns",
    "London": "Europe/London",
    "Berlin": "Europe/Berlin",
    "Paris": "Europe/Paris",
    "Rome": "Europe/Rome",
    "Moscow": "Europe/Moscow",
    "Tokyo": "Asia/Tokyo",
    "Shanghai": "Asia/Shanghai",
    "Hong Kong": "Asia/Hong_Kong",
    "Singapore": "Asia/Singapore",
    "Sydney": "Australia/Sydney",
}


@dataclass(frozen=True, slots=True)
class SignerStamp:
    submitter_id: int | None = None
    submitter_email: str | None = None
    reason: str | None = None
    signed_at: datetime | None = None


def resolve_timezone(name: str | None) -> timezone | ZoneInfo:
    if not name or name == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(_TIMEZONE_ALIASES.get(name, name))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, stamping in UTC", name)
        return timezone.utc


def short_signer_id(submitter_id: int) -> str:
    return hashlib.sha256(str(submitter_id + 1).encode("utf-8")).hexdigest()[:10].upper()


def metadata_lines(
    field_type: FieldType,
    stamp: SignerStamp | None,
    settings: SignatureSettings,
) -> list[str]:
    if stamp is None or field_type is FieldType.INITIALS:
        return []

    lines: list[str] = []
    if settings.add_signature_id_to_the_documents:
        if stamp.submitter_id is not None:
            lines.append(f"ID: {short_signer_id(stamp.submitter_id)}")
        if stamp.submitter_email:
            lines.append(stamp.submitter_email)
        signed_at = stamp.signed_at or datetime.now(timezone.utc)
        lines.append(signed_at.astimezone(resolve_timezone(settings.timezone)).strftime(STAMP_DATE_FORMAT))

    if settings.require_signing_reason and stamp.reason:
        lines.insert(0, f"Reason: {stamp.reason}")
    return lines
