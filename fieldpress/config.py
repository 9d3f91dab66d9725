"""Environment-driven settings and per-account signature settings."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any, Mapping


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Remote service
    API_BASE_URL = os.getenv("FIELDPRESS_API_BASE_URL", "")
    API_TOKEN = os.getenv("FIELDPRESS_API_TOKEN")
    REQUEST_TIMEOUT = float(os.getenv("FIELDPRESS_REQUEST_TIMEOUT", 30))

    # Editor coordinate basis used to interpret pixel-space positions
    REFERENCE_WIDTH = float(os.getenv("FIELDPRESS_REFERENCE_WIDTH", 600))
    REFERENCE_HEIGHT = float(os.getenv("FIELDPRESS_REFERENCE_HEIGHT", 800))

    # Optional TTF fonts with wider glyph coverage than the standard 14
    FONT_PATH = os.getenv("FIELDPRESS_FONT_PATH")
    BOLD_FONT_PATH = os.getenv("FIELDPRESS_BOLD_FONT_PATH")

    STROKE_WIDTH = float(os.getenv("FIELDPRESS_STROKE_WIDTH", 2.5))
    LOG_LEVEL = os.getenv("FIELDPRESS_LOG_LEVEL", "INFO")

    # Defaults for the account-level signature settings
    ADD_SIGNATURE_ID = _env_bool("FIELDPRESS_ADD_SIGNATURE_ID", False)
    REQUIRE_SIGNING_REASON = _env_bool("FIELDPRESS_REQUIRE_SIGNING_REASON", False)
    TIMEZONE = os.getenv("FIELDPRESS_TIMEZONE", "UTC")


@dataclass(frozen=True, slots=True)
class SignatureSettings:
    """Account settings that affect how signatures and audit pages are stamped."""

    add_signature_id_to_the_documents: bool = False
    require_signing_reason: bool = False
    timezone: str = "UTC"
    company_name: str | None = None
    logo_url: str | None = None

    @classmethod
    def from_config(cls, config: type[Config] = Config) -> SignatureSettings:
        return cls(
            add_signature_id_to_the_documents=config.ADD_SIGNATURE_ID,
            require_signing_reason=config.REQUIRE_SIGNING_REASON,
            timezone=config.TIMEZONE,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> SignatureSettings:
        if not data:
            return cls()
        return cls(
            add_signature_id_to_the_documents=bool(data.get("add_signature_id_to_the_documents", False)),
            require_signing_reason=bool(data.get("require_signing_reason", False)),
            timezone=str(data.get("timezone") or "UTC"),
            company_name=data.get("company_name") or None,
            logo_url=data.get("logo_url") or None,
        )
