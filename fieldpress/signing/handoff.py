"""Hands composited bytes to the remote signing service, falling back to the visual-only document."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
from typing import Protocol

from fieldpress.errors import SigningUnavailable

logger = logging.getLogger(__name__)

DEFAULT_SIGNER_EMAIL = "unknown@fieldpress.invalid"
DEFAULT_SIGNER_NAME = "Unknown Signer"


class RemoteSigner(Protocol):
    def sign_visual_pdf(
        self,
        pdf: bytes,
        *,
        filename: str,
        signer_email: str,
        signer_name: str,
        reason: str,
    ) -> bytes: ...


@dataclass(frozen=True, slots=True)
class SignerIdentity:
    email: str = DEFAULT_SIGNER_EMAIL
    name: str = DEFAULT_SIGNER_NAME
    reason: str = ""

    @classmethod
    def for_submitter(
        cls,
        submitter_id: int | None = None,
        email: str | None = None,
        *,
        on: date | None = None,
    ) -> SignerIdentity:
        return cls(
            email=email or DEFAULT_SIGNER_EMAIL,
            name=f"User {submitter_id}" if submitter_id is not None else DEFAULT_SIGNER_NAME,
            reason=default_reason(on),
        )


def default_reason(on: date | None = None) -> str:
    return f"Document signed via fieldpress on {(on or date.today()).strftime('%d/%m/%Y')}"


@dataclass(frozen=True, slots=True)
class SigningOutcome:
    data: bytes
    signed: bool
    reason: str | None = None


def try_sign(
    composited: bytes,
    signer: SignerIdentity,
    remote: RemoteSigner | None,
    *,
    filename: str = "document.pdf",
) -> SigningOutcome:
    """Return signed bytes, or the unsigned input when signing is not possible."""
    if remote is None:
        return SigningOutcome(composited, signed=False, reason="no signing service configured")

    try:
        signed = remote.sign_visual_pdf(
            composited,
            filename=filename,
            signer_email=signer.email,
            signer_name=signer.name,
            reason=signer.reason or default_reason(),
        )
    except SigningUnavailable as exc:
        logger.warning("Digital signing unavailable, keeping visual-only PDF: %s", exc)
        return SigningOutcome(composited, signed=False, reason=str(exc))
    except Exception as exc:
        logger.exception("Digital signing error, keeping visual-only PDF")
        return SigningOutcome(composited, signed=False, reason=f"{type(exc).__name__}: {exc}")

    return SigningOutcome(signed, signed=True)
