"""
Service Client

Thin wrapper around the document service HTTP API used by the composition
pipeline: source document download, image fetches, audit log retrieval,
filename preferences and the visual-PDF signing endpoint.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any
from urllib.parse import quote, urlsplit

import requests

from fieldpress.config import Config
from fieldpress.errors import EmbedFailure, SigningUnavailable, SourceFetchFailure
from fieldpress.model.audit import AuditLogEntry

logger = logging.getLogger(__name__)

ENVELOPE_RECORD_TYPE = "envelope_info"
SIGN_TIMEOUT_FACTOR = 2


def _error_details(exc: requests.exceptions.RequestException) -> tuple[int | None, str | None]:
    response = getattr(exc, "response", None)
    if response is None:
        return None, None
    return response.status_code, response.text


class ServiceClient:
    """
    Client for the document service API.

    Network failures surface as the domain error of the step that needed the
    call: SourceFetchFailure for the source PDF, EmbedFailure for images and
    SigningUnavailable for signing. Audit log and preference lookups degrade to
    empty results.
    """

    def __init__(
        self,
        base_url: str = "",
        token: str | None = None,
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: type[Config] = Config) -> ServiceClient:
        return cls(config.API_BASE_URL, config.API_TOKEN, timeout=config.REQUEST_TIMEOUT)

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def is_service_url(self, url: str) -> bool:
        """True when ``url`` points at the service itself and may carry the API token."""
        target = urlsplit(url)
        base = urlsplit(self.base_url)
        if not target.scheme:
            return True
        return (target.scheme, target.netloc) == (base.scheme, base.netloc)

    def _get(self, path: str) -> requests.Response:
        url = self.url(path)
        headers = self._headers() if self.is_service_url(url) else {}
        response = self.session.get(url, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response

    def fetch_source_pdf(self, file_path: str) -> bytes:
        try:
            response = self._get(f"/api/files/{file_path}")
        except requests.exceptions.RequestException as exc:
            status_code, _ = _error_details(exc)
            raise SourceFetchFailure(f"Failed to fetch PDF {file_path} (status {status_code}): {exc}") from exc

        if not response.content:
            raise SourceFetchFailure(f"Source PDF {file_path} is empty")
        return response.content

    def fetch_image(self, url: str) -> bytes:
        try:
            response = self._get(url)
        except requests.exceptions.RequestException as exc:
            raise EmbedFailure(f"Failed to fetch image: {exc}", source=url) from exc
        return response.content

    def fetch_audit_log(self, submitter_token: str) -> list[AuditLogEntry]:
        try:
            response = self._get(f"/api/submitters/{quote(submitter_token, safe='')}/audit-log")
            payload = response.json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            logger.warning("Failed to fetch audit log, continuing without it: %s", exc)
            return []

        records = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(records, list):
            return []
        return [
            AuditLogEntry.from_dict(record)
            for record in records
            if isinstance(record, dict) and record.get("type") != ENVELOPE_RECORD_TYPE
        ]

    def fetch_filename_format(self) -> str | None:
        if not self.token:
            return None
        try:
            payload = self._get("/api/pdf-signature/settings").json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            logger.warning("Failed to fetch PDF preferences: %s", exc)
            return None

        if isinstance(payload, dict) and payload.get("success") and isinstance(payload.get("data"), dict):
            return payload["data"].get("filename_format") or "{document.name}"
        return None

    def fetch_settings(self) -> dict[str, Any] | None:
        try:
            payload = self._get("/api/settings/user").json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            logger.warning("Failed to fetch signature settings: %s", exc)
            return None
        data = payload.get("data") if isinstance(payload, dict) else None
        return data if isinstance(data, dict) else None

    def sign_visual_pdf(
        self,
        pdf: bytes,
        *,
        filename: str,
        signer_email: str,
        signer_name: str,
        reason: str,
    ) -> bytes:
        try:
            response = self.session.post(
                self.url("/api/pdf-signature/sign-visual-pdf"),
                headers=self._headers(),
                files={"pdf": (filename, pdf, "application/pdf")},
                data={"signer_email": signer_email, "signer_name": signer_name, "reason": reason},
                timeout=self.timeout * SIGN_TIMEOUT_FACTOR,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as exc:
            status_code, body = _error_details(exc)
            raise SigningUnavailable(f"Signing request failed: {exc}", status_code, body) from exc
        except ValueError as exc:
            raise SigningUnavailable(f"Signing service returned invalid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            payload = {}
        data = payload.get("data")
        encoded = data.get("pdf_base64") if isinstance(data, dict) else None
        if not payload.get("success") or not encoded:
            raise SigningUnavailable(
                "Signing service did not return a signed document",
                response.status_code,
                response.text,
            )

        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SigningUnavailable(f"Signed document is not valid base64: {exc}") from exc
