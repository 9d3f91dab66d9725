import base64

import pytest
import requests

from conftest import FakeResponse, FakeSession
from fieldpress.errors import EmbedFailure, SigningUnavailable, SourceFetchFailure
from fieldpress.remote.client import ServiceClient


def _client(session, token="secret"):
    return ServiceClient("https://api.example/", token, timeout=5, session=session)


class TestFetchSourcePdf:
    def test_returns_bytes_with_auth_header(self):
        session = FakeSession({"/api/files/docs/contract.pdf": FakeResponse(content=b"%PDF-1.4")})
        assert _client(session).fetch_source_pdf("docs/contract.pdf") == b"%PDF-1.4"

        method, url, kwargs = session.calls[0]
        assert (method, url) == ("GET", "https://api.example/api/files/docs/contract.pdf")
        assert kwargs["headers"] == {"Authorization": "Bearer secret"}
        assert kwargs["timeout"] == 5

    def test_http_error_raises_source_fetch_failure(self):
        with pytest.raises(SourceFetchFailure):
            _client(FakeSession()).fetch_source_pdf("missing.pdf")

    def test_transport_error(self):
        session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(SourceFetchFailure):
            _client(session).fetch_source_pdf("a.pdf")


def test_fetch_image_failure_is_embed_failure():
    with pytest.raises(EmbedFailure) as excinfo:
        _client(FakeSession()).fetch_image("https://cdn.example/logo.png")
    assert excinfo.value.source == "https://cdn.example/logo.png"


def test_absolute_urls_are_not_rebased():
    session = FakeSession({"logo.png": FakeResponse(content=b"png")})
    _client(session).fetch_image("https://cdn.example/logo.png")
    assert session.calls[0][1] == "https://cdn.example/logo.png"


class TestImageCredentials:
    def test_external_host_gets_no_token(self):
        session = FakeSession({"x.png": FakeResponse(content=b"png")})
        assert _client(session).fetch_image("https://elsewhere.example/x.png") == b"png"
        assert session.calls[0][2]["headers"] == {}

    def test_service_host_keeps_token(self):
        session = FakeSession({"sig.png": FakeResponse(content=b"png")})
        _client(session).fetch_image("https://api.example/api/files/sig.png")
        assert session.calls[0][2]["headers"] == {"Authorization": "Bearer secret"}

    def test_relative_path_keeps_token(self):
        session = FakeSession({"sig.png": FakeResponse(content=b"png")})
        _client(session).fetch_image("/api/files/sig.png")
        method, url, kwargs = session.calls[0]
        assert url == "https://api.example/api/files/sig.png"
        assert kwargs["headers"] == {"Authorization": "Bearer secret"}

    def test_other_scheme_on_same_host_gets_no_token(self):
        session = FakeSession({"sig.png": FakeResponse(content=b"png")})
        _client(session).fetch_image("http://api.example/api/files/sig.png")
        assert session.calls[0][2]["headers"] == {}


class TestAuditLog:
    def test_envelope_records_are_dropped(self):
        payload = {
            "data": [
                {"type": "envelope_info", "timestamp": "t0", "action": "a", "user": "u"},
                {"timestamp": "t1", "action": "Opened", "user": "a@example.com", "ip": "1.2.3.4"},
                "garbage",
            ]
        }
        session = FakeSession({"/api/submitters/tok%2F1/audit-log": FakeResponse(payload=payload)})
        entries = _client(session).fetch_audit_log("tok/1")

        assert [entry.action for entry in entries] == ["Opened"]
        assert entries[0].ip == "1.2.3.4"

    def test_failure_yields_empty_list(self):
        session = FakeSession(error=requests.exceptions.Timeout("slow"))
        assert _client(session).fetch_audit_log("tok") == []


class TestFilenameFormat:
    def test_format_returned(self):
        payload = {"success": True, "data": {"filename_format": "{document.name} - {submission.status}"}}
        session = FakeSession({"/api/pdf-signature/settings": FakeResponse(payload=payload)})
        assert _client(session).fetch_filename_format() == "{document.name} - {submission.status}"

    def test_blank_format_defaults(self):
        payload = {"success": True, "data": {"filename_format": ""}}
        session = FakeSession({"/api/pdf-signature/settings": FakeResponse(payload=payload)})
        assert _client(session).fetch_filename_format() == "{document.name}"

    def test_no_token_skips_request(self):
        session = FakeSession()
        assert _client(session, token=None).fetch_filename_format() is None
        assert session.calls == []


def test_settings_payload():
    payload = {"success": True, "data": {"company_name": "Acme", "timezone": "Tokyo"}}
    session = FakeSession({"/api/settings/user": FakeResponse(payload=payload)})
    assert _client(session).fetch_settings() == {"company_name": "Acme", "timezone": "Tokyo"}


class TestSignVisualPdf:
    def _sign(self, session):
        return _client(session).sign_visual_pdf(
            b"%PDF visual",
            filename="signed_contract.pdf",
            signer_email="a@example.com",
            signer_name="User 3",
            reason="Approved",
        )

    def test_success_decodes_base64(self):
        encoded = base64.b64encode(b"%PDF signed").decode("ascii")
        payload = {"success": True, "data": {"pdf_base64": encoded}}
        session = FakeSession({"/sign-visual-pdf": FakeResponse(payload=payload)})

        assert self._sign(session) == b"%PDF signed"
        method, _, kwargs = session.calls[0]
        assert method == "POST"
        assert kwargs["files"]["pdf"] == ("signed_contract.pdf", b"%PDF visual", "application/pdf")
        assert kwargs["data"] == {"signer_email": "a@example.com", "signer_name": "User 3", "reason": "Approved"}
        assert kwargs["timeout"] == 10

    def test_http_error_carries_status_and_body(self):
        session = FakeSession({"/sign-visual-pdf": FakeResponse(503, {"error": "down"})})
        with pytest.raises(SigningUnavailable) as excinfo:
            self._sign(session)
        assert excinfo.value.status_code == 503
        assert "down" in excinfo.value.response_body

    @pytest.mark.parametrize(
        "payload",
        [
            {"success": False, "data": {"pdf_base64": "AAAA"}},
            {"success": True, "data": {}},
            {"success": True, "data": {"pdf_base64": "***not base64***"}},
            ["unexpected"],
        ],
    )
    def test_unusable_payloads(self, payload):
        session = FakeSession({"/sign-visual-pdf": FakeResponse(payload=payload)})
        with pytest.raises(SigningUnavailable):
            self._sign(session)

    def test_invalid_json(self):
        session = FakeSession({"/sign-visual-pdf": FakeResponse(content=b"<html>")})
        with pytest.raises(SigningUnavailable):
            self._sign(session)
