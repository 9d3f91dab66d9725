"""Shared fixtures: synthesized PDFs, PNG payloads and fake HTTP sessions."""

import base64
import json
import os
from io import BytesIO

import pytest
import requests
from PIL import Image
from reportlab.pdfgen import canvas

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def make_pdf(*sizes):
    """Build a PDF with one page per (width, height) pair."""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=sizes[0])
    for number, size in enumerate(sizes, start=1):
        pdf.setPageSize(size)
        pdf.setFont("Helvetica", 10)
        pdf.drawString(20, 20, f"Source page {number}")
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def make_png(width, height, color=(200, 30, 30, 255)):
    buffer = BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_url(width, height, color=(200, 30, 30, 255)):
    return "data:image/png;base64," + base64.b64encode(make_png(width, height, color)).decode("ascii")


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=None):
        self.status_code = status_code
        self._payload = payload
        if content is None:
            content = b"" if payload is None else json.dumps(payload).encode("utf-8")
        self.content = content
        self.text = content.decode("utf-8", errors="replace")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Records calls and replays canned responses keyed by URL suffix."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def _respond(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        for suffix, response in self.responses.items():
            if url.endswith(suffix):
                return response
        return FakeResponse(404, {"success": False})

    def get(self, url, **kwargs):
        return self._respond("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._respond("POST", url, **kwargs)


@pytest.fixture
def letter_pdf():
    return make_pdf((600, 800))


@pytest.fixture
def two_page_pdf():
    return make_pdf((600, 800), (595, 842))
