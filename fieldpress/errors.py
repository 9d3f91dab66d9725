"""Composition error taxonomy.

Field-level errors (malformed strokes, unloadable images, missing pages) are
caught per field by the compositor. Pipeline-level errors either become an
unsigned result (signing) or abort the run (source fetch, cancellation).
"""

from __future__ import annotations


class CompositionError(Exception):
    """Base class for all composition errors."""


class MalformedSignatureError(CompositionError):
    """Raised when vector stroke data has no groups or a degenerate bounding box."""


class EmbedFailure(CompositionError):
    """Raised when image bytes cannot be fetched or decoded."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        super().__init__(message)


class PageIndexOutOfRange(CompositionError):
    """Raised when a field references a page the document does not have."""

    def __init__(self, page_index: int, page_count: int) -> None:
        self.page_index = page_index
        self.page_count = page_count
        super().__init__(f"Page index {page_index} out of range (document has {page_count} pages)")


class SigningUnavailable(CompositionError):
    """Raised when the remote signing service fails or rejects the request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class SourceFetchFailure(CompositionError):
    """Raised when the original document bytes cannot be retrieved."""


class CompositionCancelled(CompositionError):
    """Raised between steps when the caller requested cancellation."""
