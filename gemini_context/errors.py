"""Exception hierarchy for source ingestion, uploads and API calls."""

from __future__ import annotations


class GeminiContextError(Exception):
    """Base class for every error raised by this package."""


class InvalidSourceError(GeminiContextError):
    """A source is neither an http(s) URL nor an existing local file."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Invalid source: {source}. It must be a URL or a file path.")


class NetworkError(GeminiContextError):
    """Fetching a remote source failed."""


class ApiError(GeminiContextError):
    """The API answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class RateLimitError(ApiError):
    """HTTP 429 from any API call."""


class UploadError(ApiError):
    """Base class for resumable upload handshake failures."""


class UploadInitiationError(UploadError):
    """Phase 1 did not hand back an upload URL."""


class UploadContentError(UploadError):
    """Phase 2 (upload, finalize) was rejected."""


class MissingFileUriError(UploadError):
    """Phase 2 succeeded but the response carried no ``file.uri``."""
