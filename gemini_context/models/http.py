"""Transport-level data models."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx


@dataclass(frozen=True)
class HttpResponse:
    """Status, headers and raw body of one API response."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> HttpResponse:
        # httpx headers are case-insensitive; normalise keys for plain dict lookups
        headers = {k.lower(): v for k, v in response.headers.items()}
        return cls(status=response.status_code, headers=headers, body=response.content)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


@dataclass
class UploadSession:
    """State carried from the initiate call to the upload-and-finalize call."""

    file_size_bytes: int
    mime_type: str
    display_name: str
    upload_url: str = ""
