"""Resumable file upload: Gemini Files API two-phase handshake."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

import httpx

from gemini_context.config import settings
from gemini_context.errors import (
    MissingFileUriError,
    UploadContentError,
    UploadInitiationError,
)
from gemini_context.models.http import HttpResponse, UploadSession

logger = logging.getLogger(__name__)

UPLOAD_URL_HEADER = "x-goog-upload-url"
CHUNK_SIZE = 1024 * 1024


class ResumableUploader:
    """Uploads one file per call: start a session, then upload and finalize.

    The whole file goes up in a single PUT, streamed from disk. There is no
    chunked resumption and no retry; either phase failing raises straight to the
    caller, transport failures included.
    """

    def __init__(
        self,
        client: httpx.Client,
        api_key: str,
        upload_base: str | None = None,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.upload_base = upload_base or settings.upload_base

    def upload(self, path: Path, mime_type: str, size_bytes: int, display_name: str) -> str:
        """Upload ``path`` and return the file URI issued by the server."""
        session = UploadSession(
            file_size_bytes=size_bytes,
            mime_type=mime_type,
            display_name=display_name,
        )
        logger.info("Starting resumable upload of %s (%d bytes, %s)", display_name, size_bytes, mime_type)

        # 1. Open the upload session
        session.upload_url = self._initiate(session)

        # 2. Send the bytes and finalize in one request
        file_uri = self._upload_and_finalize(session, Path(path))
        logger.info("Uploaded %s as %s", display_name, file_uri)
        return file_uri

    def _initiate(self, session: UploadSession) -> str:
        try:
            raw = self.client.post(
                self.upload_base,
                params={"key": self.api_key},
                headers={
                    "X-Goog-Upload-Protocol": "resumable",
                    "X-Goog-Upload-Command": "start",
                    "X-Goog-Upload-Header-Content-Length": str(session.file_size_bytes),
                    "X-Goog-Upload-Header-Content-Type": session.mime_type,
                },
                json={"file": {"display_name": session.display_name}},
            )
        except httpx.HTTPError as exc:
            logger.warning("Upload initiation for %s failed: %s", session.display_name, exc)
            raise UploadInitiationError(f"Failed to initiate upload: {exc}") from exc
        response = HttpResponse.from_httpx(raw)

        upload_url = (response.header(UPLOAD_URL_HEADER) or "").strip()
        if not upload_url:
            logger.warning("Upload initiation for %s returned no upload URL (status %d)",
                           session.display_name, response.status)
            raise UploadInitiationError(
                f"Failed to initiate upload: {response.text}",
                status_code=response.status,
                body=response.text,
            )
        return upload_url

    def _upload_and_finalize(self, session: UploadSession, path: Path) -> str:
        # The body is streamed from disk; Content-Length keeps it a single non-chunked PUT
        try:
            with path.open("rb") as fh:
                raw = self.client.put(
                    session.upload_url,
                    headers={
                        "Content-Length": str(session.file_size_bytes),
                        "X-Goog-Upload-Offset": "0",
                        "X-Goog-Upload-Command": "upload, finalize",
                    },
                    content=_read_chunks(fh),
                )
        except httpx.HTTPError as exc:
            logger.warning("Upload of %s failed: %s", session.display_name, exc)
            raise UploadContentError(f"Failed to upload file content: {exc}") from exc
        response = HttpResponse.from_httpx(raw)

        if not response.ok:
            logger.warning("Upload of %s failed with status %d", session.display_name, response.status)
            raise UploadContentError(
                f"Failed to upload file content: {response.text}",
                status_code=response.status,
                body=response.text,
            )

        try:
            payload = json.loads(response.text)
        except json.JSONDecodeError as exc:
            raise UploadContentError(
                f"Failed to upload file content: unreadable response {response.text}",
                status_code=response.status,
                body=response.text,
            ) from exc

        file_uri = (payload.get("file") or {}).get("uri") if isinstance(payload, dict) else None
        if not file_uri:
            raise MissingFileUriError(
                "No file URI in upload response", status_code=response.status, body=response.text
            )
        return file_uri


def _read_chunks(fh: BinaryIO) -> Iterator[bytes]:
    while chunk := fh.read(CHUNK_SIZE):
        yield chunk
