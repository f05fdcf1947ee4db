"""Inline-vs-upload decision for a single resolved source."""

from __future__ import annotations

import base64
import logging

from gemini_context.backends.base import FileUploader
from gemini_context.config import settings
from gemini_context.models.content import ContentDescriptor, FileReference, InlineData
from gemini_context.models.source import LocalHandle

logger = logging.getLogger(__name__)


class ContentEncoder:
    """Builds a ContentDescriptor for a file.

    Files up to ``max_inline_bytes`` (inclusive) are base64-encoded into the
    request. The file is read into memory in one go, so inline payloads cost
    roughly 2.3x their size in RAM while encoding. Larger files are handed to
    the uploader and referenced by URI.
    """

    def __init__(self, uploader: FileUploader, max_inline_bytes: int | None = None) -> None:
        self.uploader = uploader
        self.max_inline_bytes = (
            max_inline_bytes if max_inline_bytes is not None else settings.max_inline_bytes
        )

    def is_inline(self, size_bytes: int) -> bool:
        return size_bytes <= self.max_inline_bytes

    def encode(self, handle: LocalHandle, mime_type: str, size_bytes: int) -> ContentDescriptor:
        if self.is_inline(size_bytes):
            logger.debug("Inlining %s (%d bytes)", handle.name, size_bytes)
            data = base64.b64encode(handle.path.read_bytes()).decode("ascii")
            return InlineData(mime_type=mime_type, data=data)

        logger.debug("Uploading %s (%d bytes > %d)", handle.name, size_bytes, self.max_inline_bytes)
        file_uri = self.uploader.upload(handle.path, mime_type, size_bytes, display_name=handle.name)
        return FileReference(mime_type=mime_type, file_uri=file_uri)
