"""MIME type lookup by file name."""

from __future__ import annotations

import mimetypes
from urllib.parse import urlparse

from gemini_context.models.content import DEFAULT_MIME_TYPE


def media_type_for(path_or_name: str) -> str:
    """Guess the MIME type from the name's extension.

    URLs are accepted; only their path is considered. Falls back to
    ``application/octet-stream``.
    """
    name = str(path_or_name)
    if name.startswith(("http://", "https://")):
        name = urlparse(name).path
    mime_type, _ = mimetypes.guess_type(name, strict=False)
    return mime_type or DEFAULT_MIME_TYPE
