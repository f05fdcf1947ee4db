"""Prompt content descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class InlineData:
    """Bytes embedded in the request as base64 text."""

    mime_type: str
    data: str

    def __post_init__(self) -> None:
        if not self.mime_type:
            object.__setattr__(self, "mime_type", DEFAULT_MIME_TYPE)

    def to_part(self) -> dict:
        return {"inline_data": {"mime_type": self.mime_type, "data": self.data}}


@dataclass(frozen=True)
class FileReference:
    """Content previously uploaded and addressed by its server-issued URI."""

    mime_type: str
    file_uri: str

    def __post_init__(self) -> None:
        if not self.mime_type:
            object.__setattr__(self, "mime_type", DEFAULT_MIME_TYPE)

    def to_part(self) -> dict:
        return {"file_data": {"mime_type": self.mime_type, "file_uri": self.file_uri}}


ContentDescriptor = Union[InlineData, FileReference]
