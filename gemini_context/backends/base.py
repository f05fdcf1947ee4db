"""Base protocol for out-of-band file upload backends."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileUploader(Protocol):
    """Interface that file upload backends must implement."""

    def upload(self, path: Path, mime_type: str, size_bytes: int, display_name: str) -> str:
        """Upload the file and return a stable URI that prompts can reference."""
        ...
