"""Source data model."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class SourceKind(Enum):
    REMOTE = "remote"
    LOCAL = "local"


REMOTE_PREFIXES = ("http://", "https://")


def classify(source: str) -> SourceKind | None:
    """Return the kind of ``source``, or None when it is neither a URL nor a file."""
    if source.startswith(REMOTE_PREFIXES):
        return SourceKind.REMOTE
    # os.path.isfile reports over-long or malformed names as missing
    if os.path.isfile(source):
        return SourceKind.LOCAL
    return None


@dataclass(frozen=True)
class LocalHandle:
    """A readable file standing in for a source for the duration of one ingest.

    ``name`` is what the file is known as upstream: the URL basename for
    remote sources, the file basename for local ones.
    """

    source: str
    path: Path
    name: str
    kind: SourceKind
    temporary: bool = False

    @property
    def size(self) -> int:
        return self.path.stat().st_size
