"""Source resolution: local paths pass through, URLs are fetched to a temp file."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

import httpx

from gemini_context.errors import InvalidSourceError, NetworkError
from gemini_context.models.source import LocalHandle, SourceKind, classify

logger = logging.getLogger(__name__)

TEMP_PREFIX = "gemini_context_"


def remote_name(url: str) -> str:
    """Basename of a URL's path, e.g. ``https://x.io/a/b.png?s=1`` -> ``b.png``."""
    return PurePosixPath(unquote(urlparse(url).path)).name


class SourceResolver:
    """Turns a source string into a readable local file."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    @contextmanager
    def resolve(self, source: str) -> Iterator[LocalHandle]:
        """Yield a LocalHandle for ``source``.

        Remote content is written to a temporary file that is removed when the
        block exits, whatever happens inside it. Local files are used in place.
        """
        kind = classify(source)

        if kind is SourceKind.LOCAL:
            path = Path(source)
            yield LocalHandle(source=source, path=path, name=path.name, kind=kind)
            return

        if kind is None:
            raise InvalidSourceError(source)

        path = self._download(source)
        try:
            yield LocalHandle(
                source=source,
                path=path,
                name=remote_name(source) or path.name,
                kind=kind,
                temporary=True,
            )
        finally:
            path.unlink(missing_ok=True)
            logger.debug("Removed temporary file %s", path)

    def _download(self, url: str) -> Path:
        suffix = PurePosixPath(remote_name(url)).suffix
        fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix)
        path = Path(name)
        fetched = False
        try:
            with os.fdopen(fd, "wb") as fh:
                with self.client.stream("GET", url, follow_redirects=True) as response:
                    response.raise_for_status()
                    for chunk in response.iter_bytes():
                        fh.write(chunk)
            fetched = True
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Download of %s failed with status %d", url, status)
            raise NetworkError(
                f"Failed to download file from {url}: {status} {exc.response.reason_phrase}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Download of %s failed: %s", url, exc)
            raise NetworkError(f"Failed to download file from {url}: {exc}") from exc
        finally:
            if not fetched:
                path.unlink(missing_ok=True)

        logger.debug("Fetched %s into %s", url, path)
        return path
