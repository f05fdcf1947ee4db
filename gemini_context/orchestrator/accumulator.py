"""Context accumulator: turns sources into prompt parts, in order."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from gemini_context.ingest.encoder import ContentEncoder
from gemini_context.ingest.media import media_type_for
from gemini_context.ingest.resolver import SourceResolver
from gemini_context.models.content import ContentDescriptor

logger = logging.getLogger(__name__)


class ContextAccumulator:
    """Owns the ordered content descriptors attached to future prompts."""

    def __init__(self, resolver: SourceResolver, encoder: ContentEncoder) -> None:
        self.resolver = resolver
        self.encoder = encoder
        self._descriptors: list[ContentDescriptor] = []
        self._lock = threading.Lock()

    def append(self, sources: Iterable[str]) -> None:
        """Resolve, type and encode each source, appending the results in order.

        Stops at the first failing source and re-raises its error. Descriptors
        already appended by this call are kept; there is no rollback, and files
        already uploaded stay on the server.
        """
        with self._lock:
            for source in sources:
                descriptor = self._ingest(source)
                self._descriptors.append(descriptor)
                logger.info(
                    "Added %s (%s) to context, %d part(s) total",
                    source, type(descriptor).__name__, len(self._descriptors),
                )

    def _ingest(self, source: str) -> ContentDescriptor:
        with self.resolver.resolve(source) as handle:
            mime_type = media_type_for(handle.name)
            return self.encoder.encode(handle, mime_type, handle.size)

    @property
    def descriptors(self) -> tuple[ContentDescriptor, ...]:
        return tuple(self._descriptors)

    def parts(self) -> list[dict]:
        """Wire representation of the context, in insertion order."""
        return [d.to_part() for d in self._descriptors]

    def __len__(self) -> int:
        return len(self._descriptors)
