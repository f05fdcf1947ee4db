"""Gemini client: generateContent / embedContent with accumulated file context."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from gemini_context.backends.triage import triage_response
from gemini_context.backends.upload import ResumableUploader
from gemini_context.config import Settings, settings as default_settings
from gemini_context.errors import NetworkError
from gemini_context.ingest.encoder import ContentEncoder
from gemini_context.ingest.resolver import SourceResolver
from gemini_context.models.content import ContentDescriptor
from gemini_context.models.http import HttpResponse
from gemini_context.orchestrator.accumulator import ContextAccumulator

logger = logging.getLogger(__name__)

# Top-level request keys owned by the client; options may not override them
RESERVED_KEYS = frozenset({"contents"})


class GeminiClient:
    """Session-scoped client holding an API key and a prompt context.

    Files and URLs added with :meth:`add_to_context` are attached, in order,
    after the text part of every :meth:`generate_text` request.
    """

    def __init__(
        self,
        api_key: str,
        *,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("An API key is required")
        self.api_key = api_key
        self.settings = settings or default_settings
        self._http = httpx.Client(timeout=self.settings.request_timeout, transport=transport)

        uploader = ResumableUploader(self._http, api_key, upload_base=self.settings.upload_base)
        self._context = ContextAccumulator(
            SourceResolver(self._http),
            ContentEncoder(uploader, max_inline_bytes=self.settings.max_inline_bytes),
        )

    def __enter__(self) -> GeminiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def context(self) -> tuple[ContentDescriptor, ...]:
        return self._context.descriptors

    def add_to_context(self, sources: Iterable[str]) -> None:
        """Ingest URLs and/or local paths into the prompt context."""
        if isinstance(sources, str):
            sources = [sources]
        self._context.append(sources)

    def generate_text(self, prompt: str, options: dict[str, Any] | None = None) -> Any:
        """Call generateContent with ``prompt`` followed by the context parts.

        ``options`` is merged into the request body at the top level
        (``generationConfig``, ``safetySettings`` and so on) and passed through
        unvalidated.
        """
        body = self.build_generate_body(prompt, options)
        url = f"{self.settings.api_base}/models/{self.settings.generate_model}:generateContent"
        logger.info(
            "generateContent (%s) with %d context part(s)",
            self.settings.generate_model, len(self._context),
        )
        return self._post_json(url, body)

    def build_generate_body(self, prompt: str, options: dict[str, Any] | None = None) -> dict:
        options = options or {}
        clashes = RESERVED_KEYS.intersection(options)
        if clashes:
            raise ValueError(f"Options may not override reserved keys: {sorted(clashes)}")

        body: dict[str, Any] = {
            "contents": [
                {"parts": [{"text": str(prompt)}, *self._context.parts()]},
            ],
        }
        body.update(options)
        return body

    def generate_embedding(self, text: str) -> Any:
        """Call embedContent for a single text."""
        model = self.settings.embedding_model
        body = {
            "model": f"models/{model}",
            "content": {"parts": [{"text": str(text)}]},
        }
        url = f"{self.settings.api_base}/models/{model}:embedContent"
        return self._post_json(url, body)

    def _post_json(self, url: str, body: dict) -> Any:
        try:
            response = self._http.post(url, params={"key": self.api_key}, json=body)
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise NetworkError(f"Request to {url} failed: {exc}") from exc
        return triage_response(HttpResponse.from_httpx(response))
