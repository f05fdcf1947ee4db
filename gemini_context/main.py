"""gemini_context: FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from gemini_context.backends.gemini import GeminiClient
from gemini_context.config import settings
from gemini_context.errors import GeminiContextError, InvalidSourceError, RateLimitError
from gemini_context.version import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.google_api_key:
        raise RuntimeError("GEMINI_CONTEXT_GOOGLE_API_KEY is not set")
    app.state.client = GeminiClient(settings.google_api_key)
    yield
    app.state.client.close()


app = FastAPI(
    title="gemini_context",
    description="Multimodal prompt context for the Gemini API",
    version=__version__,
    lifespan=lifespan,
)


# --- Request / Response models ---


class ContextRequest(BaseModel):
    sources: list[str] = Field(min_length=1)


class ContextResponse(BaseModel):
    context_size: int
    parts: list[dict]


class GenerateRequest(BaseModel):
    prompt: str
    options: dict[str, Any] = Field(default_factory=dict)


class EmbedRequest(BaseModel):
    text: str


# --- Dependencies ---


def get_client(request: Request) -> GeminiClient:
    return request.app.state.client


def _to_http_error(exc: GeminiContextError) -> HTTPException:
    if isinstance(exc, InvalidSourceError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, RateLimitError):
        return HTTPException(status_code=429, detail=str(exc))
    logger.error("Upstream failure: %s", exc)
    return HTTPException(status_code=502, detail=str(exc))


def _summarize(part: dict) -> dict:
    """Strip base64 payloads so responses stay small."""
    inline = part.get("inline_data")
    if inline is None:
        return part
    return {"inline_data": {"mime_type": inline["mime_type"], "encoded_length": len(inline["data"])}}


# --- Routes ---
# Sync handlers: the client blocks, FastAPI runs these in its threadpool.


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/context", response_model=ContextResponse)
def add_context(req: ContextRequest, client: GeminiClient = Depends(get_client)):
    """Ingest sources into the shared session context."""
    try:
        client.add_to_context(req.sources)
    except GeminiContextError as exc:
        raise _to_http_error(exc) from exc

    parts = [_summarize(d.to_part()) for d in client.context]
    return ContextResponse(context_size=len(parts), parts=parts)


@app.post("/api/generate")
def generate(req: GenerateRequest, client: GeminiClient = Depends(get_client)):
    try:
        return client.generate_text(req.prompt, req.options)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except GeminiContextError as exc:
        raise _to_http_error(exc) from exc


@app.post("/api/embed")
def embed(req: EmbedRequest, client: GeminiClient = Depends(get_client)):
    try:
        return client.generate_embedding(req.text)
    except GeminiContextError as exc:
        raise _to_http_error(exc) from exc
