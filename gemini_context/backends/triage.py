"""Status-code triage shared by every outbound API call."""

from __future__ import annotations

import json
import logging
from typing import Any

from gemini_context.errors import ApiError, RateLimitError
from gemini_context.models.http import HttpResponse

logger = logging.getLogger(__name__)


def triage(status: int, body: bytes | str) -> Any:
    """Return the parsed JSON body of a successful response, raise otherwise.

    2xx parses the body, 429 raises RateLimitError and anything else raises
    ApiError. The body text is kept verbatim in the raised error.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body

    if 200 <= status < 300:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ApiError(
                f"Gemini API returned unreadable JSON: {text}", status_code=status, body=text
            ) from exc

    if status == 429:
        logger.warning("Gemini API rate limit hit")
        raise RateLimitError(
            f"Gemini API Rate Limit Exceeded: {text}", status_code=status, body=text
        )

    logger.warning("Gemini API returned %d", status)
    raise ApiError(f"Gemini API Error: {status} - {text}", status_code=status, body=text)


def triage_response(response: HttpResponse) -> Any:
    return triage(response.status, response.body)
