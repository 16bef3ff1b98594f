from __future__ import annotations

"""
Gemini Client.

Thin wrapper around the Google GenAI SDK `generate_content` call. Translates
SDK failures into typed exceptions so that callers can apply their own
cooldown policy.
"""

import logging
import math
import re
from typing import Any, Dict

from google import genai
from google.genai import errors, types

from codemap.infra.network.common import DEFAULT_RETRY_AFTER, DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

_RETRY_IN_RX = re.compile(r"retry in ([\d.]+)s", re.IGNORECASE)


class GeminiClientError(Exception):
    """Any failure to obtain a usable completion."""


class GeminiRateLimitError(GeminiClientError):
    """HTTP 429 from the API. `retry_after` is the suggested wait in seconds."""

    def __init__(self, message: str, retry_after: int = DEFAULT_RETRY_AFTER):
        super().__init__(message)
        self.retry_after = retry_after


def create_client(api_key: str, timeout: float = DEFAULT_TIMEOUT) -> genai.Client:
    """
    Build a GenAI client bound to an API key.

    Args:
        api_key: Gemini API key.
        timeout: Request timeout in seconds.

    Returns:
        genai.Client: Configured SDK client.
    """
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(
            timeout=int(timeout * 1000),
            headers={"User-Agent": USER_AGENT},
        ),
    )


def generate_content(client: genai.Client, model: str, prompt: str) -> str:
    """
    Send a single-turn prompt and return the completion text.

    Args:
        client: SDK client from `create_client`.
        model: Model identifier (e.g. 'gemini-2.0-flash-lite').
        prompt: Prompt text.

    Returns:
        str: Raw completion text.

    Raises:
        GeminiRateLimitError: On HTTP 429.
        GeminiClientError: On any other API, transport or payload failure.
    """
    try:
        response = client.models.generate_content(model=model, contents=prompt)
    except errors.APIError as e:
        if e.code == 429:
            retry_after = _parse_retry_after(e)
            raise GeminiRateLimitError(f"Rate limited (429), retry in {retry_after}s", retry_after) from e
        raise GeminiClientError(f"API error {e.code}: {e.message}") from e
    except Exception as e:
        raise GeminiClientError(f"Communication error: {e}") from e

    text = response.text
    if not text:
        raise GeminiClientError("Response contained no candidate text")
    return text


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _parse_retry_after(error: errors.APIError) -> int:
    """Read the suggested wait from the Retry-After header, error text or RetryInfo details."""
    headers = getattr(error.response, "headers", None) or {}
    header = str(headers.get("Retry-After", "") or "")
    if header.strip().isdigit():
        return max(1, int(header.strip()))

    match = _RETRY_IN_RX.search(error.message or "")
    if match:
        try:
            return max(1, math.ceil(float(match.group(1))))
        except ValueError:
            pass

    body: Dict[str, Any] = error.details if isinstance(error.details, dict) else {}
    payload = body.get("error") if isinstance(body.get("error"), dict) else body
    for detail in payload.get("details") or []:
        delay = str(detail.get("retryDelay", "")) if isinstance(detail, dict) else ""
        if delay.endswith("s"):
            try:
                return max(1, math.ceil(float(delay[:-1])))
            except ValueError:
                continue

    logger.debug(f"No retry hint in 429 response, using {DEFAULT_RETRY_AFTER}s.")
    return DEFAULT_RETRY_AFTER
