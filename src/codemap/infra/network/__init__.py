from __future__ import annotations

"""
Network Communication Infrastructure.

Exposes the Gemini client used by the optional enrichment provider.
"""

from codemap.infra.network.common import DEFAULT_RETRY_AFTER, DEFAULT_TIMEOUT, USER_AGENT
from codemap.infra.network.gemini_client import (
    GeminiClientError,
    GeminiRateLimitError,
    create_client,
    generate_content,
)

__all__ = [
    "create_client",
    "generate_content",
    "GeminiClientError",
    "GeminiRateLimitError",
    "USER_AGENT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_RETRY_AFTER",
]
