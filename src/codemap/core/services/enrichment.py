from __future__ import annotations

"""
Metadata Enrichment Service.

Defines the contract for optional LLM-backed metadata providers and the
Gemini implementation. Every failure (missing key, rate limit, transport
error, malformed reply) is reported to the caller as `None`, which the
analysis core treats exactly like "no enrichment configured".
"""

import json
import logging
import os
import re
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from codemap.domain.constants import (
    DEFAULT_AI_MODEL,
    DEFAULT_API_KEY_ENV,
    FALLBACK_API_KEY_ENVS,
)
from codemap.infra.network import (
    DEFAULT_TIMEOUT,
    GeminiClientError,
    GeminiRateLimitError,
    create_client,
    generate_content,
)

logger = logging.getLogger(__name__)

MAX_CONSECUTIVE_ERRORS = 3
MAX_PROMPT_CONTENT_CHARS = 3000

_FENCE_RX = re.compile(r"```(?:json)?\s*", re.IGNORECASE)

FILE_PROMPT = """You are a code analyzer. Analyze this file and return ONLY a JSON object (no markdown, no explanation):

File: {filename}
Code:
```
{code}
```

Return JSON with these exact fields:
{{
    "layer": "Frontend" | "Backend" | "Router" | "Database" | "Utility",
    "complexity": 1-100,
    "summary": "Write 2 sentences (25-35 words) describing what this file does and its purpose",
    "keywords": ["tag1", "tag2", "tag3"]
}}"""

FOLDER_PROMPT = """You are a code analyzer. Analyze this folder and return ONLY a JSON object:

Folder: {folder_name}
Contents: {contents}

Return JSON with these exact fields:
{{
    "purpose": "10 words max describing folder purpose",
    "type": "component" | "service" | "utility" | "config" | "asset" | "test"
}}"""

PROJECT_PROMPT = """You are a code analyzer. Analyze this project and return ONLY a JSON object:

Project: {project_name}
File Statistics:
- JavaScript/TypeScript: {code}
- CSS/Styles: {style}
- HTML/Markup: {markup}
- Config/Data: {data}
- Backend: {backend}
- Documentation: {documentation}

Folder Structure:
{folders}

Return JSON with these exact fields:
{{
    "description": "30 words max describing what this project does",
    "techStack": ["technology1", "technology2", "technology3"],
    "architecture": "Frontend" | "Backend" | "Full-stack" | "Library" | "CLI",
    "mainFeatures": ["feature1", "feature2", "feature3"]
}}"""


# -----------------------------------------------------------------------------
# PROVIDER CONTRACT
# -----------------------------------------------------------------------------

class EnrichmentProvider(ABC):
    """
    Optional source of file, folder and project metadata.

    Implementations must never raise from the summarize methods; any
    failure is reported as None.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider is configured at all."""

    @abstractmethod
    def summarize_file(self, filename: str, content: str) -> Optional[Dict[str, Any]]:
        """Return {layer, complexity, summary, keywords} or None."""

    @abstractmethod
    def summarize_folder(self, folder_name: str, child_names: List[str]) -> Optional[Dict[str, Any]]:
        """Return {purpose, type} or None."""

    @abstractmethod
    def summarize_project(
            self,
            project_name: str,
            category_stats: Dict[str, int],
            folder_outline: List[Dict[str, Any]],
    ) -> Optional[Dict[str, Any]]:
        """Return {description, techStack, architecture, mainFeatures} or None."""


# -----------------------------------------------------------------------------
# GEMINI PROVIDER
# -----------------------------------------------------------------------------

class GeminiEnrichmentProvider(EnrichmentProvider):
    """
    Gemini-backed provider with its own rate-limit bookkeeping.

    A 429 response starts a cooldown during which no request is issued.
    After three consecutive failures the provider stops issuing requests for
    the rest of its lifetime; a success resets the failure counter.
    """

    def __init__(
            self,
            api_key: Optional[str],
            model: str = DEFAULT_AI_MODEL,
            timeout: float = DEFAULT_TIMEOUT,
            max_consecutive_errors: int = MAX_CONSECUTIVE_ERRORS,
            clock: Callable[[], float] = time.monotonic,
            client: Any = None,
    ):
        self.api_key = api_key or ""
        self.model = model
        self.timeout = timeout
        self.max_consecutive_errors = max_consecutive_errors
        self.cooldown_until = 0.0
        self.consecutive_errors = 0
        self._clock = clock
        self._client = client

    @classmethod
    def from_environment(
            cls,
            api_key_env: str = DEFAULT_API_KEY_ENV,
            model: str = DEFAULT_AI_MODEL,
            timeout: float = DEFAULT_TIMEOUT,
    ) -> "GeminiEnrichmentProvider":
        """Create a provider reading the API key from environment variables."""
        api_key = ""
        for name in [api_key_env, *FALLBACK_API_KEY_ENVS]:
            api_key = os.environ.get(name, "").strip()
            if api_key:
                break
        return cls(api_key=api_key, model=model, timeout=timeout)

    # -- State ---------------------------------------------------------------

    def is_available(self) -> bool:
        return bool(self.api_key)

    def is_rate_limited(self) -> bool:
        """Whether a cooldown started by a 429 response is still running."""
        return self._clock() < self.cooldown_until

    def set_cooldown(self, seconds: float) -> None:
        """Suspend requests for `seconds` from now."""
        self.cooldown_until = self._clock() + seconds
        logger.warning(f"Enrichment rate limited. Cooling down for {seconds:.0f}s.")

    def reset(self) -> None:
        """Clear cooldown and failure counters."""
        self.cooldown_until = 0.0
        self.consecutive_errors = 0

    # -- Contract ------------------------------------------------------------

    def summarize_file(self, filename: str, content: str) -> Optional[Dict[str, Any]]:
        prompt = FILE_PROMPT.format(filename=filename, code=content[:MAX_PROMPT_CONTENT_CHARS])
        return self._complete_json(prompt)

    def summarize_folder(self, folder_name: str, child_names: List[str]) -> Optional[Dict[str, Any]]:
        prompt = FOLDER_PROMPT.format(folder_name=folder_name, contents=", ".join(child_names))
        return self._complete_json(prompt)

    def summarize_project(
            self,
            project_name: str,
            category_stats: Dict[str, int],
            folder_outline: List[Dict[str, Any]],
    ) -> Optional[Dict[str, Any]]:
        folders = "\n".join(
            f"{'  ' * int(f.get('depth', 0))}{f.get('name', '')} ({f.get('childCount', 0)} items)"
            for f in folder_outline
        )
        prompt = PROJECT_PROMPT.format(
            project_name=project_name,
            code=category_stats.get("code", 0),
            style=category_stats.get("style", 0),
            markup=category_stats.get("markup", 0),
            data=category_stats.get("data", 0),
            backend=category_stats.get("backend", 0),
            documentation=category_stats.get("documentation", 0),
            folders=folders,
        )
        return self._complete_json(prompt)

    # -- Internals -----------------------------------------------------------

    def _can_request(self) -> bool:
        if not self.is_available():
            return False
        if self.is_rate_limited():
            return False
        return self.consecutive_errors < self.max_consecutive_errors

    def _complete_json(self, prompt: str) -> Optional[Dict[str, Any]]:
        """Issue one request and decode the reply as a JSON object."""
        if not self._can_request():
            return None

        try:
            text = generate_content(self._get_client(), self.model, prompt)
            data = parse_json_reply(text)
        except GeminiRateLimitError as e:
            self._record_failure(e)
            self.set_cooldown(e.retry_after)
            return None
        except (GeminiClientError, ValueError) as e:
            self._record_failure(e)
            return None

        self.consecutive_errors = 0
        return data

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = create_client(self.api_key, timeout=self.timeout)
        return self._client

    def _record_failure(self, error: Exception) -> None:
        self.consecutive_errors += 1
        # Only the first failure of a streak is logged at warning level
        if self.consecutive_errors == 1:
            logger.warning(f"Gemini API error: {error}")
        else:
            logger.debug(f"Gemini API error ({self.consecutive_errors} in a row): {error}")


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def parse_json_reply(text: str) -> Dict[str, Any]:
    """
    Decode a model reply into a JSON object, tolerating markdown fences.

    Raises:
        ValueError: If the reply is not a JSON object.
    """
    cleaned = _FENCE_RX.sub("", text or "").replace("```", "").strip()
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("Reply is not a JSON object")
    return data


def create_provider(config: Dict[str, Any]) -> Optional[EnrichmentProvider]:
    """
    Build the enrichment provider requested by a validated configuration.

    Returns:
        Optional[EnrichmentProvider]: None when enrichment is disabled or no
                                      API key is available.
    """
    if not config.get("enable_ai"):
        return None

    provider = GeminiEnrichmentProvider.from_environment(
        api_key_env=config.get("api_key_env") or DEFAULT_API_KEY_ENV,
        model=config.get("ai_model") or DEFAULT_AI_MODEL,
        timeout=float(config.get("ai_timeout") or DEFAULT_TIMEOUT),
    )
    if not provider.is_available():
        logger.warning("AI enrichment requested but no API key is set. Using static analysis.")
        return None
    return provider
