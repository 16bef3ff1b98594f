from __future__ import annotations

from codemap.domain.constants import APP_VERSION

USER_AGENT = f"Codemap-Client/{APP_VERSION}"
DEFAULT_TIMEOUT = 30
DEFAULT_RETRY_AFTER = 60
