from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of the last analysis session and application
settings as JSON in the user data directory. Unknown or missing keys fall
back to defaults.
"""

import json
import logging
import os
from typing import Any, Dict

from codemap.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_AI_MODEL,
    DEFAULT_API_KEY_ENV,
    DEFAULT_HIERARCHY_MAX_DEPTH,
    DEFAULT_MAX_DEPTH,
    DEFAULT_OUTPUT_FILE,
)
from codemap.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")
DEFAULT_AI_TIMEOUT = 30


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration (Session State).
    This dictionary drives the behavior of the analysis engine.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO
        "input_path": os.getcwd(),
        "output_file": DEFAULT_OUTPUT_FILE,
        "write_output": True,

        # Enrichment
        "enable_ai": False,
        "ai_model": DEFAULT_AI_MODEL,
        "api_key_env": DEFAULT_API_KEY_ENV,
        "ai_timeout": DEFAULT_AI_TIMEOUT,

        # Traversal
        "extra_skip_folders": [],
        "max_depth": DEFAULT_MAX_DEPTH,
        "hierarchy_max_depth": DEFAULT_HIERARCHY_MAX_DEPTH,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default application state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "app_settings": {
            "log_to_file": False,
        },
        "last_session": get_default_config(),
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load application state from disk.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return state

    # Merge with defaults to ensure new keys exist
    if isinstance(data.get("app_settings"), dict):
        state["app_settings"].update(data["app_settings"])
    if isinstance(data.get("last_session"), dict):
        state["last_session"].update(data["last_session"])

    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Retrieve the active configuration (Last Session) directly.
    """
    state = load_app_state()
    config = get_default_config()
    config.update(state.get("last_session", {}))
    return config


def load_app_settings() -> Dict[str, Any]:
    """
    Retrieve the persisted application settings (e.g. `log_to_file`).
    """
    return load_app_state()["app_settings"]


def save_config(config: Dict[str, Any]) -> None:
    """
    Save the provided config as the 'last_session'.
    """
    state = load_app_state()
    state["last_session"] = config
    save_app_state(state)
