from __future__ import annotations

"""
Configuration Validator.

Acts as a gatekeeper to ensure that the configuration dictionary passed
to the analysis engine contains valid types and normalized values.
Uses a schema-driven approach to minimize boilerplate.
"""

import logging
import os
from typing import Any, Dict, List, Tuple

from codemap.domain.config import get_default_config

logger = logging.getLogger(__name__)

# Integer fields with inclusive bounds
_INT_BOUNDS: Dict[str, Tuple[int, int]] = {
    "max_depth": (1, 1024),
    "hierarchy_max_depth": (1, 100),
    "ai_timeout": (1, 600),
}


def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the configuration dictionary.

    Ensures types are correct (converting strings to bools/ints/lists if
    needed) and fills in missing values with defaults.

    Args:
        config: The raw configuration dictionary (or untrusted input).
        strict: If True, raises TypeError/ValueError on invalid data.

    Returns:
        Tuple[Dict, List[str]]: (Normalized Config, List of Warnings).
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if config is None:
        return defaults, warnings

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    string_fields = ["input_path", "output_file", "ai_model", "api_key_env"]
    bool_fields = ["write_output", "enable_ai"]
    list_fields = ["extra_skip_folders"]

    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field, (low, high) in _INT_BOUNDS.items():
        merged[field] = _as_int(merged.get(field), defaults[field], low, high, field, warnings, strict)

    for field in list_fields:
        merged[field] = _as_list_str(merged.get(field), defaults[field], field, warnings, strict)

    # The knowledge map is always written inside the scanned root
    output_file = os.path.basename(merged["output_file"])
    if output_file != merged["output_file"]:
        msg = f"Field 'output_file' must be a file name, received '{merged['output_file']}'."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using '{output_file or defaults['output_file']}'.")
    merged["output_file"] = output_file or defaults["output_file"]

    return merged, warnings


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Ensure value is a string."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback
    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce value to boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(
        value: Any,
        fallback: int,
        low: int,
        high: int,
        field: str,
        warnings: List[str],
        strict: bool,
) -> int:
    """Coerce value to an integer inside [low, high]."""
    if value is None:
        return fallback

    number = None
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    elif isinstance(value, str) and not strict:
        try:
            number = int(value.strip())
            warnings.append(f"Field '{field}' converted from '{value}' to {number}.")
        except ValueError:
            number = None

    if number is None:
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if number < low or number > high:
        msg = f"Field '{field}' out of range [{low}, {high}]: {number}."
        if strict:
            raise ValueError(msg)
        clamped = max(low, min(high, number))
        warnings.append(f"{msg} Clamped to {clamped}.")
        return clamped

    return number


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure value is a list of strings."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)
