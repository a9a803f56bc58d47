from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (CLI, config file) and
the pipeline. Coerces types, injects defaults for missing or invalid values
and collects warnings instead of failing, unless strict mode is requested.
"""

import logging
from typing import Any, Dict, List, Tuple

from ctxpick.domain.config import OUTPUT_MODES, get_default_config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: Raise on invalid values instead of coercing them.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and the
                                          warnings produced along the way.

    Raises:
        TypeError: In strict mode, when a value has the wrong type.
        ValueError: In strict mode, when a value is out of range.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    string_fields = ["search_root", "token_encoding"]
    bool_fields = ["follow_links", "keep_going", "copy_to_clipboard"]
    int_fields = {"skeleton_depth": 0, "max_ambiguous_shown": 1}

    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field, minimum in int_fields.items():
        merged[field] = _as_int(merged.get(field), defaults[field], minimum, field, warnings, strict)

    merged["output_mode"] = _as_choice(
        merged.get("output_mode"), defaults["output_mode"], OUTPUT_MODES,
        "output_mode", warnings, strict,
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
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
    """Coerce various input types into native booleans."""
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
        minimum: int,
        field: str,
        warnings: List[str],
        strict: bool,
) -> int:
    """Coerce to an integer no smaller than ``minimum``."""
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

    if number < minimum:
        msg = f"Invalid field '{field}': {number} is below the minimum of {minimum}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    return number


def _as_choice(
        value: Any,
        fallback: str,
        choices: Tuple[str, ...],
        field: str,
        warnings: List[str],
        strict: bool,
) -> str:
    """Accept only one of the allowed string values (case-insensitive)."""
    if value is None:
        return fallback
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()

    msg = f"Invalid field '{field}': {value!r} is not one of {', '.join(choices)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback
