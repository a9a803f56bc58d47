from __future__ import annotations

"""
Configuration Domain Management.

Defines the runtime configuration dictionary and its persisted JSON form.
Configuration is resolved in three layers: built-in defaults, the user's
config file, and command-line overrides.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from ctxpick.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
CURRENT_CONFIG_VERSION = "1.0.0"

DEFAULT_SKELETON_DEPTH = 4
DEFAULT_MAX_AMBIGUOUS_SHOWN = 8
DEFAULT_TOKEN_ENCODING = "o200k_base"

OUTPUT_MODES = ("full", "skeleton", "symbols")


def get_config_path() -> str:
    """Location of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Resolution
        "search_root": os.getcwd(),
        "follow_links": True,
        "keep_going": False,

        # Rendering
        "output_mode": "full",
        "skeleton_depth": DEFAULT_SKELETON_DEPTH,

        # Delivery
        "copy_to_clipboard": True,

        # Reporting
        "max_ambiguous_shown": DEFAULT_MAX_AMBIGUOUS_SHOWN,
        "token_encoding": DEFAULT_TOKEN_ENCODING,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the persisted configuration layered over the defaults.

    A missing file yields the defaults. A corrupted file is logged and
    ignored. Unknown keys are dropped.

    Args:
        path: Explicit config file location (defaults to the user data dir).

    Returns:
        Dict[str, Any]: Merged configuration (not yet validated).
    """
    config = get_default_config()
    config_path = path or get_config_path()

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return config

    settings = data.get("settings", data)
    if not isinstance(settings, dict):
        logger.warning("Config 'settings' section is not an object. Using defaults.")
        return config

    for key, value in settings.items():
        if key in config:
            config[key] = value
        else:
            logger.debug(f"Ignoring unknown config key '{key}'")

    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Persist the given configuration (excluding the per-run search root).

    Args:
        config: Configuration to store.
        path: Explicit config file location.

    Raises:
        OSError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

    settings = {k: v for k, v in config.items() if k != "search_root"}
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(
            {"version": CURRENT_CONFIG_VERSION, "settings": settings},
            f,
            ensure_ascii=False,
            indent=4,
        )
    logger.debug(f"Configuration saved to {config_path}")
