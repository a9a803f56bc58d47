from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Cross-platform path helpers shared by the resolver, the assembler and the
configuration layer: user data directory lookup, path normalization and the
canonical/display path pair used to identify resolved files.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "ctx-pick"
UNIX_APP_DIR_NAME = ".ctxpick"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir(create: bool = False) -> str:
    """
    Resolve the OS-specific directory for persistent application data.

    Standards:
    - Windows: %LOCALAPPDATA%/ctx-pick
    - Linux/Mac: ~/.ctxpick

    Args:
        create: Create the directory hierarchy if it does not exist.

    Returns:
        str: Absolute path to the application data directory.
    """
    path = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    if create:
        os.makedirs(path, exist_ok=True)

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Expands environment variables and ``~``. Reverts to ``fallback`` when
    the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))


def canonicalize(path: str) -> str:
    """Return the absolute path with every symlink resolved."""
    return os.path.realpath(path)


def to_display_path(canonical_path: str, base_dir: str) -> str:
    """
    Express a canonical path relative to ``base_dir`` for user-facing output.

    Uses forward slashes so headers look the same on every platform. Falls
    back to the absolute path when no relative form exists (different
    drives on Windows).

    Args:
        canonical_path: Absolute, symlink-free file path.
        base_dir: Directory the display path is relative to.

    Returns:
        str: Relative (or absolute) display path.
    """
    try:
        rel = os.path.relpath(canonical_path, canonicalize(base_dir))
    except ValueError:
        return canonical_path
    return rel.replace(os.sep, "/")
