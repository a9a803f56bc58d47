from __future__ import annotations

"""
Clipboard Delivery.

Thin wrapper over pyperclip that converts every clipboard failure into a
``ClipboardError``, so callers can fall back to stdout.
"""

import logging

import pyperclip

from ctxpick.domain.errors import ClipboardError

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> None:
    """
    Place ``text`` on the system clipboard.

    Args:
        text: Content to copy.

    Raises:
        ClipboardError: No clipboard mechanism is available or the copy failed.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(str(e) or "No clipboard mechanism available") from e

    logger.debug(f"Copied {len(text):,} characters to the clipboard")
