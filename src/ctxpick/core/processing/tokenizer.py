from __future__ import annotations

"""
Token Estimation Engine.

Estimates how many LLM tokens the assembled context will consume. Uses a
local tiktoken BPE encoding; when the encoding cannot be loaded (unknown
name, or offline without a cached encoding file) it falls back to a
character-density heuristic so the summary never fails.
"""

import logging
import math
from typing import Dict

import tiktoken

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS & CACHE
# -----------------------------------------------------------------------------

# Approximately 4 characters per token for code and prose
CHARS_PER_TOKEN_AVG = 4
DEFAULT_ENCODING = "o200k_base"

_ENCODING_CACHE: Dict[str, "tiktoken.Encoding"] = {}


# -----------------------------------------------------------------------------
# STRATEGIES
# -----------------------------------------------------------------------------

def heuristic_count(text: str) -> int:
    """Estimate tokens using the characters-per-token ratio."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)


def tiktoken_count(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """
    Count tokens with a tiktoken encoding.

    Raises:
        ValueError: Unknown encoding name.
        OSError: Encoding file could not be fetched or read.
    """
    encoding = _ENCODING_CACHE.get(encoding_name)
    if encoding is None:
        encoding = tiktoken.get_encoding(encoding_name)
        _ENCODING_CACHE[encoding_name] = encoding
    return len(encoding.encode(text, disallowed_special=()))


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """
    Estimate the number of tokens in ``text``.

    Args:
        text: Input string content.
        encoding_name: tiktoken encoding to use.

    Returns:
        int: Token count (exact when tiktoken is usable, estimated otherwise).
    """
    if not text:
        return 0

    try:
        return tiktoken_count(text, encoding_name)
    except Exception as e:
        # tiktoken surfaces download failures as requests/urllib errors
        logger.warning(f"tiktoken encoding '{encoding_name}' unavailable: {e}. Using heuristic estimate.")
        return heuristic_count(text)
