from __future__ import annotations

from .grammars import Grammar, grammar_for, supported_extensions
from .skeleton import extract
from .tags import extract_tags, render_tags

__all__ = [
    "Grammar",
    "grammar_for",
    "supported_extensions",
    "extract",
    "extract_tags",
    "render_tags",
]
