from __future__ import annotations

from .resolver import classify_candidates, collect_files, resolve, resolve_token

__all__ = ["resolve", "resolve_token", "classify_candidates", "collect_files"]
