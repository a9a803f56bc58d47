from __future__ import annotations

"""
ctx-pick: gather source files into an LLM-ready Markdown context.

Public API:
    resolve: Turn input tokens into an ordered, de-duplicated file list.
    extract: Depth-bounded skeleton of a source file.
    extract_tags: Declared symbols of a source file.
    run_pipeline: Resolve, assemble and measure in one call.
"""

from ctxpick.core.analysis import extract, extract_tags
from ctxpick.core.pipeline.engine import run_pipeline
from ctxpick.core.resolution import resolve

__version__ = "0.1.0"

__all__ = ["resolve", "extract", "extract_tags", "run_pipeline", "__version__"]
