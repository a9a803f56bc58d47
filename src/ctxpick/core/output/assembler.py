from __future__ import annotations

"""
Context Assembly.

Turns resolved files into Markdown blocks, one per file, in full, skeleton
or symbols form. Per-file problems never abort the run: unreadable files
are dropped and reported, unsupported languages fall back to full content.
"""

import logging
from typing import List, Sequence

from ctxpick.core.analysis.skeleton import extract
from ctxpick.core.analysis.tags import extract_tags, render_tags
from ctxpick.domain.errors import IoFailureError, UnsupportedLanguageError
from ctxpick.domain.pipeline_models import (
    AssembledContext,
    ContextEntry,
    FailureKind,
    FileFailure,
    OutputMode,
)
from ctxpick.domain.resolution_models import ResolvedFile

logger = logging.getLogger(__name__)

NO_STRUCTURE_PLACEHOLDER = "(No structure found)"
NO_SYMBOLS_PLACEHOLDER = "(No symbols found)"


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def read_source(file: ResolvedFile) -> bytes:
    """
    Read a resolved file as raw bytes.

    Raises:
        IoFailureError: The file could not be read.
    """
    try:
        with open(file.canonical_path, "rb") as f:
            return f.read()
    except OSError as e:
        raise IoFailureError(file.display_path, e) from e


def decode_source(data: bytes) -> str:
    """Decode UTF-8, replacing invalid sequences instead of failing."""
    return data.decode("utf-8", errors="replace")


def assemble_context(
        files: Sequence[ResolvedFile],
        mode: OutputMode = OutputMode.FULL,
        depth: int = 4,
) -> AssembledContext:
    """
    Render every file into a Markdown block.

    Args:
        files: Files in output order.
        mode: Full content, depth skeleton, or symbol outline.
        depth: Skeleton depth (skeleton mode only).

    Returns:
        AssembledContext: Entries for every readable file plus the failures.
    """
    entries: List[ContextEntry] = []
    failures: List[FileFailure] = []

    for file in files:
        try:
            data = read_source(file)
        except IoFailureError as e:
            logger.error(str(e))
            failures.append(FileFailure(file.display_path, FailureKind.IO_FAILURE, str(e)))
            continue

        content = decode_source(data)
        source_lines = len(content.splitlines())

        if mode is OutputMode.FULL:
            entries.append(_full_entry(file, content, source_lines))
            continue

        try:
            entries.append(_structural_entry(file, data, mode, depth, source_lines))
        except UnsupportedLanguageError as e:
            logger.warning(f"{file.display_path}: {e}. Including full content instead.")
            failures.append(
                FileFailure(file.display_path, FailureKind.UNSUPPORTED_LANGUAGE, str(e))
            )
            entries.append(_fallback_entry(file, content, source_lines, e))

    return AssembledContext(entries=tuple(entries), failures=tuple(failures))


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _full_entry(file: ResolvedFile, content: str, source_lines: int) -> ContextEntry:
    return ContextEntry(
        display_path=file.display_path,
        body=content,
        lang_hint=file.extension,
        source_lines=source_lines,
        units=source_lines,
    )


def _structural_entry(
        file: ResolvedFile,
        data: bytes,
        mode: OutputMode,
        depth: int,
        source_lines: int,
) -> ContextEntry:
    if mode is OutputMode.SKELETON:
        skeleton = extract(data, file.extension, depth)
        body = skeleton.text or NO_STRUCTURE_PLACEHOLDER
        units = skeleton.token_count
    else:
        tags = extract_tags(data, file.extension)
        body = render_tags(tags) or NO_SYMBOLS_PLACEHOLDER
        units = len(tags)

    # No language hint: the body is not compilable source
    return ContextEntry(
        display_path=file.display_path,
        body=body,
        lang_hint="",
        source_lines=source_lines,
        units=units,
    )


def _fallback_entry(
        file: ResolvedFile,
        content: str,
        source_lines: int,
        error: UnsupportedLanguageError,
) -> ContextEntry:
    banner = (
        "---\n"
        f"-- ERROR: Could not extract structure from {file.display_path}: {error}\n"
        "-- Falling back to full file content.\n"
        "---\n\n"
    )
    return ContextEntry(
        display_path=file.display_path,
        body=banner + content,
        lang_hint="",
        source_lines=source_lines,
        units=source_lines,
    )
