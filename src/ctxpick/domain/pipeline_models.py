from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the data structures and factory functions used to hand execution
results from the pipeline engine to the interface layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ctxpick.domain.resolution_models import ResolutionOutcome, ResolvedFile

# -----------------------------------------------------------------------------
# OUTPUT MODELS
# -----------------------------------------------------------------------------

class OutputMode(str, Enum):
    """Content rendered for each resolved file."""
    FULL = "full"
    SKELETON = "skeleton"
    SYMBOLS = "symbols"


class FailureKind(str, Enum):
    IO_FAILURE = "io_failure"
    UNSUPPORTED_LANGUAGE = "unsupported_language"


@dataclass(frozen=True)
class FileFailure:
    """
    Per-file problem encountered while assembling the context.

    Attributes:
        display_path: File identifier relative to the search root.
        kind: Failure category.
        message: Human-readable detail.
    """
    display_path: str
    kind: FailureKind
    message: str


@dataclass(frozen=True)
class ContextEntry:
    """
    One file block of the assembled Markdown context.

    Attributes:
        display_path: Header line of the block.
        body: Content placed inside the code fence.
        lang_hint: Fence language hint ('' for skeleton/symbol output).
        source_lines: Line count of the source file.
        units: Lines (full), skeleton tokens or tags rendered.
    """
    display_path: str
    body: str
    lang_hint: str
    source_lines: int
    units: int

    def to_markdown(self) -> str:
        return f"{self.display_path}\n```{self.lang_hint}\n{self.body.rstrip()}\n```\n\n"


@dataclass(frozen=True)
class AssembledContext:
    """Markdown document plus the entries and failures behind it."""
    entries: Tuple[ContextEntry, ...] = field(default_factory=tuple)
    failures: Tuple[FileFailure, ...] = field(default_factory=tuple)

    @property
    def markdown(self) -> str:
        return "".join(e.to_markdown() for e in self.entries)

    @property
    def units(self) -> int:
        return sum(e.units for e in self.entries)


# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineResult:
    """
    Unified result of a complete ctx-pick run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        search_root: Normalized directory tokens were resolved against.
        output_mode: Rendering mode that was requested.
        outcomes: Per-token resolution outcomes, in input order.
        files: Files that made it into the context.
        entries: Rendered file blocks.
        failures: Per-file assembly problems.
        content: Final Markdown document.
        line_count: Number of lines in ``content``.
        unit_count: Lines, skeleton tokens or symbols across all entries.
        token_count: Estimated LLM token count of ``content``.
        summary: Free-form execution statistics.
    """
    ok: bool
    error: str

    search_root: str
    output_mode: OutputMode

    outcomes: List[Tuple[str, ResolutionOutcome]] = field(default_factory=list)
    files: List[ResolvedFile] = field(default_factory=list)
    entries: List[ContextEntry] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)

    content: str = ""
    line_count: int = 0
    unit_count: int = 0
    token_count: int = 0

    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def unresolved(self) -> List[Tuple[str, ResolutionOutcome]]:
        return [(token, o) for token, o in self.outcomes if not o.ok]

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        search_root: str,
        output_mode: OutputMode,
        outcomes: Optional[List[Tuple[str, ResolutionOutcome]]] = None,
        files: Optional[List[ResolvedFile]] = None,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> PipelineResult:
    """
    Create a failed pipeline result.

    Args:
        error: Detailed error description.
        search_root: The resolution root.
        output_mode: Requested rendering mode.
        outcomes: Resolution outcomes gathered before the failure.
        files: Files that did resolve, for context in the report.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        PipelineResult: An immutable error result.
    """
    return PipelineResult(
        ok=False,
        error=error,
        search_root=search_root,
        output_mode=output_mode,
        outcomes=list(outcomes or []),
        files=list(files or []),
        summary=summary_extra or {},
    )


def create_success_result(
        search_root: str,
        output_mode: OutputMode,
        outcomes: List[Tuple[str, ResolutionOutcome]],
        context: AssembledContext,
        files: List[ResolvedFile],
        token_count: int = 0,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> PipelineResult:
    """
    Create a successful pipeline result.

    Args:
        search_root: The resolution root.
        output_mode: Rendering mode used.
        outcomes: Per-token resolution outcomes.
        context: Assembled Markdown context.
        files: Files included in the context.
        token_count: Estimated token count of the context.
        summary_extra: Final execution metrics.

    Returns:
        PipelineResult: An immutable success result.
    """
    content = context.markdown
    return PipelineResult(
        ok=True,
        error="",
        search_root=search_root,
        output_mode=output_mode,
        outcomes=list(outcomes),
        files=list(files),
        entries=list(context.entries),
        failures=list(context.failures),
        content=content,
        line_count=len(content.splitlines()),
        unit_count=context.units,
        token_count=token_count,
        summary=summary_extra or {},
    )
