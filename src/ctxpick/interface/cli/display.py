from __future__ import annotations

"""
Terminal Reports.

Human-readable views of a PipelineResult. Everything here goes to stderr so
that stdout stays reserved for the Markdown context (or the JSON result).
"""

import sys
from typing import Dict, List, Optional, TextIO, Tuple

from ctxpick.domain.pipeline_models import FailureKind, OutputMode, PipelineResult
from ctxpick.domain.resolution_models import OutcomeStatus, ResolutionOutcome

_UNIT_LABELS: Dict[OutputMode, str] = {
    OutputMode.FULL: "lines",
    OutputMode.SKELETON: "skeleton tokens",
    OutputMode.SYMBOLS: "symbols",
}

# -----------------------------------------------------------------------------
# RESOLUTION REPORT
# -----------------------------------------------------------------------------

def print_resolution_errors(
        result: PipelineResult,
        max_ambiguous_shown: int = 8,
        stream: Optional[TextIO] = None,
) -> None:
    """
    Report every token that failed to resolve, grouped by cause.

    Files that did resolve are listed afterwards for context.

    Args:
        result: A failed pipeline result carrying the resolution outcomes.
        max_ambiguous_shown: Conflicting paths listed per ambiguous token.
        stream: Destination (defaults to stderr).
    """
    out = stream or sys.stderr
    missing_paths: List[Tuple[str, ResolutionOutcome]] = []
    not_found: List[Tuple[str, ResolutionOutcome]] = []
    ambiguous: List[Tuple[str, ResolutionOutcome]] = []

    for token, outcome in result.unresolved:
        if outcome.status is OutcomeStatus.AMBIGUOUS:
            ambiguous.append((token, outcome))
        elif outcome.path_tried is not None:
            missing_paths.append((token, outcome))
        else:
            not_found.append((token, outcome))

    print("Could not proceed due to unresolved inputs:", file=out)
    print("-" * 50, file=out)

    if missing_paths:
        print("\nThe following specified paths do not exist:", file=out)
        for token, outcome in missing_paths:
            print(f"  • Input: '{token}' (checked: {outcome.path_tried})", file=out)

    if not_found:
        print("\nThe following inputs could not be found:", file=out)
        for token, _ in not_found:
            print(f"  • Input: '{token}'", file=out)

    if ambiguous:
        print("\nThe following inputs are ambiguous:", file=out)
        for token, outcome in ambiguous:
            print(f"  • Input '{token}' matched:", file=out)
            for path in outcome.conflicts[:max_ambiguous_shown]:
                print(f"    → {path}", file=out)
            remaining = len(outcome.conflicts) - max_ambiguous_shown
            if remaining > 0:
                suffix = "" if remaining == 1 else "es"
                print(f"    → ... and {remaining} more match{suffix}.", file=out)

    if result.files:
        print("\nHowever, these files were successfully resolved:", file=out)
        for file in result.files:
            print(f"  ✓ {file.display_path}", file=out)

    print("\nPlease resolve the issues above and try again.", file=out)


def print_error(result: PipelineResult, stream: Optional[TextIO] = None) -> None:
    """One-line report for failures that are not about token resolution."""
    print(f"ERROR: {result.error}", file=stream or sys.stderr)

# -----------------------------------------------------------------------------
# OPERATION SUMMARY
# -----------------------------------------------------------------------------

def print_operation_summary(
        result: PipelineResult,
        copied: bool,
        clipboard_error: Optional[Exception] = None,
        stream: Optional[TextIO] = None,
) -> None:
    """
    Summarize a successful run and preview the included files.

    Args:
        result: Successful pipeline result.
        copied: The context reached the clipboard.
        clipboard_error: Why the clipboard copy failed, if it was attempted.
        stream: Destination (defaults to stderr).
    """
    out = stream or sys.stderr
    unit = _UNIT_LABELS[result.output_mode]
    file_count = len(result.files)

    if copied:
        print(
            f"✅ Context copied to clipboard ({file_count} files, "
            f"{result.unit_count} {unit})",
            file=out,
        )
    elif clipboard_error is not None:
        print("⚠️ Failed to copy to clipboard.", file=out)
        print(f"    Error: {clipboard_error}", file=out)
        print("    Full context will be printed to stdout as a fallback.", file=out)
    else:
        print(f"Context written to stdout ({file_count} files, {result.unit_count} {unit})", file=out)

    if result.token_count > 0:
        print(f"Estimated tokens: {result.token_count:,} ({result.line_count} Markdown lines)", file=out)

    print("=" * 40, file=out)
    print("Included files:", file=out)

    if not result.entries:
        print("  (No files to preview)", file=out)
    for i, entry in enumerate(result.entries, start=1):
        print(f"\n{i}. {entry.display_path}", file=out)
        detail = f"    📄 {entry.source_lines} lines"
        if result.output_mode is not OutputMode.FULL:
            detail += f", {entry.units} {unit}"
        print(detail, file=out)

    if result.failures:
        print("\nProblems:", file=out)
        for failure in result.failures:
            marker = "✗" if failure.kind is FailureKind.IO_FAILURE else "⚠"
            print(f"  {marker} {failure.display_path}: {failure.message}", file=out)

    print("\n" + "=" * 40, file=out)
