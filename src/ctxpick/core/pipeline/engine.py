from __future__ import annotations

"""
Core orchestration pipeline.

Coordinates a complete ctx-pick run:
1. Validates configuration and the search root.
2. Resolves every input token.
3. Halts on unresolved tokens unless asked to keep going.
4. Assembles the Markdown context (full, skeleton or symbols).
5. Computes line and token metrics.

Delivery (clipboard / stdout) and rendering are left to the interface layer.
"""

import logging
import os
from typing import Any, Dict, Optional, Sequence

from ctxpick.core.output.assembler import assemble_context
from ctxpick.core.pipeline.validator import validate_config
from ctxpick.core.processing.tokenizer import count_tokens
from ctxpick.core.resolution.resolver import resolve
from ctxpick.domain.pipeline_models import (
    FailureKind,
    OutputMode,
    PipelineResult,
    create_error_result,
    create_success_result,
)
from ctxpick.infra.fs import normalize_path

logger = logging.getLogger(__name__)


def run_pipeline(
        config: Optional[Dict[str, Any]],
        tokens: Sequence[str],
) -> PipelineResult:
    """
    Execute the full resolve-and-assemble pipeline.

    Args:
        config: The configuration dictionary (raw or partial).
        tokens: Input tokens in command-line order.

    Returns:
        PipelineResult: Status, outcomes, assembled content and metrics.
    """
    logger.debug("Pipeline execution started.")

    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config or {}, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    mode = OutputMode(cfg["output_mode"])
    search_root = normalize_path(cfg["search_root"], os.getcwd())

    if not os.path.isdir(search_root):
        msg = f"Invalid search root: {search_root}"
        logger.error(msg)
        return create_error_result(
            msg, search_root, mode, summary_extra={"invalid_root": True}
        )

    # -------------------------------------------------------------------------
    # 2) Resolution
    # -------------------------------------------------------------------------
    files, outcomes = resolve(tokens, search_root, follow_links=cfg["follow_links"])
    unresolved = [token for token, outcome in outcomes if not outcome.ok]

    # -------------------------------------------------------------------------
    # 3) Halt Policy
    # -------------------------------------------------------------------------
    if unresolved and not cfg["keep_going"]:
        msg = f"{len(unresolved)} input(s) could not be resolved"
        logger.debug(f"{msg}: {unresolved}")
        return create_error_result(
            msg, search_root, mode, outcomes, files,
            summary_extra={"unresolved": unresolved},
        )

    if unresolved:
        logger.warning(f"Continuing without unresolved input(s): {', '.join(unresolved)}")

    if not files:
        msg = "No files were found or resolved based on your input."
        logger.debug(msg)
        return create_error_result(msg, search_root, mode, outcomes, files)

    # -------------------------------------------------------------------------
    # 4) Assembly
    # -------------------------------------------------------------------------
    context = assemble_context(files, mode=mode, depth=cfg["skeleton_depth"])
    failed_paths = {f.display_path for f in context.failures if f.kind is FailureKind.IO_FAILURE}
    included = [f for f in files if f.display_path not in failed_paths]

    if not context.entries:
        msg = "None of the resolved files could be read."
        logger.error(msg)
        return create_error_result(
            msg, search_root, mode, outcomes, included,
            summary_extra={"failures": [f.display_path for f in context.failures]},
        )

    # -------------------------------------------------------------------------
    # 5) Metrics
    # -------------------------------------------------------------------------
    token_count = count_tokens(context.markdown, cfg["token_encoding"])

    summary = {
        "resolved_files": len(files),
        "included_files": len(included),
        "failures": len(context.failures),
        "unresolved": unresolved,
    }
    logger.debug(f"Pipeline finished: {summary}")

    return create_success_result(
        search_root=search_root,
        output_mode=mode,
        outcomes=outcomes,
        context=context,
        files=included,
        token_count=token_count,
        summary_extra=summary,
    )
