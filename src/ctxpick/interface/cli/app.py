from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration layering
(defaults, saved settings, command-line overrides), pipeline execution,
delivery of the Markdown context (clipboard, with stdout fallback) and the
terminal report.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from ctxpick.core.output.clipboard import copy_to_clipboard
from ctxpick.core.pipeline.engine import run_pipeline
from ctxpick.core.pipeline.validator import validate_config
from ctxpick.domain.config import get_default_config, load_config, save_config
from ctxpick.domain.errors import ClipboardError
from ctxpick.domain.pipeline_models import PipelineResult
from ctxpick.infra.logging import LoggingConfig, configure_logging, get_logger, shutdown_logging
from ctxpick.interface.cli import args as cli_args
from ctxpick.interface.cli import display

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_ROOT = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    try:
        return _run(args)
    finally:
        shutdown_logging()


def _run(args: Any) -> int:
    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (defaults vs saved settings)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 4. Merge command-line overrides and validate
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        try:
            save_config(clean_conf)
        except OSError as e:
            logger.error(f"Could not save configuration: {e}")

    # 5. Pipeline execution phase
    try:
        result = run_pipeline(clean_conf, args.tokens)
    except KeyboardInterrupt:
        logger.warning("Operation interrupted by user.")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Pipeline failed: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
        return _exit_code(result)

    if not result.ok:
        _report_failure(result, clean_conf)
        return _exit_code(result)

    # 6. Delivery phase
    _deliver(result, use_clipboard=clean_conf["copy_to_clipboard"])
    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge known, non-None override values into the base configuration.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = [
        "search_root", "output_mode", "skeleton_depth",
        "keep_going", "copy_to_clipboard",
    ]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# RESULT HANDLING
# -----------------------------------------------------------------------------

def _exit_code(result: PipelineResult) -> int:
    if result.ok:
        return EXIT_OK
    if result.summary.get("invalid_root"):
        return EXIT_BAD_ROOT
    return EXIT_FAILURE


def _report_failure(result: PipelineResult, config: Dict[str, Any]) -> None:
    if result.unresolved:
        display.print_resolution_errors(result, config["max_ambiguous_shown"])
    else:
        display.print_error(result)


def _deliver(result: PipelineResult, use_clipboard: bool) -> None:
    """Copy the context to the clipboard, printing it to stdout when that is not possible."""
    if not use_clipboard:
        display.print_operation_summary(result, copied=False)
        print(result.content)
        return

    try:
        copy_to_clipboard(result.content)
    except ClipboardError as e:
        logger.debug(f"Clipboard unavailable: {e}")
        display.print_operation_summary(result, copied=False, clipboard_error=e)
        print(result.content)
        return

    display.print_operation_summary(result, copied=True)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
