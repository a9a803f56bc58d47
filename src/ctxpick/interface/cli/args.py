from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the ctx-pick command-line schema and translates the parsed
namespace into configuration overrides understood by the domain layer.
"""

import argparse
from typing import Any, Dict

from ctxpick.domain.config import DEFAULT_SKELETON_DEPTH

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the ctx-pick CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="ctx-pick",
        description=(
            "Resolve file names, paths, directories and glob patterns into "
            "a Markdown context block and copy it to the clipboard."
        ),
    )

    p.add_argument(
        "tokens",
        nargs="+",
        metavar="TOKEN",
        help="File name fragment, relative path, directory or glob pattern.",
    )

    # --- Resolution ---
    p.add_argument(
        "--root",
        dest="search_root",
        default=None,
        help="Directory tokens are resolved against (default: current directory).",
    )
    p.add_argument(
        "-k", "--keep-going",
        action="store_true",
        help="Assemble the files that did resolve even if some tokens did not.",
    )

    # --- Rendering ---
    mode = p.add_mutually_exclusive_group()
    mode.add_argument(
        "-s", "--skeleton",
        action="store_true",
        help="Emit a depth-bounded structural skeleton instead of full content.",
    )
    mode.add_argument(
        "--symbols",
        action="store_true",
        help="Emit the declared symbols (functions, classes...) of each file.",
    )
    p.add_argument(
        "-d", "--depth",
        dest="skeleton_depth",
        type=int,
        default=None,
        help=f"Skeleton depth (default: {DEFAULT_SKELETON_DEPTH}).",
    )

    # --- Delivery ---
    p.add_argument(
        "--stdout",
        action="store_true",
        help="Print the Markdown to stdout instead of copying it to the clipboard.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the full pipeline result as JSON to stdout.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration (without --root) before running.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to a rotating file at this path.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a domain configuration dictionary.

    Only flags the user actually passed produce an override, so saved
    settings survive unless explicitly replaced.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["search_root"] = args.search_root

    if args.skeleton:
        overrides["output_mode"] = "skeleton"
    elif args.symbols:
        overrides["output_mode"] = "symbols"

    if args.skeleton_depth is not None:
        overrides["skeleton_depth"] = args.skeleton_depth
    if args.keep_going:
        overrides["keep_going"] = True
    if args.stdout or args.json_output:
        overrides["copy_to_clipboard"] = False

    return overrides
