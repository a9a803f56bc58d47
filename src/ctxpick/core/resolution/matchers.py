from __future__ import annotations

"""
File Matching Primitives.

The three building blocks of input resolution:

- ``walk_files`` / ``directory_candidates``: recursive enumeration of
  regular files below a directory.
- ``expand_glob`` / ``glob_candidates``: glob pattern expansion against the
  search root.
- ``match_name`` / ``find_name_candidates``: filename and path-suffix
  matching of bare name fragments.

All functions are read-only over the filesystem and return plain values;
classification into outcomes happens in the resolver.
"""

import glob
import logging
import os
from typing import Iterator, List, Optional, Sequence

from ctxpick.domain.resolution_models import Candidate, MatchKind, ResolvedFile
from ctxpick.infra.fs import canonicalize, to_display_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONSTANTS
# -----------------------------------------------------------------------------

GLOB_METACHARACTERS = ("*", "?", "[")

# -----------------------------------------------------------------------------
# DIRECTORY WALKER
# -----------------------------------------------------------------------------

def walk_files(directory: str, follow_links: bool = True) -> Iterator[str]:
    """
    Yield the absolute path of every regular file below ``directory``.

    Traversal is sorted for deterministic output. When following symlinks,
    directories whose real path was already visited are pruned so link
    cycles terminate. Otherwise symlinked directories are skipped without
    marking their target, which is still reached through its real path.
    Unreadable directories are logged and skipped.

    Args:
        directory: Root of the walk.
        follow_links: Descend into symlinked directories.

    Yields:
        str: Absolute file paths (symlinks not resolved).
    """
    root_abs = os.path.abspath(directory)
    visited = {canonicalize(root_abs)}

    def _on_error(err: OSError) -> None:
        logger.debug(f"Skipping unreadable path during walk: {err}")

    for root, dirs, files in os.walk(root_abs, followlinks=follow_links, onerror=_on_error):
        kept = []
        for d in sorted(dirs):
            dir_path = os.path.join(root, d)
            # os.walk never descends into these, so they must not claim the target
            if not follow_links and os.path.islink(dir_path):
                continue
            real = canonicalize(dir_path)
            if real in visited:
                logger.debug(f"Pruning already visited directory: {dir_path}")
                continue
            visited.add(real)
            kept.append(d)
        dirs[:] = kept

        for file_name in sorted(files):
            file_path = os.path.join(root, file_name)
            if os.path.isfile(file_path):
                yield file_path


def make_resolved_file(path: str, search_root: str) -> ResolvedFile:
    """Build the canonical/display path pair for a file on disk."""
    canonical = canonicalize(path)
    return ResolvedFile(
        display_path=to_display_path(canonical, search_root),
        canonical_path=canonical,
    )


def directory_candidates(
        directory: str,
        search_root: str,
        follow_links: bool = True,
) -> List[Candidate]:
    """Tag every file below ``directory`` as a directory match, in walk order."""
    return [
        Candidate(make_resolved_file(p, search_root), MatchKind.DIRECTORY)
        for p in walk_files(directory, follow_links)
    ]

# -----------------------------------------------------------------------------
# GLOB MATCHER
# -----------------------------------------------------------------------------

def is_glob_pattern(token: str) -> bool:
    """True if the token contains a glob metacharacter."""
    return any(ch in token for ch in GLOB_METACHARACTERS)


def expand_glob(pattern: str, search_root: str) -> List[str]:
    """
    Expand a glob pattern relative to the search root.

    ``**`` matches any number of directories and dotfiles are matched like
    any other name, as in directory expansion. The search root is taken
    literally even if it contains metacharacters. Absolute patterns are
    used as-is. Only regular files are returned, sorted.

    Args:
        pattern: Glob pattern supplied by the user.
        search_root: Directory relative patterns are anchored to.

    Returns:
        List[str]: Absolute paths of the matching files.
    """
    anchored = os.path.join(glob.escape(search_root), os.path.expanduser(pattern))
    matches = glob.glob(anchored, recursive=True, include_hidden=True)
    return sorted(os.path.abspath(m) for m in matches if os.path.isfile(m))


def glob_candidates(pattern: str, search_root: str) -> List[Candidate]:
    """Tag every file matched by ``pattern`` as a glob match."""
    return [
        Candidate(make_resolved_file(p, search_root), MatchKind.GLOB)
        for p in expand_glob(pattern, search_root)
    ]

# -----------------------------------------------------------------------------
# NAME MATCHER
# -----------------------------------------------------------------------------

def _split_segments(path: str) -> List[str]:
    normalized = path.replace("\\", "/")
    return [s for s in normalized.split("/") if s and s != "."]


def match_name(token: str, rel_path: str) -> Optional[MatchKind]:
    """
    Classify how a bare name fragment matches a relative file path.

    Tokens without a path separator match ``EXACT_FILENAME`` when equal to
    the final path segment (no extension folding) and ``PARTIAL_SUBSTRING``
    when contained anywhere in the relative path.

    Tokens with a separator are path-suffix matches: ``EXACT_FILENAME``
    when all their segments equal the trailing segments of the path, and
    ``PARTIAL_SUBSTRING`` when their directory segments equal the trailing
    directories of the path and their last segment is contained in the
    file name.

    Args:
        token: User-supplied fragment.
        rel_path: File path relative to the search root.

    Returns:
        Optional[MatchKind]: Match kind, or None if the path does not match.
    """
    token_parts = _split_segments(token)
    path_parts = _split_segments(rel_path)
    if not token_parts or not path_parts:
        return None

    if len(token_parts) == 1:
        fragment = token_parts[0]
        if path_parts[-1] == fragment:
            return MatchKind.EXACT_FILENAME
        if fragment in "/".join(path_parts):
            return MatchKind.PARTIAL_SUBSTRING
        return None

    if len(token_parts) > len(path_parts):
        return None

    if path_parts[-len(token_parts):] == token_parts:
        return MatchKind.EXACT_FILENAME

    token_dirs, token_name = token_parts[:-1], token_parts[-1]
    file_dirs = path_parts[:-1]
    if file_dirs[-len(token_dirs):] == token_dirs and token_name in path_parts[-1]:
        return MatchKind.PARTIAL_SUBSTRING

    return None


def find_name_candidates(
        token: str,
        search_root: str,
        file_index: Sequence[str],
) -> List[Candidate]:
    """
    Match a name fragment against every file reachable from the search root.

    Args:
        token: User-supplied fragment.
        search_root: Directory the relative paths are computed from.
        file_index: Absolute paths of every file under the search root.

    Returns:
        List[Candidate]: One candidate per matching file, in index order.
    """
    candidates: List[Candidate] = []
    for file_path in file_index:
        rel_path = os.path.relpath(file_path, search_root)
        kind = match_name(token, rel_path)
        if kind is not None:
            candidates.append(Candidate(make_resolved_file(file_path, search_root), kind))
    return candidates
