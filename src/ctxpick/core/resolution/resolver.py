from __future__ import annotations

"""
Input Resolution Service.

Turns user-supplied tokens into a conflict-free, ordered list of files.
Each token goes through four phases, the first applicable one wins:

1. Exact path: the token names an existing file.
2. Directory: the token names an existing directory; every file below it
   is selected.
3. Glob: the token contains glob metacharacters.
4. Name fragment: filename / substring / path-suffix search over the whole
   search root, with exact matches taking priority over partial ones.

Every token is resolved independently; failures are reported per token and
never abort the others.
"""

import logging
import os
from typing import Dict, List, Optional, Sequence, Tuple

from ctxpick.core.resolution.matchers import (
    directory_candidates,
    find_name_candidates,
    glob_candidates,
    is_glob_pattern,
    make_resolved_file,
    walk_files,
)
from ctxpick.domain.resolution_models import (
    Candidate,
    MatchKind,
    OutcomeStatus,
    ResolutionOutcome,
    ResolvedFile,
    ambiguous,
    not_found,
    resolved,
    resolved_many,
)

logger = logging.getLogger(__name__)

Outcomes = List[Tuple[str, ResolutionOutcome]]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def resolve(
        tokens: Sequence[str],
        search_root: str,
        *,
        follow_links: bool = True,
) -> Tuple[List[ResolvedFile], Outcomes]:
    """
    Resolve every input token against the search root.

    Args:
        tokens: Raw user inputs, in command-line order.
        search_root: Directory relative tokens are resolved against.
        follow_links: Follow symlinked directories while walking.

    Returns:
        Tuple[List[ResolvedFile], Outcomes]: The deduplicated files in
        first-seen order, and one ``(token, outcome)`` pair per token.
    """
    root = os.path.abspath(search_root)
    index = _FileIndex(root, follow_links)

    outcomes: Outcomes = [
        (token, resolve_token(token, root, index=index, follow_links=follow_links))
        for token in tokens
    ]
    files = collect_files(outcomes)

    logger.debug(
        f"Resolved {len(tokens)} token(s) to {len(files)} file(s) under {root}"
    )
    return files, outcomes


def resolve_token(
        token: str,
        search_root: str,
        *,
        index: Optional["_FileIndex"] = None,
        follow_links: bool = True,
) -> ResolutionOutcome:
    """
    Resolve a single token.

    Args:
        token: Raw user input.
        search_root: Absolute resolution root.
        index: Shared lazy file listing of the search root.
        follow_links: Follow symlinked directories while walking.

    Returns:
        ResolutionOutcome: The token's outcome.
    """
    if not token.strip():
        return not_found()

    if index is None:
        index = _FileIndex(search_root, follow_links)

    path_to_check = os.path.join(search_root, os.path.expanduser(token))

    # Phase 1: literal file (checked before globbing so names like "a[1].txt" work)
    if os.path.isfile(path_to_check):
        logger.debug(f"'{token}' is an existing file")
        return classify_candidates(
            [Candidate(make_resolved_file(path_to_check, search_root), MatchKind.EXACT_PATH)]
        )

    # Phase 2: directory expansion
    if os.path.isdir(path_to_check):
        candidates = directory_candidates(path_to_check, search_root, follow_links)
        logger.debug(f"'{token}' expanded as a directory to {len(candidates)} file(s)")
        return expand_candidates(candidates)

    # Phase 3: glob pattern
    if is_glob_pattern(token):
        candidates = glob_candidates(token, search_root)
        logger.debug(f"'{token}' expanded as a glob to {len(candidates)} file(s)")
        if not candidates:
            return not_found()
        return expand_candidates(candidates)

    # Phase 4: name fragment search
    outcome = classify_candidates(find_name_candidates(token, search_root, index.files))
    if outcome.status is OutcomeStatus.NOT_FOUND and _looks_like_path(token):
        return not_found(path_tried=os.path.abspath(path_to_check))
    return outcome


def classify_candidates(candidates: Sequence[Candidate]) -> ResolutionOutcome:
    """
    Turn one token's candidate list into an outcome.

    Exact candidates (path or filename) discard every partial candidate.
    The survivors are deduplicated by canonical path: one left is a
    resolution, several an ambiguity, none a miss.

    Args:
        candidates: Every candidate found for a token.

    Returns:
        ResolutionOutcome: Resolved, ambiguous or not found.
    """
    exact = [c for c in candidates if c.is_exact]
    remaining = _dedupe(tuple(c.file for c in (exact or candidates)))

    if not remaining:
        return not_found()
    if len(remaining) == 1:
        return resolved(remaining[0])
    return ambiguous(tuple(f.display_path for f in remaining))


def expand_candidates(candidates: Sequence[Candidate]) -> ResolutionOutcome:
    """
    Turn the candidates of a directory or glob token into an outcome.

    Expansions select every match and are never ambiguous; an empty
    directory is still a successful, empty expansion.

    Args:
        candidates: Directory or glob candidates in expansion order.

    Returns:
        ResolutionOutcome: Resolved-many with deduplicated files.
    """
    return resolved_many(_dedupe(tuple(c.file for c in candidates)))


def collect_files(outcomes: Outcomes) -> List[ResolvedFile]:
    """
    Merge the files of all successful outcomes.

    Order follows the tokens, then each token's own ordering. A file
    selected by several tokens keeps its first position.

    Args:
        outcomes: ``(token, outcome)`` pairs.

    Returns:
        List[ResolvedFile]: Deduplicated files.
    """
    selected = tuple(f for _, outcome in outcomes if outcome.ok for f in outcome.files)
    return list(_dedupe(selected))


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

class _FileIndex:
    """Lazily walked listing of every file under the search root, shared by tokens."""

    def __init__(self, search_root: str, follow_links: bool) -> None:
        self._search_root = search_root
        self._follow_links = follow_links
        self._files: Optional[List[str]] = None

    @property
    def files(self) -> List[str]:
        if self._files is None:
            self._files = list(walk_files(self._search_root, self._follow_links))
            logger.debug(f"Indexed {len(self._files)} file(s) under {self._search_root}")
        return self._files


def _dedupe(files: Tuple[ResolvedFile, ...]) -> Tuple[ResolvedFile, ...]:
    seen: Dict[str, ResolvedFile] = {}
    for f in files:
        seen.setdefault(f.canonical_path, f)
    return tuple(seen.values())


def _looks_like_path(token: str) -> bool:
    return "/" in token or os.sep in token
