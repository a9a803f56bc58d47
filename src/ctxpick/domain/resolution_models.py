from __future__ import annotations

"""
Input Resolution Domain Models.

Immutable value objects exchanged between the matchers, the resolver and
the reporting layer. A resolution run produces one ``ResolutionOutcome``
per input token plus the deduplicated list of ``ResolvedFile`` objects.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from ctxpick.domain.errors import AmbiguousMatchError, NotFoundError

# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class MatchKind(str, Enum):
    """How a candidate file was matched by its token."""
    EXACT_PATH = "exact_path"
    EXACT_FILENAME = "exact_filename"
    DIRECTORY = "directory"
    GLOB = "glob"
    PARTIAL_SUBSTRING = "partial_substring"


EXACT_KINDS: FrozenSet[MatchKind] = frozenset({MatchKind.EXACT_PATH, MatchKind.EXACT_FILENAME})


class OutcomeStatus(str, Enum):
    """Final state of a single input token."""
    RESOLVED = "resolved"
    RESOLVED_MANY = "resolved_many"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"


# -----------------------------------------------------------------------------
# VALUE OBJECTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolvedFile:
    """
    A file selected for inclusion.

    Attributes:
        display_path: Path shown to the user and used as the Markdown header,
                      relative to the search root where possible.
        canonical_path: Absolute, symlink-free path. Used for deduplication
                        and for reading the file.
    """
    display_path: str
    canonical_path: str

    @property
    def extension(self) -> str:
        """File extension without the leading dot ('' when absent)."""
        name = self.display_path.rsplit("/", 1)[-1]
        if "." not in name.lstrip("."):
            return ""
        return name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class Candidate:
    """A file matched by a token, tagged with how it matched."""
    file: ResolvedFile
    kind: MatchKind

    @property
    def is_exact(self) -> bool:
        return self.kind in EXACT_KINDS


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Result of resolving one input token.

    Attributes:
        status: Outcome category.
        files: Files selected by the token (resolved / resolved_many).
        conflicts: Competing display paths (ambiguous only).
        path_tried: Absolute path that was checked when a path-like token
                    matched nothing (not_found only).
    """
    status: OutcomeStatus
    files: Tuple[ResolvedFile, ...] = field(default_factory=tuple)
    conflicts: Tuple[str, ...] = field(default_factory=tuple)
    path_tried: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (OutcomeStatus.RESOLVED, OutcomeStatus.RESOLVED_MANY)

    def raise_for_status(self, token: str) -> None:
        """Raise the matching ResolutionError if the token did not resolve."""
        if self.status is OutcomeStatus.NOT_FOUND:
            raise NotFoundError(f"Input '{token}' could not be found", token)
        if self.status is OutcomeStatus.AMBIGUOUS:
            raise AmbiguousMatchError(
                f"Input '{token}' is ambiguous ({len(self.conflicts)} matches)",
                token,
                self.conflicts,
            )


# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def resolved(file: ResolvedFile) -> ResolutionOutcome:
    return ResolutionOutcome(status=OutcomeStatus.RESOLVED, files=(file,))


def resolved_many(files: Tuple[ResolvedFile, ...]) -> ResolutionOutcome:
    return ResolutionOutcome(status=OutcomeStatus.RESOLVED_MANY, files=tuple(files))


def ambiguous(conflicts: Tuple[str, ...]) -> ResolutionOutcome:
    return ResolutionOutcome(status=OutcomeStatus.AMBIGUOUS, conflicts=tuple(sorted(conflicts)))


def not_found(path_tried: Optional[str] = None) -> ResolutionOutcome:
    return ResolutionOutcome(status=OutcomeStatus.NOT_FOUND, path_tried=path_tried)
