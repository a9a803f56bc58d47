"""Exception hierarchy for ctx-pick.

Resolution problems are normally reported as outcomes rather than raised;
these classes are raised where a single call cannot continue (extraction,
file reads, clipboard access) or on explicit request via
``ResolutionOutcome.raise_for_status``.
"""

from typing import Sequence


class CtxPickError(Exception):
    """Base exception for all ctx-pick errors."""


class ResolutionError(CtxPickError):
    """Base exception for input resolution failures.

    Attributes:
        token: The input token that failed to resolve
    """

    def __init__(self, message: str, token: str) -> None:
        super().__init__(message)
        self.token = token


class NotFoundError(ResolutionError):
    """Token matched no file."""


class AmbiguousMatchError(ResolutionError):
    """Token matched several files after exact-match prioritization.

    Attributes:
        conflicts: Display paths of the competing files
    """

    def __init__(self, message: str, token: str, conflicts: Sequence[str]) -> None:
        super().__init__(message, token)
        self.conflicts = tuple(conflicts)


class ExtractionError(CtxPickError):
    """Base exception for skeleton and symbol extraction errors."""


class UnsupportedLanguageError(ExtractionError):
    """No grammar is registered for the file extension.

    Attributes:
        extension: Normalized extension (without the leading dot)
    """

    def __init__(self, extension: str) -> None:
        super().__init__(
            f"Language support not configured for file extension: '{extension}'"
        )
        self.extension = extension


class IoFailureError(CtxPickError):
    """A file that passed existence checks could not be read.

    Attributes:
        path: Path that failed
    """

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"Could not read '{path}': {cause}")
        self.path = path
        self.__cause__ = cause


class ClipboardError(CtxPickError):
    """The system clipboard is unavailable or rejected the content."""
