from __future__ import annotations

"""
Structural Analysis Domain Models.

Value objects produced by the skeleton and tag extractors. Both are built
once per request and consumed immediately by the output assembler.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class SkeletonToken:
    """
    A text fragment emitted by the depth-bounded walk.

    Attributes:
        text: Leaf text, or the collapsed text span of a non-terminal cut
              off at the maximum depth.
        depth: Tree depth at which the node was visited (root is 0).
    """
    text: str
    depth: int


@dataclass(frozen=True)
class Skeleton:
    """
    Ordered token sequence abbreviating one file at a fixed maximum depth.

    Attributes:
        tokens: Emitted tokens in visitation order.
        max_depth: Depth bound the skeleton was built with.
    """
    tokens: Tuple[SkeletonToken, ...] = field(default_factory=tuple)
    max_depth: int = 0

    @property
    def text(self) -> str:
        """Tokens joined with single spaces."""
        return " ".join(t.text for t in self.tokens)

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, order=True)
class Tag:
    """
    A declared symbol located by a grammar's tag query.

    Instances order by ``start_byte`` so a sorted list follows the source.

    Attributes:
        start_byte: Byte offset of the definition node.
        name: Symbol name (function, struct, class...).
        kind: Symbol category taken from the ``@definition.<kind>`` capture.
        line_text: First line of the definition, stripped.
        doc_string: Associated documentation, if any.
    """
    start_byte: int
    name: str = field(compare=False)
    kind: str = field(compare=False)
    line_text: str = field(compare=False)
    doc_string: Optional[str] = field(default=None, compare=False)
