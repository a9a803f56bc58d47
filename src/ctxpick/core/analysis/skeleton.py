from __future__ import annotations

"""
Depth-bounded Skeleton Extraction.

Compresses a source file into a flat token sequence by walking its parse
tree down to a caller-supplied depth. Shallow depths keep only the coarse
outline of the file; each additional level splits the cut-off subtrees into
their children, until the walk reaches the leaves and reproduces every
source token.
"""

import logging
from typing import Iterator

from ctxpick.core.analysis import grammars
from ctxpick.core.analysis.parse_tree import ParseTree
from ctxpick.domain.analysis_models import Skeleton, SkeletonToken
from ctxpick.domain.errors import UnsupportedLanguageError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def extract(source_bytes: bytes, file_extension: str, max_depth: int) -> Skeleton:
    """
    Build the skeleton of a source file.

    Unsupported extensions are rejected before any parsing happens. Syntax
    errors are not fatal: the walk covers whatever structure the parser
    recovered.

    Args:
        source_bytes: Raw file content.
        file_extension: Extension selecting the grammar ('rs', '.py'...).
        max_depth: Deepest tree level to visit (root is 0).

    Returns:
        Skeleton: Tokens in visitation order.

    Raises:
        UnsupportedLanguageError: No grammar is registered for the extension.
        ValueError: ``max_depth`` is negative.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")

    grammar = grammars.grammar_for(file_extension)
    if grammar is None:
        raise UnsupportedLanguageError(grammars.normalize_extension(file_extension))

    tree = grammar.parse(source_bytes)
    skeleton = skeleton_from_tree(tree, max_depth)

    logger.debug(
        f"{grammar.name} skeleton: {skeleton.token_count} token(s) at depth {max_depth} "
        f"(tree height {tree.height})"
    )
    return skeleton


def skeleton_from_tree(tree: ParseTree, max_depth: int) -> Skeleton:
    """Run the depth-bounded walk over an already parsed tree."""
    return Skeleton(tokens=tuple(walk(tree, max_depth)), max_depth=max_depth)


def walk(tree: ParseTree, max_depth: int) -> Iterator[SkeletonToken]:
    """
    Depth-first, depth-bounded traversal of the arena.

    - Nodes deeper than ``max_depth`` are skipped.
    - Leaves emit their stripped text.
    - A non-terminal at exactly ``max_depth`` emits its whole text span with
      whitespace collapsed, instead of descending.
    - Shallower non-terminals descend into their children.

    Empty texts are dropped. An explicit stack keeps deep trees clear of the
    recursion limit.

    Args:
        tree: Arena parse tree.
        max_depth: Deepest level to visit.

    Yields:
        SkeletonToken: Emitted tokens in source order.
    """
    stack = [tree.root]
    while stack:
        index = stack.pop()
        node = tree.node(index)

        if node.depth > max_depth:
            continue

        if node.is_leaf or node.depth == max_depth:
            text = _token_text(tree, index, collapse=not node.is_leaf)
            if text:
                yield SkeletonToken(text=text, depth=node.depth)
            continue

        stack.extend(reversed(tree.children(index)))


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _token_text(tree: ParseTree, index: int, collapse: bool) -> str:
    text = tree.text(index)
    if collapse:
        return " ".join(text.split())
    return text.strip()
