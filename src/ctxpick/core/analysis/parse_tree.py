from __future__ import annotations

"""
Arena-backed Parse Tree.

A flat, immutable copy of a concrete syntax tree. Nodes are stored in
breadth-first order, so the children of any node occupy a contiguous index
range and are referenced by ``(first_child, child_count)`` instead of
object pointers.
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Iterator, List, Tuple


@dataclass(frozen=True)
class ParseNode:
    """
    One node of the arena.

    Attributes:
        kind: Grammar node type (e.g. 'function_definition', 'identifier').
        start_byte: Start offset in the source.
        end_byte: End offset in the source (exclusive).
        depth: Distance from the root (root is 0).
        first_child: Arena index of the first child.
        child_count: Number of children.
        is_error: Node is an error or missing node inserted by the parser.
    """
    kind: str
    start_byte: int
    end_byte: int
    depth: int
    first_child: int
    child_count: int
    is_error: bool = False

    @property
    def is_leaf(self) -> bool:
        return self.child_count == 0


class ParseTree:
    """Immutable arena of ``ParseNode`` objects plus the source they index into."""

    def __init__(self, nodes: Tuple[ParseNode, ...], source: bytes) -> None:
        if not nodes:
            raise ValueError("A parse tree needs at least a root node")
        self._nodes = nodes
        self._source = source

    @classmethod
    def from_tree_sitter(cls, tree: Any, source: bytes) -> "ParseTree":
        """
        Copy a ``tree_sitter.Tree`` into a breadth-first arena.

        Nodes are numbered in the order they are dequeued; because each
        node's children are enqueued together, they receive consecutive
        indices starting at the counter value when their parent is taken.

        Args:
            tree: Tree returned by ``tree_sitter.Parser.parse``.
            source: The exact bytes that were parsed.

        Returns:
            ParseTree: The arena copy.
        """
        nodes: List[ParseNode] = []
        pending: Deque[Tuple[Any, int]] = deque([(tree.root_node, 0)])
        next_index = 1

        while pending:
            ts_node, depth = pending.popleft()
            children = ts_node.children
            nodes.append(ParseNode(
                kind=ts_node.type,
                start_byte=ts_node.start_byte,
                end_byte=ts_node.end_byte,
                depth=depth,
                first_child=next_index,
                child_count=len(children),
                is_error=ts_node.is_error or ts_node.is_missing,
            ))
            next_index += len(children)
            pending.extend((child, depth + 1) for child in children)

        return cls(tuple(nodes), source)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def root(self) -> int:
        return 0

    @property
    def source(self) -> bytes:
        return self._source

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> ParseNode:
        return self._nodes[index]

    def children(self, index: int) -> range:
        """Arena indices of the children of ``index``."""
        n = self._nodes[index]
        return range(n.first_child, n.first_child + n.child_count)

    def text(self, index: int) -> str:
        """Source text spanned by a node (undecodable bytes replaced)."""
        n = self._nodes[index]
        return self._source[n.start_byte:n.end_byte].decode("utf-8", errors="replace")

    def leaves(self) -> Iterator[int]:
        """Leaf indices in source (depth-first) order."""
        stack = [self.root]
        while stack:
            index = stack.pop()
            if self._nodes[index].is_leaf:
                yield index
            else:
                stack.extend(reversed(self.children(index)))

    @property
    def height(self) -> int:
        """Greatest node depth (0 for a tree with only a root)."""
        return max(n.depth for n in self._nodes)

    @property
    def has_errors(self) -> bool:
        return any(n.is_error for n in self._nodes)
