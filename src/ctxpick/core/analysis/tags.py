from __future__ import annotations

"""
Symbol Tag Extraction.

Runs a grammar's tag query over a parsed file and returns the declared
symbols (functions, classes, traits, interfaces...) with their first
definition line and documentation. Used by the 'symbols' output mode as a
more selective alternative to the depth-bounded skeleton.
"""

import logging
from typing import Any, Dict, List, Optional

from tree_sitter import Query, QueryCursor

from ctxpick.core.analysis import grammars
from ctxpick.domain.analysis_models import Tag
from ctxpick.domain.errors import UnsupportedLanguageError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONSTANTS
# -----------------------------------------------------------------------------

DEFINITION_PREFIX = "definition."

_CONTAINER_KINDS = frozenset({
    "class_definition", "class_declaration", "abstract_class_declaration",
    "impl_item", "trait_item",
})
_TRANSPARENT_KINDS = frozenset({
    "block", "declaration_list", "decorated_definition", "class_body",
})
_COMMENT_KINDS = frozenset({"comment", "line_comment", "block_comment"})


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def extract_tags(source_bytes: bytes, file_extension: str) -> List[Tag]:
    """
    Extract the declared symbols of a source file.

    Args:
        source_bytes: Raw file content.
        file_extension: Extension selecting the grammar.

    Returns:
        List[Tag]: Tags sorted by position in the file.

    Raises:
        UnsupportedLanguageError: No grammar is registered for the extension.
    """
    grammar = grammars.grammar_for(file_extension)
    if grammar is None:
        raise UnsupportedLanguageError(grammars.normalize_extension(file_extension))

    tree = grammar.parse_native(source_bytes)
    query = Query(grammar.language, grammar.tags_query)
    cursor = QueryCursor(query)

    tags: Dict[int, Tag] = {}
    for _, captures in cursor.matches(tree.root_node):
        tag = _build_tag(captures, source_bytes)
        if tag is not None:
            tags.setdefault(tag.start_byte, tag)

    logger.debug(f"{grammar.name}: {len(tags)} tag(s) extracted")
    return sorted(tags.values())


def render_tags(tags: List[Tag]) -> str:
    """
    Format tags as an outline, one definition line per symbol.

    Documentation, when present, follows on an indented line (first line
    only).
    """
    lines: List[str] = []
    for tag in tags:
        lines.append(f"[{tag.kind}] {tag.line_text}")
        if tag.doc_string:
            lines.append(f"    {tag.doc_string.splitlines()[0]}")
    return "\n".join(lines)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _build_tag(captures: Dict[str, List[Any]], source: bytes) -> Optional[Tag]:
    name_nodes = captures.get("name")
    definition = next(
        ((key, nodes) for key, nodes in captures.items() if key.startswith(DEFINITION_PREFIX)),
        None,
    )
    if not name_nodes or definition is None:
        return None

    capture_name, def_nodes = definition
    node = def_nodes[0]
    kind = capture_name[len(DEFINITION_PREFIX):]
    if kind == "function" and _is_inside_container(node):
        kind = "method"

    return Tag(
        start_byte=node.start_byte,
        name=_node_text(name_nodes[0], source),
        kind=kind,
        line_text=_first_line(source, node.start_byte),
        doc_string=_doc_string(node, source),
    )


def _node_text(node: Any, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _first_line(source: bytes, offset: int) -> str:
    start = source.rfind(b"\n", 0, offset) + 1
    end = source.find(b"\n", offset)
    if end == -1:
        end = len(source)
    return source[start:end].decode("utf-8", errors="replace").strip()


def _is_inside_container(node: Any) -> bool:
    parent = node.parent
    while parent is not None and parent.type in _TRANSPARENT_KINDS:
        parent = parent.parent
    return parent is not None and parent.type in _CONTAINER_KINDS


def _doc_string(node: Any, source: bytes) -> Optional[str]:
    """Python body docstring, else contiguous comments right above the definition."""
    body = node.child_by_field_name("body")
    if node.type in ("function_definition", "class_definition") and body is not None:
        first = body.named_children[0] if body.named_children else None
        if first is not None and first.type == "expression_statement" and first.named_children:
            literal = first.named_children[0]
            if literal.type == "string":
                return _clean_docstring(_node_text(literal, source))
        return None

    anchor = node.parent if node.parent is not None and node.parent.type == "export_statement" else node

    comments: List[str] = []
    sibling = anchor.prev_named_sibling
    while sibling is not None and sibling.type in _COMMENT_KINDS:
        comments.append(_clean_comment(_node_text(sibling, source)))
        sibling = sibling.prev_named_sibling

    text = "\n".join(c for c in reversed(comments) if c)
    return text or None


def _clean_docstring(literal: str) -> Optional[str]:
    text = literal.lstrip("rRbBuUfF")
    for quote in ('"""', "'''", '"', "'"):
        if text.startswith(quote) and text.endswith(quote) and len(text) >= 2 * len(quote):
            text = text[len(quote):-len(quote)]
            break
    text = text.strip()
    return text or None


def _clean_comment(comment: str) -> str:
    lines = []
    for line in comment.strip().splitlines():
        line = line.strip()
        for marker in ("///", "//!", "//", "/**", "/*", "*/", "*"):
            if line.startswith(marker):
                line = line[len(marker):]
                break
        if line.endswith("*/"):
            line = line[:-2]
        lines.append(line.strip())
    return "\n".join(line for line in lines if line)
