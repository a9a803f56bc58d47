from __future__ import annotations

"""
Grammar Registry.

Closed capability table mapping file extensions to tree-sitter grammars.
Each entry knows how to parse source bytes and carries a canned tag query
describing the symbol shapes (functions, classes, traits...) of its
language.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import tree_sitter_python
import tree_sitter_rust
import tree_sitter_typescript
from tree_sitter import Language, Parser, Tree

from ctxpick.core.analysis.parse_tree import ParseTree

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# TAG QUERIES
# -----------------------------------------------------------------------------

PYTHON_TAGS_QUERY = """
(class_definition name: (identifier) @name) @definition.class
(function_definition name: (identifier) @name) @definition.function
"""

RUST_TAGS_QUERY = """
(struct_item name: (type_identifier) @name) @definition.class
(enum_item name: (type_identifier) @name) @definition.enum
(type_item name: (type_identifier) @name) @definition.type
(trait_item name: (type_identifier) @name) @definition.interface
(impl_item type: (type_identifier) @name) @definition.implementation
(function_item name: (identifier) @name) @definition.function
(function_signature_item name: (identifier) @name) @definition.function
(mod_item name: (identifier) @name) @definition.module
(macro_definition name: (identifier) @name) @definition.macro
"""

TYPESCRIPT_TAGS_QUERY = """
(class_declaration name: (type_identifier) @name) @definition.class
(abstract_class_declaration name: (type_identifier) @name) @definition.class
(interface_declaration name: (type_identifier) @name) @definition.interface
(type_alias_declaration name: (type_identifier) @name) @definition.type
(enum_declaration name: (identifier) @name) @definition.enum
(function_declaration name: (identifier) @name) @definition.function
(method_definition name: (property_identifier) @name) @definition.method
"""

# -----------------------------------------------------------------------------
# GRAMMAR CAPABILITY
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Grammar:
    """
    Parsing capability for one language.

    Attributes:
        name: Language identifier.
        extensions: File extensions (without dot) handled by the grammar.
        language_factory: Returns the raw tree-sitter language pointer.
        tags_query: Tag query source with ``@name`` / ``@definition.*`` captures.
    """
    name: str
    extensions: Tuple[str, ...]
    language_factory: Callable[[], Any]
    tags_query: str

    @property
    def language(self) -> Language:
        return _load_language(self)

    def parse_native(self, source: bytes) -> Tree:
        """Parse into a tree-sitter ``Tree`` (used by tag queries)."""
        parser = Parser(self.language)
        return parser.parse(source)

    def parse(self, source: bytes) -> ParseTree:
        """Parse source bytes into an arena ``ParseTree``."""
        tree = self.parse_native(source)
        parse_tree = ParseTree.from_tree_sitter(tree, source)
        if parse_tree.has_errors:
            logger.debug(f"{self.name} parse recovered from syntax errors")
        return parse_tree


@functools.lru_cache(maxsize=None)
def _load_language(grammar: Grammar) -> Language:
    logger.debug(f"Loading tree-sitter grammar '{grammar.name}'")
    return Language(grammar.language_factory())


# -----------------------------------------------------------------------------
# REGISTRY
# -----------------------------------------------------------------------------

PYTHON = Grammar(
    name="python",
    extensions=("py", "pyi"),
    language_factory=tree_sitter_python.language,
    tags_query=PYTHON_TAGS_QUERY,
)
RUST = Grammar(
    name="rust",
    extensions=("rs",),
    language_factory=tree_sitter_rust.language,
    tags_query=RUST_TAGS_QUERY,
)
TYPESCRIPT = Grammar(
    name="typescript",
    extensions=("ts", "mts", "cts"),
    language_factory=tree_sitter_typescript.language_typescript,
    tags_query=TYPESCRIPT_TAGS_QUERY,
)
TSX = Grammar(
    name="tsx",
    extensions=("tsx",),
    language_factory=tree_sitter_typescript.language_tsx,
    tags_query=TYPESCRIPT_TAGS_QUERY,
)

_REGISTRY: Dict[str, Grammar] = {
    ext: grammar
    for grammar in (PYTHON, RUST, TYPESCRIPT, TSX)
    for ext in grammar.extensions
}


def normalize_extension(extension: str) -> str:
    """Strip the leading dot and lower-case an extension ('.PY' -> 'py')."""
    return (extension or "").strip().lstrip(".").lower()


def grammar_for(extension: str) -> Optional[Grammar]:
    """
    Look up the grammar registered for a file extension.

    Args:
        extension: Extension with or without the leading dot.

    Returns:
        Optional[Grammar]: The grammar, or None when the language is unsupported.
    """
    return _REGISTRY.get(normalize_extension(extension))


def supported_extensions() -> Tuple[str, ...]:
    return tuple(sorted(_REGISTRY))
