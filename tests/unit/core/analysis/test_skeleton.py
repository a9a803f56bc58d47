from __future__ import annotations

"""
Unit tests for the Depth-bounded Skeleton Extractor.

Verifies idempotence, monotonicity in depth, convergence to the full leaf
token stream, tolerance to syntax errors and early rejection of
unsupported languages.
"""

from unittest.mock import patch

import pytest

from ctxpick.core.analysis import grammars
from ctxpick.core.analysis.skeleton import extract, skeleton_from_tree
from ctxpick.domain.errors import UnsupportedLanguageError

PY_SOURCE = b'''
class Greeter:
    """Says hello."""

    def greet(self, name):
        if name:
            return f"Hello, {name}"
        return "Hello"


def main():
    print(Greeter().greet("world"))
'''

RS_SOURCE = b"""
pub struct Point { x: i32, y: i32 }

impl Point {
    pub fn norm(&self) -> i32 {
        self.x * self.x + self.y * self.y
    }
}
"""


@pytest.mark.parametrize("source, ext", [(PY_SOURCE, "py"), (RS_SOURCE, "rs")])
def test_extract_is_idempotent(source: bytes, ext: str) -> None:
    """TC-01: Same bytes, extension and depth give identical output."""
    assert extract(source, ext, 3).text == extract(source, ext, 3).text


@pytest.mark.parametrize("source, ext", [(PY_SOURCE, "py"), (RS_SOURCE, "rs")])
def test_token_count_is_monotonic_in_depth(source: bytes, ext: str) -> None:
    """TC-02: Depth d never yields more tokens than depth d + 1."""
    height = grammars.grammar_for(ext).parse(source).height
    counts = [extract(source, ext, d).token_count for d in range(height + 2)]

    assert counts == sorted(counts)


@pytest.mark.parametrize("source, ext", [(PY_SOURCE, "py"), (RS_SOURCE, "rs")])
def test_full_depth_reproduces_leaf_tokens(source: bytes, ext: str) -> None:
    """TC-03: At depth >= height every leaf token is emitted, in order."""
    tree = grammars.grammar_for(ext).parse(source)
    expected = [tree.text(i).strip() for i in tree.leaves()]
    expected = [t for t in expected if t]

    for depth in (tree.height, tree.height + 5):
        skeleton = skeleton_from_tree(tree, depth)
        assert [t.text for t in skeleton.tokens] == expected


def test_depth_zero_is_whole_file_collapsed() -> None:
    """TC-04: At depth 0 the root emits its full span with whitespace collapsed."""
    skeleton = extract(PY_SOURCE, "py", 0)

    assert skeleton.token_count == 1
    assert skeleton.text == " ".join(PY_SOURCE.decode().split())
    assert skeleton.tokens[0].depth == 0


def test_shallow_depth_emits_top_level_units() -> None:
    """TC-05: Depth 1 yields one token per top-level definition."""
    skeleton = extract(PY_SOURCE, "py", 1)

    assert skeleton.token_count == 2
    assert skeleton.tokens[0].text.startswith("class Greeter:")
    assert skeleton.tokens[1].text.startswith("def main():")
    assert all(t.depth == 1 for t in skeleton.tokens)


def test_no_token_deeper_than_max_depth() -> None:
    for depth in range(6):
        assert all(t.depth <= depth for t in extract(RS_SOURCE, "rs", depth).tokens)


def test_syntax_errors_are_not_fatal() -> None:
    """TC-06: A malformed file still produces a partial skeleton."""
    skeleton = extract(b"def broken(:\n    pass\n", "py", 10)

    assert skeleton.token_count > 0
    assert "broken" in skeleton.text


def test_empty_source() -> None:
    """TC-07: An empty file has an empty skeleton."""
    assert extract(b"", "py", 4).text == ""


def test_unsupported_extension_never_parses() -> None:
    """TC-08: '.md' raises UnsupportedLanguage before any parser is created."""
    with patch("ctxpick.core.analysis.grammars.Parser") as mock_parser:
        with pytest.raises(UnsupportedLanguageError) as exc:
            extract(b"# Title\n", ".md", 4)

    mock_parser.assert_not_called()
    assert exc.value.extension == "md"
    assert "'md'" in str(exc.value)


def test_negative_depth_rejected() -> None:
    with pytest.raises(ValueError):
        extract(PY_SOURCE, "py", -1)


def test_str_matches_text() -> None:
    skeleton = extract(RS_SOURCE, "rs", 2)
    assert str(skeleton) == skeleton.text
    assert skeleton.max_depth == 2
