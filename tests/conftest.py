from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: a configuration dictionary and a small project tree
   used by the resolution, pipeline and CLI tests.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict(tmp_path: Path) -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Mirrors 'ctxpick.domain.config.get_default_config' with the clipboard
    disabled and the search root pointed at a temporary directory.
    """
    return {
        "search_root": str(tmp_path),
        "follow_links": True,
        "keep_going": False,
        "output_mode": "full",
        "skeleton_depth": 4,
        "copy_to_clipboard": False,
        "max_ambiguous_shown": 8,
        "token_encoding": "o200k_base",
    }


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """
    Create a small mixed-language project.

    Layout:
        a/config.rs
        b/config.rs
        src/lib.rs
        src/main.rs
        src/utils/helpers.py
        tests/test_one.py
        tests/test_two.py
        README.md
    """
    root = tmp_path / "project"
    (root / "a").mkdir(parents=True)
    (root / "b").mkdir()
    (root / "src" / "utils").mkdir(parents=True)
    (root / "tests").mkdir()

    (root / "a" / "config.rs").write_text("pub const A: u8 = 1;\n", encoding="utf-8")
    (root / "b" / "config.rs").write_text("pub const B: u8 = 2;\n", encoding="utf-8")
    (root / "src" / "lib.rs").write_text(
        "/// Adds two numbers.\npub fn add(a: i32, b: i32) -> i32 {\n    a + b\n}\n",
        encoding="utf-8",
    )
    (root / "src" / "main.rs").write_text(
        "fn main() {\n    println!(\"hi\");\n}\n", encoding="utf-8"
    )
    (root / "src" / "utils" / "helpers.py").write_text(
        'def helper():\n    """Help."""\n    return 1\n', encoding="utf-8"
    )
    (root / "tests" / "test_one.py").write_text("def test_one():\n    pass\n", encoding="utf-8")
    (root / "tests" / "test_two.py").write_text("def test_two():\n    pass\n", encoding="utf-8")
    (root / "README.md").write_text("# Project\n", encoding="utf-8")

    return root
