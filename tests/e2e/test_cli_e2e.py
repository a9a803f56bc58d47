from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess: argument parsing, exit codes and the separation of
stdout (Markdown context / JSON) from stderr (reports and logs). The
clipboard is always bypassed with --stdout or --json.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "ctxpick" / "main.py"


def run_cli(args: List[str], home: Path, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package is resolvable
    without being installed, and points HOME at a temporary directory so no
    real user configuration is read.

    Args:
        args: Command line arguments (excluding 'python' and script path).
        home: Directory used as the user's home.
        cwd: Optional working directory for the subprocess.

    Returns:
        subprocess.CompletedProcess: returncode, stdout and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["HOME"] = str(home)
    env["USERPROFILE"] = str(home)

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


def test_cli_happy_path_stdout(project: Path, home: Path) -> None:
    """TC-01: Tokens resolve and the Markdown context is printed (exit 0)."""
    result = run_cli(["--stdout", "lib.rs", "tests"], home, cwd=project)

    assert result.returncode == 0, f"CLI failed with stderr: {result.stderr}"
    assert result.stdout.startswith("src/lib.rs\n```rs\n")
    assert "tests/test_one.py\n```py\n" in result.stdout
    assert "tests/test_two.py\n```py\n" in result.stdout
    assert "Included files:" in result.stderr


def test_cli_ambiguous_input_exit_code(project: Path, home: Path) -> None:
    """TC-02: An ambiguous token exits 1 and prints nothing on stdout."""
    result = run_cli(["--stdout", "--root", str(project), "config"], home)

    assert result.returncode == 1
    assert result.stdout == ""
    assert "The following inputs are ambiguous:" in result.stderr


def test_cli_invalid_root(tmp_path: Path, home: Path) -> None:
    """TC-03: A search root that does not exist exits 2."""
    result = run_cli(["--stdout", "--root", str(tmp_path / "missing"), "x"], home)

    assert result.returncode == 2
    assert "Invalid search root" in result.stderr


def test_cli_skeleton_mode(project: Path, home: Path) -> None:
    """TC-04: Skeleton output has no language hint and falls back for markdown."""
    result = run_cli(
        ["--stdout", "-s", "-d", "1", "--root", str(project), "main.rs", "README.md"],
        home,
    )

    assert result.returncode == 0, result.stderr
    assert "src/main.rs\n```\nfn main()" in result.stdout
    assert "-- Falling back to full file content." in result.stdout


def test_cli_json_output_structure(project: Path, home: Path) -> None:
    """TC-05: JSON mode serializes the whole pipeline result."""
    result = run_cli(["--json", "--root", str(project), "--symbols", "lib.rs"], home)

    assert result.returncode == 0, result.stderr
    try:
        data: Dict[str, Any] = json.loads(result.stdout)
    except json.JSONDecodeError:
        pytest.fail(f"Failed to decode JSON output: {result.stdout}")

    assert data["ok"] is True
    assert data["output_mode"] == "symbols"
    assert data["outcomes"][0][0] == "lib.rs"
    assert data["outcomes"][0][1]["status"] == "resolved"
    assert "[function] pub fn add" in data["content"]


def test_cli_requires_tokens(home: Path) -> None:
    """TC-06: Calling without tokens is an argparse usage error."""
    result = run_cli([], home)

    assert result.returncode == 2
    assert "usage:" in result.stderr
