from __future__ import annotations

"""
Unit tests for the Input Resolution Service.

Verifies phase ordering (exact path, directory, glob, name fragment),
exact-over-partial prioritization, ambiguity reporting, per-token
independence and first-seen deduplication.
"""

import os
from pathlib import Path

import pytest

from ctxpick.core.resolution import classify_candidates, collect_files, resolve, resolve_token
from ctxpick.domain.errors import AmbiguousMatchError, NotFoundError
from ctxpick.domain.resolution_models import (
    Candidate,
    MatchKind,
    OutcomeStatus,
    ResolvedFile,
    resolved,
)


def _paths(files) -> list:
    return [f.display_path for f in files]

# -----------------------------------------------------------------------------
# Documented Scenarios
# -----------------------------------------------------------------------------

def test_same_name_in_two_directories_is_ambiguous(project: Path) -> None:
    """TC-01: 'config' matches a/config.rs and b/config.rs partially -> Ambiguous."""
    outcome = resolve_token("config", str(project))

    assert outcome.status is OutcomeStatus.AMBIGUOUS
    assert outcome.conflicts == ("a/config.rs", "b/config.rs")
    assert outcome.files == ()


def test_relative_path_resolves_single_file(project: Path) -> None:
    """TC-02: 'a/config.rs' is an existing path -> Resolved."""
    outcome = resolve_token("a/config.rs", str(project))

    assert outcome.status is OutcomeStatus.RESOLVED
    assert _paths(outcome.files) == ["a/config.rs"]


def test_mixed_tokens_keep_first_seen_order(tmp_path: Path) -> None:
    """TC-03: File + directory + fragment gives 1 + 2 + 1 = 4 files in order."""
    root = tmp_path / "repo"
    (root / "src").mkdir(parents=True)
    (root / "tests").mkdir()
    (root / "etc").mkdir()
    (root / "src" / "lib.rs").write_text("", encoding="utf-8")
    (root / "tests" / "alpha.rs").write_text("", encoding="utf-8")
    (root / "tests" / "beta.rs").write_text("", encoding="utf-8")
    (root / "etc" / "config.toml").write_text("", encoding="utf-8")

    files, outcomes = resolve(["src/lib.rs", "tests", "config"], str(root))

    assert _paths(files) == ["src/lib.rs", "tests/alpha.rs", "tests/beta.rs", "etc/config.toml"]
    assert [o.status for _, o in outcomes] == [
        OutcomeStatus.RESOLVED,
        OutcomeStatus.RESOLVED_MANY,
        OutcomeStatus.RESOLVED,
    ]


def test_empty_token_list(project: Path) -> None:
    """TC-04: No tokens -> no files and no outcomes, not an error."""
    files, outcomes = resolve([], str(project))

    assert files == []
    assert outcomes == []

# -----------------------------------------------------------------------------
# Phases
# -----------------------------------------------------------------------------

def test_directory_token_selects_every_file_below(project: Path) -> None:
    """TC-05: Directory expansion is complete, recursive and never ambiguous."""
    outcome = resolve_token("src", str(project))

    assert outcome.status is OutcomeStatus.RESOLVED_MANY
    assert _paths(outcome.files) == ["src/lib.rs", "src/main.rs", "src/utils/helpers.py"]


def test_empty_directory_resolves_to_nothing(project: Path) -> None:
    """TC-06: An empty directory is a successful expansion with no files."""
    (project / "empty").mkdir()

    outcome = resolve_token("empty", str(project))

    assert outcome.status is OutcomeStatus.RESOLVED_MANY
    assert outcome.files == ()


def test_glob_token_expands_and_is_never_ambiguous(project: Path) -> None:
    """TC-07: A glob matching several files is RESOLVED_MANY."""
    outcome = resolve_token("*/config.rs", str(project))

    assert outcome.status is OutcomeStatus.RESOLVED_MANY
    assert _paths(outcome.files) == ["a/config.rs", "b/config.rs"]


def test_glob_without_matches_is_not_found(project: Path) -> None:
    """TC-08: Zero glob matches is NotFound for that token only."""
    files, outcomes = resolve(["*.java", "lib.rs"], str(project))

    assert outcomes[0][1].status is OutcomeStatus.NOT_FOUND
    assert _paths(files) == ["src/lib.rs"]


def test_glob_under_root_with_brackets(tmp_path: Path) -> None:
    """TC-08b: A search root containing '[' still anchors relative globs."""
    root = tmp_path / "proj[1]"
    (root / "src").mkdir(parents=True)
    (root / "src" / "a.py").write_text("", encoding="utf-8")

    outcome = resolve_token("src/*.py", str(root))

    assert outcome.status is OutcomeStatus.RESOLVED_MANY
    assert _paths(outcome.files) == ["src/a.py"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_not_following_links_keeps_real_directory(tmp_path: Path) -> None:
    """TC-08c: With links not followed, files behind a linked directory stay reachable."""
    (tmp_path / "z_real").mkdir()
    (tmp_path / "z_real" / "f.py").write_text("x = 1\n", encoding="utf-8")
    try:
        os.symlink(str(tmp_path / "z_real"), str(tmp_path / "a_link"), target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    files, outcomes = resolve(["f.py"], str(tmp_path), follow_links=False)

    assert outcomes[0][1].status is OutcomeStatus.RESOLVED
    assert _paths(files) == ["z_real/f.py"]


def test_literal_file_with_glob_characters(tmp_path: Path) -> None:
    """TC-09: An existing file is taken literally even if its name looks like a glob."""
    (tmp_path / "data[1].txt").write_text("x", encoding="utf-8")

    outcome = resolve_token("data[1].txt", str(tmp_path))

    assert outcome.status is OutcomeStatus.RESOLVED
    assert _paths(outcome.files) == ["data[1].txt"]


def test_exact_filename_beats_partial(tmp_path: Path) -> None:
    """TC-10: An exact filename match discards partial matches of the same token."""
    (tmp_path / "x").mkdir()
    (tmp_path / "x" / "main.rs").write_text("", encoding="utf-8")
    (tmp_path / "x" / "main.rs.orig").write_text("", encoding="utf-8")
    (tmp_path / "domain.rs").write_text("", encoding="utf-8")

    outcome = resolve_token("main.rs", str(tmp_path))

    assert outcome.status is OutcomeStatus.RESOLVED
    assert _paths(outcome.files) == ["x/main.rs"]


def test_several_exact_filenames_are_ambiguous(project: Path) -> None:
    """TC-11: Two files with the same exact name are reported, not picked."""
    outcome = resolve_token("config.rs", str(project))

    assert outcome.status is OutcomeStatus.AMBIGUOUS
    assert outcome.conflicts == ("a/config.rs", "b/config.rs")


def test_missing_path_like_token_reports_path_tried(project: Path) -> None:
    """TC-12: A token with a separator that matches nothing records the checked path."""
    outcome = resolve_token("nope/missing.rs", str(project))

    assert outcome.status is OutcomeStatus.NOT_FOUND
    assert outcome.path_tried == os.path.join(str(project), "nope", "missing.rs")


def test_missing_bare_token_has_no_path_tried(project: Path) -> None:
    """TC-13: A bare fragment that matches nothing is a plain NotFound."""
    outcome = resolve_token("zzz", str(project))

    assert outcome.status is OutcomeStatus.NOT_FOUND
    assert outcome.path_tried is None


@pytest.mark.parametrize("token", ["", "   "])
def test_blank_token_is_not_found(project: Path, token: str) -> None:
    """TC-14: Blank tokens never match every file in the tree."""
    assert resolve_token(token, str(project)).status is OutcomeStatus.NOT_FOUND


def test_failures_do_not_abort_other_tokens(project: Path) -> None:
    """TC-15: Ambiguous and missing tokens are reported next to resolved ones."""
    files, outcomes = resolve(["config", "zzz", "main"], str(project))

    assert [o.status for _, o in outcomes] == [
        OutcomeStatus.AMBIGUOUS,
        OutcomeStatus.NOT_FOUND,
        OutcomeStatus.RESOLVED,
    ]
    assert _paths(files) == ["src/main.rs"]


def test_overlapping_tokens_are_deduplicated(project: Path) -> None:
    """TC-16: A file selected twice keeps its first position."""
    files, _ = resolve(["src/main.rs", "src", "main"], str(project))

    assert _paths(files) == ["src/main.rs", "src/lib.rs", "src/utils/helpers.py"]

# -----------------------------------------------------------------------------
# Classification & Reporting Helpers
# -----------------------------------------------------------------------------

def test_classify_candidates_dedupes_by_canonical_path() -> None:
    """TC-17: The same file reached twice is one resolution, not an ambiguity."""
    f = ResolvedFile("a.py", "/abs/a.py")
    outcome = classify_candidates([
        Candidate(f, MatchKind.PARTIAL_SUBSTRING),
        Candidate(ResolvedFile("./a.py", "/abs/a.py"), MatchKind.PARTIAL_SUBSTRING),
    ])

    assert outcome == resolved(f)


def test_classify_candidates_empty() -> None:
    """TC-18: No candidates is NotFound."""
    assert classify_candidates([]).status is OutcomeStatus.NOT_FOUND


def test_collect_files_skips_failed_outcomes(project: Path) -> None:
    """TC-19: Only resolved outcomes contribute files."""
    _, outcomes = resolve(["config", "lib.rs"], str(project))

    assert _paths(collect_files(outcomes)) == ["src/lib.rs"]


def test_raise_for_status(project: Path) -> None:
    """TC-20: Outcomes can be turned into typed exceptions on request."""
    with pytest.raises(AmbiguousMatchError) as exc:
        resolve_token("config", str(project)).raise_for_status("config")
    assert exc.value.conflicts == ("a/config.rs", "b/config.rs")

    with pytest.raises(NotFoundError):
        resolve_token("zzz", str(project)).raise_for_status("zzz")

    resolve_token("lib.rs", str(project)).raise_for_status("lib.rs")
