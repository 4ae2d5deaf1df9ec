"""Tests for lazy_changesets.shell."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from lazy_changesets.shell import add, commit, fatal, git, tag, warn


@patch("lazy_changesets.shell.subprocess.run")
def test_git_returns_stripped_stdout(mock_run: MagicMock, tmp_path: Path) -> None:
    mock_run.return_value = MagicMock(stdout="abc123\n")
    assert git("rev-parse", "HEAD", cwd=tmp_path) == "abc123"
    mock_run.assert_called_once_with(
        ["git", "rev-parse", "HEAD"], cwd=tmp_path, capture_output=True, text=True, check=True
    )


@patch("lazy_changesets.shell.git")
def test_add_stages_deletions(mock_git: MagicMock, tmp_path: Path) -> None:
    add(tmp_path / ".changeset", tmp_path)
    mock_git.assert_called_once_with(
        "add", "--all", "--", str(tmp_path / ".changeset"), cwd=tmp_path
    )


@patch("lazy_changesets.shell.git")
def test_commit_splits_subject_and_body(mock_git: MagicMock, tmp_path: Path) -> None:
    commit("chore: version packages\n\n  pkg-a: 1.0.0 → 1.1.0", tmp_path)
    mock_git.assert_called_once_with(
        "commit",
        "-m",
        "chore: version packages",
        "-m",
        "  pkg-a: 1.0.0 → 1.1.0",
        cwd=tmp_path,
    )


@patch("lazy_changesets.shell.git")
def test_commit_subject_only(mock_git: MagicMock, tmp_path: Path) -> None:
    commit("chore: release", tmp_path)
    mock_git.assert_called_once_with("commit", "-m", "chore: release", cwd=tmp_path)


@patch("lazy_changesets.shell.git")
def test_tag(mock_git: MagicMock, tmp_path: Path) -> None:
    tag("pkg-a/v1.1.0", tmp_path)
    mock_git.assert_called_once_with("tag", "pkg-a/v1.1.0", cwd=tmp_path)


def test_warn_goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    warn("careful")
    assert capsys.readouterr().err == "WARNING: careful\n"


def test_fatal_exits(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        fatal("boom")
    assert excinfo.value.code == 1
    assert "ERROR: boom" in capsys.readouterr().err
