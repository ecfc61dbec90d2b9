"""Tests for git-backed history queries."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from pushgate.classifier import classify_log
from pushgate.errors import HookAbort
from pushgate.git.history import GitHistory
from pushgate.transcript import Transcript
from pushgate.types import ZERO_SHA, ChangeKind, CommitRange


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def _commit(repo: Path, message: str) -> str:
    _git(repo, "add", "-A")
    _git(repo, "commit", "-m", message)
    return _git(repo, "rev-parse", "HEAD")


@pytest.fixture
def repo(tmp_path: Path) -> tuple[Path, list[str]]:
    """Three commits: add a.txt, add b.txt, modify a.txt."""
    root = tmp_path / "repo"
    root.mkdir()
    _git(root, "init")
    _git(root, "config", "user.email", "test@example.com")
    _git(root, "config", "user.name", "Test User")

    (root / "a.txt").write_text("alpha\n", encoding="utf-8")
    first = _commit(root, "add a")
    (root / "b.txt").write_text("bravo\n", encoding="utf-8")
    second = _commit(root, "add b")
    (root / "a.txt").write_text("alpha\nalpha again\n", encoding="utf-8")
    third = _commit(root, "grow a\n\nOVERRIDE")
    return root, [first, second, third]


def test_commit_list_is_newest_first(repo: tuple[Path, list[str]]) -> None:
    root, (first, second, third) = repo
    history = GitHistory(root)

    assert history.commit_list(CommitRange(tip=third, base=first)) == [third, second]
    assert history.commit_list(CommitRange(tip=third)) == [third, second, first]


def test_name_status_log_classifies(repo: tuple[Path, list[str]]) -> None:
    root, (first, second, third) = repo
    history = GitHistory(root)
    commit_range = CommitRange(tip=third)

    commits = classify_log(
        history.commit_list(commit_range),
        history.change_log(commit_range, with_blobs=False),
        transcript=Transcript(),
    )

    assert [op.kind for op in commits[first].operations] == [ChangeKind.ADD]
    assert [op.kind for op in commits[second].operations] == [ChangeKind.ADD]
    assert [(op.kind, op.path) for op in commits[third].operations] == [(ChangeKind.MODIFY, "a.txt")]


def test_raw_log_carries_blob_sizes(repo: tuple[Path, list[str]]) -> None:
    root, (first, _, third) = repo
    history = GitHistory(root)
    commit_range = CommitRange(tip=third, base=first)

    commits = classify_log(
        history.commit_list(commit_range),
        history.change_log(commit_range, with_blobs=True),
        transcript=Transcript(),
    )

    (op,) = commits[third].operations
    assert op.old_blob is not None and op.new_blob is not None
    assert history.blob_size(op.old_blob) == len("alpha\n")
    assert history.blob_size(op.new_blob) == len("alpha\nalpha again\n")
    assert history.blob_size(ZERO_SHA) == 0


def test_commit_message_returns_full_body(repo: tuple[Path, list[str]]) -> None:
    root, (_, _, third) = repo
    assert "OVERRIDE" in GitHistory(root).commit_message(third)


def test_failed_query_aborts(repo: tuple[Path, list[str]]) -> None:
    root, _ = repo
    with pytest.raises(HookAbort, match="history query failed"):
        GitHistory(root).commit_list(CommitRange(tip="1" * 40))


def test_missing_git_binary_aborts(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def _no_git(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "git")

    monkeypatch.setattr("pushgate.git.history.run_git", _no_git)

    with pytest.raises(HookAbort, match="unable to run git"):
        GitHistory(tmp_path).commit_list(CommitRange(tip="1" * 40))
