"""Pytest configuration and fixtures for pushgate tests."""
from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from pushgate.transcript import Message
from pushgate.types import CommitRange


def pytest_sessionfinish(session, exitstatus):
    """Fail the run when --cov was requested but no coverage data was written."""
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    coverage_files = list(Path.cwd().glob(".coverage*"))
    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'pushgate' (the package) not 'src/pushgate'.",
            returncode=1,
        )


class FakeHistory:
    """In-memory ``HistoryQuery`` returning canned text."""

    def __init__(
        self,
        commit_list: Sequence[str],
        log_lines: Sequence[str],
        *,
        messages: dict[str, str] | None = None,
        blob_sizes: dict[str, int] | None = None,
    ):
        self.commits = list(commit_list)
        self.log_lines = list(log_lines)
        self.messages = messages or {}
        self.blob_sizes = blob_sizes or {}
        self.calls: list[tuple[str, object]] = []

    def commit_list(self, commit_range: CommitRange) -> list[str]:
        self.calls.append(("commit_list", commit_range))
        return list(self.commits)

    def change_log(self, commit_range: CommitRange, *, with_blobs: bool) -> list[str]:
        self.calls.append(("change_log", (commit_range, with_blobs)))
        return list(self.log_lines)

    def commit_message(self, sha: str) -> str:
        self.calls.append(("commit_message", sha))
        return self.messages.get(sha, "")

    def blob_size(self, blob: str) -> int:
        self.calls.append(("blob_size", blob))
        if set(blob) == {"0"}:
            return 0
        return self.blob_sizes[blob]


class RecordingSink:
    """Sink that records every delivery, or fails when asked to."""

    def __init__(self, name: str, *, error: Exception | None = None):
        self.name = name
        self.error = error
        self.deliveries: list[list[Message]] = []

    def deliver(self, messages: Sequence[Message]) -> None:
        if self.error is not None:
            raise self.error
        self.deliveries.append(list(messages))


@pytest.fixture
def sha() -> Callable[[int], str]:
    """Build a distinct 40-hex commit hash from a small integer."""

    def _sha(n: int) -> str:
        return f"{n:040x}"

    return _sha


@pytest.fixture
def make_history() -> type[FakeHistory]:
    return FakeHistory


@pytest.fixture
def make_sink() -> type[RecordingSink]:
    return RecordingSink
