"""History queries backing the push classifier."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pushgate.errors import HookAbort
from pushgate.git.exec import ExecError, run_git
from pushgate.types import ZERO_SHA, CommitRange


class HistoryQuery(Protocol):
    """Text contract the classifier depends on."""

    def commit_list(self, commit_range: CommitRange) -> list[str]:
        """Return range commits newest first, topologically ordered."""
        ...

    def change_log(self, commit_range: CommitRange, *, with_blobs: bool) -> list[str]:
        """Return hash header lines followed by change records, same order as ``commit_list``."""
        ...

    def commit_message(self, sha: str) -> str: ...

    def blob_size(self, blob: str) -> int: ...


class GitHistory:
    """``HistoryQuery`` bound to the git binary and one repository."""

    def __init__(self, repo_root: Path):
        self.repo_root = repo_root

    def _git(self, args: list[str]) -> str:
        try:
            return run_git(args, repo_root=self.repo_root).stdout
        except ExecError as exc:
            raise HookAbort(f"history query failed: {exc}") from exc
        except OSError as exc:
            raise HookAbort(f"history query failed: unable to run git: {exc}") from exc

    def commit_list(self, commit_range: CommitRange) -> list[str]:
        output = self._git(["rev-list", "--topo-order", commit_range.revision()])
        return [line.strip() for line in output.splitlines() if line.strip()]

    def change_log(self, commit_range: CommitRange, *, with_blobs: bool) -> list[str]:
        record_format = ["--raw", "--no-abbrev"] if with_blobs else ["--name-status"]
        output = self._git(
            [
                "log",
                "--topo-order",
                "--format=%H",
                "-M",
                *record_format,
                commit_range.revision(),
            ]
        )
        return output.splitlines()

    def commit_message(self, sha: str) -> str:
        return self._git(["log", "-1", "--format=%B", sha])

    def blob_size(self, blob: str) -> int:
        if blob == ZERO_SHA:
            return 0
        return int(self._git(["cat-file", "-s", blob]).strip())
