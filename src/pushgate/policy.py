"""Commit policies and override-token exemption."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Protocol

from pushgate.errors import HookAbort
from pushgate.git.history import HistoryQuery
from pushgate.transcript import Transcript
from pushgate.types import ADDITIVE_KINDS, GITLINK_MODE, ZERO_SHA, ChangeKind, Commit, Verdict

SIZE_PLACEHOLDER = "%SIZE%"

POLICY_NO_MODIFY = "no-modify"
POLICY_MAX_SIZE = "max-size"
POLICY_NAMES: tuple[str, ...] = (POLICY_NO_MODIFY, POLICY_MAX_SIZE)


class Policy(Protocol):
    """Predicate marking commits bad."""

    name: str
    needs_blobs: bool

    def evaluate(self, commit: Commit, history: HistoryQuery) -> Verdict: ...

    def override_token(self, template: str, verdict: Verdict) -> str: ...

    def describe(self) -> str: ...


@dataclass(frozen=True)
class StructuralPolicy:
    """Only additions are allowed: any modify, delete, or rename is bad."""

    name: str = POLICY_NO_MODIFY
    needs_blobs: bool = False

    def evaluate(self, commit: Commit, history: HistoryQuery) -> Verdict:
        _ = history
        return Verdict(bad=any(op.kind not in ADDITIVE_KINDS for op in commit.operations))

    def override_token(self, template: str, verdict: Verdict) -> str:
        _ = verdict
        return template

    def describe(self) -> str:
        return "existing files may not be modified, deleted, or renamed"


@dataclass(frozen=True)
class QuantitativePolicy:
    """A commit may not add more than ``max_bytes`` of new content."""

    max_bytes: int
    name: str = POLICY_MAX_SIZE
    needs_blobs: bool = True

    def _side_size(self, blob: str | None, mode: str | None, history: HistoryQuery) -> int:
        # a gitlink names a commit in another repository, not a blob here
        if mode == GITLINK_MODE:
            return 0
        return history.blob_size(blob or ZERO_SHA)

    def added_bytes(self, commit: Commit, history: HistoryQuery) -> int:
        total = 0
        for op in commit.operations:
            if op.kind is ChangeKind.DELETE:
                continue
            if op.new_blob is None:
                raise HookAbort(f"Change record without blob ids in commit {commit.sha}: {op.record!r}")
            old_size = self._side_size(op.old_blob, op.old_mode, history)
            new_size = self._side_size(op.new_blob, op.new_mode, history)
            total += max(0, new_size - old_size)
        return total

    def evaluate(self, commit: Commit, history: HistoryQuery) -> Verdict:
        added = self.added_bytes(commit, history)
        return Verdict(bad=added > self.max_bytes, added_bytes=added)

    def override_token(self, template: str, verdict: Verdict) -> str:
        return template.replace(SIZE_PLACEHOLDER, str(verdict.added_bytes or 0))

    def describe(self) -> str:
        return f"no commit may add more than {self.max_bytes} bytes"


def build_policy(name: str, *, max_bytes: int | None = None) -> Policy:
    """Select the policy configured by ``name``."""
    if name == POLICY_NO_MODIFY:
        return StructuralPolicy()
    if name == POLICY_MAX_SIZE:
        if max_bytes is None:
            raise HookAbort(f"Policy {POLICY_MAX_SIZE!r} requires a byte threshold.")
        return QuantitativePolicy(max_bytes=max_bytes)
    raise HookAbort(f"Unknown policy {name!r}. Expected one of {list(POLICY_NAMES)}.")


def evaluate_commits(
    commits: Mapping[str, Commit],
    *,
    policy: Policy,
    history: HistoryQuery,
    override_template: str | None,
    transcript: Transcript,
) -> dict[str, Verdict]:
    """Compute a verdict for every commit, then test bad commits for an override token."""
    verdicts: dict[str, Verdict] = {}
    for sha, commit in commits.items():
        verdict = policy.evaluate(commit, history)
        if verdict.bad and override_template:
            token = policy.override_token(override_template, verdict)
            message = history.commit_message(sha)
            if token in message:
                verdict = replace(verdict, exempted=True)
                transcript.debug(f"Commit {sha} carries override token {token!r}.")
        transcript.trace(f"verdict {sha}: bad={verdict.bad} exempted={verdict.exempted}")
        verdicts[sha] = verdict
    return verdicts
