"""Domain types for push classification and decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

ZERO_SHA = "0" * 40

# tree-entry mode of a submodule commit pointer
GITLINK_MODE = "160000"


class ChangeKind(str, Enum):
    """Change-record letters emitted by ``git log --name-status``."""

    ADD = "A"
    COPY = "C"
    DELETE = "D"
    MODIFY = "M"
    RENAME = "R"


ADDITIVE_KINDS: frozenset[ChangeKind] = frozenset({ChangeKind.ADD, ChangeKind.COPY})


class Outcome(str, Enum):
    """Final push decision."""

    ALLOW = "allow"
    ALLOW_REPORTED = "allow-reported"
    REJECT = "reject"


@dataclass(frozen=True)
class RefUpdate:
    """One ``<old> <new> <ref>`` line from the pre-receive input."""

    from_hash: str
    to_hash: str
    ref_name: str
    ref_type: str
    short_name: str

    @property
    def is_deletion(self) -> bool:
        return self.to_hash == ZERO_SHA

    @property
    def is_creation(self) -> bool:
        return self.from_hash == ZERO_SHA


@dataclass(frozen=True)
class CommitRange:
    """Commits reachable from ``tip`` and not from ``base``."""

    tip: str
    base: str | None = None

    def revision(self) -> str:
        if self.base is None:
            return self.tip
        return f"{self.base}..{self.tip}"


@dataclass(frozen=True)
class ChangeOp:
    """One change record of a commit."""

    kind: ChangeKind
    path: str
    record: str
    old_blob: str | None = None
    new_blob: str | None = None
    old_mode: str | None = None
    new_mode: str | None = None


@dataclass
class Commit:
    """Commit under inspection; operations accumulate while parsing."""

    sha: str
    operations: list[ChangeOp] = field(default_factory=list)


@dataclass(frozen=True)
class Verdict:
    """Policy outcome for one commit."""

    bad: bool
    exempted: bool = False
    added_bytes: int | None = None


@dataclass(frozen=True)
class PushDecision:
    """Aggregated decision over all commits of a push."""

    outcome: Outcome
    bad_commits: tuple[str, ...] = ()
    exempted_commits: tuple[str, ...] = ()

    @property
    def unresolved_commits(self) -> tuple[str, ...]:
        exempted = set(self.exempted_commits)
        return tuple(sha for sha in self.bad_commits if sha not in exempted)

    @property
    def blocked(self) -> bool:
        return self.outcome is Outcome.REJECT

    @property
    def unblocked(self) -> bool:
        return self.outcome is Outcome.ALLOW_REPORTED
