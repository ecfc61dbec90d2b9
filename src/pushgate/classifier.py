"""Streaming classifier for ``git log`` change-record output.

The log is a flat sequence of lines: for every commit of the range a header
line holding the commit hash, followed by change records. Records come in
``--name-status`` form (``M<TAB>path``, ``R087<TAB>old<TAB>new``) or in
``--raw`` form (``:100644 100644 <old> <new> M<TAB>path``). Type changes
(``T``) are classified as modifications. Anything else is ignored.

A line is a header only if it equals a hash from the previously fetched
commit list. Commit-message text that happens to equal an in-range hash is
therefore read as a header; the header count check below turns that into a
fatal mismatch rather than a silent misparse.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from enum import Enum

from pushgate.errors import HookAbort
from pushgate.transcript import Transcript
from pushgate.types import ChangeKind, ChangeOp, Commit

_NAME_STATUS_RE = re.compile(r"^([ACDMRT])\d*\s+(.+)$")
_RAW_RE = re.compile(r"^:(\d+) (\d+) ([0-9a-f]+) ([0-9a-f]+) ([ACDMRT])\d*\t(.+)$")

# a type change (file to symlink, file to submodule) rewrites an existing path
_TYPE_CHANGE = "T"


class ParserState(Enum):
    AWAITING_COMMIT = "awaiting-commit"
    IN_COMMIT = "in-commit"


def _kind(letter: str) -> ChangeKind:
    if letter == _TYPE_CHANGE:
        return ChangeKind.MODIFY
    return ChangeKind(letter)


def parse_change_record(line: str) -> ChangeOp | None:
    """Parse a single change record, or return None for any other line."""
    raw = _RAW_RE.match(line)
    if raw:
        old_mode, new_mode, old_blob, new_blob, letter, paths = raw.groups()
        return ChangeOp(
            kind=_kind(letter),
            path=paths.split("\t")[-1],
            record=line,
            old_blob=old_blob,
            new_blob=new_blob,
            old_mode=old_mode,
            new_mode=new_mode,
        )

    plain = _NAME_STATUS_RE.match(line)
    if plain:
        letter, paths = plain.groups()
        return ChangeOp(kind=_kind(letter), path=paths.split("\t")[-1].strip(), record=line)
    return None


def classify_log(
    commit_list: Sequence[str],
    log_lines: Iterable[str],
    *,
    transcript: Transcript,
) -> dict[str, Commit]:
    """Group change records by commit.

    Args:
        commit_list: Range commits, newest first.
        log_lines: Change log for the same range and order.
        transcript: Receives trace output for each parsed record.

    Returns:
        Commits that carry at least one change record, keyed by hash in log order.

    Raises:
        HookAbort: The number of headers seen differs from ``len(commit_list)``.
    """
    known = frozenset(commit_list)
    commits: dict[str, Commit] = {}
    state = ParserState.AWAITING_COMMIT
    current: Commit | None = None
    seen = 0

    def finalize(commit: Commit | None) -> None:
        if commit is not None and commit.operations:
            commits[commit.sha] = commit

    for raw_line in log_lines:
        line = raw_line.rstrip("\n")
        if line in known:
            finalize(current)
            current = Commit(sha=line)
            state = ParserState.IN_COMMIT
            seen += 1
            transcript.trace(f"commit {line}")
            continue

        if state is not ParserState.IN_COMMIT or current is None:
            continue

        op = parse_change_record(line)
        if op is not None:
            current.operations.append(op)
            transcript.trace(f"  {op.kind.value} {op.path}")

    finalize(current)

    if seen != len(commit_list):
        raise HookAbort(
            f"Internal consistency error: parsed {seen} commit header(s) from the change log "
            f"but rev-list reported {len(commit_list)} commit(s)."
        )
    return commits
