"""Ref update collection and commit range resolution."""

from __future__ import annotations

import re
from collections.abc import Iterable

from pushgate.errors import HookAbort
from pushgate.transcript import Transcript
from pushgate.types import CommitRange, RefUpdate

_HASH_RE = re.compile(r"^[0-9a-f]{40}$")
_REF_RE = re.compile(r"^refs/(heads|tags)/(.+)$")


def parse_ref_update(line: str) -> RefUpdate:
    """Parse one ``<old-hash> <new-hash> <ref-name>`` input line."""
    tokens = line.split()
    if len(tokens) != 3:
        raise HookAbort(f"Malformed ref update line (expected 3 fields): {line.rstrip()!r}")

    from_hash, to_hash, ref_name = tokens
    for value in (from_hash, to_hash):
        if not _HASH_RE.match(value):
            raise HookAbort(f"Malformed object name {value!r} in ref update line: {line.rstrip()!r}")

    match = _REF_RE.match(ref_name)
    if not match:
        raise HookAbort(f"Unable to parse ref name {ref_name!r}; expected refs/heads/* or refs/tags/*")

    return RefUpdate(
        from_hash=from_hash,
        to_hash=to_hash,
        ref_name=ref_name,
        ref_type=match.group(1),
        short_name=match.group(2),
    )


def targets_branch(update: RefUpdate, branch: str) -> bool:
    """True when ``update`` moves the protected ``branch`` (short or full name)."""
    if update.ref_name == branch:
        return True
    return update.ref_type == "heads" and update.short_name == branch


def collect_ref_update(
    lines: Iterable[str],
    *,
    branch: str,
    transcript: Transcript,
) -> RefUpdate | None:
    """Parse every input line and return the update for ``branch``, if any.

    All lines are validated before filtering, so a malformed line aborts
    even when it would not have matched.
    """
    updates = [parse_ref_update(line) for line in lines if line.strip()]
    for update in updates:
        transcript.trace(f"ref update: {update.from_hash} {update.to_hash} {update.ref_name}")

    matching = [update for update in updates if targets_branch(update, branch)]
    if not matching:
        transcript.debug(f"No update to protected branch {branch!r}; nothing to check.")
        return None
    if len(matching) > 1:
        raise HookAbort(f"Push carries {len(matching)} updates to {branch!r}; expected at most one.")
    return matching[0]


def resolve_range(update: RefUpdate, *, transcript: Transcript) -> CommitRange | None:
    """Return the commit range introduced by ``update``; None for a deletion."""
    if update.is_deletion:
        transcript.debug(f"{update.ref_name} is being deleted; no commits to check.")
        return None
    if update.is_creation:
        transcript.debug(f"{update.ref_name} is being created; checking full ancestry of {update.to_hash}.")
        return CommitRange(tip=update.to_hash)
    transcript.debug(f"Checking {update.ref_name} range {update.from_hash}..{update.to_hash}.")
    return CommitRange(tip=update.to_hash, base=update.from_hash)
