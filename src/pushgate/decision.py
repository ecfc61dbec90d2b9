"""Aggregate per-commit verdicts into a push decision."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pushgate.types import Outcome, PushDecision, Verdict


def push_order(commit_list: Sequence[str]) -> list[str]:
    """Chronological (oldest first) order of a newest-first commit list."""
    return list(reversed(commit_list))


def decide(verdicts: Mapping[str, Verdict], commit_list: Sequence[str]) -> PushDecision:
    """Apply the decision law to ``verdicts``.

    ``Allow`` when nothing is bad, ``AllowReported`` when every bad commit is
    exempted, ``Reject`` otherwise. Commit tuples are in push order.
    """
    ordered = [sha for sha in push_order(commit_list) if sha in verdicts]
    bad = tuple(sha for sha in ordered if verdicts[sha].bad)
    # exemption is only recorded for commits that are already bad
    exempted = tuple(sha for sha in bad if verdicts[sha].exempted)

    if not bad:
        return PushDecision(outcome=Outcome.ALLOW)
    if len(exempted) == len(bad):
        outcome = Outcome.ALLOW_REPORTED
    else:
        outcome = Outcome.REJECT
    return PushDecision(outcome=outcome, bad_commits=bad, exempted_commits=exempted)
