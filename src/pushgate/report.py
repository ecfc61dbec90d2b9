"""Transcript composition for push decisions."""

from __future__ import annotations

from collections.abc import Mapping

from pushgate.policy import SIZE_PLACEHOLDER, Policy, QuantitativePolicy
from pushgate.transcript import Transcript
from pushgate.types import Commit, Outcome, PushDecision, Verdict

BANNER = "*" * 72
INDENT = "    "

_CLOSING: dict[Outcome, str] = {
    Outcome.ALLOW: "Push accepted.",
    Outcome.ALLOW_REPORTED: "Push ACCEPTED: every offending commit carries the override token.",
    Outcome.REJECT: "Push REJECTED.",
}


def report_allow(transcript: Transcript, *, reason: str) -> None:
    """Record a quiet Allow: debug-level only."""
    transcript.debug(reason)
    transcript.debug(_CLOSING[Outcome.ALLOW])


def _commit_list(transcript: Transcript, shas: tuple[str, ...]) -> None:
    for sha in shas:
        transcript.notice(f"{INDENT}{sha}")


def _guidance(
    transcript: Transcript,
    *,
    policy: Policy,
    override_message: str | None,
    support_contact: str | None,
) -> None:
    if override_message:
        transcript.notice("If these changes are intentional, add the following text to the message")
        transcript.notice("of each offending commit and push again:")
        transcript.notice(f"{INDENT}{override_message}")
        if isinstance(policy, QuantitativePolicy) and SIZE_PLACEHOLDER in override_message:
            transcript.notice(
                f"Replace {SIZE_PLACEHOLDER} with the number of bytes the commit adds, as listed above."
            )
    if support_contact:
        transcript.notice(f"For help, contact {support_contact}.")


def build_report(
    transcript: Transcript,
    *,
    branch: str,
    decision: PushDecision,
    commits: Mapping[str, Commit],
    verdicts: Mapping[str, Verdict],
    policy: Policy,
    override_message: str | None = None,
    support_contact: str | None = None,
) -> None:
    """Append the report for ``decision`` to ``transcript``."""
    if decision.outcome is Outcome.ALLOW:
        report_allow(
            transcript,
            reason=f"{len(commits)} commit(s) with changes checked on {branch!r}; no violations.",
        )
        return

    transcript.notice(BANNER)
    transcript.notice(f"Push to {branch!r} violates policy {policy.name!r}: {policy.describe()}.")
    transcript.notice("")

    exempted = set(decision.exempted_commits)
    for sha in decision.bad_commits:
        suffix = " (exempted)" if sha in exempted else ""
        transcript.notice(f"Commit {sha}{suffix}:")
        added = verdicts[sha].added_bytes
        if added is not None:
            transcript.notice(f"{INDENT}adds {added} bytes")
        for op in commits[sha].operations:
            transcript.notice(f"{INDENT}{op.record}")
    transcript.notice("")

    unresolved = decision.unresolved_commits
    if exempted and unresolved:
        transcript.notice(f"{len(decision.exempted_commits)} commit(s) exempted by the override token:")
        _commit_list(transcript, decision.exempted_commits)
        transcript.notice(f"{len(unresolved)} commit(s) still in violation:")
        _commit_list(transcript, unresolved)
    elif exempted:
        transcript.notice(f"{len(decision.exempted_commits)} commit(s) exempted by the override token:")
        _commit_list(transcript, decision.exempted_commits)
    else:
        transcript.notice(f"{len(unresolved)} commit(s) in violation:")
        _commit_list(transcript, unresolved)

    if decision.outcome is Outcome.REJECT:
        transcript.notice("")
        _guidance(
            transcript,
            policy=policy,
            override_message=override_message,
            support_contact=support_contact,
        )

    transcript.notice(_CLOSING[decision.outcome])
    transcript.notice(BANNER)
