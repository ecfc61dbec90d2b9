"""Push hook pipeline: ref updates in, exit code and transcript out."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from rich.console import Console

from pushgate.classifier import classify_log
from pushgate.config import ConfigStore, HookConfig, SinkConfig
from pushgate.decision import decide
from pushgate.dispatcher import Dispatch, RunModes, RunResult, RunStatus, SinkSet, dispatch
from pushgate.errors import HookAbort
from pushgate.git.history import HistoryQuery
from pushgate.policy import build_policy, evaluate_commits
from pushgate.refs import collect_ref_update, resolve_range
from pushgate.report import build_report, report_allow
from pushgate.transcript import Level, Transcript
from pushgate.types import Outcome, PushDecision


def evaluate_push(
    lines: Iterable[str],
    *,
    config: HookConfig,
    history: HistoryQuery,
    transcript: Transcript,
) -> RunResult:
    """Classify the pushed commits and decide.

    Raises:
        HookAbort: Malformed input, a failed history query, or a parser
            consistency failure.
    """
    update = collect_ref_update(lines, branch=config.branch, transcript=transcript)
    if update is None:
        return RunResult(status=RunStatus.NOT_APPLICABLE)

    commit_range = resolve_range(update, transcript=transcript)
    if commit_range is None:
        report_allow(transcript, reason=f"Deletion of {update.ref_name} is always allowed.")
        return RunResult(status=RunStatus.DECIDED, decision=PushDecision(outcome=Outcome.ALLOW))

    policy = build_policy(config.policy, max_bytes=config.max_commit_bytes)
    commit_list = history.commit_list(commit_range)
    transcript.debug(f"{len(commit_list)} commit(s) in range {commit_range.revision()}.")
    log_lines = history.change_log(commit_range, with_blobs=policy.needs_blobs)

    commits = classify_log(commit_list, log_lines, transcript=transcript)
    if not commits:
        report_allow(transcript, reason="No change records in pushed commits; nothing to check.")
        return RunResult(status=RunStatus.DECIDED, decision=PushDecision(outcome=Outcome.ALLOW))

    verdicts = evaluate_commits(
        commits,
        policy=policy,
        history=history,
        override_template=config.override_message,
        transcript=transcript,
    )
    decision = decide(verdicts, commit_list)
    build_report(
        transcript,
        branch=config.branch,
        decision=decision,
        commits=commits,
        verdicts=verdicts,
        policy=policy,
        override_message=config.override_message,
        support_contact=config.support_contact,
    )
    return RunResult(status=RunStatus.DECIDED, decision=decision)


def run_hook(
    lines: Iterable[str],
    *,
    store: ConfigStore,
    history: HistoryQuery,
    repo_root: Path,
    modes: RunModes | None = None,
    min_level: Level = Level.NOTICE,
    sinks: SinkSet | None = None,
    out: Console | None = None,
) -> Dispatch:
    """Run one hook invocation end to end.

    Fatal errors are recorded as ``ERROR:`` notices and still flow through
    the dispatcher, so sinks receive them.
    """
    transcript = Transcript()
    sink_set = sinks or SinkSet()
    try:
        if sinks is None:
            sink_set = SinkSet.from_config(SinkConfig.load(store), cwd=repo_root)
        config = HookConfig.load(store)
        result = evaluate_push(lines, config=config, history=history, transcript=transcript)
    except HookAbort as exc:
        transcript.notice(f"ERROR: {exc}")
        result = RunResult(status=RunStatus.ABORTED)

    return dispatch(
        result,
        transcript,
        modes=modes or RunModes(),
        sinks=sink_set,
        min_level=min_level,
        out=out,
    )
