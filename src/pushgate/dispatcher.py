"""Single exit point: test-mode overrides, exit code, and transcript flush."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rich.console import Console

from pushgate.config import SinkConfig
from pushgate.sinks import CommandSink, Sink, SinkError, SinkRoute
from pushgate.transcript import Level, Message, Transcript
from pushgate.types import PushDecision
from pushgate.ui import emit_messages, warn

EXIT_ACCEPT = 0
EXIT_REJECT = 1


class RunStatus(str, Enum):
    """How the pipeline ended."""

    DECIDED = "decided"
    NOT_APPLICABLE = "not-applicable"
    ABORTED = "aborted"


@dataclass(frozen=True)
class RunResult:
    """Pipeline result handed to the dispatcher."""

    status: RunStatus
    decision: PushDecision | None = None


@dataclass(frozen=True)
class RunModes:
    """Overrides applied once at exit."""

    dry_run: bool = False
    always_fail: bool = False


@dataclass(frozen=True)
class SinkSet:
    """Configured sinks; ``None`` means the sink is not configured."""

    log: SinkRoute | None = None
    blocked: Sink | None = None
    unblocked: Sink | None = None

    @classmethod
    def from_config(cls, config: SinkConfig, *, cwd: Path) -> SinkSet:
        log = None
        if config.log_command:
            log = SinkRoute(
                sink=CommandSink(name="log-command", command=config.log_command, cwd=cwd),
                min_level=config.log_command_level,
            )
        blocked = None
        if config.blocked_push_command:
            blocked = CommandSink(name="blocked-push-command", command=config.blocked_push_command, cwd=cwd)
        unblocked = None
        if config.unblocked_push_command:
            unblocked = CommandSink(
                name="unblocked-push-command",
                command=config.unblocked_push_command,
                cwd=cwd,
            )
        return cls(log=log, blocked=blocked, unblocked=unblocked)


@dataclass(frozen=True)
class Dispatch:
    """What the dispatcher did."""

    exit_code: int
    notify_blocked: bool
    notify_unblocked: bool


def _deliver(sink: Sink | None, messages: list[Message], out: Console | None) -> None:
    if sink is None or not messages:
        return
    try:
        sink.deliver(messages)
    except SinkError as exc:
        warn(str(exc), out=out)


def dispatch(
    result: RunResult,
    transcript: Transcript,
    *,
    modes: RunModes,
    sinks: SinkSet,
    min_level: Level = Level.NOTICE,
    out: Console | None = None,
) -> Dispatch:
    """Compute the exit code and flush ``transcript`` exactly once.

    Notification routing follows the decision before test-mode overrides.
    Sink failures are reported as warnings and never change the exit code.
    """
    decision = result.decision
    notify_blocked = result.status is RunStatus.DECIDED and decision is not None and decision.blocked
    notify_unblocked = result.status is RunStatus.DECIDED and decision is not None and decision.unblocked

    notices = transcript.at_least(Level.NOTICE)
    blocked_payload = notices if notify_blocked else []
    unblocked_payload = notices if notify_unblocked else []

    if result.status is RunStatus.ABORTED:
        exit_code = EXIT_REJECT
    elif result.status is RunStatus.NOT_APPLICABLE:
        exit_code = EXIT_ACCEPT
    else:
        exit_code = EXIT_REJECT if notify_blocked else EXIT_ACCEPT
        if exit_code != EXIT_ACCEPT and modes.dry_run:
            transcript.notice("Dry run: this push would have been rejected; accepting it instead.")
            exit_code = EXIT_ACCEPT
        elif exit_code == EXIT_ACCEPT and modes.always_fail:
            transcript.notice("always-fail is set: rejecting a push that would have been accepted.")
            exit_code = EXIT_REJECT

    emit_messages(transcript, min_level=min_level, out=out)
    if sinks.log is not None:
        _deliver(sinks.log.sink, transcript.at_least(sinks.log.min_level), out)
    if notify_blocked:
        _deliver(sinks.blocked, blocked_payload, out)
    if notify_unblocked:
        _deliver(sinks.unblocked, unblocked_payload, out)
    transcript.mark_flushed()

    return Dispatch(exit_code=exit_code, notify_blocked=notify_blocked, notify_unblocked=notify_unblocked)
