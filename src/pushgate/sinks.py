"""Best-effort delivery of transcript lines to external commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pushgate.git.exec import run_shell
from pushgate.transcript import Level, Message


class SinkError(RuntimeError):
    """Raised when a sink cannot be started or exits uncleanly."""


class Sink(Protocol):
    """Consumer of transcript content."""

    name: str

    def deliver(self, messages: Sequence[Message]) -> None: ...


@dataclass(frozen=True)
class SinkRoute:
    """A sink plus the minimum level of messages it receives."""

    sink: Sink
    min_level: Level


@dataclass(frozen=True)
class CommandSink:
    """Shell command fed the rendered transcript on stdin."""

    name: str
    command: str
    cwd: Path

    def deliver(self, messages: Sequence[Message]) -> None:
        payload = "".join(f"{message.render()}\n" for message in messages)
        try:
            result = run_shell(self.command, cwd=self.cwd, stdin_text=payload)
        except OSError as exc:
            raise SinkError(f"{self.name}: unable to run {self.command!r}: {exc}") from exc
        if not result.ok:
            detail = (result.stderr or result.stdout).strip()
            raise SinkError(f"{self.name}: {self.command!r} exited {result.returncode}: {detail}")
