"""Leveled, append-only transcript shared by every hook stage."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum


class Level(IntEnum):
    """Message severity. Higher values are more important."""

    TRACE = 1
    DEBUG = 2
    NOTICE = 3

    @classmethod
    def parse(cls, value: str) -> Level:
        """Parse a case-insensitive level name."""
        name = value.strip().upper()
        try:
            return cls[name]
        except KeyError as exc:
            valid = ", ".join(level.name for level in sorted(cls, reverse=True))
            raise ValueError(f"Unknown log level: {value!r}. Expected one of {valid}.") from exc


@dataclass(frozen=True)
class Message:
    """Single transcript line."""

    level: Level
    text: str

    def render(self) -> str:
        return f"{self.level.name}: {self.text}"


@dataclass
class Transcript:
    """Ordered messages, flushed to sinks exactly once at exit."""

    messages: list[Message] = field(default_factory=list)
    flushed: bool = False

    def add(self, level: Level, text: str) -> None:
        if self.flushed:
            raise RuntimeError("Transcript already flushed; no further messages accepted.")
        self.messages.append(Message(level=level, text=text))

    def notice(self, text: str) -> None:
        self.add(Level.NOTICE, text)

    def debug(self, text: str) -> None:
        self.add(Level.DEBUG, text)

    def trace(self, text: str) -> None:
        self.add(Level.TRACE, text)

    def at_least(self, level: Level) -> list[Message]:
        """Return messages at or above ``level``, in order."""
        return [message for message in self.messages if message.level >= level]

    def mark_flushed(self) -> None:
        if self.flushed:
            raise RuntimeError("Transcript flushed twice.")
        self.flushed = True

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)
