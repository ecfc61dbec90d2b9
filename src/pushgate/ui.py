from __future__ import annotations

import os
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from pushgate.transcript import Level, Message

LEVEL_STYLES: dict[Level, str] = {
    Level.NOTICE: "bold bright_white",
    Level.DEBUG: "cyan",
    Level.TRACE: "dim",
}

WARNING_STYLE = "bold bright_yellow"


def color_enabled() -> bool:
    if os.getenv("NO_COLOR"):
        return False
    return os.getenv("PUSHGATE_COLOR", "1") == "1"


def make_console() -> Console:
    """Console bound to stderr, which git relays to the pushing client."""
    enabled = color_enabled()
    return Console(
        stderr=True,
        no_color=not enabled,
        highlight=False,
        soft_wrap=True,
    )


console = make_console()


def emit_messages(messages: Iterable[Message], *, min_level: Level, out: Console | None = None) -> None:
    target = out or console
    for message in messages:
        if message.level < min_level:
            continue
        line = Text(f"[{message.level.name}] ", style=LEVEL_STYLES[message.level])
        line.append(message.text)
        target.print(line)


def warn(text: str, *, out: Console | None = None) -> None:
    target = out or console
    target.print(Text(f"[WARNING] {text}", style=WARNING_STYLE))
