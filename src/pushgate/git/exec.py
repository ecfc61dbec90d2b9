"""Subprocess runners shared by history queries and sink commands."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ExecResult:
    """Captured outcome of one external command."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ExecError(RuntimeError):
    """Raised when a checked command exits non-zero."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = (result.stderr or result.stdout).strip()
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


def run_command(
    argv: list[str],
    *,
    cwd: Path,
    check: bool = True,
    stdin_text: str | None = None,
) -> ExecResult:
    """Run ``argv`` to completion, optionally feeding ``stdin_text``.

    Raises:
        OSError: The executable could not be started.
        ExecError: ``check`` is set and the command exited non-zero.
    """
    completed = subprocess.run(
        argv,
        cwd=cwd,
        input=stdin_text,
        capture_output=True,
        text=True,
        check=False,
    )
    result = ExecResult(
        argv=tuple(argv),
        cwd=cwd.resolve(),
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )
    if check and not result.ok:
        raise ExecError(result)
    return result


def run_shell(command: str, *, cwd: Path, stdin_text: str) -> ExecResult:
    """Run a configured shell command line, feeding it ``stdin_text``."""
    return run_command(["/bin/sh", "-c", command], cwd=cwd, check=False, stdin_text=stdin_text)


def run_git(
    args: list[str],
    *,
    repo_root: Path,
    check: bool = True,
) -> ExecResult:
    """Run a git subcommand inside ``repo_root`` (a work tree or bare repo)."""
    return run_command(["git", *args], cwd=repo_root, check=check)
