"""Pushgate CLI - pre-receive hook entry point."""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path

import click
import typer

from pushgate import __version__
from pushgate.config import ConfigStore, GitConfigStore, YamlConfigStore
from pushgate.dispatcher import RunModes
from pushgate.git.history import GitHistory
from pushgate.hook import run_hook
from pushgate.transcript import Level

MANUAL = """\
PUSHGATE(1)

NAME
    pushgate - reject pushes that break the content policy of a protected branch

SYNOPSIS
    pushgate [--dry-run 0|1] [--log-level LEVEL] [--always-fail] [--config PATH]

DESCRIPTION
    Install as the pre-receive hook of a repository. Git feeds one line per
    updated ref on stdin:

        <old-hash> <new-hash> <ref-name>

    Only the update to the configured protected branch is checked. Two
    policies are available:

    no-modify   commits may only add or copy files; modifying, deleting, or
                renaming an existing file marks the commit bad.
    max-size    a commit may not add more than max-commit-bytes bytes.

    A bad commit whose message contains commit-override-message is exempted.
    Under max-size, %SIZE% in that setting stands for the number of bytes the
    commit adds. A push whose bad commits are all exempted is accepted and
    reported; any remaining bad commit rejects the whole push.

CONFIGURATION
    Read from `git config pushgate.<key>` unless --config names a YAML file.

    master-branch-name        protected branch (required)
    policy                    no-modify (default) or max-size
    max-commit-bytes          byte limit for max-size
    commit-override-message   override token
    support-contact           shown in rejection guidance
    log-command               receives the transcript on stdin
    log-command-level         NOTICE (default), DEBUG or TRACE
    blocked-push-command      receives NOTICE lines of rejected pushes
    unblocked-push-command    receives NOTICE lines of exempted pushes

EXIT STATUS
    0 to accept the push, 1 to reject it.
"""


class LogLevelChoice(str, Enum):
    """Diagnostic stream verbosity."""

    NOTICE = "NOTICE"
    DEBUG = "DEBUG"
    TRACE = "TRACE"


app = typer.Typer(
    name="pushgate",
    help="Pushgate - protected branch push gatekeeper",
    add_completion=False,
)


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _man_option_callback(value: bool) -> None:
    """Handle eager --man option."""
    if value:
        if sys.stdout.isatty():
            click.echo_via_pager(MANUAL)
        else:
            typer.echo(MANUAL)
        raise typer.Exit()


def _config_store(config_path: Path | None, repo_root: Path) -> ConfigStore:
    if config_path is not None:
        return YamlConfigStore(config_path)
    return GitConfigStore(repo_root)


@app.command()
def hook(
    dry_run: int = typer.Option(
        0,
        "--dry-run",
        min=0,
        max=1,
        help="1 to report violations but always accept the push.",
    ),
    log_level: LogLevelChoice = typer.Option(
        LogLevelChoice.NOTICE,
        "--log-level",
        case_sensitive=False,
        help="Minimum severity written to stderr.",
    ),
    always_fail: bool = typer.Option(
        False,
        "--always-fail",
        help="Reject every push that would have been accepted (hook testing).",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="YAML configuration file (defaults to git config pushgate.*).",
    ),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository path (defaults to current working directory).",
    ),
    man: bool = typer.Option(
        False,
        "--man",
        help="Show the full manual and exit.",
        is_eager=True,
        callback=_man_option_callback,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show pushgate version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Check the ref updates on stdin against the protected branch policy."""
    _ = (man, version)
    repo_root = (repo or Path.cwd()).resolve()

    result = run_hook(
        sys.stdin,
        store=_config_store(config_path, repo_root),
        history=GitHistory(repo_root),
        repo_root=repo_root,
        modes=RunModes(dry_run=bool(dry_run), always_fail=always_fail),
        min_level=Level.parse(log_level.value),
    )
    raise typer.Exit(result.exit_code)


def main() -> None:
    app()


if __name__ == "__main__":

    main()
