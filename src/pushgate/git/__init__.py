"""Git bindings for pushgate history queries."""

from pushgate.git.exec import ExecError, ExecResult, run_command, run_git, run_shell
from pushgate.git.history import GitHistory, HistoryQuery

__all__ = [
    "ExecError",
    "ExecResult",
    "GitHistory",
    "HistoryQuery",
    "run_command",
    "run_git",
    "run_shell",
]
