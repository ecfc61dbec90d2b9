"""Hook configuration loaded from git config or a YAML file.

Keys are looked up in a flat key/value namespace:

- ``master-branch-name`` (required)
- ``policy``: ``no-modify`` (default) or ``max-size``
- ``max-commit-bytes``: byte threshold, required for ``max-size``
- ``commit-override-message``, ``support-contact``
- ``log-command``, ``log-command-level``
- ``blocked-push-command``, ``unblocked-push-command``
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import yaml

from pushgate.errors import ConfigError
from pushgate.git.exec import run_git
from pushgate.policy import POLICY_MAX_SIZE, POLICY_NAMES, POLICY_NO_MODIFY
from pushgate.transcript import Level

DEFAULT_GIT_SECTION = "pushgate"


class ConfigStore(Protocol):
    """Key/value lookup service."""

    def get(self, key: str) -> str | None: ...


class GitConfigStore:
    """Read ``<section>.<key>`` values with ``git config --get``."""

    def __init__(self, repo_root: Path, section: str = DEFAULT_GIT_SECTION):
        self.repo_root = repo_root
        self.section = section

    def get(self, key: str) -> str | None:
        try:
            result = run_git(["config", "--get", f"{self.section}.{key}"], repo_root=self.repo_root, check=False)
        except OSError as exc:
            raise ConfigError(f"git config lookup for {self.section}.{key} failed: unable to run git: {exc}") from exc
        # git config exits 1 for an unset key
        if result.returncode == 1:
            return None
        if not result.ok:
            detail = (result.stderr or result.stdout).strip()
            raise ConfigError(f"git config lookup for {self.section}.{key} failed: {detail}")
        return result.stdout.rstrip("\n")


class YamlConfigStore:
    """Flat YAML mapping of configuration keys."""

    def __init__(self, path: Path):
        self.path = path
        self._data: dict[str, Any] | None = None

    @property
    def data(self) -> dict[str, Any]:
        if self._data is None:
            self._data = self._load(self.path)
        return self._data

    @staticmethod
    def _load(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Unable to read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed YAML config at {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping at the top level")
        return data

    def get(self, key: str) -> str | None:
        value = self.data.get(key)
        if value is None:
            return None
        return str(value)


def _value(store: ConfigStore, key: str) -> str | None:
    raw = store.get(key)
    if raw is None or not raw.strip():
        return None
    return raw


@dataclass(frozen=True)
class SinkConfig:
    """Commands receiving the transcript at exit."""

    log_command: str | None = None
    log_command_level: Level = Level.NOTICE
    blocked_push_command: str | None = None
    unblocked_push_command: str | None = None

    @classmethod
    def load(cls, store: ConfigStore) -> SinkConfig:
        log_command_level = Level.NOTICE
        raw_level = _value(store, "log-command-level")
        if raw_level is not None:
            try:
                log_command_level = Level.parse(raw_level)
            except ValueError as e:
                raise ConfigError(f"Invalid log-command-level: {e}") from e

        return cls(
            log_command=_value(store, "log-command"),
            log_command_level=log_command_level,
            blocked_push_command=_value(store, "blocked-push-command"),
            unblocked_push_command=_value(store, "unblocked-push-command"),
        )


@dataclass(frozen=True)
class HookConfig:
    """Resolved hook settings."""

    branch: str
    policy: str = POLICY_NO_MODIFY
    max_commit_bytes: int | None = None
    override_message: str | None = None
    support_contact: str | None = None

    @classmethod
    def load(cls, store: ConfigStore) -> HookConfig:
        """Resolve and validate the policy keys from ``store``.

        Raises:
            ConfigError: Required key missing or a value is invalid.
        """
        branch = _value(store, "master-branch-name")
        if branch is None:
            raise ConfigError("Required configuration master-branch-name is not set")

        policy = (_value(store, "policy") or POLICY_NO_MODIFY).strip()
        if policy not in POLICY_NAMES:
            raise ConfigError(f"Unknown policy {policy!r}. Expected one of {list(POLICY_NAMES)}.")

        max_commit_bytes = None
        raw_bytes = _value(store, "max-commit-bytes")
        if raw_bytes is not None:
            try:
                max_commit_bytes = int(raw_bytes.strip())
            except ValueError as e:
                raise ConfigError(f"max-commit-bytes must be an integer, got {raw_bytes!r}") from e
            if max_commit_bytes < 0:
                raise ConfigError(f"max-commit-bytes must be non-negative, got {max_commit_bytes}")
        if policy == POLICY_MAX_SIZE and max_commit_bytes is None:
            raise ConfigError(f"Policy {POLICY_MAX_SIZE!r} requires max-commit-bytes")

        return cls(
            branch=branch.strip(),
            policy=policy,
            max_commit_bytes=max_commit_bytes,
            override_message=_value(store, "commit-override-message"),
            support_contact=_value(store, "support-contact"),
        )
