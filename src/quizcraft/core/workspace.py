"""Workspace directory helpers for quizcraft runtime files.

Quizzes themselves are never written to disk. The workspace only holds the
TOML configuration and the JSON log files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, MutableMapping


WORKSPACE_ENV = "QUIZCRAFT_HOME"
DEFAULT_WORKSPACE = Path.home() / ".quizcraft"

_SUBDIRS = {
    "config": "config",
    "logs": "logs",
}


class WorkspaceError(RuntimeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    """Resolved workspace paths."""

    home: Path
    directories: Mapping[str, Path]

    def path_for(self, key: str) -> Path:
        try:
            return self.directories[key]
        except KeyError as exc:
            raise KeyError(f"Unknown workspace directory '{key}'.") from exc


def resolve_home(
    *, env: Mapping[str, str] | None = None, path: Path | None = None
) -> Path:
    """Return the workspace home honouring explicit and env overrides."""

    if path is not None:
        return path.expanduser().resolve()
    env_map = os.environ if env is None else env
    custom = (env_map.get(WORKSPACE_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser().resolve()
    return DEFAULT_WORKSPACE


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
    create: bool = True,
) -> WorkspaceLayout:
    """Resolve the workspace layout, creating directories when requested."""

    home = resolve_home(env=env, path=path)
    if home.exists() and not home.is_dir():
        raise WorkspaceError(
            f"Configured workspace exists and is not a directory: {home}"
        )

    directories: MutableMapping[str, Path] = {}
    for key, relative in _SUBDIRS.items():
        candidate = home / relative
        if create:
            _ensure_dir(candidate)
        elif candidate.exists() and not candidate.is_dir():
            raise WorkspaceError(
                "Expected workspace directory for '{0}' but found a file: "
                "{1}".format(key, candidate)
            )
        directories[key] = candidate

    return WorkspaceLayout(
        home=home,
        directories=MappingProxyType(dict(directories)),
    )


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except (FileExistsError, PermissionError) as exc:
        raise WorkspaceError(f"Unable to prepare directory: {path}") from exc
    if not path.is_dir():
        raise WorkspaceError(
            f"Expected directory but found a non-directory entry: {path}"
        )
    try:
        path.chmod(0o700)
    except (PermissionError, NotImplementedError):
        return
