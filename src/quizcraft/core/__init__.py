"""Shared configuration, logging and client helpers."""

from __future__ import annotations

from .ai import ClientConfigError, load_client
from .config import (
    ConfigError,
    QuizcraftConfig,
    load_config,
    resolve_config_path,
    write_template,
)
from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "ClientConfigError",
    "load_client",
    "ConfigError",
    "QuizcraftConfig",
    "load_config",
    "resolve_config_path",
    "write_template",
    "JsonLogFormatter",
    "configure_logger",
    "WORKSPACE_ENV",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]
