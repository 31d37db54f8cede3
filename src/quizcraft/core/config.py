"""TOML configuration for quizcraft.

The file is optional. Values missing from it fall back to ``_DEFAULTS`` and
unknown keys are rejected so typos surface early instead of being ignored.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover - should never happen
    raise RuntimeError("Python 3.11+ required for tomllib support") from exc

from . import workspace

__all__ = [
    "CONFIG_FILENAME",
    "CONFIG_PATH_ENV",
    "ConfigError",
    "OpenAIConfig",
    "QuizConfig",
    "LoggingConfig",
    "QuizcraftConfig",
    "MIN_QUESTIONS",
    "MAX_QUESTIONS",
    "config_template",
    "default_tree",
    "load_config",
    "resolve_config_path",
    "write_template",
]

CONFIG_FILENAME = "quizcraft.toml"
CONFIG_PATH_ENV = "QUIZCRAFT_CONFIG"

MIN_QUESTIONS = 3
MAX_QUESTIONS = 25


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class OpenAIConfig:
    model: str
    temperature: float
    max_output_tokens: int
    request_timeout_seconds: int
    api_base: Optional[str]


@dataclass(frozen=True)
class QuizConfig:
    default_count: int


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class QuizcraftConfig:
    openai: OpenAIConfig
    quiz: QuizConfig
    logging: LoggingConfig


_DEFAULTS: Dict[str, Any] = {
    "openai": {
        "model": "gpt-4o-mini",
        "temperature": 0.7,
        "max_output_tokens": 4000,
        "request_timeout_seconds": 60,
        "api_base": None,
    },
    "quiz": {
        "default_count": 5,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}

_CONFIG_TEMPLATE = """
# quizcraft configuration
# Credentials are read from OPENAI_API_KEY (environment or .env file).

[openai]
model = "gpt-4o-mini"
temperature = 0.7
max_output_tokens = 4000
request_timeout_seconds = 60
# api_base = "https://api.openai.com/v1"

[quiz]
# Pre-selected question count in the creation form (3-25).
default_count = 5

[logging]
level = "INFO"
verbose = false
"""


def _merge_dict(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise ConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise ConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted, type(value).__name__
                    )
                )
            _merge_dict(base_value, value, path=f"{dotted}.")
        else:
            base[key] = value


def _require_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{field}' must be a positive integer.")
    return value


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _coerce_optional_string(value: Any, *, field: str) -> Optional[str]:
    if value is None:
        return None
    return _require_string(value, field=field)


def _build_openai(section: Mapping[str, Any]) -> OpenAIConfig:
    temperature = section.get("temperature")
    if isinstance(temperature, bool) or not isinstance(
        temperature, (int, float)
    ):
        raise ConfigError("'openai.temperature' must be a number.")
    if not 0.0 <= float(temperature) <= 2.0:
        raise ConfigError("'openai.temperature' must be between 0.0 and 2.0.")
    return OpenAIConfig(
        model=_require_string(section.get("model"), field="openai.model"),
        temperature=float(temperature),
        max_output_tokens=_require_positive_int(
            section.get("max_output_tokens"),
            field="openai.max_output_tokens",
        ),
        request_timeout_seconds=_require_positive_int(
            section.get("request_timeout_seconds"),
            field="openai.request_timeout_seconds",
        ),
        api_base=_coerce_optional_string(
            section.get("api_base"), field="openai.api_base"
        ),
    )


def _build_quiz(section: Mapping[str, Any]) -> QuizConfig:
    count = _require_positive_int(
        section.get("default_count"), field="quiz.default_count"
    )
    if not MIN_QUESTIONS <= count <= MAX_QUESTIONS:
        raise ConfigError(
            f"'quiz.default_count' must be between {MIN_QUESTIONS} and "
            f"{MAX_QUESTIONS}."
        )
    return QuizConfig(default_count=count)


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = _require_string(
        section.get("level"), field="logging.level"
    ).upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if level not in allowed:
        raise ConfigError(
            "logging.level must be one of DEBUG, INFO, WARNING, ERROR, "
            "CRITICAL."
        )
    verbose = _require_bool(section.get("verbose"), field="logging.verbose")
    return LoggingConfig(level=level, verbose=verbose)


def _build_config(tree: Mapping[str, Any]) -> QuizcraftConfig:
    return QuizcraftConfig(
        openai=_build_openai(tree["openai"]),
        quiz=_build_quiz(tree["quiz"]),
        logging=_build_logging(tree["logging"]),
    )


def _load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML: {exc}") from exc


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    env_override = env_map.get(CONFIG_PATH_ENV)
    if env_override:
        return Path(env_override).expanduser().resolve()
    home = workspace.resolve_home(env=env_map)
    return home / "config" / CONFIG_FILENAME


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> QuizcraftConfig:
    """Load the TOML config, applying defaults and validation.

    A file requested through ``explicit_path`` or ``QUIZCRAFT_CONFIG`` must
    exist. The implicit workspace location may be absent, in which case the
    defaults are used as-is.
    """

    env_map = os.environ if env is None else env
    path = resolve_config_path(explicit_path=explicit_path, env=env_map)
    required = explicit_path is not None or bool(env_map.get(CONFIG_PATH_ENV))
    tree = default_tree()
    if required or path.exists():
        toml_data = _load_toml(path)
        _merge_dict(tree, toml_data)
    return _build_config(tree)


def default_tree() -> Dict[str, Any]:
    """Return a copy of the default configuration tree."""

    return copy.deepcopy(_DEFAULTS)


def config_template() -> str:
    """Return the TOML template recommended for new installs."""

    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(
    path: Path, *, overwrite: bool = False, mode: int = 0o600
) -> Path:
    """Write the default template to ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    with path.open("w", encoding="utf-8") as fh:
        fh.write(config_template())
    try:
        path.chmod(mode)
    except PermissionError:
        pass
    return path
