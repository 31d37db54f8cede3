"""OpenAI client loader."""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv

try:  # Allow module import even when the OpenAI dependency is absent.
    from openai import OpenAI  # type: ignore
except ImportError:  # pragma: no cover - optional dependency guard
    OpenAI = None  # type: ignore

from .config import OpenAIConfig

__all__ = ["API_KEY_ENV", "ClientConfigError", "load_client"]

API_KEY_ENV = "OPENAI_API_KEY"


class ClientConfigError(RuntimeError):
    """Raised when the OpenAI client cannot be configured."""


def load_client(settings: OpenAIConfig | None = None) -> Any:
    """Build an OpenAI client from environment-derived credentials.

    Meant to run once at start-up so a missing key is reported before any
    quiz can be requested.
    """
    if OpenAI is None:
        raise ClientConfigError(
            "The 'openai' package is required to create a client. "
            "Install it and retry."
        )
    load_dotenv()
    api_key = os.getenv(API_KEY_ENV)
    if not api_key:
        raise ClientConfigError(
            f"{API_KEY_ENV} not found in environment. Set it or add to .env"
        )
    kwargs: dict[str, Any] = {"api_key": api_key}
    if settings is not None:
        kwargs["timeout"] = settings.request_timeout_seconds
        if settings.api_base:
            kwargs["base_url"] = settings.api_base
    return OpenAI(**kwargs)
