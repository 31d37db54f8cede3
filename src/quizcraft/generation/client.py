"""Quiz generation through the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Optional

from ..core.config import MAX_QUESTIONS, MIN_QUESTIONS, OpenAIConfig
from ..quiz.models import Quiz
from .prompts import build_messages, response_format

logger = logging.getLogger(__name__)

EMPTY_TOPIC_MESSAGE = "Please enter a topic."
GENERATION_FAILED_MESSAGE = (
    "Failed to generate the quiz. The model may have returned an invalid "
    "format. Please try again."
)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


class InputValidationError(ValueError):
    """Raised for creation input rejected before any network call."""


class GenerationError(RuntimeError):
    """Raised when the provider call or its response is unusable.

    ``str(exc)`` is always the single user-facing message; the underlying
    cause is chained and logged.
    """

    def __init__(
        self, message: str = GENERATION_FAILED_MESSAGE, *, reason: str = ""
    ):
        super().__init__(message)
        self.reason = reason


def validate_request(topic: str, count: int) -> tuple[str, int]:
    """Normalise creation input or raise ``InputValidationError``."""

    cleaned = (topic or "").strip()
    if not cleaned:
        raise InputValidationError(EMPTY_TOPIC_MESSAGE)
    if isinstance(count, bool) or not isinstance(count, int):
        raise InputValidationError(
            "Number of questions must be a whole number."
        )
    if not MIN_QUESTIONS <= count <= MAX_QUESTIONS:
        raise InputValidationError(
            f"Number of questions must be between {MIN_QUESTIONS} and "
            f"{MAX_QUESTIONS}."
        )
    return cleaned, count


def parse_quiz_payload(content: str) -> Quiz:
    """Decode and shape-check the provider's JSON reply.

    Only the top-level shape is verified: a non-empty ``title`` and a
    ``questions`` list of objects. Option counts, the question count and
    whether ``correctAnswer`` appears among the options are taken on trust.
    """

    text = (content or "").strip()
    if not text:
        raise GenerationError(reason="empty response")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        fenced = _FENCE_RE.fullmatch(text)
        if fenced is None:
            raise GenerationError(
                reason="response is not valid JSON"
            ) from exc
        try:
            data = json.loads(fenced.group(1))
        except json.JSONDecodeError as inner:
            raise GenerationError(
                reason="fenced response is not valid JSON"
            ) from inner
    if not isinstance(data, Mapping):
        raise GenerationError(reason="response root is not an object")
    if not data.get("title"):
        raise GenerationError(reason="missing title")
    questions = data.get("questions")
    if not isinstance(questions, list):
        raise GenerationError(reason="questions is not an array")
    if not all(isinstance(item, Mapping) for item in questions):
        raise GenerationError(reason="question entry is not an object")
    return Quiz.from_payload(data)


class QuizGenerator:
    """Turn a topic and question count into a ``Quiz``.

    The OpenAI client is injected so credentials are checked once at
    composition time. Each ``generate_quiz`` call makes exactly one request
    with no retry and no caching.
    """

    def __init__(self, client: Any, settings: Optional[OpenAIConfig] = None):
        if client is None:
            raise ValueError("QuizGenerator requires an OpenAI client")
        self._client = client
        self._settings = settings

    @property
    def model(self) -> str:
        return self._settings.model if self._settings else "gpt-4o-mini"

    def generate_quiz(self, topic: str, count: int) -> Quiz:
        topic, count = validate_request(topic, count)
        logger.info(
            "Requesting quiz",
            extra={"topic": topic, "count": count, "model": self.model},
        )
        try:
            content = self._request(topic, count)
            quiz = parse_quiz_payload(content)
        except GenerationError as exc:
            logger.error(
                "Quiz generation failed",
                extra={"topic": topic, "reason": exc.reason},
            )
            raise
        except Exception as exc:
            logger.exception("Quiz generation request failed")
            raise GenerationError(reason=str(exc)) from exc
        logger.info(
            "Quiz generated",
            extra={
                "title": quiz.title,
                "requested": count,
                "received": len(quiz.questions),
            },
        )
        return quiz

    def _request(self, topic: str, count: int) -> str:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": build_messages(topic, count),
            "response_format": response_format(),
        }
        if self._settings is not None:
            kwargs["temperature"] = self._settings.temperature
            kwargs["max_tokens"] = self._settings.max_output_tokens
        resp = self._client.chat.completions.create(**kwargs)
        return resp.choices[0].message.content or ""
