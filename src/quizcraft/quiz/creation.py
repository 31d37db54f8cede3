"""Creation flow: collect a topic and count, then request a quiz."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from ..core.config import MAX_QUESTIONS, MIN_QUESTIONS
from ..generation.client import (
    EMPTY_TOPIC_MESSAGE,
    GenerationError,
    InputValidationError,
)
from .models import Quiz

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class QuizSource(Protocol):
    def generate_quiz(self, topic: str, count: int) -> Quiz: ...


class CreationFlow:
    """Form state for quiz creation.

    ``is_loading`` stays set for the whole provider call; submissions made
    meanwhile are ignored rather than queued. Every failure ends with a
    message in ``error`` and the form usable again.
    """

    def __init__(self, generator: QuizSource, *, default_count: int = 5):
        if not MIN_QUESTIONS <= default_count <= MAX_QUESTIONS:
            raise ValueError(
                f"default_count must be between {MIN_QUESTIONS} and "
                f"{MAX_QUESTIONS}"
            )
        self._generator = generator
        self.topic = ""
        self.count = default_count
        self.is_loading = False
        self.error: Optional[str] = None

    async def submit(
        self, topic: Optional[str] = None, count: Optional[int] = None
    ) -> Optional[Quiz]:
        if self.is_loading:
            logger.debug("Ignoring submission while a request is pending")
            return None
        if topic is not None:
            self.topic = topic
        if count is not None:
            self.count = count
        if not self.topic.strip():
            self.error = EMPTY_TOPIC_MESSAGE
            return None

        self.is_loading = True
        self.error = None
        try:
            return await asyncio.to_thread(
                self._generator.generate_quiz, self.topic, self.count
            )
        except (GenerationError, InputValidationError) as exc:
            self.error = str(exc)
            return None
        except Exception:
            logger.exception("Unexpected failure while creating a quiz")
            self.error = UNKNOWN_ERROR_MESSAGE
            return None
        finally:
            self.is_loading = False
