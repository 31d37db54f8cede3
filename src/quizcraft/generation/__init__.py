from .client import (
    EMPTY_TOPIC_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    GenerationError,
    InputValidationError,
    QuizGenerator,
    parse_quiz_payload,
    validate_request,
)
from .prompts import QUIZ_SCHEMA, build_quiz_prompt

__all__ = [
    "EMPTY_TOPIC_MESSAGE",
    "GENERATION_FAILED_MESSAGE",
    "GenerationError",
    "InputValidationError",
    "QuizGenerator",
    "parse_quiz_payload",
    "validate_request",
    "QUIZ_SCHEMA",
    "build_quiz_prompt",
]
