"""Shared testing fixtures for the quizcraft test suite."""

from .openai import FakeOpenAI, FakeOpenAIFactory  # noqa: F401
from .quizzes import (  # noqa: F401
    correct_answers,
    make_quiz,
    question_payload,
    quiz_payload,
    wrong_answer,
)

__all__ = [
    "FakeOpenAI",
    "FakeOpenAIFactory",
    "correct_answers",
    "make_quiz",
    "question_payload",
    "quiz_payload",
    "wrong_answer",
]
