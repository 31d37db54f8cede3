"""Presentation values derived from a ``QuizSession``.

Everything here is a pure function of the session and its quiz and is
recomputed on every read.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .session import QuizSession

NOT_ANSWERED = "Not answered"

HIGH_BAND_THRESHOLD = 0.7
MEDIUM_BAND_THRESHOLD = 0.4


class OptionStyle(str, Enum):
    INTERACTIVE = "interactive"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    MUTED = "muted"


class ScoreBand(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class AnswerFeedback:
    """Feedback shown once the current question has been answered."""

    is_correct: bool
    selected: str
    correct_answer: str
    explanation: str


@dataclass(frozen=True)
class ReviewItem:
    """One row of the end-of-quiz review."""

    number: int
    question_text: str
    user_answer: Optional[str]
    correct_answer: str
    explanation: str
    is_correct: bool

    @property
    def answer_label(self) -> str:
        return self.user_answer or NOT_ANSWERED


def format_time(seconds: int) -> str:
    """Format elapsed seconds as zero-padded ``MM:SS``."""

    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def progress_percentage(session: QuizSession) -> float:
    return (session.current_index + 1) / session.total_questions * 100


def option_style(session: QuizSession, option: str) -> OptionStyle:
    if not session.is_answered():
        return OptionStyle.INTERACTIVE
    question = session.current_question
    if option == question.correct_answer:
        return OptionStyle.CORRECT
    if option == session.selected_for():
        return OptionStyle.INCORRECT
    return OptionStyle.MUTED


def answer_feedback(session: QuizSession) -> Optional[AnswerFeedback]:
    selected = session.selected_for()
    if selected is None:
        return None
    question = session.current_question
    return AnswerFeedback(
        is_correct=question.is_correct(selected),
        selected=selected,
        correct_answer=question.correct_answer,
        explanation=question.explanation,
    )


def band_for_ratio(ratio: float) -> ScoreBand:
    if ratio >= HIGH_BAND_THRESHOLD:
        return ScoreBand.HIGH
    if ratio >= MEDIUM_BAND_THRESHOLD:
        return ScoreBand.MEDIUM
    return ScoreBand.LOW


def score_band(score: int, total: int) -> ScoreBand:
    if total <= 0:
        return ScoreBand.LOW
    return band_for_ratio(score / total)


def review_items(session: QuizSession) -> List[ReviewItem]:
    items: List[ReviewItem] = []
    for index, question in enumerate(session.quiz.questions):
        selected = session.selected_for(index)
        items.append(
            ReviewItem(
                number=index + 1,
                question_text=question.question_text,
                user_answer=selected,
                correct_answer=question.correct_answer,
                explanation=question.explanation,
                is_correct=question.is_correct(selected),
            )
        )
    return items
