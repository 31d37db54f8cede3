"""Quiz-taking state machine.

A ``QuizSession`` walks through ``NOT_STARTED -> IN_PROGRESS -> FINISHED``
exactly once. Answers are locked on first selection so the feedback shown
for a question never changes, and the elapsed-time counter only advances
while the quiz is in progress. Transition methods return ``False`` instead
of raising when a call is not valid in the current state, which lets the UI
forward raw key presses and clicks without pre-checking them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Callable, Optional

from .models import Phase, Question, Quiz
from .timer import Ticker

logger = logging.getLogger(__name__)


def compute_score(
    questions: Sequence[Question], answers: Mapping[int, str]
) -> int:
    """Count answered questions whose answer matches the correct one."""

    return sum(
        1
        for index, question in enumerate(questions)
        if question.is_correct(answers.get(index))
    )


class QuizSession:
    """Mutable session state for one run through a quiz."""

    def __init__(
        self,
        quiz: Quiz,
        *,
        ticker: Optional[Ticker] = None,
        on_tick: Optional[Callable[[int], object]] = None,
    ):
        if not quiz.questions:
            raise ValueError("A quiz session needs at least one question")
        self.quiz = quiz
        self.phase = Phase.NOT_STARTED
        self._index = 0
        self._answers: dict[int, str] = {}
        self._elapsed = 0
        self._ticker = ticker
        self._on_tick = on_tick

    # State accessors

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def answers(self) -> Mapping[int, str]:
        return dict(self._answers)

    @property
    def total_questions(self) -> int:
        return len(self.quiz.questions)

    @property
    def current_question(self) -> Question:
        return self.quiz.questions[self._index]

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def is_last_question(self) -> bool:
        return self._index == self.total_questions - 1

    @property
    def timer_running(self) -> bool:
        return self._ticker is not None and self._ticker.running

    def is_answered(self, index: Optional[int] = None) -> bool:
        target = self._index if index is None else index
        return target in self._answers

    def selected_for(self, index: Optional[int] = None) -> Optional[str]:
        target = self._index if index is None else index
        return self._answers.get(target)

    # Transitions

    def start(self) -> bool:
        if self.phase is not Phase.NOT_STARTED:
            return False
        self.phase = Phase.IN_PROGRESS
        if self._ticker is not None:
            self._ticker.start(self.tick)
        logger.debug(
            "Quiz started",
            extra={
                "title": self.quiz.title,
                "questions": self.total_questions,
            },
        )
        return True

    def tick(self) -> bool:
        if self.phase is not Phase.IN_PROGRESS:
            return False
        self._elapsed += 1
        if self._on_tick is not None:
            self._on_tick(self._elapsed)
        return True

    def select_answer(self, index: int, value: str) -> bool:
        if self.phase is not Phase.IN_PROGRESS:
            return False
        if not 0 <= index < self.total_questions:
            return False
        if index in self._answers:
            return False
        self._answers[index] = value
        return True

    def select_current(self, value: str) -> bool:
        return self.select_answer(self._index, value)

    def go_next(self) -> bool:
        if self._index >= self.total_questions - 1:
            return False
        self._index += 1
        return True

    def go_prev(self) -> bool:
        if self._index <= 0:
            return False
        self._index -= 1
        return True

    def can_go_next(self) -> bool:
        """Whether Next is offered: current question answered, not last."""

        return (
            self.phase is Phase.IN_PROGRESS
            and not self.is_last_question
            and self.is_answered()
        )

    def can_finish(self) -> bool:
        return (
            self.phase is Phase.IN_PROGRESS
            and self.is_last_question
            and self.is_answered()
        )

    def finish(self) -> bool:
        if not self.can_finish():
            return False
        self.phase = Phase.FINISHED
        self._stop_ticker()
        logger.debug(
            "Quiz finished",
            extra={
                "score": self.score(),
                "questions": self.total_questions,
                "elapsed_seconds": self._elapsed,
            },
        )
        return True

    def close(self) -> None:
        """Release the ticker; the session must not be used afterwards."""

        self._stop_ticker()

    def score(self) -> int:
        return compute_score(self.quiz.questions, self._answers)

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
