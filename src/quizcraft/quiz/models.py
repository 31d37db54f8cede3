"""Immutable quiz value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class Phase(str, Enum):
    """Linear phases of a quiz-taking session."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class Question:
    """A multiple-choice question as delivered by the generator.

    ``correct_answer`` is expected to equal one of ``options`` but this is
    not enforced; a mismatch simply means no option is ever marked correct.
    """

    question_text: str
    options: tuple[str, ...]
    correct_answer: str
    explanation: str

    def is_correct(self, answer: str | None) -> bool:
        return answer is not None and answer == self.correct_answer

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Question":
        raw_options = data.get("options") or []
        if isinstance(raw_options, (str, bytes)) or not isinstance(
            raw_options, (list, tuple)
        ):
            raw_options = []
        return cls(
            question_text=str(data.get("questionText") or "").strip(),
            options=tuple(str(option) for option in raw_options),
            correct_answer=str(data.get("correctAnswer") or ""),
            explanation=str(data.get("explanation") or "").strip(),
        )


@dataclass(frozen=True)
class Quiz:
    """A titled, ordered set of questions generated for one session."""

    title: str
    questions: tuple[Question, ...]

    def __len__(self) -> int:
        return len(self.questions)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Quiz":
        """Build a quiz from the decoded JSON payload.

        Callers are expected to have shape-checked ``title`` and
        ``questions`` already.
        """
        return cls(
            title=str(data["title"]).strip(),
            questions=tuple(
                Question.from_payload(item) for item in data["questions"]
            ),
        )
