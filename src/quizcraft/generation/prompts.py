"""Prompt text and response schema for quiz generation."""

from __future__ import annotations

from typing import Any, Dict, List

SYSTEM_PROMPT = (
    "You are a knowledgeable professor who writes clear, accurate "
    "multiple-choice quizzes."
)

QUIZ_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "A creative and relevant title for the quiz.",
        },
        "questions": {
            "type": "array",
            "description": "An array of quiz questions.",
            "items": {
                "type": "object",
                "properties": {
                    "questionText": {
                        "type": "string",
                        "description": "The text of the question.",
                    },
                    "options": {
                        "type": "array",
                        "description": (
                            "An array of 4 possible answers as strings."
                        ),
                        "items": {"type": "string"},
                    },
                    "correctAnswer": {
                        "type": "string",
                        "description": (
                            "The correct answer, which must exactly match "
                            "one of the items in the 'options' array."
                        ),
                    },
                    "explanation": {
                        "type": "string",
                        "description": (
                            "A brief, professor-like explanation for why the "
                            "correct answer is correct."
                        ),
                    },
                },
                "required": [
                    "questionText",
                    "options",
                    "correctAnswer",
                    "explanation",
                ],
                "additionalProperties": False,
            },
        },
    },
    "required": ["title", "questions"],
    "additionalProperties": False,
}


def build_quiz_prompt(topic: str, count: int) -> str:
    return (
        f"Create a quiz about {topic} with exactly {count} multiple-choice "
        "questions. Each question must have exactly 4 options. For each "
        "question, also provide a brief but insightful explanation for why "
        "the correct answer is correct, as if a professor were explaining "
        "it. The response must be a JSON object that strictly adheres to the "
        "provided schema. The 'correctAnswer' field for each question must "
        "be an exact string match to one of the provided options."
    )


def build_messages(topic: str, count: int) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_quiz_prompt(topic, count)},
    ]


def response_format() -> Dict[str, Any]:
    """Structured-output request constraining the reply to ``QUIZ_SCHEMA``."""

    return {
        "type": "json_schema",
        "json_schema": {
            "name": "quiz",
            "schema": QUIZ_SCHEMA,
            "strict": True,
        },
    }
