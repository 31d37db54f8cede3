from __future__ import annotations

import asyncio
from typing import Iterable

import pytest
from rich.console import Console

from fixtures import make_quiz
from quizcraft.generation.client import GenerationError
from quizcraft.quiz.timer import ManualTicker
from quizcraft.quiz.view import ScoreBand
from quizcraft.ui import console as console_ui
from quizcraft.ui.console import (
    SessionCommand,
    parse_session_command,
    run_console_app,
    run_quiz_session,
)


def scripted(lines: Iterable[str]):
    iterator = iter(lines)
    return lambda: next(iterator)


def make_console() -> Console:
    return Console(record=True, width=100, force_terminal=False)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("s", SessionCommand("start")),
        (" Start ", SessionCommand("start")),
        ("n", SessionCommand("next")),
        ("previous", SessionCommand("prev")),
        ("F", SessionCommand("finish")),
        ("exit", SessionCommand("quit")),
        ("2", SessionCommand("select", 1)),
        ("c", SessionCommand("select", 2)),
        ("0", None),
        ("zz", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_session_command(raw, expected):
    assert parse_session_command(raw) == expected


def test_full_session_all_correct():
    console = make_console()
    ticker = ManualTicker()
    script = ["", "2", "n", "2", "n", "2", "f"]

    result = asyncio.run(
        run_quiz_session(
            make_quiz(3), console, scripted(script), ticker=ticker
        )
    )

    assert result.exit_action == "finished"
    assert result.score == 3
    assert result.total_questions == 3
    assert result.band is ScoreBand.HIGH
    assert ticker.running is False
    output = console.export_text()
    assert "Quiz Completed!" in output
    assert "3 / 3" in output
    assert "Correct!" in output


def test_session_reports_incorrect_answer():
    console = make_console()
    script = ["s", "a", "n", "b", "n", "b", "f"]

    result = asyncio.run(
        run_quiz_session(
            make_quiz(3), console, scripted(script), ticker=ManualTicker()
        )
    )

    assert result.score == 2
    assert result.band is ScoreBand.MEDIUM
    output = console.export_text()
    assert "Incorrect!" in output
    assert "The correct answer is: Q1 B" in output
    assert "Your answer: Q1 A" in output
    assert "Correct answer: Q1 B" in output


def test_answers_are_locked_and_navigation_is_gated():
    console = make_console()
    script = ["", "n", "1", "2", "p", "n", "2", "n", "f", "x", "q"]

    result = asyncio.run(
        run_quiz_session(
            make_quiz(3), console, scripted(script), ticker=ManualTicker()
        )
    )

    assert result.exit_action == "quit"
    assert result.answered_questions == 2
    assert result.score == 1
    output = console.export_text()
    assert "Answer this question before moving on." in output
    assert "This question is already answered." in output
    assert "Already at the first question." in output
    assert "Answer the last question before finishing." in output
    assert "Unrecognized command. Try again." in output
    assert "Ending quiz without finishing." in output
    assert "Quiz Completed!" not in output


def test_last_question_blocks_next_and_missing_option():
    console = make_console()
    script = ["", "2", "n", "2", "n", "9", "2", "n", "f"]

    result = asyncio.run(
        run_quiz_session(
            make_quiz(3), console, scripted(script), ticker=ManualTicker()
        )
    )

    assert result.exit_action == "finished"
    output = console.export_text()
    assert "Option 9 does not exist." in output
    assert "This is the last question; type 'f' to finish." in output


def test_start_prompt_rejects_other_input_and_can_quit():
    console = make_console()
    ticker = ManualTicker()

    result = asyncio.run(
        run_quiz_session(
            make_quiz(3), console, scripted(["n", "q"]), ticker=ticker
        )
    )

    assert result.exit_action == "quit"
    assert ticker.start_count == 0
    assert "Type 's' or press Enter to start." in console.export_text()


def test_end_of_input_interrupts_session():
    console = make_console()
    ticker = ManualTicker()

    result = asyncio.run(
        run_quiz_session(
            make_quiz(3), console, scripted(["", "1"]), ticker=ticker
        )
    )

    assert result.exit_action == "quit"
    assert result.answered_questions == 1
    assert ticker.running is False
    assert "Session interrupted." in console.export_text()


class StubGenerator:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def generate_quiz(self, topic, count):
        self.calls.append((topic, count))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_console_app_creates_retries_and_resets():
    console = make_console()
    generator = StubGenerator(
        [GenerationError(), make_quiz(3, title="Second"), make_quiz(3)]
    )
    script = [
        "Oceans", "",  # first attempt fails
        "Oceans", "3",
        "", "2", "n", "2", "n", "2", "f",
        "y",
        "Deserts", "abc",  # rejected count
        "Deserts", "4",
        "q",
        "n",
    ]

    finished = asyncio.run(
        run_console_app(
            generator,
            console,
            scripted(script),
            default_count=5,
            ticker_factory=ManualTicker,
        )
    )

    assert finished == 1
    assert generator.calls == [
        ("Oceans", 5),
        ("Oceans", 3),
        ("Deserts", 4),
    ]
    output = console.export_text()
    assert "Oops! Something went wrong." in output
    assert "Failed to generate the quiz." in output
    assert "Enter a whole number between 3 and 25." in output
    assert "Create a new quiz? [y/N]" in output


def test_console_app_quits_at_topic_prompt():
    generator = StubGenerator([])
    finished = asyncio.run(
        run_console_app(generator, make_console(), scripted(["q"]))
    )
    assert finished == 0
    assert generator.calls == []


@pytest.mark.parametrize(
    "raw, expected",
    [("", 5), ("  ", 5), ("3", 3), ("25", 25), ("2", None), ("x", None)],
)
def test_parse_count(raw, expected):
    assert console_ui._parse_count(raw, 5) == expected
