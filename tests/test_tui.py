from __future__ import annotations

import asyncio

from rich.text import Text
from textual.widgets import Input, Static

from fixtures import make_quiz
from quizcraft.generation.client import (
    GENERATION_FAILED_MESSAGE,
    GenerationError,
)
from quizcraft.quiz.models import Phase
from quizcraft.quiz.session import QuizSession
from quizcraft.quiz.timer import ManualTicker
from quizcraft.quiz.view import review_items
from quizcraft.ui import tui


class StubGenerator:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def generate_quiz(self, topic, count):
        self.calls.append((topic, count))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _started(count: int = 3) -> QuizSession:
    session = QuizSession(make_quiz(count))
    session.start()
    return session


def test_progress_label():
    session = _started(4)
    assert tui.progress_label(session) == "Question 1 of 4  25%"
    session.select_current("Q1 B")
    session.go_next()
    assert tui.progress_label(session) == "Question 2 of 4  50%"


def test_feedback_text_states():
    session = _started()
    assert tui.feedback_text(session).plain == ""

    session.select_current("Q1 B")
    assert tui.feedback_text(session).plain.startswith("Correct!")

    session.go_next()
    session.select_current("Q2 C")
    plain = tui.feedback_text(session).plain
    assert plain.startswith("Incorrect!")
    assert "The correct answer is: Q2 B" in plain
    assert "question 2" in plain


def test_review_renderable_lists_every_question():
    session = _started(2)
    session.select_current("Q1 A")
    group = tui.review_renderable(review_items(session))
    blocks = list(group.renderables)

    assert len(blocks) == 2
    assert isinstance(blocks[0], Text)
    assert "Your answer: Q1 A" in blocks[0].plain
    assert "Correct answer: Q1 B" in blocks[0].plain
    assert "Your answer: Not answered" in blocks[1].plain


def test_parse_count():
    assert tui.parse_count("5") == 5
    assert tui.parse_count(" 25 ") == 25
    assert tui.parse_count("2") is None
    assert tui.parse_count("") is None
    assert tui.parse_count("-4") is None


def test_quiz_screen_plays_through_with_keys():
    generator = StubGenerator(make_quiz(3))
    app = tui.QuizcraftApp(generator, ticker_factory=ManualTicker)

    async def scenario():
        async with app.run_test() as pilot:
            app.show_quiz(make_quiz(3))
            await pilot.pause()
            screen = app.screen
            assert isinstance(screen, tui.QuizScreen)
            assert screen.session.phase is Phase.NOT_STARTED

            await pilot.press("n", "s", "2", "n", "1", "n", "2")
            await pilot.pause()
            assert screen.session.current_index == 2
            assert screen.session.answers == {
                0: "Q1 B",
                1: "Q2 A",
                2: "Q3 B",
            }

            await pilot.press("f")
            await pilot.pause()
            assert screen.session.phase is Phase.FINISHED
            assert screen.session.score() == 2
            assert screen.query_one("#score").has_class("band-medium")

            await pilot.press("r")
            await pilot.pause()
            assert isinstance(app.screen, tui.CreatorScreen)

    asyncio.run(scenario())


def test_creator_screen_shows_error_then_keeps_form():
    generator = StubGenerator(GenerationError())
    app = tui.QuizcraftApp(generator, ticker_factory=ManualTicker)

    async def scenario():
        async with app.run_test() as pilot:
            await pilot.pause()
            screen = app.screen
            assert isinstance(screen, tui.CreatorScreen)
            screen.query_one("#topic", Input).value = "Glaciers"
            screen.query_one("#count", Input).value = "4"
            await pilot.click("#generate")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert generator.calls == [("Glaciers", 4)]
            error = screen.query_one("#error", Static)
            assert error.display is True
            assert app.flow.error == GENERATION_FAILED_MESSAGE
            assert app.screen is screen
            assert app.flow.is_loading is False

    asyncio.run(scenario())


def test_creator_screen_opens_quiz_on_success():
    generator = StubGenerator(make_quiz(3, title="Glaciers"))
    app = tui.QuizcraftApp(generator, ticker_factory=ManualTicker)

    async def scenario():
        async with app.run_test() as pilot:
            await pilot.pause()
            screen = app.screen
            screen.query_one("#topic", Input).value = "Glaciers"
            await pilot.click("#generate")
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert isinstance(app.screen, tui.QuizScreen)
            assert app.screen.session.quiz.title == "Glaciers"
            assert generator.calls == [("Glaciers", 5)]

    asyncio.run(scenario())
