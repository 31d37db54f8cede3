from __future__ import annotations

import asyncio
import threading

import pytest

from fixtures import make_quiz
from quizcraft.generation.client import (
    EMPTY_TOPIC_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    GenerationError,
    InputValidationError,
)
from quizcraft.quiz.creation import UNKNOWN_ERROR_MESSAGE, CreationFlow


class StubGenerator:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def generate_quiz(self, topic, count):
        self.calls.append((topic, count))
        if self.error is not None:
            raise self.error
        return self.result


def test_submit_returns_quiz_and_clears_state():
    quiz = make_quiz(5)
    generator = StubGenerator(result=quiz)
    flow = CreationFlow(generator)

    result = asyncio.run(flow.submit("Rivers", 5))

    assert result is quiz
    assert generator.calls == [("Rivers", 5)]
    assert flow.is_loading is False
    assert flow.error is None


def test_default_count_is_used():
    generator = StubGenerator(result=make_quiz(3))
    flow = CreationFlow(generator, default_count=8)

    asyncio.run(flow.submit("Rivers"))

    assert generator.calls == [("Rivers", 8)]


def test_default_count_must_be_in_range():
    with pytest.raises(ValueError):
        CreationFlow(StubGenerator(), default_count=30)


def test_blank_topic_sets_error_without_request():
    generator = StubGenerator(result=make_quiz(3))
    flow = CreationFlow(generator)

    assert asyncio.run(flow.submit("   ", 5)) is None
    assert flow.error == EMPTY_TOPIC_MESSAGE
    assert generator.calls == []
    assert flow.is_loading is False


def test_generation_error_message_is_surfaced():
    flow = CreationFlow(StubGenerator(error=GenerationError(reason="bad")))

    assert asyncio.run(flow.submit("Rivers", 5)) is None
    assert flow.error == GENERATION_FAILED_MESSAGE
    assert flow.is_loading is False


def test_validation_error_message_is_surfaced():
    error = InputValidationError("Number of questions must be between 3")
    flow = CreationFlow(StubGenerator(error=error))

    asyncio.run(flow.submit("Rivers", 5))

    assert flow.error == str(error)


def test_unexpected_error_becomes_unknown_message():
    flow = CreationFlow(StubGenerator(error=KeyError("boom")))

    assert asyncio.run(flow.submit("Rivers", 5)) is None
    assert flow.error == UNKNOWN_ERROR_MESSAGE
    assert flow.is_loading is False


def test_error_cleared_on_next_attempt():
    generator = StubGenerator(error=GenerationError())
    flow = CreationFlow(generator)
    asyncio.run(flow.submit("Rivers", 5))
    assert flow.error

    generator.error = None
    generator.result = make_quiz(3)
    assert asyncio.run(flow.submit()) is not None
    assert flow.error is None
    assert generator.calls == [("Rivers", 5), ("Rivers", 5)]


def test_submissions_while_loading_are_ignored():
    release = threading.Event()
    entered = threading.Event()

    class BlockingGenerator(StubGenerator):
        def generate_quiz(self, topic, count):
            entered.set()
            release.wait(timeout=5)
            return super().generate_quiz(topic, count)

    generator = BlockingGenerator(result=make_quiz(3))
    flow = CreationFlow(generator)

    async def scenario():
        first = asyncio.create_task(flow.submit("Rivers", 5))
        await asyncio.to_thread(entered.wait, 5)
        assert flow.is_loading is True
        second = await flow.submit("Mountains", 4)
        release.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert first is not None
    assert second is None
    assert generator.calls == [("Rivers", 5)]
    assert flow.is_loading is False
