"""Rich console front end for creating and taking quizzes.

The loop reads commands from an injectable ``input_provider`` so it can be
scripted in tests. Input is awaited in a worker thread, which keeps the
session ticker running on the event loop while the user thinks.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.config import MAX_QUESTIONS, MIN_QUESTIONS
from ..quiz.creation import CreationFlow, QuizSource
from ..quiz.models import Phase, Quiz
from ..quiz.session import QuizSession
from ..quiz.timer import AsyncioTicker, Ticker
from ..quiz.view import (
    OptionStyle,
    ScoreBand,
    answer_feedback,
    format_time,
    option_style,
    progress_percentage,
    review_items,
    score_band,
)

InputProvider = Callable[[], str]
TickerFactory = Callable[[], Ticker]
ExitAction = Literal["finished", "quit"]

OPTION_STYLES = {
    OptionStyle.INTERACTIVE: "",
    OptionStyle.CORRECT: "bold green",
    OptionStyle.INCORRECT: "bold red",
    OptionStyle.MUTED: "dim",
}

BAND_STYLES = {
    ScoreBand.HIGH: "bold green",
    ScoreBand.MEDIUM: "bold yellow",
    ScoreBand.LOW: "bold red",
}

_OPTION_LETTERS = "ABCDEFGH"


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["start", "next", "prev", "finish", "quit", "select"]
    choice: Optional[int] = None


@dataclass(frozen=True)
class QuizSessionResult:
    """Outcome of one ``run_quiz_session`` call."""

    exit_action: ExitAction
    score: int
    total_questions: int
    answered_questions: int
    elapsed_seconds: int

    @property
    def band(self) -> ScoreBand:
        return score_band(self.score, self.total_questions)


def parse_session_command(raw: Optional[str]) -> Optional[SessionCommand]:
    """Parse raw user input into a structured command.

    Options are chosen by number (``1``-``4``) or letter (``a``-``d``).
    """

    if raw is None:
        return None
    text = raw.strip().lower()
    if text in {"s", "start"}:
        return SessionCommand("start")
    if text in {"n", "next"}:
        return SessionCommand("next")
    if text in {"p", "prev", "previous"}:
        return SessionCommand("prev")
    if text in {"f", "finish"}:
        return SessionCommand("finish")
    if text in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if text.isdigit() and int(text) >= 1:
        return SessionCommand("select", int(text) - 1)
    if len(text) == 1 and text.upper() in _OPTION_LETTERS:
        return SessionCommand("select", _OPTION_LETTERS.index(text.upper()))
    return None


def _call_provider(input_provider: InputProvider) -> str:
    # StopIteration cannot cross into an asyncio future.
    try:
        return input_provider()
    except StopIteration as exc:
        raise EOFError from exc


async def _read(input_provider: InputProvider) -> Optional[str]:
    try:
        return await asyncio.to_thread(_call_provider, input_provider)
    except (EOFError, KeyboardInterrupt):
        return None


async def run_quiz_session(
    quiz: Quiz,
    console: Console,
    input_provider: InputProvider,
    *,
    ticker: Optional[Ticker] = None,
) -> QuizSessionResult:
    """Take ``quiz`` interactively until it is finished or abandoned."""

    session = QuizSession(quiz, ticker=ticker or AsyncioTicker())
    exit_action: ExitAction = "quit"
    try:
        _render_start(console, session)
        while session.phase is Phase.NOT_STARTED:
            raw = await _read(input_provider)
            if raw is None:
                return _result(session, "quit")
            if raw.strip():
                command = parse_session_command(raw)
            else:
                command = SessionCommand("start")
            if command is not None and command.type == "quit":
                return _result(session, "quit")
            if command is None or command.type != "start":
                console.print("[red]Type 's' or press Enter to start.[/]")
                continue
            session.start()

        while session.phase is Phase.IN_PROGRESS:
            _render_question(console, session)
            raw = await _read(input_provider)
            if raw is None:
                console.print("\n[bold yellow]Session interrupted.[/]")
                break
            command = parse_session_command(raw)
            if command is None:
                console.print("[red]Unrecognized command. Try again.[/]")
                continue
            if command.type == "quit":
                console.print(
                    "\n[bold yellow]Ending quiz without finishing.[/]"
                )
                break
            _apply_command(command, session, console)

        if session.phase is Phase.FINISHED:
            exit_action = "finished"
            _render_summary(console, session)
        return _result(session, exit_action)
    finally:
        session.close()


def _apply_command(
    command: SessionCommand, session: QuizSession, console: Console
) -> None:
    if command.type == "select" and command.choice is not None:
        options = session.current_question.options
        if command.choice >= len(options):
            console.print(
                f"[red]Option {command.choice + 1} does not exist.[/]"
            )
        elif not session.select_current(options[command.choice]):
            console.print("[yellow]This question is already answered.[/]")
        return
    if command.type == "next":
        if not session.can_go_next() or not session.go_next():
            console.print(_next_blocked_message(session))
        return
    if command.type == "prev":
        if not session.go_prev():
            console.print("[yellow]Already at the first question.[/]")
        return
    if command.type == "finish":
        if not session.finish():
            console.print(
                "[yellow]Answer the last question before finishing.[/]"
            )
        return
    if command.type == "start":
        console.print("[dim]The quiz is already running.[/]")


def _next_blocked_message(session: QuizSession) -> str:
    if session.is_last_question:
        return "[yellow]This is the last question; type 'f' to finish.[/]"
    return "[yellow]Answer this question before moving on.[/]"


def _result(
    session: QuizSession, exit_action: ExitAction
) -> QuizSessionResult:
    return QuizSessionResult(
        exit_action=exit_action,
        score=session.score(),
        total_questions=session.total_questions,
        answered_questions=session.answered_count,
        elapsed_seconds=session.elapsed_seconds,
    )


def _render_start(console: Console, session: QuizSession) -> None:
    body = Text.assemble(
        (session.quiz.title, "bold"),
        "\n\n",
        (
            "Ready to test your knowledge? There are "
            f"{session.total_questions} questions.",
            "dim",
        ),
    )
    console.print()
    console.print(
        Panel(
            body,
            title="Quiz",
            subtitle="Enter to start, q to quit",
            border_style="magenta",
        )
    )


def _render_question(console: Console, session: QuizSession) -> None:
    question = session.current_question
    header = Text.assemble(
        (session.quiz.title, "bold magenta"),
        ("  ", ""),
        (format_time(session.elapsed_seconds), "bold"),
    )
    console.print()
    console.rule(header)
    console.print(
        Text(
            f"Question {session.current_index + 1} of "
            f"{session.total_questions}  "
            f"{round(progress_percentage(session))}%",
            style="dim",
        )
    )
    console.print(Text(question.question_text, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Option")
    for idx, option in enumerate(question.options):
        style = OPTION_STYLES[option_style(session, option)]
        table.add_row(str(idx + 1), Text(option, style=style))
    console.print(table)

    feedback = answer_feedback(session)
    if feedback is not None:
        if feedback.is_correct:
            verdict = Text("Correct!", style="bold green")
        else:
            verdict = Text.assemble(
                ("Incorrect!", "bold red"),
                "\nThe correct answer is: ",
                (feedback.correct_answer, "bold"),
            )
        verdict.append("\n\n")
        verdict.append(feedback.explanation)
        console.print(
            Panel(
                verdict,
                border_style="green" if feedback.is_correct else "red",
            )
        )

    hints = ["1-4 to answer", "p (prev)"]
    if session.is_last_question:
        hints.append("f (finish)")
    else:
        hints.append("n (next)")
    hints.append("q (quit)")
    console.print(Text("Commands: " + ", ".join(hints), style="dim"))


def _render_summary(console: Console, session: QuizSession) -> None:
    score = session.score()
    total = session.total_questions
    band = score_band(score, total)

    console.print()
    console.rule(Text("Quiz Completed!", style="bold magenta"))
    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row(
        "Score", Text(f"{score} / {total}", style=BAND_STYLES[band])
    )
    overview.add_row("Time", format_time(session.elapsed_seconds))
    console.print(overview)

    for item in review_items(session):
        body = Text()
        body.append(
            f"Your answer: {item.answer_label}",
            style="green" if item.is_correct else "red",
        )
        if not item.is_correct:
            body.append(
                f"\nCorrect answer: {item.correct_answer}", style="cyan"
            )
        if item.explanation:
            body.append("\n\nExplanation: ", style="bold")
            body.append(item.explanation)
        console.print(
            Panel(
                body,
                title=f"{item.number}. {item.question_text}",
                title_align="left",
                border_style="green" if item.is_correct else "red",
            )
        )


async def run_console_app(
    generator: QuizSource,
    console: Console,
    input_provider: InputProvider,
    *,
    default_count: int = 5,
    ticker_factory: TickerFactory = AsyncioTicker,
) -> int:
    """Alternate between quiz creation and quiz taking until the user quits.

    Returns the number of quizzes that were finished.
    """

    flow = CreationFlow(generator, default_count=default_count)
    finished = 0
    while True:
        quiz = await _create_quiz(flow, console, input_provider)
        if quiz is None:
            return finished
        result = await run_quiz_session(
            quiz, console, input_provider, ticker=ticker_factory()
        )
        if result.exit_action == "finished":
            finished += 1
        # Dropping the quiz here is the reset back to the creation form.
        console.print("\nCreate a new quiz? [y/N]", markup=False)
        answer = await _read(input_provider)
        if answer is None or answer.strip().lower() not in {"y", "yes"}:
            return finished


async def _create_quiz(
    flow: CreationFlow, console: Console, input_provider: InputProvider
) -> Optional[Quiz]:
    console.print()
    console.print(
        Panel(
            "Enter any topic and let AI create a quiz for you!",
            title="Quiz Generator",
            border_style="magenta",
        )
    )
    while True:
        console.print("Quiz topic (q to quit):")
        topic = await _read(input_provider)
        if topic is None or topic.strip().lower() in {"q", "quit"}:
            return None
        console.print(f"Number of questions (3-25) [{flow.count}]:")
        raw_count = await _read(input_provider)
        if raw_count is None:
            return None
        count = _parse_count(raw_count, flow.count)
        if count is None:
            console.print(
                "[red]Enter a whole number between "
                f"{MIN_QUESTIONS} and {MAX_QUESTIONS}.[/]"
            )
            continue
        with console.status("Generating quiz..."):
            quiz = await flow.submit(topic, count)
        if quiz is not None:
            return quiz
        console.print(
            Panel(
                Text(flow.error or "", style="red"),
                title="Oops! Something went wrong.",
                border_style="red",
            )
        )


def _parse_count(raw: str, default: int) -> Optional[int]:
    text = raw.strip()
    if not text:
        return default
    if not text.isdigit():
        return None
    count = int(text)
    if not MIN_QUESTIONS <= count <= MAX_QUESTIONS:
        return None
    return count
