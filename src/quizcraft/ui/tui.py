"""Textual front end: a creation screen and a quiz screen.

``QuizcraftApp`` keeps the creation screen at the bottom of the stack. A
generated quiz is pushed on top as a ``QuizScreen``; popping it is the reset
that discards the session and the quiz.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from rich.console import Group
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Button, Footer, Input, ProgressBar, Static

from ..core.config import MAX_QUESTIONS, MIN_QUESTIONS
from ..quiz.creation import CreationFlow, QuizSource
from ..quiz.models import Phase, Quiz
from ..quiz.session import QuizSession
from ..quiz.timer import AsyncioTicker, Ticker
from ..quiz.view import (
    OptionStyle,
    ReviewItem,
    ScoreBand,
    answer_feedback,
    format_time,
    option_style,
    progress_percentage,
    review_items,
    score_band,
)

TickerFactory = Callable[[], Ticker]

OPTION_CLASSES = {
    OptionStyle.INTERACTIVE: "interactive",
    OptionStyle.CORRECT: "correct",
    OptionStyle.INCORRECT: "incorrect",
    OptionStyle.MUTED: "muted",
}

BAND_CLASSES = {
    ScoreBand.HIGH: "band-high",
    ScoreBand.MEDIUM: "band-medium",
    ScoreBand.LOW: "band-low",
}

MAX_OPTIONS = 4


# Pure helpers (testable without running the App)


def progress_label(session: QuizSession) -> str:
    return (
        f"Question {session.current_index + 1} of {session.total_questions}"
        f"  {round(progress_percentage(session))}%"
    )


def feedback_text(session: QuizSession) -> Text:
    feedback = answer_feedback(session)
    if feedback is None:
        return Text("")
    if feedback.is_correct:
        text = Text("Correct!", style="bold green")
    else:
        text = Text.assemble(
            ("Incorrect!", "bold red"),
            "\nThe correct answer is: ",
            (feedback.correct_answer, "bold"),
        )
    text.append("\n\n")
    text.append(feedback.explanation)
    return text


def review_renderable(items: List[ReviewItem]) -> Group:
    blocks: List[Text] = []
    for item in items:
        block = Text()
        block.append(f"{item.number}. {item.question_text}\n", style="bold")
        block.append(
            f"Your answer: {item.answer_label}\n",
            style="green" if item.is_correct else "red",
        )
        if not item.is_correct:
            block.append(
                f"Correct answer: {item.correct_answer}\n", style="cyan"
            )
        block.append("Explanation: ", style="bold dim")
        block.append(f"{item.explanation}\n", style="dim")
        blocks.append(block)
    return Group(*blocks)


def parse_count(raw: str) -> Optional[int]:
    text = (raw or "").strip()
    if not text.isdigit():
        return None
    count = int(text)
    if not MIN_QUESTIONS <= count <= MAX_QUESTIONS:
        return None
    return count


class CreatorScreen(Screen):
    """Topic and question-count form."""

    def __init__(self, flow: CreationFlow) -> None:
        super().__init__()
        self.flow = flow

    def compose(self) -> ComposeResult:
        with Vertical(id="creator"):
            yield Static("Quizcraft", id="creator-title")
            yield Static(
                "Enter any topic and let AI create a quiz for you!",
                id="creator-subtitle",
            )
            yield Input(
                value=self.flow.topic,
                placeholder="e.g., Roman History, Python decorators",
                id="topic",
            )
            yield Input(
                value=str(self.flow.count),
                placeholder=f"Number of questions ({MIN_QUESTIONS}-"
                f"{MAX_QUESTIONS})",
                type="integer",
                id="count",
            )
            yield Button("Generate Quiz", id="generate", variant="primary")
            yield Static("", id="error")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#topic", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "generate":
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def _submit(self) -> None:
        if self.flow.is_loading:
            return
        topic = self.query_one("#topic", Input).value
        count = parse_count(self.query_one("#count", Input).value)
        if count is None:
            self._show_error(
                f"Number of questions must be between {MIN_QUESTIONS} and "
                f"{MAX_QUESTIONS}."
            )
            return
        self._set_loading(True)
        self.run_worker(self._generate(topic, count), exclusive=True)

    async def _generate(self, topic: str, count: int) -> None:
        try:
            quiz = await self.flow.submit(topic, count)
        finally:
            self._set_loading(False)
        if quiz is None:
            self._show_error(self.flow.error or "")
            return
        self._show_error("")
        self.app.show_quiz(quiz)  # type: ignore[attr-defined]

    def _set_loading(self, loading: bool) -> None:
        button = self.query_one("#generate", Button)
        button.label = "Generating Quiz..." if loading else "Generate Quiz"
        button.disabled = loading
        self.query_one("#topic", Input).disabled = loading
        self.query_one("#count", Input).disabled = loading

    def _show_error(self, message: str) -> None:
        error = self.query_one("#error", Static)
        if message:
            error.update(
                Text.assemble(
                    ("Oops! Something went wrong.\n", "bold"), message
                )
            )
        else:
            error.update("")
        error.display = bool(message)


class QuizScreen(Screen):
    """Start, play and results views for a single quiz session."""

    BINDINGS = [
        ("s", "start", "Start"),
        ("1", "select(0)", "Option 1"),
        ("2", "select(1)", "Option 2"),
        ("3", "select(2)", "Option 3"),
        ("4", "select(3)", "Option 4"),
        ("p", "prev", "Prev"),
        ("n", "next", "Next"),
        ("f", "finish", "Finish"),
        ("r", "new_quiz", "New quiz"),
    ]

    def __init__(self, quiz: Quiz, *, ticker: Optional[Ticker] = None):
        super().__init__()
        self.session = QuizSession(
            quiz, ticker=ticker, on_tick=self._on_tick
        )

    def compose(self) -> ComposeResult:
        quiz = self.session.quiz
        with Vertical(id="start-view"):
            yield Static(Text(quiz.title), classes="quiz-title")
            yield Static(
                "Ready to test your knowledge? There are "
                f"{len(quiz.questions)} questions."
            )
            yield Button("Start Quiz", id="start", variant="primary")
        with Vertical(id="play-view"):
            with Horizontal(id="play-header"):
                yield Static(Text(quiz.title), classes="quiz-title")
                yield Static(format_time(0), id="clock")
            yield Static("", id="progress-label")
            yield ProgressBar(total=100, show_eta=False, id="progress")
            yield Static("", id="question")
            with Vertical(id="options"):
                for idx in range(MAX_OPTIONS):
                    yield Button("", id=f"option-{idx}", classes="option")
            yield Static("", id="feedback")
            with Horizontal(id="nav"):
                yield Button("Previous", id="prev")
                yield Button("Next", id="next", variant="primary")
                yield Button("Finish Quiz", id="finish", variant="success")
        with VerticalScroll(id="results-view"):
            yield Static("Quiz Completed!", classes="quiz-title")
            yield Static("", id="score")
            yield Static("", id="time")
            yield Static("", id="review")
            yield Button("Create a New Quiz", id="new-quiz", variant="primary")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    def on_unmount(self) -> None:
        self.session.close()

    # Actions

    def action_start(self) -> None:
        if self.session.start():
            self.refresh_view()

    def action_select(self, index: int) -> None:
        options = self.session.current_question.options
        if 0 <= index < len(options) and self.session.select_current(
            options[index]
        ):
            self.refresh_view()

    def action_next(self) -> None:
        if self.session.can_go_next() and self.session.go_next():
            self.refresh_view()

    def action_prev(self) -> None:
        if self.session.phase is Phase.IN_PROGRESS and self.session.go_prev():
            self.refresh_view()

    def action_finish(self) -> None:
        if self.session.finish():
            self.refresh_view()

    def action_new_quiz(self) -> None:
        if self.session.phase is Phase.FINISHED:
            self.session.close()
            self.app.pop_screen()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid.startswith("option-"):
            self.action_select(int(bid.split("-", 1)[1]))
        elif bid == "start":
            self.action_start()
        elif bid == "prev":
            self.action_prev()
        elif bid == "next":
            self.action_next()
        elif bid == "finish":
            self.action_finish()
        elif bid == "new-quiz":
            self.action_new_quiz()

    # Rendering

    def _on_tick(self, elapsed: int) -> None:
        try:
            clock = self.query_one("#clock", Static)
        except NoMatches:
            return
        clock.update(format_time(elapsed))

    def refresh_view(self) -> None:
        phase = self.session.phase
        self.query_one("#start-view").display = phase is Phase.NOT_STARTED
        self.query_one("#play-view").display = phase is Phase.IN_PROGRESS
        self.query_one("#results-view").display = phase is Phase.FINISHED
        if phase is Phase.IN_PROGRESS:
            self._render_question()
        elif phase is Phase.FINISHED:
            self._render_results()

    def _render_question(self) -> None:
        session = self.session
        question = session.current_question
        self.query_one("#clock", Static).update(
            format_time(session.elapsed_seconds)
        )
        self.query_one("#progress-label", Static).update(
            progress_label(session)
        )
        self.query_one("#progress", ProgressBar).update(
            progress=progress_percentage(session)
        )
        self.query_one("#question", Static).update(
            Text(question.question_text)
        )
        answered = session.is_answered()
        for idx in range(MAX_OPTIONS):
            button = self.query_one(f"#option-{idx}", Button)
            if idx >= len(question.options):
                button.display = False
                continue
            option = question.options[idx]
            button.display = True
            button.label = Text(f"{idx + 1}. {option}")
            button.disabled = answered
            for css_class in OPTION_CLASSES.values():
                button.remove_class(css_class)
            button.add_class(OPTION_CLASSES[option_style(session, option)])
        feedback = self.query_one("#feedback", Static)
        feedback.update(feedback_text(session))
        feedback.display = answered

        self.query_one("#prev", Button).disabled = session.current_index == 0
        next_button = self.query_one("#next", Button)
        finish_button = self.query_one("#finish", Button)
        next_button.display = not session.is_last_question
        finish_button.display = session.is_last_question
        next_button.disabled = not session.can_go_next()
        finish_button.disabled = not session.can_finish()

    def _render_results(self) -> None:
        session = self.session
        score = session.score()
        band = score_band(score, session.total_questions)
        score_widget = self.query_one("#score", Static)
        score_widget.update(f"Score: {score} / {session.total_questions}")
        for css_class in BAND_CLASSES.values():
            score_widget.remove_class(css_class)
        score_widget.add_class(BAND_CLASSES[band])
        self.query_one("#time", Static).update(
            f"Time: {format_time(session.elapsed_seconds)}"
        )
        self.query_one("#review", Static).update(
            review_renderable(review_items(session))
        )


class QuizcraftApp(App):
    TITLE = "Quizcraft"
    CSS = """
#creator, #start-view, #play-view, #results-view { padding: 1 2; }
#creator-title, .quiz-title { text-style: bold; color: $accent; }
#error { color: $error; display: none; margin-top: 1; }
#play-header { height: auto; }
#clock { width: auto; margin-left: 2; text-style: bold; }
#question { margin: 1 0; text-style: bold; }
#options Button { width: 100%; margin-bottom: 1; }
Button.option.correct { background: $success 30%; border: tall $success; }
Button.option.incorrect { background: $error 30%; border: tall $error; }
Button.option.muted { opacity: 60%; }
#feedback { border: round $panel; padding: 1; }
#nav { height: auto; margin-top: 1; }
.band-high { color: $success; text-style: bold; }
.band-medium { color: $warning; text-style: bold; }
.band-low { color: $error; text-style: bold; }
"""
    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(
        self,
        generator: QuizSource,
        *,
        default_count: int = 5,
        ticker_factory: TickerFactory = AsyncioTicker,
    ) -> None:
        super().__init__()
        self.flow = CreationFlow(generator, default_count=default_count)
        self._ticker_factory = ticker_factory

    def on_mount(self) -> None:
        self.push_screen(CreatorScreen(self.flow))

    def show_quiz(self, quiz: Quiz) -> None:
        self.push_screen(QuizScreen(quiz, ticker=self._ticker_factory()))
