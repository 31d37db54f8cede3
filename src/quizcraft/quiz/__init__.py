from .models import Phase, Question, Quiz
from .session import QuizSession, compute_score
from .timer import AsyncioTicker, ManualTicker, Ticker
from .view import (
    AnswerFeedback,
    OptionStyle,
    ReviewItem,
    ScoreBand,
    answer_feedback,
    band_for_ratio,
    format_time,
    option_style,
    progress_percentage,
    review_items,
    score_band,
)

__all__ = [
    "Phase",
    "Question",
    "Quiz",
    "QuizSession",
    "compute_score",
    "AsyncioTicker",
    "ManualTicker",
    "Ticker",
    "AnswerFeedback",
    "OptionStyle",
    "ReviewItem",
    "ScoreBand",
    "answer_feedback",
    "band_for_ratio",
    "format_time",
    "option_style",
    "progress_percentage",
    "review_items",
    "score_band",
]
