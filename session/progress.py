"""
Quiz Progress State
===================

The quiz-taking flow as an immutable record. Every user action is a pure
reducer that takes the current QuizProgress and returns a new one, so the
flow can be driven (and tested) without any UI.
"""

import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional

from models.quiz_models import Quiz
from scoring.normalizer import normalize_letter

DEFAULT_DURATION_SECONDS = 30 * 60
# Live quizzes reserve part of each question's slot; only the rest is answer time
TIME_PER_QUESTION_RESERVE = 15


@dataclass(frozen=True)
class QuizProgress:
    question_index: int = 0
    selected_answers: Mapping[int, str] = field(default_factory=dict)
    remaining_time_seconds: int = 0
    question_count: int = 0
    submitted: bool = False

    def __post_init__(self):
        object.__setattr__(self, "selected_answers",
                           MappingProxyType(dict(self.selected_answers)))


def start_quiz(question_count: int, duration_seconds: int) -> QuizProgress:
    return QuizProgress(
        question_index=0,
        selected_answers={},
        remaining_time_seconds=max(0, int(duration_seconds)),
        question_count=max(0, question_count),
    )


def select_answer(progress: QuizProgress, letter: str) -> QuizProgress:
    letter = normalize_letter(letter)
    if progress.submitted or progress.question_count == 0 or letter is None:
        return progress
    answers = dict(progress.selected_answers)
    answers[progress.question_index] = letter
    return replace(progress, selected_answers=answers)


def go_next(progress: QuizProgress) -> QuizProgress:
    if progress.submitted or progress.question_index >= progress.question_count - 1:
        return progress
    return replace(progress, question_index=progress.question_index + 1)


def go_previous(progress: QuizProgress) -> QuizProgress:
    if progress.submitted or progress.question_index <= 0:
        return progress
    return replace(progress, question_index=progress.question_index - 1)


def submit_quiz(progress: QuizProgress) -> QuizProgress:
    if progress.submitted:
        return progress
    return replace(progress, submitted=True)


def advance(progress: QuizProgress) -> QuizProgress:
    """Moves to the next question, or submits when on the last one."""
    if progress.question_index >= progress.question_count - 1:
        return submit_quiz(progress)
    return go_next(progress)


def tick(progress: QuizProgress, seconds: int = 1) -> QuizProgress:
    """Consumes time. Reaching zero submits the quiz."""
    if progress.submitted or progress.remaining_time_seconds <= 0:
        return progress
    remaining = max(0, progress.remaining_time_seconds - seconds)
    return replace(
        progress,
        remaining_time_seconds=remaining,
        submitted=remaining == 0 and progress.question_count > 0,
    )


def current_answer(progress: QuizProgress) -> Optional[str]:
    return progress.selected_answers.get(progress.question_index)


def answered_count(progress: QuizProgress) -> int:
    return len(progress.selected_answers)


def remaining_count(progress: QuizProgress) -> int:
    return progress.question_count - answered_count(progress)


def progress_fraction(progress: QuizProgress) -> float:
    if progress.question_count == 0:
        return 0.0
    return (progress.question_index + 1) / progress.question_count


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02}:{secs:02}"


def _minutes_from_text(text) -> Optional[int]:
    match = re.search(r"\d+", str(text))
    return int(match.group(0)) * 60 if match else None


def quiz_duration_seconds(quiz: Quiz, fallback_duration: Optional[str] = None) -> int:
    """
    Time limit for a quiz, in order of preference:
    1. the "30 min" style duration text
    2. durationMinutes
    3. question count x (time_per_question - reserve) from quiz_metadata
    4. the duration text of the listing the quiz was opened from
    Falls back to 30 minutes.
    """
    seconds = None
    metadata = quiz.quiz_metadata or {}

    if quiz.duration:
        seconds = _minutes_from_text(quiz.duration)
    elif quiz.duration_minutes:
        seconds = int(quiz.duration_minutes * 60)
    elif metadata.get("time_per_question"):
        count = (quiz.total_questions
                 or metadata.get("total_questions")
                 or len(quiz.questions))
        if count > 0:
            seconds = count * (metadata["time_per_question"] - TIME_PER_QUESTION_RESERVE)
    elif fallback_duration:
        seconds = _minutes_from_text(fallback_duration)

    return int(seconds) if seconds and seconds > 0 else DEFAULT_DURATION_SECONDS
