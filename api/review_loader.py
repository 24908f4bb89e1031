"""
Attempt Review Loader
=====================

Gathers everything the attempted-results screen needs: the attempt itself, the
quiz questions and the scored summary. Requests are awaited one after the other.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from api.fallback import Strategy, run_strategies
from api.live_quiz_client import LiveQuizClient
from models.quiz_models import AttemptRecord, AttemptSummary, Quiz
from scoring.adapter import questions_from_breakdown
from scoring.summary import build_attempt_summary

logger = logging.getLogger(__name__)

ATTEMPT_LOOKUP_LIMIT = 100


class ReviewLoadError(Exception):
    """Carries a message meant to be shown to the user as is."""


@dataclass
class AttemptReview:
    quiz: Quiz
    attempt: AttemptRecord
    summary: AttemptSummary
    questions_source: str


async def find_attempt(client: LiveQuizClient, user_id, attempt_id):
    async def from_user_results():
        attempts = await client.fetch_user_attempts(user_id, limit=ATTEMPT_LOOKUP_LIMIT)
        return next((a for a in attempts if a.id == attempt_id), None)

    async def from_attempted_quizzes():
        attempts = await client.fetch_attempted_quizzes(user_id, limit=ATTEMPT_LOOKUP_LIMIT)
        return next((a for a in attempts if a.id == attempt_id), None)

    result = await run_strategies([
        Strategy("user_results", from_user_results),
        Strategy("attempted_quizzes", from_attempted_quizzes),
    ])
    return result.value


async def load_attempt_review(client: LiveQuizClient, user_id, attempt_id,
                              attempt: Optional[AttemptRecord] = None) -> AttemptReview:
    """Pass `attempt` when the caller already holds the record, to skip looking it up again."""
    if not attempt_id:
        raise ReviewLoadError("Attempt ID is required")
    if not user_id:
        raise ReviewLoadError("Please log in to view your results")

    if attempt is None or attempt.id != attempt_id:
        attempt = await find_attempt(client, user_id, attempt_id)
    if attempt is None:
        raise ReviewLoadError("Attempt not found. Please try again.")

    fetched = {}

    async def from_breakdown():
        return questions_from_breakdown(attempt.raw)

    async def from_quiz():
        if not attempt.quiz_id:
            raise ValueError("Quiz ID not found in attempt data")
        fetched["quiz"] = await client.fetch_quiz_by_id(attempt.quiz_id)
        return fetched["quiz"].questions

    questions = await run_strategies([
        Strategy("question_breakdown", from_breakdown),
        Strategy("quiz_by_id", from_quiz),
    ])
    if not questions.succeeded:
        logger.warning("No questions for attempt %s: %s", attempt_id, questions.failures)
        if not attempt.quiz_id:
            raise ReviewLoadError("Quiz ID not found in attempt data")
        raise ReviewLoadError("Quiz questions not available. The quiz may have expired.")

    source = fetched.get("quiz") or Quiz(id=attempt.quiz_id)
    quiz = Quiz(
        id=attempt.quiz_id,
        title=attempt.title or source.title,
        subject=attempt.subject or source.subject,
        language=attempt.language or source.language,
        duration=source.duration or attempt.duration,
        duration_minutes=source.duration_minutes,
        total_questions=source.total_questions,
        questions=questions.value,
        quiz_metadata=source.quiz_metadata,
    )

    summary = build_attempt_summary(quiz.questions, attempt.raw_answers, attempt.stats)
    return AttemptReview(quiz=quiz, attempt=attempt, summary=summary,
                         questions_source=questions.name)
