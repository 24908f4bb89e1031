"""
Session Submission
==================

Scores a finished quiz run and builds the body sent to the backend when the
session is completed.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from models.quiz_models import STATUS_CORRECT, AttemptSummary, Question
from scoring.summary import build_attempt_summary
from session.progress import QuizProgress


def score_progress(questions: Sequence[Question], progress: QuizProgress) -> AttemptSummary:
    return build_attempt_summary(questions, dict(progress.selected_answers))


def build_completion_payload(summary: AttemptSummary,
                             user_id: Optional[str],
                             time_spent_seconds: int = 0,
                             completed_at: Optional[datetime] = None) -> Dict[str, Any]:
    completed_at = completed_at or datetime.now(timezone.utc)

    answers = [{
        "questionId": result.question.id or f"q_{result.index - 1}",
        "selectedOption": result.user_answer,
        "isCorrect": result.status == STATUS_CORRECT,
    } for result in summary.results]

    return {
        "answers": answers,
        "summary": {
            "userId": user_id,
            "score": summary.correct,
            "totalQuestions": summary.total_questions,
            "correctCount": summary.correct,
            "incorrectCount": summary.incorrect,
            "unattemptedCount": summary.unattempted,
            "timeSpentSeconds": int(time_spent_seconds),
            "completedAt": completed_at.isoformat(),
        },
    }
