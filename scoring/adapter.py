"""
Backend Payload Adapter
=======================

The backend names the same field differently depending on the endpoint and on
its version. Every field-name guess lives here, in the priority tables below,
so the rest of the client only ever sees the dataclasses from models.quiz_models.

A field is "present" when the key exists and its value is not None. Zero and
False are real values and are never skipped.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from models.quiz_models import (
    AnswerEntry,
    AttemptRecord,
    Question,
    Quiz,
    ServerStats,
    UserProfile,
)

logger = logging.getLogger(__name__)

# ---------- FIELD PRIORITY TABLES ----------

QUESTION_ID_FIELDS = ("id", "_id", "questionId", "question_id")
QUESTION_TEXT_FIELDS = ("question_text", "questionText", "text")
CORRECT_ANSWER_FIELDS = ("correct_answer", "correctAnswer")
CONCEPT_FIELDS = ("concept", "cbse_chapter", "topic")

SELECTED_OPTION_FIELDS = ("selectedOption", "selected_option", "userAnswer", "user_answer", "answer")
ANSWER_QUESTION_ID_FIELDS = ("questionId", "question_id", "qid")
ANSWER_TIME_FIELDS = ("timeSpentSeconds", "timeSpent")
ANSWER_MARKS_FIELDS = ("marks", "points")

ATTEMPT_ANSWERS_FIELDS = ("answers", "userAnswers", "questionBreakdown")
CORRECT_COUNT_FIELDS = ("correct", "correctCount")
INCORRECT_COUNT_FIELDS = ("incorrect", "incorrectCount")
UNATTEMPTED_COUNT_FIELDS = ("skipped", "unattempted", "unattemptedCount")
TOTAL_QUESTIONS_FIELDS = ("totalQuestions", "total_questions")
TIME_SPENT_FIELDS = ("effectiveTimeSeconds", "timeSpentSeconds", "totalTimeSeconds")
ATTEMPTED_AT_FIELDS = ("attemptedAt", "completedAt", "createdAt")

QUIZ_ID_FIELDS = ("id", "_id", "quizId")


def first_present(raw: Any, keys: Iterable[str], default=None):
    """Value of the first key in `keys` that exists in `raw` with a non-None value."""
    if not isinstance(raw, dict):
        return default
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def _first_non_empty(raw: Dict[str, Any], keys: Iterable[str]):
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return None


def parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp: %r", value)
        return None


# ---------- QUESTIONS ----------

def parse_question(raw: Any) -> Optional[Question]:
    if not isinstance(raw, dict):
        return None

    ids = [raw[key] for key in QUESTION_ID_FIELDS if raw.get(key) is not None]
    options = raw.get("options")
    correct = first_present(raw, CORRECT_ANSWER_FIELDS)

    return Question(
        id=ids[0] if ids else None,
        text=first_present(raw, QUESTION_TEXT_FIELDS, ""),
        options=list(options) if isinstance(options, list) else [],
        correct_answer=str(correct) if correct is not None else None,
        explanation=raw.get("explanation") or "",
        concept=first_present(raw, CONCEPT_FIELDS, "General"),
        alt_ids=tuple(ids[1:]),
    )


def parse_questions(payload: Any) -> List[Question]:
    """Accepts a bare list of questions or a {"questions": [...]} envelope."""
    if isinstance(payload, dict):
        payload = payload.get("questions")
    if not isinstance(payload, list):
        return []

    questions = []
    for position, raw in enumerate(payload):
        question = parse_question(raw)
        if question is None:
            logger.warning("Skipping malformed question at position %d", position)
            continue
        questions.append(question)
    return questions


def questions_from_breakdown(raw_attempt: Any) -> List[Question]:
    """
    Some attempts embed the full question data in their questionBreakdown.
    Returns [] unless the breakdown carries question text and options.
    """
    breakdown = raw_attempt.get("questionBreakdown") if isinstance(raw_attempt, dict) else None
    if not isinstance(breakdown, list) or not breakdown:
        return []
    head = breakdown[0]
    if not isinstance(head, dict) or not head.get("questionText") or not head.get("options"):
        return []
    return parse_questions(breakdown)


# ---------- ANSWERS ----------

def _parse_answer(raw: Any, position: Optional[int], question_id=None) -> AnswerEntry:
    if not isinstance(raw, dict):
        return AnswerEntry(
            selected_option=None if raw is None else str(raw),
            position=position,
            question_id=question_id,
        )

    selected = first_present(raw, SELECTED_OPTION_FIELDS)
    return AnswerEntry(
        selected_option=None if selected is None else str(selected),
        position=position,
        question_id=first_present(raw, ANSWER_QUESTION_ID_FIELDS, question_id),
        is_correct=raw.get("isCorrect"),
        time_spent_seconds=first_present(raw, ANSWER_TIME_FIELDS),
        marks=first_present(raw, ANSWER_MARKS_FIELDS),
    )


def parse_answers(raw: Any) -> List[AnswerEntry]:
    """
    Normalizes the answer shapes the backend and the quiz screen produce:
      - a list of answer objects (or bare letters), positioned by list index
      - a mapping keyed by question index, or by question id for non-numeric keys
      - None / anything else: no answers
    """
    if isinstance(raw, list):
        return [_parse_answer(entry, position) for position, entry in enumerate(raw)]

    if isinstance(raw, dict):
        answers = []
        for key, value in raw.items():
            try:
                answers.append(_parse_answer(value, int(key)))
            except (TypeError, ValueError):
                answers.append(_parse_answer(value, None, question_id=key))
        return answers

    return []


# ---------- STATS & RECORDS ----------

def parse_server_stats(raw: Any) -> ServerStats:
    if not isinstance(raw, dict):
        return ServerStats()
    return ServerStats(
        correct=first_present(raw, CORRECT_COUNT_FIELDS),
        incorrect=first_present(raw, INCORRECT_COUNT_FIELDS),
        unattempted=first_present(raw, UNATTEMPTED_COUNT_FIELDS),
        score=raw.get("score"),
        accuracy=raw.get("accuracy"),
        total_questions=first_present(raw, TOTAL_QUESTIONS_FIELDS),
    )


def parse_quiz(raw: Any) -> Quiz:
    if not isinstance(raw, dict):
        return Quiz(id=None)

    metadata = raw.get("quiz_metadata") or {}
    return Quiz(
        id=first_present(raw, QUIZ_ID_FIELDS),
        title=raw.get("title") or "Quiz",
        subject=raw.get("subject") or "General",
        language=raw.get("language") or metadata.get("language") or "English",
        duration=raw.get("duration"),
        duration_minutes=raw.get("durationMinutes"),
        total_questions=first_present(raw, TOTAL_QUESTIONS_FIELDS),
        questions=parse_questions(raw.get("questions")),
        quiz_metadata=metadata,
    )


def parse_attempt(raw: Dict[str, Any]) -> AttemptRecord:
    return AttemptRecord(
        id=raw.get("id"),
        quiz_id=raw.get("quizId"),
        title=raw.get("quizTitle") or raw.get("quizLabel"),
        subject=raw.get("quizSubject"),
        language=raw.get("language"),
        duration=raw.get("duration"),
        raw_answers=_first_non_empty(raw, ATTEMPT_ANSWERS_FIELDS),
        stats=parse_server_stats(raw),
        attempted_at=parse_datetime(first_present(raw, ATTEMPTED_AT_FIELDS)),
        time_spent_seconds=first_present(raw, TIME_SPENT_FIELDS, 0),
        raw=raw,
    )


# ---------- PROFILE ----------

REFERRAL_URL = "https://theskillguru.org/signup?ref={id}"
PROFILE_STAT_DEFAULTS = {
    "reputationScore": 0,
    "totalCallTime": "0.0h",
    "questionsAsked": 0,
    "solutionsProvided": 0,
    "liveImpactScore": 0,
    "learningTime": "0h 0m",
}


def parse_profile(raw: Any) -> UserProfile:
    if not isinstance(raw, dict):
        return UserProfile(id=None)
    user_id = raw.get("id")
    return UserProfile(
        id=user_id,
        name=raw.get("fullName") or "No_Name_Provided",
        email=first_present(raw, ("userEmail",), "Email Not Provided"),
        phone_number=raw.get("userPhone") or raw.get("phoneNumber"),
        online=bool(raw.get("Is online")),
        avatar=raw.get("profileImageUrl") or None,
        city=raw.get("city"),
        state=raw.get("state"),
        referral_link=raw.get("referralLink") or REFERRAL_URL.format(id=user_id),
        stats={key: first_present(raw, (key,), default)
               for key, default in PROFILE_STAT_DEFAULTS.items()},
    )
