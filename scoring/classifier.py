"""
Result Classification
=====================

Assigns one of correct / incorrect / unattempted to a single question.
"""

from dataclasses import dataclass
from typing import Any, Optional

from models.quiz_models import (
    STATUS_CORRECT,
    STATUS_INCORRECT,
    STATUS_UNATTEMPTED,
    Question,
)
from scoring.normalizer import normalize_correct_answer, normalize_letter


@dataclass(frozen=True)
class Classification:
    status: str
    correct_answer_letter: Optional[str]


def classify(question: Question, user_answer: Any) -> Classification:
    """
    Compares letters only. A full-text user answer has to be resolved to a
    letter beforehand (see resolve_selected_option).
    """
    correct_letter = normalize_correct_answer(question)
    user_letter = normalize_letter(user_answer)

    if user_letter is None:
        return Classification(STATUS_UNATTEMPTED, correct_letter)
    if correct_letter is not None and user_letter == correct_letter:
        return Classification(STATUS_CORRECT, correct_letter)
    return Classification(STATUS_INCORRECT, correct_letter)
