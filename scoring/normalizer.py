"""
Answer Normalization
====================

Maps free-form answers (option letters or full option text) onto canonical
option letters. Position in the option list decides the letter: 0 -> "A".
"""

from typing import Any, Optional

from models.quiz_models import Question


def option_letter(index: int) -> str:
    return chr(ord("A") + index)


def option_text(option: Any) -> Optional[str]:
    """Options arrive either as plain strings or as {"text": ...} dicts."""
    if isinstance(option, dict):
        return option.get("text")
    return option


def normalize_letter(value: Any) -> Optional[str]:
    """Trims, then uppercases. Empty or missing values become None."""
    if value is None:
        return None
    text = str(value).strip().upper()
    return text or None


def normalize_correct_answer(question: Question) -> Optional[str]:
    """
    Returns the letter of the correct option.
    An exact (case-sensitive) text match wins; otherwise the raw value is
    assumed to be a letter already.
    """
    correct = question.correct_answer
    if correct is None or correct == "":
        return None

    for index, option in enumerate(question.options):
        if option_text(option) == correct:
            return option_letter(index)

    return normalize_letter(correct)


def resolve_selected_option(question: Question, selected: Any) -> Optional[str]:
    """
    Converts a full-text answer to its option letter.
    Tries an exact match first, then a trimmed case-insensitive one.
    Values that match no option are returned unchanged.
    """
    if selected is None:
        return None
    selected = str(selected)

    for index, option in enumerate(question.options):
        if option_text(option) == selected:
            return option_letter(index)

    wanted = selected.strip().lower()
    for index, option in enumerate(question.options):
        text = option_text(option)
        if text is not None and str(text).strip().lower() == wanted:
            return option_letter(index)

    return selected
