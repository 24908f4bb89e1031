from models.quiz_models import Question
from scoring.normalizer import (
    normalize_correct_answer,
    normalize_letter,
    option_letter,
    option_text,
    resolve_selected_option,
)


def test_option_letter():
    assert option_letter(0) == "A"
    assert option_letter(2) == "C"
    assert option_letter(5) == "F"


def test_option_text_accepts_strings_and_dicts():
    assert option_text("Rome") == "Rome"
    assert option_text({"text": "Rome"}) == "Rome"


def test_correct_answer_text_maps_to_letter(rome_question):
    assert normalize_correct_answer(rome_question) == "C"


def test_correct_answer_matches_dict_options(questions):
    assert normalize_correct_answer(questions[1]) == "A"


def test_correct_answer_letter_is_kept():
    question = Question(id="x", text="?", options=["a", "b"], correct_answer=" b ")
    assert normalize_correct_answer(question) == "B"


def test_correct_answer_text_match_is_case_sensitive():
    question = Question(id="x", text="?", options=["Rome", "Paris"], correct_answer="rome")
    assert normalize_correct_answer(question) == "ROME"


def test_missing_correct_answer_is_none():
    assert normalize_correct_answer(Question(id="x", text="?", options=["a"])) is None
    assert normalize_correct_answer(Question(id="x", text="?", options=["a"], correct_answer="")) is None


def test_normalize_letter():
    assert normalize_letter("  c ") == "C"
    assert normalize_letter("   ") is None
    assert normalize_letter(None) is None


def test_resolve_selected_option(rome_question):
    assert resolve_selected_option(rome_question, "Rome") == "C"
    assert resolve_selected_option(rome_question, "  berlin ") == "D"
    assert resolve_selected_option(rome_question, "B") == "B"
    assert resolve_selected_option(rome_question, "Madrid") == "Madrid"
    assert resolve_selected_option(rome_question, None) is None
