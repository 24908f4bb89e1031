from models.quiz_models import Question
from scoring.classifier import classify


def test_letter_matching_correct_option(rome_question):
    result = classify(rome_question, "C")
    assert result.status == "correct"
    assert result.correct_answer_letter == "C"


def test_lowercase_answer_with_whitespace(rome_question):
    assert classify(rome_question, " c ").status == "correct"


def test_wrong_letter(rome_question):
    result = classify(rome_question, "B")
    assert result.status == "incorrect"
    assert result.correct_answer_letter == "C"


def test_missing_or_blank_answer(rome_question):
    assert classify(rome_question, None).status == "unattempted"
    assert classify(rome_question, "  ").status == "unattempted"


def test_full_text_answer_is_not_resolved(rome_question):
    assert classify(rome_question, "Rome").status == "incorrect"


def test_question_without_correct_answer_is_never_correct():
    question = Question(id="x", text="?", options=["a", "b"])
    result = classify(question, "A")
    assert result.status == "incorrect"
    assert result.correct_answer_letter is None
