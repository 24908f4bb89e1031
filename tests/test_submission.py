from datetime import datetime, timezone

from session.progress import go_next, select_answer, start_quiz
from session.submission import build_completion_payload, score_progress


def test_completion_payload(questions):
    progress = select_answer(start_quiz(len(questions), 600), "C")
    progress = select_answer(go_next(progress), "D")
    summary = score_progress(questions, progress)

    payload = build_completion_payload(
        summary, "user-1", time_spent_seconds=125.7,
        completed_at=datetime(2025, 11, 22, 11, 0, tzinfo=timezone.utc),
    )

    assert payload["answers"][0] == {"questionId": "q1", "selectedOption": "C", "isCorrect": True}
    assert payload["answers"][1] == {"questionId": "q2", "selectedOption": "D", "isCorrect": False}
    assert payload["answers"][2]["selectedOption"] is None
    assert payload["summary"] == {
        "userId": "user-1",
        "score": 1,
        "totalQuestions": 4,
        "correctCount": 1,
        "incorrectCount": 1,
        "unattemptedCount": 2,
        "timeSpentSeconds": 125,
        "completedAt": "2025-11-22T11:00:00+00:00",
    }


def test_question_without_id_gets_positional_id():
    from scoring.adapter import parse_questions

    questions = parse_questions([{"text": "?", "options": ["a", "b"], "correct_answer": "a"}])
    summary = score_progress(questions, start_quiz(1, 60))
    payload = build_completion_payload(summary, None)
    assert payload["answers"][0]["questionId"] == "q_0"
