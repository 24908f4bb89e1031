import httpx
import pytest

from api.live_quiz_client import LiveQuizClient
from scoring.adapter import parse_question, parse_questions

BASE_URL = "https://api.test"

# Four questions; correct answers given as full text, as the backend sends them
QUIZ_PAYLOAD = {
    "id": "quiz-1",
    "title": "JEE Main • Geography",
    "subject": "General Knowledge",
    "duration": "30 min",
    "questions": [
        {"id": "q1", "question_text": "Capital of Italy?",
         "options": ["Paris", "London", "Rome", "Berlin"], "correct_answer": "Rome"},
        {"_id": "q2", "questionText": "Capital of France?",
         "options": [{"text": "Paris"}, {"text": "Madrid"}, {"text": "Lisbon"}, {"text": "Oslo"}],
         "correctAnswer": "Paris", "concept": "Europe"},
        {"id": "q3", "text": "Capital of Japan?",
         "options": ["Seoul", "Tokyo", "Beijing", "Bangkok"], "correct_answer": "B"},
        {"questionId": "q4", "question_text": "Capital of Canada?",
         "options": ["Toronto", "Vancouver", "Montreal", "Ottawa"], "correct_answer": "Ottawa",
         "explanation": "Ottawa has been the capital since 1857."},
    ],
}


@pytest.fixture
def quiz_payload():
    return QUIZ_PAYLOAD


@pytest.fixture
def questions():
    return parse_questions(QUIZ_PAYLOAD)


@pytest.fixture
def rome_question():
    return parse_question(QUIZ_PAYLOAD["questions"][0])


@pytest.fixture
def make_client():
    """Builds a LiveQuizClient whose requests are answered by `handler`."""
    def factory(handler):
        return LiveQuizClient(base_url=BASE_URL, timeout=5, transport=httpx.MockTransport(handler))
    return factory
