import asyncio
import json

import httpx
import pytest

from api.http import ApiError, build_query
from api.profile_client import ProfileClient

BASE_URL = "https://api.test"


def run(coro):
    return asyncio.run(coro)


async def call(client, method, *args, **kwargs):
    async with client:
        return await getattr(client, method)(*args, **kwargs)


def test_build_query():
    assert build_query({
        "quizType": None, "labels": ["jee", "neet"], "exams": [], "language": "",
        "activeOnly": True, "limit": 200,
    }) == {"labels": "jee,neet", "activeOnly": "true", "limit": "200"}


def test_fetch_live_quizzes_sends_filters(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"items": [{"id": "quiz-1"}]})

    items = run(call(make_client(handler), "fetch_live_quizzes", labels=["jee"], language="English"))

    assert items == [{"id": "quiz-1"}]
    assert seen[0].url.path == "/live-quiz"
    assert seen[0].url.params["labels"] == "jee"
    assert seen[0].url.params["limit"] == "200"
    assert "quizType" not in seen[0].url.params


def test_listing_error_carries_backend_message(make_client):
    handler = lambda request: httpx.Response(500, json={"error": "database down"})
    with pytest.raises(ApiError) as excinfo:
        run(call(make_client(handler), "fetch_upcoming_quizzes"))
    assert str(excinfo.value) == "database down"
    assert excinfo.value.status_code == 500


def test_listing_error_without_body_uses_default_message(make_client):
    handler = lambda request: httpx.Response(502, text="<html>bad gateway</html>")
    with pytest.raises(ApiError, match="Failed to fetch live quizzes"):
        run(call(make_client(handler), "fetch_live_quizzes_only"))


def test_fetch_quiz_by_id(make_client, quiz_payload):
    handler = lambda request: httpx.Response(200, json=quiz_payload)
    quiz = run(call(make_client(handler), "fetch_quiz_by_id", "quiz-1"))
    assert quiz.id == "quiz-1"
    assert quiz.category == "JEE Main"
    assert len(quiz.questions) == 4


def test_fetch_quiz_by_id_requires_id(make_client):
    with pytest.raises(ValueError):
        run(call(make_client(lambda request: httpx.Response(200, json={})), "fetch_quiz_by_id", None))


@pytest.mark.parametrize("body", [
    {"attempts": [{"id": "a1"}]},
    {"items": [{"id": "a1"}]},
    {"results": [{"id": "a1"}]},
    [{"id": "a1"}],
])
def test_fetch_user_attempts_envelopes(make_client, body):
    handler = lambda request: httpx.Response(200, json=body)
    attempts = run(call(make_client(handler), "fetch_user_attempts", "u1"))
    assert [a.id for a in attempts] == ["a1"]


def test_fetch_user_attempts_failure_returns_empty(make_client):
    handler = lambda request: httpx.Response(500, json={"message": "boom"})
    assert run(call(make_client(handler), "fetch_user_attempts", "u1")) == []
    assert run(call(make_client(handler), "fetch_attempted_quizzes", "u1")) == []
    assert run(call(make_client(handler), "fetch_user_attempts", None)) == []


def test_session_calls(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        if request.url.path.endswith("/session"):
            return httpx.Response(200, json={"sessionId": "s1"})
        return httpx.Response(204)

    client = make_client(handler)

    async def flow():
        async with client:
            session = await client.start_session("quiz-1", {"userId": "u1"})
            answer = await client.submit_answer("quiz-1", "s1", "q1", "C", 12)
            done = await client.complete_session("quiz-1", "s1", [{"questionId": "q1"}], {"score": 1})
            skipped = await client.complete_session("quiz-1", None, [], {})
            return session, answer, done, skipped

    session, answer, done, skipped = run(flow())

    assert session == {"sessionId": "s1"}
    assert answer is None and done is None and skipped is None
    assert [r.url.path for r in seen] == [
        "/live-quiz/quiz-1/session",
        "/live-quiz/quiz-1/session/s1/answer",
        "/live-quiz/quiz-1/session/s1/complete",
    ]
    assert json.loads(seen[1].content) == {"questionId": "q1", "selectedOption": "C", "timeSpentSeconds": 12}
    assert json.loads(seen[2].content) == {"answers": [{"questionId": "q1"}], "summary": {"score": 1}}


def test_start_session_failure_returns_none(make_client):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)
    assert run(call(make_client(handler), "start_session", "quiz-1")) is None


def test_fetch_leaderboard(make_client):
    handler = lambda request: httpx.Response(200, json={
        "leaderboard": [{"rank": 1}, {"rank": 2}], "totalParticipants": 40, "quizLabel": "Optics",
    })
    board = run(call(make_client(handler), "fetch_leaderboard", "quiz-1"))
    assert board.count == 2
    assert board.total_participants == 40
    assert board.quiz_label == "Optics"

    failing = lambda request: httpx.Response(404, json={"error": "no quiz"})
    empty = run(call(make_client(failing), "fetch_leaderboard", "quiz-1"))
    assert empty.entries == []
    assert empty.count == 0


def test_fetch_practice_quizzes(make_client):
    handler = lambda request: httpx.Response(200, json={"items": [{"id": i} for i in range(20)], "total": 45})
    page = run(call(make_client(handler), "fetch_practice_quizzes"))
    assert page.total == 45
    assert page.has_more

    handler = lambda request: httpx.Response(200, json={"items": [], "hasMore": False})
    assert not run(call(make_client(handler), "fetch_practice_quizzes", page=3)).has_more


def test_fetch_daily_winners_raises(make_client):
    handler = lambda request: httpx.Response(500, json={"error": "later"})
    with pytest.raises(ApiError):
        run(call(make_client(handler), "fetch_daily_winners"))


def test_fetch_user_profile():
    handler = lambda request: httpx.Response(200, json={"user": {"fullName": "Test User"}})
    client = ProfileClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    assert run(call(client, "fetch_user_profile", "u1")) == {"fullName": "Test User"}

    client = ProfileClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    with pytest.raises(ValueError):
        run(call(client, "fetch_user_profile", ""))
