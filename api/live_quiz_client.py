"""
Live Quiz API Client
====================

Async wrapper around the backend's /live-quiz routes.

Listing and lookup calls raise ApiError when the backend refuses them. Calls
made while a quiz is being taken (session start, answers, completion) and the
history/leaderboard lookups are best-effort: failures are logged and an empty
default is returned so the screen can still render.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from api.http import ApiError, BaseClient
from models.quiz_models import AttemptRecord, Leaderboard, PracticePage, Quiz
from scoring.adapter import parse_attempt, parse_quiz

logger = logging.getLogger(__name__)

REQUEST_ERRORS = (httpx.HTTPError, ApiError, ValueError)


def _as_dict(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _attempt_records(items) -> List[AttemptRecord]:
    return [parse_attempt(item) for item in items if isinstance(item, dict)]


class LiveQuizClient(BaseClient):

    @property
    def live_quiz_base(self) -> str:
        return f"{self.base_url}/live-quiz"

    # ---------- LISTINGS ----------

    async def fetch_live_quizzes(self, quiz_type=None, labels=(), exams=(), language=None,
                                 active_only=None, limit="200", at_time=None) -> List[Dict[str, Any]]:
        data = await self._get(self.live_quiz_base, {
            "quizType": quiz_type, "labels": list(labels), "exams": list(exams),
            "language": language, "activeOnly": active_only, "limit": limit, "atTime": at_time,
        }, default_message="Failed to fetch quizzes")
        return _as_dict(data).get("items") or []

    async def fetch_live_quizzes_only(self, quiz_type=None, labels=(), exams=(), language=None,
                                      limit="200", at_time=None, days_back=7,
                                      days_forward=1) -> List[Dict[str, Any]]:
        """Quizzes currently running, looking `days_back` back and `days_forward` ahead."""
        data = await self._get(f"{self.live_quiz_base}/live", {
            "quizType": quiz_type, "labels": list(labels), "exams": list(exams),
            "language": language, "limit": limit, "atTime": at_time,
            "daysBack": days_back, "daysForward": days_forward,
        }, default_message="Failed to fetch live quizzes")
        return _as_dict(data).get("items") or []

    async def fetch_upcoming_quizzes(self, quiz_type=None, labels=(), exams=(), language=None,
                                     limit="200", at_time=None,
                                     days_forward=7) -> List[Dict[str, Any]]:
        data = await self._get(f"{self.live_quiz_base}/upcoming", {
            "quizType": quiz_type, "labels": list(labels), "exams": list(exams),
            "language": language, "limit": limit, "atTime": at_time,
            "daysForward": days_forward,
        }, default_message="Failed to fetch upcoming quizzes")
        return _as_dict(data).get("items") or []

    async def fetch_practice_quizzes(self, page=1, limit=20, labels=(), language=None) -> PracticePage:
        try:
            data = await self._get(f"{self.live_quiz_base}/practice", {
                "page": page, "limit": limit, "labels": list(labels), "language": language,
            })
            data = _as_dict(data)
        except REQUEST_ERRORS as e:
            logger.warning("Failed to fetch practice quizzes: %s", e)
            raise

        items = data.get("items") if isinstance(data.get("items"), list) else []
        has_more = data.get("hasMore")
        return PracticePage(
            items=items,
            total=data.get("total") or 0,
            page=data.get("page") or page,
            limit=data.get("limit") or limit,
            has_more=has_more if has_more is not None else len(items) == limit,
        )

    # ---------- QUIZ & SESSION ----------

    async def fetch_quiz_by_id(self, quiz_id) -> Quiz:
        if not quiz_id:
            raise ValueError("quizId is required")
        data = await self._get(f"{self.live_quiz_base}/{quiz_id}")
        quiz = parse_quiz(data)
        if quiz.id is None:
            quiz.id = quiz_id
        return quiz

    async def start_session(self, quiz_id, body: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        if not quiz_id:
            return None
        try:
            return await self._post(f"{self.live_quiz_base}/{quiz_id}/session", body or {})
        except REQUEST_ERRORS as e:
            logger.warning("Failed to start session for quiz %s: %s", quiz_id, e)
            return None

    async def submit_answer(self, quiz_id, session_id, question_id, selected_option,
                            time_spent_seconds=None) -> Optional[Dict[str, Any]]:
        if not quiz_id or not session_id or not question_id:
            return None
        try:
            return await self._post(
                f"{self.live_quiz_base}/{quiz_id}/session/{session_id}/answer",
                {"questionId": question_id, "selectedOption": selected_option,
                 "timeSpentSeconds": time_spent_seconds},
            )
        except REQUEST_ERRORS as e:
            logger.warning("Failed to submit answer for question %s: %s", question_id, e)
            return None

    async def complete_session(self, quiz_id, session_id, answers, summary) -> Optional[Dict[str, Any]]:
        if not quiz_id or not session_id:
            return None
        try:
            return await self._post(
                f"{self.live_quiz_base}/{quiz_id}/session/{session_id}/complete",
                {"answers": answers, "summary": summary},
            )
        except REQUEST_ERRORS as e:
            logger.warning("Failed to complete session %s: %s", session_id, e)
            return None

    # ---------- RESULTS ----------

    async def fetch_attempted_quizzes(self, user_id, limit=100) -> List[AttemptRecord]:
        if not user_id:
            return []
        try:
            data = await self._get(f"{self.live_quiz_base}/attempted/{user_id}", {"limit": limit},
                                   default_message="Failed to fetch attempted quizzes")
        except REQUEST_ERRORS as e:
            logger.warning("Failed to fetch attempted quizzes: %s", e)
            return []
        return _attempt_records(_as_dict(data).get("attempts") or [])

    async def fetch_user_attempts(self, user_id, limit=50) -> List[AttemptRecord]:
        """The attempt list sits under "attempts", "items" or "results", or is the body itself."""
        if not user_id:
            return []
        try:
            data = await self._get(f"{self.live_quiz_base}/results/user/{user_id}", {"limit": limit})
        except REQUEST_ERRORS as e:
            logger.warning("Failed to fetch attempts: %s", e)
            return []

        if isinstance(data, list):
            return _attempt_records(data)
        for key in ("attempts", "items", "results"):
            if isinstance(data, dict) and isinstance(data.get(key), list):
                return _attempt_records(data[key])
        return []

    async def fetch_leaderboard(self, quiz_id, limit=None, session_id=None,
                                include_prize_info=True) -> Leaderboard:
        if not quiz_id:
            return Leaderboard()
        try:
            data = await self._get(f"{self.live_quiz_base}/{quiz_id}/leaderboard", {
                "limit": limit, "sessionId": session_id, "includePrizeInfo": include_prize_info,
            })
            data = _as_dict(data)
        except REQUEST_ERRORS as e:
            logger.warning("Failed to fetch leaderboard for quiz %s: %s", quiz_id, e)
            return Leaderboard()

        entries = data.get("leaderboard") if isinstance(data.get("leaderboard"), list) else []
        return Leaderboard(
            entries=entries,
            highlighted=data.get("highlighted"),
            count=data.get("count") or len(entries),
            total_participants=data.get("totalParticipants") or 0,
            quiz_id=data.get("quizId"),
            quiz_label=data.get("quizLabel"),
            quiz_subject=data.get("quizSubject"),
            slot_hour_key=data.get("slotHourKey"),
            slot_display=data.get("slotDisplay"),
            prize_distribution_summary=data.get("prizeDistributionSummary"),
        )

    async def fetch_daily_winners(self, date=None, include_details=True):
        try:
            return await self._get(f"{self.live_quiz_base}/prize-distribution/day/current", {
                "date": date, "includeDetails": include_details,
            })
        except REQUEST_ERRORS as e:
            logger.warning("Failed to fetch daily winners: %s", e)
            raise
