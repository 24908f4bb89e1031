"""
Data Management
===============

Bridges the Streamlit screens and the async API clients, and keeps the quiz
progress record in the session state.
"""
import asyncio
import logging
import os
import time
from datetime import datetime, timezone

import httpx
import pandas as pd
import plotly.express as px
import streamlit as st

from api.http import ApiError
from api.live_quiz_client import LiveQuizClient
from api.profile_client import ProfileClient
from api.review_loader import ReviewLoadError, load_attempt_review
from config import get_settings
from scoring.adapter import parse_profile
from scoring.summary import performance_message, results_frame
from session.progress import (
    answered_count,
    current_answer,
    format_time,
    progress_fraction,
    quiz_duration_seconds,
    remaining_count,
    start_quiz,
)
from session.submission import build_completion_payload, score_progress

logger = logging.getLogger(__name__)


# ==========================================
# ASYNC CALLS
# ==========================================

async def load_quiz_async(quiz_id, user_id):
    """Fetches the quiz and, for a known user, opens a backend session."""
    async with LiveQuizClient() as client:
        quiz = await client.fetch_quiz_by_id(quiz_id)
        session_id = None
        if user_id:
            session = await client.start_session(quiz_id, {
                "userId": user_id,
                "startedAt": datetime.now(timezone.utc).isoformat(),
            })
            session_id = (session or {}).get("sessionId")
        return quiz, session_id


async def complete_quiz_async(quiz_id, session_id, payload):
    async with LiveQuizClient() as client:
        return await client.complete_session(quiz_id, session_id,
                                             payload["answers"], payload["summary"])


async def fetch_attempts_async(user_id):
    async with LiveQuizClient() as client:
        return await client.fetch_user_attempts(user_id, limit=100)


async def load_review_async(user_id, attempt):
    async with LiveQuizClient() as client:
        return await load_attempt_review(client, user_id, attempt.id, attempt)


async def fetch_profile_async(user_id):
    async with ProfileClient() as client:
        return parse_profile(await client.fetch_user_profile(user_id))


# ==========================================
# SESSION STATE
# ==========================================

def initialize_session_state():
    """Initializes page config and session variables."""
    st.set_page_config(page_title="Quiz Arena Dash", layout="wide")

    defaults = {
        "quiz": None,
        "progress": None,
        "quiz_session_id": None,
        "quiz_started_at": None,
        "last_summary": None,
        "last_quiz": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def start_live_quiz(quiz_id, user_id):
    try:
        quiz, session_id = asyncio.run(load_quiz_async(quiz_id, user_id))
    except (httpx.HTTPError, ApiError, ValueError) as e:
        st.error(f"Failed to load quiz: {e}")
        return

    if session_id is None:
        st.warning("Quiz session could not be started. Your attempt will not be saved.")

    st.session_state.quiz = quiz
    st.session_state.quiz_session_id = session_id
    st.session_state.quiz_started_at = time.time() if session_id else None
    st.session_state.progress = start_quiz(len(quiz.questions), quiz_duration_seconds(quiz))
    st.session_state.last_summary = None


def dispatch(reducer, *args):
    """Applies a progress reducer and finishes the quiz once it is submitted."""
    st.session_state.progress = reducer(st.session_state.progress, *args)
    if st.session_state.progress.submitted:
        finish_quiz()


def finish_quiz():
    quiz = st.session_state.quiz
    summary = score_progress(quiz.questions, st.session_state.progress)

    started_at = st.session_state.quiz_started_at
    time_spent = int(time.time() - started_at) if started_at else 0
    user_id = st.session_state.get("user_id") or get_settings().user_id

    if user_id and st.session_state.quiz_session_id:
        payload = build_completion_payload(summary, user_id, time_spent)
        saved = asyncio.run(complete_quiz_async(quiz.id, st.session_state.quiz_session_id, payload))
        if saved is None:
            st.warning("Your attempt could not be saved.")
    else:
        logger.warning("No session or user id, quiz attempt not saved to backend")

    st.session_state.last_summary = summary
    st.session_state.last_quiz = quiz
    st.session_state.quiz = None
    st.session_state.progress = None


def reset_live_quiz():
    st.session_state.quiz = None
    st.session_state.progress = None
    st.session_state.quiz_session_id = None
    st.session_state.quiz_started_at = None
