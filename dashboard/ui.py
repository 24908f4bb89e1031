"""
UI
==

This module implements the quiz screens: taking a live quiz, its results, and
the review of a past attempt.
"""

from dashboard.data_management import *
from models.quiz_models import STATUS_CORRECT, STATUS_INCORRECT, STATUS_UNATTEMPTED
from scoring.normalizer import option_letter, option_text
from session.progress import advance, go_next, go_previous, select_answer, submit_quiz

STATUS_ICONS = {STATUS_CORRECT: "🟢", STATUS_INCORRECT: "🔴", STATUS_UNATTEMPTED: "⚪"}
STATUS_COLORS = {STATUS_CORRECT: "#10B981", STATUS_INCORRECT: "#EF4444", STATUS_UNATTEMPTED: "#9CA3AF"}


def format_time_spent(seconds):
    """Formats seconds as "4m 5s", or N/A when nothing was recorded."""
    seconds = int(seconds or 0)
    if seconds <= 0:
        return "N/A"
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}m {secs}s"


def format_date(value):
    return value.strftime("%b %d, %Y") if value else "N/A"


def render_sidebar():
    settings = get_settings()
    with st.sidebar:
        st.title("🟢 Live Quiz Arena")
        st.header("Settings")
        st.text_input("User ID", value=settings.user_id or "", key="user_id")
        quiz_id = st.text_input("Quiz ID", value=os.getenv("QUIZ_ID", ""))

        st.divider()
        page = st.radio("Navigate", ["Live Quiz", "Results", "Attempted", "Profile"],
                        label_visibility="collapsed")

    return st.session_state.user_id, quiz_id, page


# ==========================================
# LIVE QUIZ
# ==========================================

def render_question(quiz, progress):
    question = quiz.questions[progress.question_index]
    st.markdown(f"**{question.text}**")

    letters = [option_letter(i) for i in range(len(question.options))]
    labels = {letter: f"{letter}. {option_text(option)}"
              for letter, option in zip(letters, question.options)}
    selected = current_answer(progress)

    choice = st.radio(
        "Options",
        letters,
        index=letters.index(selected) if selected in letters else None,
        format_func=labels.get,
        key=f"options_{progress.question_index}",
        label_visibility="collapsed",
    )
    if choice and choice != selected:
        dispatch(select_answer, choice)


def render_live_quiz(user_id, quiz_id):
    quiz = st.session_state.quiz
    if quiz is None:
        st.info("Enter a Quiz ID in the sidebar and start the quiz.")
        if st.button("▶️ Start Quiz", disabled=not quiz_id):
            start_live_quiz(quiz_id, user_id)
            st.rerun()
        return

    progress = st.session_state.progress
    st.caption(quiz.category.upper())
    st.subheader(quiz.title)

    c1, c2 = st.columns([3, 1])
    with c1:
        st.write(f"Question {progress.question_index + 1}/{progress.question_count}")
        st.progress(progress_fraction(progress))
        st.caption(f"{answered_count(progress)} answered • {remaining_count(progress)} remaining")
    c2.metric("Time Limit", format_time(progress.remaining_time_seconds))

    if progress.question_count == 0:
        st.error("No questions available for this quiz")
        if st.button("⬅️ Back"):
            reset_live_quiz()
            st.rerun()
        return

    render_question(quiz, progress)

    col_prev, col_next, col_finish = st.columns(3)
    if col_prev.button("⬅️ Previous", disabled=progress.question_index == 0):
        dispatch(go_previous)
        st.rerun()
    is_last = progress.question_index == progress.question_count - 1
    if col_next.button("✅ Submit" if is_last else "➡️ Next"):
        dispatch(advance if is_last else go_next)
        st.rerun()
    if col_finish.button("🏁 Finish Test"):
        dispatch(submit_quiz)
        st.rerun()


# ==========================================
# RESULTS
# ==========================================

def render_score_card(summary, extra_metrics=None):
    st.metric("Score", f"{summary.correct}/{summary.total_questions}")
    st.write(f"You scored {summary.correct} out of {summary.total_questions} questions correctly.")
    st.subheader(performance_message(summary.accuracy))

    metrics = {
        "Accuracy": f"{summary.accuracy}%",
        "Correct": summary.correct,
        "Incorrect": summary.incorrect,
        "Skipped": summary.unattempted,
    }
    metrics.update(extra_metrics or {})
    for column, (title, value) in zip(st.columns(len(metrics)), metrics.items()):
        column.metric(title, value)

    counts = pd.DataFrame({
        "Status": [STATUS_CORRECT, STATUS_INCORRECT, STATUS_UNATTEMPTED],
        "Count": [summary.correct, summary.incorrect, summary.unattempted],
    })
    if counts["Count"].sum() > 0:
        fig = px.pie(counts, names="Status", values="Count", color="Status",
                     color_discrete_map=STATUS_COLORS, hole=0.5)
        fig.update_layout(height=260, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, width="stretch")


def render_question_breakdown(summary):
    st.header(f"{summary.total_questions} Questions")
    st.caption("Question Breakdown")

    if not summary.answers_loaded:
        st.warning("Your answers could not be loaded. Showing questions and correct answers only.")

    for result in summary.results:
        question = result.question
        with st.expander(f"{STATUS_ICONS[result.status]} Q{result.index} · {question.concept}"):
            st.markdown(question.text)
            for i, option in enumerate(question.options):
                letter = option_letter(i)
                line = f"{letter}. {option_text(option)}"
                if letter == result.correct_answer:
                    st.success(f"{line}  ✓ Correct")
                elif letter == result.user_answer:
                    st.error(f"{line}  ✗ Your Answer")
                else:
                    st.write(line)
            if question.explanation:
                st.info(f"Explanation: {question.explanation}")

    st.dataframe(results_frame(summary).set_index("Question"), width="stretch")


def render_results_page():
    summary = st.session_state.last_summary
    quiz = st.session_state.last_quiz
    if summary is None:
        st.info("Finish a quiz to see its results here.")
        return

    st.header(quiz.category if quiz else "Quiz")
    render_score_card(summary)
    render_question_breakdown(summary)


def render_attempted_page(user_id):
    if not user_id:
        st.error("Please log in to view your results")
        return

    attempts = asyncio.run(fetch_attempts_async(user_id))
    if not attempts:
        st.info("No attempted quizzes found.")
        return

    by_id = {a.id: a for a in attempts}
    labels = {a.id: f"{a.title or a.quiz_id} · {format_date(a.attempted_at)}" for a in attempts}
    attempt_id = st.selectbox("Attempt", list(labels), format_func=labels.get)

    try:
        review = asyncio.run(load_review_async(user_id, by_id[attempt_id]))
    except ReviewLoadError as e:
        st.error(f"⚠️ {e}")
        return

    st.header(review.quiz.category)
    st.caption(f"Attempted on {format_date(review.attempt.attempted_at)}")
    render_score_card(review.summary, {
        "Time Spent": format_time_spent(review.attempt.time_spent_seconds),
    })
    render_question_breakdown(review.summary)


# ==========================================
# PROFILE
# ==========================================

def render_profile_page(user_id):
    if not user_id:
        st.error("Please log in to view your profile")
        return

    try:
        profile = asyncio.run(fetch_profile_async(user_id))
    except (httpx.HTTPError, ApiError, ValueError) as e:
        st.error(f"Failed to load profile: {e}")
        return

    c1, c2 = st.columns([1, 3])
    if profile.avatar:
        c1.image(profile.avatar, width=96)
    with c2:
        st.subheader(profile.name)
        st.caption("🟢 Online" if profile.online else "⚪ Offline")
        st.write(profile.email)
        if profile.phone_number:
            st.write(profile.phone_number)
        if profile.city or profile.state:
            st.write(", ".join(p for p in (profile.city, profile.state) if p))

    st.text_input("Referral Link", value=profile.referral_link, disabled=True)

    st.header("Performance Overview")
    titles = {
        "reputationScore": "Reputation",
        "totalCallTime": "Call Time",
        "questionsAsked": "Questions Asked",
        "solutionsProvided": "Solutions",
        "liveImpactScore": "Live Impact",
        "learningTime": "Learning Time",
    }
    for column, (key, title) in zip(st.columns(len(titles)), titles.items()):
        column.metric(title, profile.stats.get(key))


# ==========================================
# MAIN LOOP
# ==========================================

def run_dashboard():
    initialize_session_state()

    user_id, quiz_id, page = render_sidebar()

    if page == "Live Quiz":
        render_live_quiz(user_id, quiz_id)
    elif page == "Results":
        render_results_page()
    elif page == "Attempted":
        render_attempted_page(user_id)
    else:
        render_profile_page(user_id)
