"""
Attempt Scoring and Answer Reconciliation
=========================================

Builds the summary shown on every results screen: attaches each answer to its
question, classifies every question and aggregates the counts. Statistics the
backend reports are authoritative and always win over local computation.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from models.quiz_models import (
    STATUS_CORRECT,
    STATUS_INCORRECT,
    AnswerEntry,
    AttemptSummary,
    Question,
    QuestionResult,
    ServerStats,
)
from scoring.adapter import parse_answers, parse_server_stats
from scoring.classifier import classify
from scoring.normalizer import normalize_letter, resolve_selected_option

logger = logging.getLogger(__name__)


def percentage(part: float, total: float) -> int:
    """Rounds half up, so 2/8 -> 25 and 1/8 -> 13."""
    if not total:
        return 0
    return int(math.floor(part / total * 100 + 0.5))


def reconcile_answers(questions: Sequence[Question],
                      answers: Sequence[AnswerEntry]) -> Dict[int, AnswerEntry]:
    """
    Maps question index -> answer.
    Entries whose question id matches a known question are attached first;
    the rest fall back to their array position. A slot is never overwritten.
    """
    linked: Dict[int, AnswerEntry] = {}
    unlinked: List[AnswerEntry] = []

    for entry in answers:
        index = next((i for i, q in enumerate(questions) if q.matches_id(entry.question_id)), None)
        if index is None or index in linked:
            unlinked.append(entry)
        else:
            linked[index] = entry

    for entry in unlinked:
        position = entry.position
        if position is None or not 0 <= position < len(questions) or position in linked:
            logger.debug("Dropping answer with unresolvable linkage: %r", entry)
            continue
        if entry.question_id is not None:
            logger.debug("Question id %r not found, attaching answer at position %d",
                         entry.question_id, position)
        linked[position] = entry

    return linked


def build_attempt_summary(questions: Optional[Sequence[Question]],
                          raw_answers: Any = None,
                          server_stats: Union[ServerStats, Dict[str, Any], None] = None) -> AttemptSummary:
    """
    Scores one attempt.

    `raw_answers` may be a list of answer objects, a mapping keyed by question
    index, a list of AnswerEntry, or None. `server_stats` may be a ServerStats
    or the raw attempt dict the backend returned.
    """
    questions = list(questions or [])
    if isinstance(server_stats, ServerStats):
        stats = server_stats
    else:
        stats = parse_server_stats(server_stats)

    if isinstance(raw_answers, list) and all(isinstance(a, AnswerEntry) for a in raw_answers):
        answers = list(raw_answers)
    else:
        answers = parse_answers(raw_answers)

    linked = reconcile_answers(questions, answers)

    results = []
    local_correct = local_incorrect = 0
    for index, question in enumerate(questions):
        entry = linked.get(index)
        selected = resolve_selected_option(question, entry.selected_option) if entry else None
        classification = classify(question, selected)

        if classification.status == STATUS_CORRECT:
            local_correct += 1
        elif classification.status == STATUS_INCORRECT:
            local_incorrect += 1

        results.append(QuestionResult(
            index=index + 1,
            question=question,
            user_answer=normalize_letter(selected),
            correct_answer=classification.correct_answer_letter,
            status=classification.status,
            answer=entry,
        ))

    total = stats.total_questions if stats.total_questions is not None else len(questions)
    # Local counts only fill what the server's own counts leave over
    correct, incorrect = stats.correct, stats.incorrect
    if correct is None:
        correct = min(local_correct, max(0, total - (incorrect or 0)))
    if incorrect is None:
        incorrect = min(local_incorrect, max(0, total - correct))
    if stats.unattempted is not None:
        unattempted = stats.unattempted
    else:
        unattempted = max(0, total - correct - incorrect)

    if stats != ServerStats():
        logger.debug("Server stats override local counts: %s", stats)

    return AttemptSummary(
        correct=correct,
        incorrect=incorrect,
        unattempted=unattempted,
        score=stats.score if stats.score is not None else correct,
        accuracy=stats.accuracy if stats.accuracy is not None else percentage(correct, total),
        total_questions=total,
        results=results,
        answers_loaded=bool(answers),
    )


def performance_message(accuracy: float) -> str:
    if accuracy >= 80:
        return "Excellent Work!"
    elif accuracy >= 60:
        return "Good Attempt!"
    elif accuracy >= 40:
        return "Nice Try!"
    return "Keep Practicing!"


def results_frame(summary: AttemptSummary) -> pd.DataFrame:
    """One row per question, ready for st.dataframe."""
    rows = [{
        "Question": f"Q{result.index}",
        "Status": result.status,
        "Your Answer": result.user_answer or "-",
        "Correct Answer": result.correct_answer or "-",
        "Concept": result.question.concept,
    } for result in summary.results]
    return pd.DataFrame(rows, columns=["Question", "Status", "Your Answer", "Correct Answer", "Concept"])
