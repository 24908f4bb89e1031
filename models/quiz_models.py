"""
Data Models for the Quiz Arena
==============================

This module defines the data structures used to represent quizzes, answers and
scored attempts throughout the client. All models are implemented as dataclasses.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

STATUS_CORRECT = "correct"
STATUS_INCORRECT = "incorrect"
STATUS_UNATTEMPTED = "unattempted"


@dataclass(frozen=True)
class Question:
    id: Optional[str]
    text: str
    # Plain strings or {"text": ...} dicts, kept in backend order
    options: List[Any] = field(default_factory=list)
    correct_answer: Optional[str] = None
    explanation: str = ""
    concept: str = "General"
    alt_ids: tuple = ()

    def matches_id(self, question_id) -> bool:
        if question_id is None:
            return False
        return question_id == self.id or question_id in self.alt_ids


@dataclass(frozen=True)
class AnswerEntry:
    selected_option: Optional[str]
    position: Optional[int] = None
    question_id: Optional[str] = None
    is_correct: Optional[bool] = None
    time_spent_seconds: Optional[float] = None
    marks: Optional[float] = None


@dataclass(frozen=True)
class ServerStats:
    """Authoritative counts reported by the backend. None means "not reported"."""
    correct: Optional[int] = None
    incorrect: Optional[int] = None
    unattempted: Optional[int] = None
    score: Optional[float] = None
    accuracy: Optional[float] = None
    total_questions: Optional[int] = None


@dataclass(frozen=True)
class QuestionResult:
    index: int
    question: Question
    user_answer: Optional[str]
    correct_answer: Optional[str]
    status: str
    answer: Optional[AnswerEntry] = None


@dataclass(frozen=True)
class AttemptSummary:
    correct: int
    incorrect: int
    unattempted: int
    score: float
    accuracy: float
    total_questions: int
    results: List[QuestionResult] = field(default_factory=list)
    answers_loaded: bool = True


@dataclass
class Quiz:
    id: Optional[str]
    title: str = "Quiz"
    subject: str = "General"
    language: str = "English"
    duration: Optional[str] = None
    duration_minutes: Optional[float] = None
    total_questions: Optional[int] = None
    questions: List[Question] = field(default_factory=list)
    quiz_metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def category(self) -> str:
        """ "JEE Main • Optics" -> "JEE Main" """
        head = self.title.split("•")[0].strip() if self.title else ""
        return head or self.subject or "Quiz"


@dataclass
class AttemptRecord:
    id: Optional[str]
    quiz_id: Optional[str]
    title: Optional[str] = None
    subject: Optional[str] = None
    language: Optional[str] = None
    duration: Optional[str] = None
    raw_answers: Any = None
    stats: ServerStats = field(default_factory=ServerStats)
    attempted_at: Optional[datetime] = None
    time_spent_seconds: float = 0
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Leaderboard:
    entries: List[Dict[str, Any]] = field(default_factory=list)
    highlighted: Optional[Dict[str, Any]] = None
    count: int = 0
    total_participants: int = 0
    quiz_id: Optional[str] = None
    quiz_label: Optional[str] = None
    quiz_subject: Optional[str] = None
    slot_hour_key: Optional[str] = None
    slot_display: Optional[str] = None
    prize_distribution_summary: Optional[Dict[str, Any]] = None


@dataclass
class PracticePage:
    items: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20
    has_more: bool = False


@dataclass
class UserProfile:
    id: Optional[str]
    name: str = "No_Name_Provided"
    email: str = "Email Not Provided"
    phone_number: Optional[str] = None
    online: bool = False
    avatar: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    referral_link: Optional[str] = None
    stats: Dict[str, Any] = field(default_factory=dict)
