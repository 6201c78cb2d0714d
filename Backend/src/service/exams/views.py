# -*- coding: utf-8 -*-
"""
Shapes returned by the exam session manager.

``ActiveExamView`` never carries option correctness: it is sent to the user
taking the exam.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class OptionView:
    index: int
    text: str


@dataclass(frozen=True)
class QuestionView:
    question_id: int
    question: str
    score: float
    options: List[OptionView]


@dataclass
class ActiveExamView:
    exam_id: int
    course_id: int
    title: str
    attempt_number: int
    total_score: float
    duration_minutes: Optional[int]
    pass_percent: float
    started_at: datetime
    deadline: Optional[datetime]
    questions: List[QuestionView] = field(default_factory=list)
    resumed: bool = False


@dataclass(frozen=True)
class SubmittedAnswer:
    question_id: int
    selected_option_indexes: List[int]


@dataclass(frozen=True)
class GradedAnswer:
    question_id: int
    selected_option_indexes: List[int]
    is_correct: bool
    score: float

    def to_json(self) -> dict:
        return {
            "question_id": self.question_id,
            "selected_option_indexes": list(self.selected_option_indexes),
            "is_correct": self.is_correct,
            "score": self.score,
        }


@dataclass
class SubmissionResult:
    exam_id: int
    attempt_number: int
    achieved_score: float
    total_score: float
    pass_percent: float
    percent: float
    # this attempt only
    passed: bool
    # best submitted attempt, grants course credit
    exam_passed: bool
    expired: bool
    submitted_at: datetime


@dataclass
class StatusView:
    exam_id: int
    course_id: int
    attempt_number: int
    achieved_score: float
    total_score: float
    pass_percent: float
    percent: float
    passed: bool
    submitted_at: Optional[datetime]
    taken: bool = True


@dataclass
class HistoryItem:
    exam_id: int
    exam_title: str
    course_id: int
    course_title: str
    attempt_number: int
    achieved_score: float
    total_score: float
    percent: int
    pass_percent: float
    passed: bool
    submitted_at: Optional[datetime]
    user_id: Optional[int] = None
    user_name: Optional[str] = None


@dataclass
class HistoryPage:
    items: List[HistoryItem]
    total: int
    limit: int
    offset: int
