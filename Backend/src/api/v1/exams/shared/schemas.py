# -*- coding: utf-8 -*-
"""
Pydantic schemas of the exam endpoints.

Question payloads sent to the user taking an exam never contain option
correctness.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ----------------------------- ACTIVE EXAM ----------------------------------


class ExamOptionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    index: int = Field(description="Original option index, sent back on submit")
    text: str


class ExamQuestionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: int
    question: str
    score: float
    options: List[ExamOptionSchema]


class ActiveExamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    exam_id: int
    course_id: int
    title: str
    attempt_number: int
    total_score: float
    duration_minutes: Optional[int] = Field(
        default=None, description="None means no time limit"
    )
    pass_percent: float
    started_at: datetime
    deadline: Optional[datetime] = None
    resumed: bool = False
    questions: List[ExamQuestionSchema]


# ----------------------------- SUBMIT ---------------------------------------


class AnswerSchema(BaseModel):
    question_id: int
    selected_option_indexes: List[int] = Field(default_factory=list)

    @field_validator("selected_option_indexes")
    @classmethod
    def indexes_not_negative(cls, value: List[int]) -> List[int]:
        if any(index < 0 for index in value):
            raise ValueError("Option indexes must be non-negative")
        return value


class ExamSubmitRequest(BaseModel):
    attempt: int = Field(ge=1, description="Attempt number returned by /active")
    answers: List[AnswerSchema] = Field(default_factory=list)


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    exam_id: int
    attempt_number: int
    achieved_score: float
    total_score: float
    pass_percent: float
    percent: float
    passed: bool = Field(description="This attempt reached the pass percent")
    exam_passed: bool = Field(
        description="The best submitted attempt reached its pass percent"
    )
    expired: bool = False
    submitted_at: datetime


# ----------------------------- STATUS / HISTORY -----------------------------


class ExamStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    taken: bool
    exam_id: Optional[int] = None
    course_id: Optional[int] = None
    attempt_number: Optional[int] = None
    achieved_score: Optional[float] = None
    total_score: Optional[float] = None
    pass_percent: Optional[float] = None
    percent: Optional[float] = None
    passed: Optional[bool] = None
    submitted_at: Optional[datetime] = None


class ExamHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
    submitted_at: Optional[datetime] = None
    user_id: Optional[int] = None
    user_name: Optional[str] = None


class ExamHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    items: List[ExamHistoryItem]
    total: int
    limit: int
    offset: int
