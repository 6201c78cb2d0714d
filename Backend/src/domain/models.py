# -*- coding: utf-8 -*-
"""
LearnHub/Backend/src/domain/models.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
SQLAlchemy 2.0 ORM models.

Courses are split into sections; a section holds lessons and exams. An exam
owns its questions. Each time a user takes an exam an ``ExamAttempt`` row is
written with the randomized snapshot of that attempt, and passed exams and
finished lessons become ``CompletionRecord`` rows that drive the
enrollment's progress percentage.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import (JSON, Boolean, DateTime, Enum, Float, ForeignKey,
                        Index, Integer, String, Text, UniqueConstraint, func)
from sqlalchemy.orm import (DeclarativeBase, Mapped, mapped_column,
                            relationship)

from src.domain.enums import (CompletionItemType, EnrollmentRole,
                              ExamAttemptStatus, LessonType, Role)


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    """Declarative base for every table."""


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="role", values_callable=_enum_values),
        default=Role.STUDENT,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    teacher_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    sections: Mapped[List["Section"]] = relationship(back_populates="course")


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    course: Mapped["Course"] = relationship(back_populates="sections")


class Lesson(Base):
    __tablename__ = "lessons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    section_id: Mapped[int] = mapped_column(
        ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[LessonType] = mapped_column(
        Enum(LessonType, name="lesson_type", values_callable=_enum_values),
        nullable=False,
    )
    content_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Exam(Base):
    __tablename__ = "exams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    section_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("sections.id", ondelete="CASCADE"), nullable=True, index=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # sum of question scores, maintained by the content builder
    total_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    # None = unlimited
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    pass_percent: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, default=50.0
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    section: Mapped[Optional["Section"]] = relationship()


class ExamQuestion(Base):
    __tablename__ = "exam_questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    exam_id: Mapped[int] = mapped_column(
        ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    # [{"text": str, "is_correct": bool}, ...]
    options: Mapped[List[dict]] = mapped_column(JSON, nullable=False, default=list)
    score: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    explanation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ExamAttempt(Base):
    __tablename__ = "exam_attempts"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "exam_id", "attempt_number", name="uq_exam_attempt_number"
        ),
        Index("ix_exam_attempts_user_exam_status", "user_id", "exam_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exam_id: Mapped[int] = mapped_column(
        ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # immutable snapshot
    question_order: Mapped[List[int]] = mapped_column(JSON, nullable=False)
    # [[question_id, [option indexes...]], ...]
    option_order: Mapped[List[Any]] = mapped_column(JSON, nullable=False)
    total_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    pass_percent: Mapped[float] = mapped_column(Float, nullable=False, default=50.0)

    # written once, on submission
    answers: Mapped[List[dict]] = mapped_column(JSON, nullable=False, default=list)
    achieved_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[ExamAttemptStatus] = mapped_column(
        Enum(
            ExamAttemptStatus,
            name="exam_attempt_status",
            values_callable=_enum_values,
        ),
        nullable=False,
        default=ExamAttemptStatus.IN_PROGRESS,
    )
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    exam: Mapped["Exam"] = relationship()
    course: Mapped["Course"] = relationship()


class CompletionRecord(Base):
    __tablename__ = "completion_records"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "course_id",
            "item_type",
            "item_id",
            name="uq_completion_record_item",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_type: Mapped[CompletionItemType] = mapped_column(
        Enum(
            CompletionItemType,
            name="completion_item_type",
            values_callable=_enum_values,
        ),
        nullable=False,
    )
    item_id: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[EnrollmentRole] = mapped_column(
        Enum(EnrollmentRole, name="enrollment_role", values_callable=_enum_values),
        nullable=False,
        default=EnrollmentRole.STUDENT,
    )
    completed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )
