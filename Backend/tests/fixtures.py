# -*- coding: utf-8 -*-
"""
Builders for test data: users, courses, their content and exam attempts.
"""

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import (EnrollmentRole, ExamAttemptStatus, LessonType,
                              Role)
from src.domain.models import (Course, Enrollment, Exam, ExamAttempt,
                               ExamQuestion, Lesson, Section, User)
from src.repository.base import create_item
from src.security.security import create_access_token


async def create_test_user(
    session: AsyncSession, user_id: int = 1, role: Role = Role.STUDENT
) -> User:
    """Create a test user"""
    return await create_item(
        session,
        User,
        id=user_id,
        email=f"user{user_id}@example.com",
        name=f"Test User {user_id}",
        password="password",
        role=role,
        is_active=True,
    )


async def create_test_course(
    session: AsyncSession, teacher_id: Optional[int] = None, title: str = "Test Course"
) -> Course:
    """Create a test course"""
    return await create_item(
        session,
        Course,
        title=title,
        description="Test course description",
        teacher_id=teacher_id,
    )


async def create_test_section(
    session: AsyncSession, course_id: int, title: str = "Test Section", order: int = 1
) -> Section:
    return await create_item(
        session, Section, course_id=course_id, title=title, order=order
    )


async def create_test_lesson(
    session: AsyncSession, section_id: int, title: str = "Test Lesson", order: int = 1
) -> Lesson:
    return await create_item(
        session,
        Lesson,
        section_id=section_id,
        title=title,
        type=LessonType.DOCUMENT,
        content_url=None,
        order=order,
    )


async def create_test_exam(
    session: AsyncSession,
    section_id: Optional[int],
    title: str = "Test Exam",
    pass_percent: Optional[float] = 50.0,
    duration_minutes: Optional[int] = None,
) -> Exam:
    """Create an exam without questions"""
    return await create_item(
        session,
        Exam,
        section_id=section_id,
        title=title,
        description="Test exam description",
        total_score=0.0,
        duration_minutes=duration_minutes,
        pass_percent=pass_percent,
        order=1,
    )


def make_options(count: int = 4, correct: Sequence[int] = (0,)) -> List[dict]:
    """Option payloads; ``correct`` holds the indexes marked correct."""
    return [
        {"text": f"Option {index}", "is_correct": index in correct}
        for index in range(count)
    ]


async def create_test_question(
    session: AsyncSession,
    exam_id: int,
    score: float = 1.0,
    options: Optional[List[dict]] = None,
    order: int = 1,
) -> ExamQuestion:
    return await create_item(
        session,
        ExamQuestion,
        exam_id=exam_id,
        order=order,
        question=f"Question {order}",
        options=options if options is not None else make_options(),
        score=score,
    )


async def create_test_questions(
    session: AsyncSession,
    exam_id: int,
    count: int = 3,
    score: float = 1.0,
    correct: Sequence[int] = (0,),
) -> List[ExamQuestion]:
    """Create ``count`` questions with four options each"""
    questions = []
    for i in range(count):
        question = await create_test_question(
            session,
            exam_id,
            score=score,
            options=make_options(correct=correct),
            order=i + 1,
        )
        questions.append(question)
    return questions


async def create_exam_setup(
    session: AsyncSession,
    question_count: int = 3,
    score: float = 1.0,
    pass_percent: Optional[float] = 50.0,
    duration_minutes: Optional[int] = None,
    enroll_user_id: Optional[int] = 1,
):
    """
    Student, course, section and an exam with questions.

    Returns:
        Tuple of (user, course, section, exam, questions)
    """
    user = await create_test_user(session, user_id=1, role=Role.STUDENT)
    course = await create_test_course(session)
    section = await create_test_section(session, course.id)
    exam = await create_test_exam(
        session,
        section.id,
        pass_percent=pass_percent,
        duration_minutes=duration_minutes,
    )
    questions = await create_test_questions(
        session, exam.id, count=question_count, score=score
    )
    if enroll_user_id is not None:
        await create_test_enrollment(session, enroll_user_id, course.id, total_count=1)
    return user, course, section, exam, questions


async def create_test_enrollment(
    session: AsyncSession,
    user_id: int,
    course_id: int,
    role: EnrollmentRole = EnrollmentRole.STUDENT,
    total_count: int = 0,
) -> Enrollment:
    return await create_item(
        session,
        Enrollment,
        user_id=user_id,
        course_id=course_id,
        role=role,
        completed_count=0,
        total_count=total_count,
        progress=0,
    )


async def create_test_attempt(
    session: AsyncSession,
    user_id: int,
    exam_id: int,
    course_id: int,
    attempt_number: int = 1,
    achieved_score: float = 0.0,
    total_score: float = 10.0,
    pass_percent: float = 50.0,
    status: ExamAttemptStatus = ExamAttemptStatus.SUBMITTED,
    question_order: Optional[List[int]] = None,
    submitted_at: Optional[datetime] = None,
) -> ExamAttempt:
    """Create an attempt directly in the store, bypassing the session manager"""
    started_at = datetime(2026, 1, 1, 10, 0, 0)
    if status == ExamAttemptStatus.SUBMITTED and submitted_at is None:
        submitted_at = datetime(2026, 1, 1, 10, attempt_number, 0)
    return await create_item(
        session,
        ExamAttempt,
        user_id=user_id,
        exam_id=exam_id,
        course_id=course_id,
        attempt_number=attempt_number,
        question_order=question_order or [],
        option_order=[],
        total_score=total_score,
        duration_minutes=None,
        pass_percent=pass_percent,
        answers=[],
        achieved_score=achieved_score,
        status=status,
        started_at=started_at,
        submitted_at=submitted_at,
    )


def auth_headers(user_id: int, role: Role = Role.STUDENT) -> dict:
    """Bearer header for a user"""
    token = create_access_token({"sub": user_id, "role": role})
    return {"Authorization": f"Bearer {token}"}
