# -*- coding: utf-8 -*-
"""
Read-only access to exams, their questions and course structure.

The content builder owns these tables; the exam engine only reads them.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.models import Exam, ExamQuestion, Lesson, Section

logger = configure_logger(__name__)


async def get_exam_by_id(session: AsyncSession, exam_id: int) -> Optional[Exam]:
    """
    Fetch an exam definition.

    Args:
        session: Database session
        exam_id: Exam ID

    Returns:
        Exam or None
    """
    exam = await session.get(Exam, exam_id)
    if exam is None:
        logger.debug(f"Exam {exam_id} not found")
    return exam


async def list_exam_questions(
    session: AsyncSession, exam_id: int
) -> List[ExamQuestion]:
    """
    Return the questions of an exam in authoring order.

    Args:
        session: Database session
        exam_id: Exam ID

    Returns:
        List of questions (possibly empty)
    """
    stmt = (
        select(ExamQuestion)
        .where(ExamQuestion.exam_id == exam_id)
        .order_by(ExamQuestion.order, ExamQuestion.id)
    )
    result = await session.execute(stmt)
    questions = list(result.scalars().all())
    logger.debug(f"Exam {exam_id}: {len(questions)} questions in the bank")
    return questions


async def get_questions_by_ids(
    session: AsyncSession, exam_id: int, question_ids: Iterable[int]
) -> Dict[int, ExamQuestion]:
    """
    Load questions of one exam by ID.

    Questions that belong to another exam are never returned.

    Args:
        session: Database session
        exam_id: Exam ID
        question_ids: Wanted question IDs

    Returns:
        Mapping of question ID to question
    """
    ids = list(question_ids)
    if not ids:
        return {}
    stmt = select(ExamQuestion).where(
        ExamQuestion.exam_id == exam_id, ExamQuestion.id.in_(ids)
    )
    result = await session.execute(stmt)
    return {question.id: question for question in result.scalars().all()}


async def get_course_id_for_section(
    session: AsyncSession, section_id: Optional[int]
) -> Optional[int]:
    """Resolve the course owning a section."""
    if section_id is None:
        return None
    stmt = select(Section.course_id).where(Section.id == section_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def count_course_items(session: AsyncSession, course_id: int) -> int:
    """
    Count the lessons and exams of every section of a course.

    Args:
        session: Database session
        course_id: Course ID

    Returns:
        Number of completable items
    """
    section_ids = select(Section.id).where(Section.course_id == course_id)

    lessons_stmt = select(func.count(Lesson.id)).where(
        Lesson.section_id.in_(section_ids)
    )
    exams_stmt = select(func.count(Exam.id)).where(Exam.section_id.in_(section_ids))

    lesson_count = (await session.execute(lessons_stmt)).scalar_one()
    exam_count = (await session.execute(exams_stmt)).scalar_one()
    return int(lesson_count) + int(exam_count)


async def get_lesson_course_id(session: AsyncSession, lesson_id: int) -> Optional[int]:
    """Resolve the course a lesson belongs to."""
    stmt = (
        select(Section.course_id)
        .join(Lesson, Lesson.section_id == Section.id)
        .where(Lesson.id == lesson_id)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
