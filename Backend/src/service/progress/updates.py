# -*- coding: utf-8 -*-
"""
Marking course items as completed.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.items import CompletionItem, ExamItem, LessonItem
from src.repository.exams import (get_course_id_for_section, get_exam_by_id,
                                  get_lesson_course_id)
from src.repository.progress import upsert_completion_record
from src.service.exams.pass_rule import check_exam_passed
from src.service.progress.calculation import (ProgressSnapshot,
                                              calculate_course_progress)
from src.utils.exceptions import NotFoundError, ValidationError

logger = configure_logger(__name__)


async def mark_item_completed(
    session: AsyncSession, user_id: int, course_id: int, item: CompletionItem
) -> ProgressSnapshot:
    """
    Record a completed lesson or exam and recalculate course progress.

    Calling it again for the same item changes nothing: the completion
    record is unique per (user, course, item type, item).

    Args:
        session: Database session
        user_id: User ID
        course_id: Course ID
        item: LessonItem or ExamItem

    Returns:
        Progress after the update
    """
    created = await upsert_completion_record(
        session, user_id, course_id, item.item_type, item.item_id
    )
    snapshot = await calculate_course_progress(session, user_id, course_id, commit=False)
    await session.commit()

    if created:
        logger.info(
            f"User {user_id} completed {item.item_type.value} {item.item_id} "
            f"in course {course_id}: {snapshot.progress}%"
        )
    return snapshot


async def _validate_lesson(session: AsyncSession, course_id: int, item: LessonItem) -> None:
    lesson_course_id = await get_lesson_course_id(session, item.item_id)
    if lesson_course_id is None:
        raise NotFoundError("Lesson", item.item_id)
    if lesson_course_id != course_id:
        raise ValidationError(
            f"Lesson {item.item_id} does not belong to course {course_id}"
        )


async def _validate_exam(
    session: AsyncSession, user_id: int, course_id: int, item: ExamItem
) -> None:
    exam = await get_exam_by_id(session, item.item_id)
    if exam is None:
        raise NotFoundError("Exam", item.item_id)
    exam_course_id = await get_course_id_for_section(session, exam.section_id)
    if exam_course_id != course_id:
        raise ValidationError(
            f"Exam {item.item_id} does not belong to course {course_id}"
        )
    if not await check_exam_passed(session, user_id, item.item_id, course_id):
        raise ValidationError(f"Exam {item.item_id} has not been passed yet")


async def complete_item_for_user(
    session: AsyncSession, user_id: int, course_id: int, item: CompletionItem
) -> ProgressSnapshot:
    """
    Mark an item completed on behalf of the user themself.

    Lessons must belong to the course. Exams are only credited when the best
    submitted attempt already reaches its pass percent.

    Raises:
        NotFoundError: The lesson or exam does not exist
        ValidationError: The item is outside the course or the exam is not passed
    """
    if isinstance(item, LessonItem):
        await _validate_lesson(session, course_id, item)
    elif isinstance(item, ExamItem):
        await _validate_exam(session, user_id, course_id, item)
    else:
        raise ValidationError(f"Unsupported item: {item!r}")
    return await mark_item_completed(session, user_id, course_id, item)
