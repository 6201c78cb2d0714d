# -*- coding: utf-8 -*-
"""
Enrollment service.

Unenrolling wipes the user's exam attempts and completion records for the
course, so a later re-enrollment starts again from attempt 1 and 0%.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.enums import EnrollmentRole
from src.domain.models import Course, Enrollment
from src.repository.base import find_item
from src.repository.enrollment import create_enrollment, delete_enrollment
from src.repository.exams import count_course_items, purge_attempts_for_course
from src.repository.progress import purge_completion_records
from src.utils.exceptions import NotFoundError, ValidationError

logger = configure_logger(__name__)


@dataclass(frozen=True)
class UnenrollResult:
    user_id: int
    course_id: int
    purged_attempts: int
    purged_completions: int


async def enroll_user(
    session: AsyncSession,
    user_id: int,
    course_id: int,
    role: EnrollmentRole = EnrollmentRole.STUDENT,
) -> Enrollment:
    """
    Enroll a user in a course.

    Args:
        session: Database session
        user_id: User ID
        course_id: Course ID
        role: Role inside the course

    Returns:
        The new enrollment

    Raises:
        NotFoundError: The course does not exist
        ValidationError: A teacher tries to enroll in their own course
        ConflictError: The user is already enrolled
    """
    course = await find_item(session, Course, course_id)
    if course is None:
        raise NotFoundError("Course", course_id)
    if role == EnrollmentRole.TEACHER and course.teacher_id == user_id:
        raise ValidationError("Teacher cannot enroll in their own course")

    total_count = await count_course_items(session, course_id)
    return await create_enrollment(
        session, user_id, course_id, role=role, total_count=total_count
    )


async def unenroll_user(
    session: AsyncSession, user_id: int, course_id: int
) -> UnenrollResult:
    """
    Remove an enrollment together with the attempts and completions it owns.

    Everything is deleted in one transaction.

    Raises:
        NotFoundError: The user is not enrolled in the course
    """
    removed = await delete_enrollment(session, user_id, course_id)
    if not removed:
        await session.rollback()
        raise NotFoundError(
            "Enrollment", details=f"user {user_id} in course {course_id}"
        )

    purged_attempts = await purge_attempts_for_course(session, user_id, course_id)
    purged_completions = await purge_completion_records(session, user_id, course_id)
    await session.commit()

    logger.info(
        f"User {user_id} unenrolled from course {course_id}: "
        f"{purged_attempts} attempts, {purged_completions} completions removed"
    )
    return UnenrollResult(
        user_id=user_id,
        course_id=course_id,
        purged_attempts=purged_attempts,
        purged_completions=purged_completions,
    )
