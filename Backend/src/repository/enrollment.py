# -*- coding: utf-8 -*-
"""
Enrollment rows: who is attached to which course.
"""

from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.enums import EnrollmentRole
from src.domain.models import Enrollment
from src.utils.exceptions import ConflictError

logger = configure_logger(__name__)


async def create_enrollment(
    session: AsyncSession,
    user_id: int,
    course_id: int,
    role: EnrollmentRole = EnrollmentRole.STUDENT,
    total_count: int = 0,
) -> Enrollment:
    """
    Enroll a user in a course.

    Raises:
        ConflictError: The user is already enrolled
    """
    enrollment = Enrollment(
        user_id=user_id,
        course_id=course_id,
        role=role,
        completed_count=0,
        total_count=total_count,
        progress=0,
    )
    session.add(enrollment)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(
            f"User {user_id} is already enrolled in course {course_id}"
        ) from None
    await session.refresh(enrollment)
    logger.info(f"User {user_id} enrolled in course {course_id} as {role.value}")
    return enrollment


async def delete_enrollment(session: AsyncSession, user_id: int, course_id: int) -> bool:
    """Delete an enrollment. The caller commits. Returns False if none existed."""
    stmt = delete(Enrollment).where(
        Enrollment.user_id == user_id, Enrollment.course_id == course_id
    )
    result = await session.execute(stmt)
    return result.rowcount > 0


async def list_enrollments(
    session: AsyncSession,
    user_id: Optional[int] = None,
    course_id: Optional[int] = None,
    limit: int = 20,
    offset: int = 0,
) -> Tuple[List[Enrollment], int]:
    """
    Page through enrollments of a user or of a course, newest first.

    Args:
        session: Database session
        user_id: Filter by user
        course_id: Filter by course
        limit: Page size
        offset: Rows to skip

    Returns:
        Tuple of (enrollments, total)
    """
    conditions = []
    if user_id is not None:
        conditions.append(Enrollment.user_id == user_id)
    if course_id is not None:
        conditions.append(Enrollment.course_id == course_id)

    total_stmt = select(func.count(Enrollment.id)).where(*conditions)
    total = (await session.execute(total_stmt)).scalar_one()

    stmt = (
        select(Enrollment)
        .where(*conditions)
        .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), int(total)
