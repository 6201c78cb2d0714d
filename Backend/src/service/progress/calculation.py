# -*- coding: utf-8 -*-
"""
Course progress calculation.

Progress is always derived from the raw completion records, never
incremented in place, so recalculating is safe at any time.
"""

import math
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.repository.exams import count_course_items
from src.repository.progress import count_completions, update_enrollment_progress

logger = configure_logger(__name__)


@dataclass(frozen=True)
class ProgressSnapshot:
    completed_count: int
    total_count: int
    progress: int


def calculate_progress_percent(completed_count: int, total_count: int) -> int:
    """
    Whole-number completion percentage, capped at 100.

    Args:
        completed_count: Completed items
        total_count: Items in the course

    Returns:
        ``floor(completed / total * 100)``, 0 for an empty course
    """
    if total_count <= 0:
        return 0
    return min(100, math.floor(completed_count / total_count * 100))


async def calculate_course_progress(
    session: AsyncSession, user_id: int, course_id: int, commit: bool = True
) -> ProgressSnapshot:
    """
    Recount the completions of a user and store them on the enrollment.

    Args:
        session: Database session
        user_id: User ID
        course_id: Course ID
        commit: Commit the enrollment update

    Returns:
        ProgressSnapshot
    """
    completed_count = await count_completions(session, user_id, course_id)
    total_count = await count_course_items(session, course_id)
    progress = calculate_progress_percent(completed_count, total_count)

    enrolled = await update_enrollment_progress(
        session, user_id, course_id, completed_count, total_count, progress
    )
    if commit:
        await session.commit()

    if not enrolled:
        logger.debug(
            f"User {user_id} is not enrolled in course {course_id}, progress not stored"
        )
    logger.debug(
        f"Course {course_id} progress for user {user_id}: "
        f"{completed_count}/{total_count} ({progress}%)"
    )
    return ProgressSnapshot(
        completed_count=completed_count, total_count=total_count, progress=progress
    )
