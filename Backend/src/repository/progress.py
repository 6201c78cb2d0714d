# -*- coding: utf-8 -*-
"""
Completion records and enrollment progress counters.
"""

from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.enums import CompletionItemType
from src.domain.models import CompletionRecord, Enrollment

logger = configure_logger(__name__)


def _insert_for(session: AsyncSession):
    dialect = session.bind.dialect.name if session.bind is not None else ""
    if dialect == "sqlite":
        return sqlite_insert
    return pg_insert


async def upsert_completion_record(
    session: AsyncSession,
    user_id: int,
    course_id: int,
    item_type: CompletionItemType,
    item_id: int,
) -> bool:
    """
    Insert a completion record unless it already exists.

    Concurrent calls for the same item resolve on the unique constraint, so
    the record is never duplicated. The caller commits.

    Args:
        session: Database session
        user_id: User ID
        course_id: Course ID
        item_type: Lesson or exam
        item_id: Lesson or exam ID

    Returns:
        True if a new record was written
    """
    insert = _insert_for(session)
    stmt = (
        insert(CompletionRecord.__table__)
        .values(
            user_id=user_id,
            course_id=course_id,
            item_type=item_type,
            item_id=item_id,
        )
        .on_conflict_do_nothing(
            index_elements=["user_id", "course_id", "item_type", "item_id"]
        )
    )
    result = await session.execute(stmt)
    created = bool(result.rowcount)
    logger.debug(
        f"Completion {item_type.value}:{item_id} for user {user_id} in course "
        f"{course_id}: {'created' if created else 'already present'}"
    )
    return created


async def count_completions(session: AsyncSession, user_id: int, course_id: int) -> int:
    """Number of completion records of a user in a course."""
    stmt = select(func.count(CompletionRecord.id)).where(
        CompletionRecord.user_id == user_id, CompletionRecord.course_id == course_id
    )
    return int((await session.execute(stmt)).scalar_one())


async def list_completed_items(
    session: AsyncSession,
    user_id: int,
    course_id: int,
    item_type: Optional[CompletionItemType] = None,
    limit: int = 100,
    offset: int = 0,
) -> Tuple[List[CompletionRecord], int]:
    """
    Page through the completion records of a user in a course.

    Args:
        session: Database session
        user_id: User ID
        course_id: Course ID
        item_type: Only lessons or only exams; None for both
        limit: Page size
        offset: Rows to skip

    Returns:
        Tuple of (records, total)
    """
    conditions = [
        CompletionRecord.user_id == user_id,
        CompletionRecord.course_id == course_id,
    ]
    if item_type is not None:
        conditions.append(CompletionRecord.item_type == item_type)

    total_stmt = select(func.count(CompletionRecord.id)).where(*conditions)
    total = (await session.execute(total_stmt)).scalar_one()

    stmt = (
        select(CompletionRecord)
        .where(*conditions)
        .order_by(CompletionRecord.completed_at, CompletionRecord.id)
        .offset(offset)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), int(total)


async def get_enrollment(
    session: AsyncSession, user_id: int, course_id: int
) -> Optional[Enrollment]:
    """Fetch the enrollment of a user in a course."""
    stmt = select(Enrollment).where(
        Enrollment.user_id == user_id, Enrollment.course_id == course_id
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def update_enrollment_progress(
    session: AsyncSession,
    user_id: int,
    course_id: int,
    completed_count: int,
    total_count: int,
    progress: int,
) -> bool:
    """
    Write the progress counters onto the enrollment. The caller commits.

    Returns:
        False when the user is not enrolled
    """
    stmt = (
        update(Enrollment)
        .where(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
        .values(
            completed_count=completed_count,
            total_count=total_count,
            progress=progress,
        )
    )
    result = await session.execute(stmt)
    return result.rowcount > 0


async def purge_completion_records(
    session: AsyncSession, user_id: int, course_id: int
) -> int:
    """Delete every completion record of a user in a course. The caller commits."""
    stmt = delete(CompletionRecord).where(
        CompletionRecord.user_id == user_id, CompletionRecord.course_id == course_id
    )
    result = await session.execute(stmt)
    return result.rowcount
