# -*- coding: utf-8 -*-
"""
Exam attempt store.

One row per (user, exam, attempt number). The snapshot columns are written
once on insert; answers, achieved score, status and submission time are
written once on submit through a conditional update.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logger import configure_logger
from src.domain.enums import ExamAttemptStatus
from src.domain.models import Course, Exam, ExamAttempt, User
from src.utils.exceptions import DuplicateCreateRace

logger = configure_logger(__name__)


async def find_in_progress_attempt(
    session: AsyncSession, user_id: int, exam_id: int
) -> Optional[ExamAttempt]:
    """
    Find the open attempt of a user for an exam.

    Args:
        session: Database session
        user_id: User ID
        exam_id: Exam ID

    Returns:
        The in-progress attempt or None
    """
    stmt = (
        select(ExamAttempt)
        .where(
            ExamAttempt.user_id == user_id,
            ExamAttempt.exam_id == exam_id,
            ExamAttempt.status == ExamAttemptStatus.IN_PROGRESS,
        )
        .order_by(ExamAttempt.attempt_number.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def get_attempt(
    session: AsyncSession, user_id: int, exam_id: int, attempt_number: int
) -> Optional[ExamAttempt]:
    """Fetch one attempt by its natural key."""
    stmt = select(ExamAttempt).where(
        ExamAttempt.user_id == user_id,
        ExamAttempt.exam_id == exam_id,
        ExamAttempt.attempt_number == attempt_number,
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def get_last_attempt_number(
    session: AsyncSession, user_id: int, exam_id: int
) -> int:
    """Highest attempt number of a user for an exam, 0 when there is none."""
    stmt = select(func.max(ExamAttempt.attempt_number)).where(
        ExamAttempt.user_id == user_id, ExamAttempt.exam_id == exam_id
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none() or 0


async def insert_attempt(
    session: AsyncSession,
    *,
    user_id: int,
    exam_id: int,
    course_id: int,
    attempt_number: int,
    question_order: List[int],
    option_order: List[Any],
    total_score: float,
    duration_minutes: Optional[int],
    pass_percent: float,
    started_at: datetime,
) -> ExamAttempt:
    """
    Persist a new in-progress attempt.

    Args:
        session: Database session
        user_id: User ID
        exam_id: Exam ID
        course_id: Course the exam belongs to
        attempt_number: 1-based attempt number
        question_order: Randomized question IDs
        option_order: ``[[question_id, permutation], ...]``
        total_score: Sum of question scores at creation time
        duration_minutes: Snapshotted duration, None = unlimited
        pass_percent: Snapshotted pass threshold
        started_at: Creation time

    Returns:
        The stored attempt

    Raises:
        DuplicateCreateRace: Another request inserted the same attempt number
    """
    attempt = ExamAttempt(
        user_id=user_id,
        exam_id=exam_id,
        course_id=course_id,
        attempt_number=attempt_number,
        question_order=question_order,
        option_order=option_order,
        total_score=total_score,
        duration_minutes=duration_minutes,
        pass_percent=pass_percent,
        answers=[],
        achieved_score=0.0,
        status=ExamAttemptStatus.IN_PROGRESS,
        started_at=started_at,
    )
    session.add(attempt)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        if await get_attempt(session, user_id, exam_id, attempt_number) is not None:
            raise DuplicateCreateRace(user_id, exam_id, attempt_number) from None
        raise
    await session.refresh(attempt)
    return attempt


async def mark_attempt_submitted(
    session: AsyncSession,
    attempt_id: int,
    *,
    answers: List[Dict[str, Any]],
    achieved_score: float,
    submitted_at: datetime,
) -> bool:
    """
    Close an attempt with its graded answers in a single statement.

    The update only matches while the attempt is still in progress, so of two
    concurrent submissions exactly one changes the row.

    Args:
        session: Database session
        attempt_id: Attempt ID
        answers: Graded answers
        achieved_score: Sum of awarded scores
        submitted_at: Submission time

    Returns:
        True if this call submitted the attempt
    """
    stmt = (
        update(ExamAttempt)
        .where(
            ExamAttempt.id == attempt_id,
            ExamAttempt.status == ExamAttemptStatus.IN_PROGRESS,
        )
        .values(
            answers=answers,
            achieved_score=achieved_score,
            status=ExamAttemptStatus.SUBMITTED,
            submitted_at=submitted_at,
        )
    )
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount == 1


async def list_submitted_attempts(
    session: AsyncSession, user_id: int, exam_id: int, course_id: int
) -> List[ExamAttempt]:
    """All submitted attempts of a user for an exam within a course."""
    stmt = (
        select(ExamAttempt)
        .where(
            ExamAttempt.user_id == user_id,
            ExamAttempt.exam_id == exam_id,
            ExamAttempt.course_id == course_id,
            ExamAttempt.status == ExamAttemptStatus.SUBMITTED,
        )
        .order_by(ExamAttempt.attempt_number)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_latest_submitted_attempt(
    session: AsyncSession, user_id: int, exam_id: int
) -> Optional[ExamAttempt]:
    """Most recently submitted attempt of a user for an exam."""
    stmt = (
        select(ExamAttempt)
        .where(
            ExamAttempt.user_id == user_id,
            ExamAttempt.exam_id == exam_id,
            ExamAttempt.status == ExamAttemptStatus.SUBMITTED,
        )
        .order_by(ExamAttempt.submitted_at.desc(), ExamAttempt.attempt_number.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def list_submitted_history(
    session: AsyncSession,
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> Tuple[List[Tuple[ExamAttempt, Optional[str], Optional[str], Optional[User]]], int]:
    """
    Page through submitted attempts, newest first.

    Args:
        session: Database session
        user_id: Restrict to one user; None for every user
        search: Case-insensitive filter on exam or course title, plus user
            name and email when listing every user
        limit: Page size
        offset: Rows to skip

    Returns:
        Tuple of (rows of (attempt, exam title, course title, user), total)
    """
    conditions = [ExamAttempt.status == ExamAttemptStatus.SUBMITTED]
    if user_id is not None:
        conditions.append(ExamAttempt.user_id == user_id)
    if search:
        pattern = f"%{search.strip().lower()}%"
        matches = [
            func.lower(Exam.title).like(pattern),
            func.lower(Course.title).like(pattern),
        ]
        if user_id is None:
            matches.append(func.lower(User.name).like(pattern))
            matches.append(func.lower(User.email).like(pattern))
        conditions.append(or_(*matches))

    def joined(stmt):
        return (
            stmt.select_from(ExamAttempt)
            .outerjoin(Exam, Exam.id == ExamAttempt.exam_id)
            .outerjoin(Course, Course.id == ExamAttempt.course_id)
            .outerjoin(User, User.id == ExamAttempt.user_id)
            .where(and_(*conditions))
        )

    count_stmt = joined(select(func.count(ExamAttempt.id)))
    total = (await session.execute(count_stmt)).scalar_one()

    stmt = (
        joined(select(ExamAttempt, Exam.title, Course.title, User))
        .order_by(ExamAttempt.submitted_at.desc(), ExamAttempt.id.desc())
        .offset(offset)
        .limit(limit)
    )
    rows = (await session.execute(stmt)).all()
    return [tuple(row) for row in rows], int(total)


async def purge_attempts_for_course(
    session: AsyncSession, user_id: int, course_id: int
) -> int:
    """
    Delete every attempt of a user in a course. The caller commits.

    Returns:
        Number of deleted attempts
    """
    stmt = delete(ExamAttempt).where(
        ExamAttempt.user_id == user_id, ExamAttempt.course_id == course_id
    )
    result = await session.execute(stmt)
    logger.debug(
        f"Purged {result.rowcount} attempts of user {user_id} in course {course_id}"
    )
    return result.rowcount
