# -*- coding: utf-8 -*-
"""
Pass determination.

Two questions are answered here and they must stay separate:

* ``is_attempt_passed`` - did this one attempt reach its pass percent
  (shown to the user right after submitting);
* ``check_exam_passed`` - does the best submitted attempt reach its own
  pass percent (grants completion credit for the course).
"""

from typing import Any, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.repository.exams import list_submitted_attempts


def attempt_percent(achieved_score: float, total_score: float) -> float:
    """Score percentage, 0 when the total is not positive."""
    if not total_score or total_score <= 0:
        return 0.0
    return achieved_score / total_score * 100


def is_attempt_passed(
    achieved_score: float, total_score: float, pass_percent: float
) -> bool:
    if not total_score or total_score <= 0:
        return False
    return attempt_percent(achieved_score, total_score) >= pass_percent


def best_attempt(attempts: Sequence[Any]) -> Optional[Any]:
    """The attempt with the highest achieved score; the earliest one on ties."""
    if not attempts:
        return None
    return max(attempts, key=lambda attempt: attempt.achieved_score)


def is_best_attempt_passed(attempts: Sequence[Any]) -> bool:
    best = best_attempt(attempts)
    if best is None:
        return False
    return is_attempt_passed(best.achieved_score, best.total_score, best.pass_percent)


async def check_exam_passed(
    session: AsyncSession, user_id: int, exam_id: int, course_id: int
) -> bool:
    """
    Apply the best-attempt rule to every submitted attempt of a user.

    Args:
        session: Database session
        user_id: User ID
        exam_id: Exam ID
        course_id: Course ID

    Returns:
        True if the best attempt reached its pass percent
    """
    attempts = await list_submitted_attempts(session, user_id, exam_id, course_id)
    return is_best_attempt_passed(attempts)
