# -*- coding: utf-8 -*-
"""
Result of the latest submitted attempt.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.security.security import authenticated, get_current_user
from src.service.exams.session import get_status

from ..shared.cache import get_exam_status_cached, set_exam_status_cached
from ..shared.schemas import ExamStatusResponse

router = APIRouter()
logger = configure_logger(__name__)


@router.get(
    "/{exam_id}/status",
    response_model=ExamStatusResponse,
    dependencies=[Depends(authenticated)],
)
async def get_exam_status_endpoint(
    exam_id: int,
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> ExamStatusResponse:
    """
    Return the latest submitted attempt of the caller, or ``taken=false``.

    Args:
        exam_id: Exam ID
        session: Database session
        current_user: Current user data

    Returns:
        Status of the exam for the caller
    """
    user_id = int(current_user["sub"])

    cached = await get_exam_status_cached(user_id, exam_id)
    if cached is not None:
        logger.debug(f"Exam status cache hit: user {user_id}, exam {exam_id}")
        return ExamStatusResponse.model_validate(cached)

    try:
        view = await get_status(session, user_id, exam_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get status of exam {exam_id} for user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get exam status",
        )

    if view is None:
        # not cached: a submit may be committing right now
        return ExamStatusResponse(taken=False)

    response = ExamStatusResponse.model_validate(view)
    await set_exam_status_cached(user_id, exam_id, response.model_dump(mode="json"))
    return response
