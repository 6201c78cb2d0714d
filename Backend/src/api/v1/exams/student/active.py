# -*- coding: utf-8 -*-
"""
Starting or resuming an exam attempt.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.security.security import authenticated, get_current_user
from src.service.exams.session import get_or_create_active

from ..shared.schemas import ActiveExamResponse

router = APIRouter()
logger = configure_logger(__name__)


@router.get(
    "/{exam_id}/active",
    response_model=ActiveExamResponse,
    dependencies=[Depends(authenticated)],
)
async def get_active_exam_endpoint(
    exam_id: int,
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> ActiveExamResponse:
    """
    Return the open attempt of the caller, creating it when needed.

    Args:
        exam_id: Exam ID
        session: Database session
        current_user: Current user data

    Returns:
        Randomized questions of the attempt, without correct answers

    Raises:
        HTTPException: If the exam is missing, empty or inconsistent
    """
    user_id = int(current_user["sub"])
    logger.debug(f"Active exam requested: user {user_id}, exam {exam_id}")

    try:
        view = await get_or_create_active(session, user_id, exam_id)
        return ActiveExamResponse.model_validate(view)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Failed to open exam {exam_id} for user {user_id}: "
            f"{type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to open exam",
        )
