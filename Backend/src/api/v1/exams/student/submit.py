# -*- coding: utf-8 -*-
"""
Submitting an exam attempt.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.security.security import authenticated, get_current_user
from src.service.exams.session import submit
from src.service.exams.views import SubmittedAnswer

from ..shared.cache import invalidate_exam_status_cache
from ..shared.schemas import ExamSubmitRequest, SubmissionResponse

router = APIRouter()
logger = configure_logger(__name__)


@router.post(
    "/{exam_id}/submit",
    response_model=SubmissionResponse,
    dependencies=[Depends(authenticated)],
)
async def submit_exam_endpoint(
    exam_id: int,
    payload: ExamSubmitRequest,
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> SubmissionResponse:
    """
    Grade and close an attempt of the caller.

    Args:
        exam_id: Exam ID
        payload: Attempt number and answers
        session: Database session
        current_user: Current user data

    Returns:
        Score of the attempt and pass flags

    Raises:
        HTTPException: If the attempt is not open or grading fails
    """
    user_id = int(current_user["sub"])
    logger.info(
        f"Submit requested: user {user_id}, exam {exam_id}, attempt {payload.attempt}, "
        f"{len(payload.answers)} answers"
    )

    answers = [
        SubmittedAnswer(
            question_id=answer.question_id,
            selected_option_indexes=list(answer.selected_option_indexes),
        )
        for answer in payload.answers
    ]

    try:
        result = await submit(session, user_id, exam_id, payload.attempt, answers)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Failed to submit exam {exam_id} for user {user_id}: "
            f"{type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit exam",
        )

    await invalidate_exam_status_cache(user_id, exam_id)
    return SubmissionResponse.model_validate(result)
