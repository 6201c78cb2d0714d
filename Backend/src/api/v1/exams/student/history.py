# -*- coding: utf-8 -*-
"""
Exam history of the caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.security.security import authenticated, get_current_user
from src.service.exams.session import get_history

from ..shared.schemas import ExamHistoryResponse

router = APIRouter()
logger = configure_logger(__name__)


@router.get(
    "/history",
    response_model=ExamHistoryResponse,
    dependencies=[Depends(authenticated)],
)
async def get_my_exam_history_endpoint(
    search: Optional[str] = Query(None, description="Filter on exam or course title"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> ExamHistoryResponse:
    user_id = int(current_user["sub"])
    logger.debug(f"Exam history of user {user_id}: search={search!r}, offset={offset}")
    page = await get_history(
        session, user_id=user_id, search=search, limit=limit, offset=offset
    )
    return ExamHistoryResponse.model_validate(page)
