# -*- coding: utf-8 -*-
"""
Exam history of every user, for administrators.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.security.security import admin_only
from src.service.exams.session import get_history

from ..shared.schemas import ExamHistoryResponse

router = APIRouter()
logger = configure_logger(__name__)


@router.get(
    "/history/all",
    response_model=ExamHistoryResponse,
    dependencies=[Depends(admin_only)],
)
async def get_all_exam_history_endpoint(
    search: Optional[str] = Query(
        None, description="Filter on user, exam or course name"
    ),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db),
) -> ExamHistoryResponse:
    """
    Page through submitted attempts of all users, newest first.

    Args:
        search: Case-insensitive filter
        limit: Page size
        offset: Rows to skip
        session: Database session

    Returns:
        Page of attempts with user names
    """
    page = await get_history(
        session, user_id=None, search=search, limit=limit, offset=offset
    )
    logger.debug(f"Admin exam history: {len(page.items)} of {page.total}")
    return ExamHistoryResponse.model_validate(page)
