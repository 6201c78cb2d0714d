# -*- coding: utf-8 -*-
"""
Course progress routes.

* POST /api/v1/progress/courses/{course_id} - mark a lesson or exam completed
* GET  /api/v1/progress/courses/{course_id} - completed items and percentage

A student only reads their own progress. A teacher or admin may pass
``user_id`` to read someone else's. Everybody marks only their own items.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.domain.enums import CompletionItemType, Role
from src.security.security import authenticated, get_current_user
from src.service.progress import complete_item_for_user, get_course_progress

from .schemas import (CompletedItemRead, CompletionItemSchema,
                      CourseProgressRead, ProgressSnapshotRead)

router = APIRouter()
logger = configure_logger(__name__)


def _resolve_user_id(requested: Optional[int], jwt_payload: dict) -> int:
    """
    User whose progress is read.

    Students always get their own ``sub``; teachers and admins get
    ``requested`` when given.
    """
    own_id = int(jwt_payload["sub"])
    if Role(jwt_payload["role"]) == Role.STUDENT or requested is None:
        return own_id
    return requested


@router.post(
    "/courses/{course_id}",
    response_model=ProgressSnapshotRead,
    dependencies=[Depends(authenticated)],
)
async def mark_item_completed_endpoint(
    course_id: int,
    item: Annotated[CompletionItemSchema, Body(discriminator="item_type")],
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> ProgressSnapshotRead:
    """
    Mark a lesson or a passed exam of the course as completed by the caller.

    Args:
        course_id: Course ID
        item: ``{"item_type": "lesson" | "exam", "item_id": int}``
        session: Database session
        current_user: Current user data

    Returns:
        Course progress after the update
    """
    user_id = int(current_user["sub"])
    logger.info(
        f"Progress update: user {user_id}, course {course_id}, "
        f"{item.item_type} {item.item_id}"
    )
    snapshot = await complete_item_for_user(
        session, user_id, course_id, item.to_domain()
    )
    return ProgressSnapshotRead.model_validate(snapshot)


@router.get(
    "/courses/{course_id}",
    response_model=CourseProgressRead,
    dependencies=[Depends(authenticated)],
)
async def get_course_progress_endpoint(
    course_id: int,
    user_id: Optional[int] = Query(None, description="Teachers and admins only"),
    item_type: Optional[CompletionItemType] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> CourseProgressRead:
    target_user_id = _resolve_user_id(user_id, current_user)
    page = await get_course_progress(
        session,
        target_user_id,
        course_id,
        item_type=item_type,
        limit=limit,
        offset=offset,
    )
    return CourseProgressRead(
        user_id=page.user_id,
        course_id=page.course_id,
        items=[
            CompletedItemRead(
                item_type=completed.item.item_type,
                item_id=completed.item.item_id,
                completed_at=completed.completed_at,
            )
            for completed in page.items
        ],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        progress=page.progress,
        completed_count=page.completed_count,
        total_count=page.total_count,
    )
