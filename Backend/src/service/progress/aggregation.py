# -*- coding: utf-8 -*-
"""
Read side of course progress.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import CompletionItemType
from src.domain.items import CompletionItem, completion_item
from src.domain.models import Course
from src.repository.base import find_item
from src.repository.progress import get_enrollment, list_completed_items
from src.utils.exceptions import NotFoundError


@dataclass(frozen=True)
class CompletedItem:
    item: CompletionItem
    completed_at: datetime


@dataclass
class CourseProgressPage:
    user_id: int
    course_id: int
    items: List[CompletedItem]
    total: int
    limit: int
    offset: int
    progress: Optional[int] = None
    completed_count: Optional[int] = None
    total_count: Optional[int] = None


async def get_course_progress(
    session: AsyncSession,
    user_id: int,
    course_id: int,
    item_type: Optional[CompletionItemType] = None,
    limit: int = 20,
    offset: int = 0,
) -> CourseProgressPage:
    """
    List what a user completed in a course, with the enrollment counters.

    Args:
        session: Database session
        user_id: User whose progress is read
        course_id: Course ID
        item_type: Filter on lessons or exams
        limit: Page size
        offset: Rows to skip

    Returns:
        CourseProgressPage

    Raises:
        NotFoundError: The course does not exist
    """
    if await find_item(session, Course, course_id) is None:
        raise NotFoundError("Course", course_id)

    records, total = await list_completed_items(
        session, user_id, course_id, item_type=item_type, limit=limit, offset=offset
    )
    page = CourseProgressPage(
        user_id=user_id,
        course_id=course_id,
        items=[
            CompletedItem(
                item=completion_item(record.item_type, record.item_id),
                completed_at=record.completed_at,
            )
            for record in records
        ],
        total=total,
        limit=limit,
        offset=offset,
    )

    enrollment = await get_enrollment(session, user_id, course_id)
    if enrollment is not None:
        page.progress = enrollment.progress
        page.completed_count = enrollment.completed_count
        page.total_count = enrollment.total_count
    return page
