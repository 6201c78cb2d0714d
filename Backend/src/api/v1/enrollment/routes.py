# -*- coding: utf-8 -*-
"""
Enrollment routes.

* POST   /api/v1/enrollments/{course_id}        - enroll
* DELETE /api/v1/enrollments/{course_id}        - unenroll, wiping attempts and progress
* GET    /api/v1/enrollments/me                 - caller's enrollments
* GET    /api/v1/enrollments/course/{course_id} - enrollments of a course (staff)

Admins may act on another user with ``user_id``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.v1.exams.shared.cache import invalidate_user_exam_caches
from src.clients.database_client import get_db
from src.config.logger import configure_logger
from src.domain.enums import EnrollmentRole, Role
from src.repository.enrollment import list_enrollments
from src.security.security import (admin_or_teacher, authenticated,
                                   get_current_user)
from src.service.enrollment import enroll_user, unenroll_user
from src.utils.exceptions import PermissionDeniedError

from .schemas import EnrollmentPage, EnrollmentRead, UnenrollRead

router = APIRouter()
logger = configure_logger(__name__)


def _target_user_id(requested: Optional[int], jwt_payload: dict) -> int:
    own_id = int(jwt_payload["sub"])
    if requested is None or requested == own_id:
        return own_id
    if Role(jwt_payload["role"]) != Role.ADMIN:
        raise PermissionDeniedError("Only admins can manage other users' enrollments")
    return requested


@router.get(
    "/me",
    response_model=EnrollmentPage,
    dependencies=[Depends(authenticated)],
)
async def list_my_enrollments_endpoint(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> EnrollmentPage:
    enrollments, total = await list_enrollments(
        session, user_id=int(current_user["sub"]), limit=limit, offset=offset
    )
    return EnrollmentPage(
        items=[EnrollmentRead.model_validate(e) for e in enrollments],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/course/{course_id}",
    response_model=EnrollmentPage,
    dependencies=[Depends(admin_or_teacher)],
)
async def list_course_enrollments_endpoint(
    course_id: int,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db),
) -> EnrollmentPage:
    enrollments, total = await list_enrollments(
        session, course_id=course_id, limit=limit, offset=offset
    )
    return EnrollmentPage(
        items=[EnrollmentRead.model_validate(e) for e in enrollments],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/{course_id}",
    response_model=EnrollmentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(authenticated)],
)
async def enroll_endpoint(
    course_id: int,
    role: EnrollmentRole = Query(EnrollmentRole.STUDENT),
    user_id: Optional[int] = Query(None, description="Admins only"),
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> EnrollmentRead:
    """
    Enroll the caller (or, for admins, ``user_id``) in a course.

    Students always enroll with the student role.
    """
    target_id = _target_user_id(user_id, current_user)
    if Role(current_user["role"]) == Role.STUDENT:
        role = EnrollmentRole.STUDENT
    enrollment = await enroll_user(session, target_id, course_id, role=role)
    return EnrollmentRead.model_validate(enrollment)


@router.delete(
    "/{course_id}",
    response_model=UnenrollRead,
    dependencies=[Depends(authenticated)],
)
async def unenroll_endpoint(
    course_id: int,
    user_id: Optional[int] = Query(None, description="Admins only"),
    session: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
) -> UnenrollRead:
    """
    Unenroll from a course. Exam attempts and completions of the course are
    deleted with the enrollment.
    """
    target_id = _target_user_id(user_id, current_user)
    result = await unenroll_user(session, target_id, course_id)
    await invalidate_user_exam_caches(target_id)
    return UnenrollRead.model_validate(result)
