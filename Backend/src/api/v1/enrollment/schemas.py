# -*- coding: utf-8 -*-
"""
Pydantic schemas for enrollments.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict

from src.domain.enums import EnrollmentRole


class EnrollmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    course_id: int
    role: EnrollmentRole
    completed_count: int
    total_count: int
    progress: int
    enrolled_at: datetime


class EnrollmentPage(BaseModel):
    items: List[EnrollmentRead]
    total: int
    limit: int
    offset: int


class UnenrollRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    course_id: int
    purged_attempts: int
    purged_completions: int
