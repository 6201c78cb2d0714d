# -*- coding: utf-8 -*-
"""
Pydantic schemas for course progress.

The request body is a tagged union on ``item_type``: a lesson or an exam.
"""

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.domain.enums import CompletionItemType
from src.domain.items import CompletionItem, ExamItem, LessonItem


class LessonItemSchema(BaseModel):
    item_type: Literal["lesson"]
    item_id: int = Field(gt=0)

    def to_domain(self) -> CompletionItem:
        return LessonItem(item_id=self.item_id)


class ExamItemSchema(BaseModel):
    item_type: Literal["exam"]
    item_id: int = Field(gt=0)

    def to_domain(self) -> CompletionItem:
        return ExamItem(item_id=self.item_id)


# tagged on item_type
CompletionItemSchema = Union[LessonItemSchema, ExamItemSchema]


class ProgressSnapshotRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    completed_count: int
    total_count: int
    progress: int


class CompletedItemRead(BaseModel):
    item_type: CompletionItemType
    item_id: int
    completed_at: datetime


class CourseProgressRead(BaseModel):
    user_id: int
    course_id: int
    items: List[CompletedItemRead]
    total: int
    limit: int
    offset: int
    progress: Optional[int] = None
    completed_count: Optional[int] = None
    total_count: Optional[int] = None
