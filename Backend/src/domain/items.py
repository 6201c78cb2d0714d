# -*- coding: utf-8 -*-
"""
Course items that can be marked as completed.

A completion is either a lesson or an exam. Both variants carry the item id;
the ``item_type`` literal is the discriminator, so callers can match on the
class instead of comparing free-form strings.
"""

from dataclasses import dataclass
from typing import Literal, Union

from src.domain.enums import CompletionItemType


@dataclass(frozen=True)
class LessonItem:
    item_id: int
    item_type: Literal[CompletionItemType.LESSON] = CompletionItemType.LESSON


@dataclass(frozen=True)
class ExamItem:
    item_id: int
    item_type: Literal[CompletionItemType.EXAM] = CompletionItemType.EXAM


CompletionItem = Union[LessonItem, ExamItem]


def completion_item(item_type: CompletionItemType, item_id: int) -> CompletionItem:
    """Build the variant matching ``item_type``."""
    if item_type == CompletionItemType.LESSON:
        return LessonItem(item_id=item_id)
    if item_type == CompletionItemType.EXAM:
        return ExamItem(item_id=item_id)
    raise ValueError(f"Unknown completion item type: {item_type}")
