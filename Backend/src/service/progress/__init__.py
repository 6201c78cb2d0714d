# -*- coding: utf-8 -*-
"""
Course progress: completion records and the enrollment percentage.
"""

from src.service.progress.aggregation import (CompletedItem,
                                              CourseProgressPage,
                                              get_course_progress)
from src.service.progress.calculation import (ProgressSnapshot,
                                              calculate_course_progress,
                                              calculate_progress_percent)
from src.service.progress.updates import (complete_item_for_user,
                                          mark_item_completed)

__all__ = [
    "CompletedItem",
    "CourseProgressPage",
    "ProgressSnapshot",
    "calculate_course_progress",
    "calculate_progress_percent",
    "complete_item_for_user",
    "get_course_progress",
    "mark_item_completed",
]
