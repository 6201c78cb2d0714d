"""
Repositories of the exam engine: question bank reads and the attempt store.
"""

from .attempts import (find_in_progress_attempt, get_attempt,
                       get_last_attempt_number, get_latest_submitted_attempt,
                       insert_attempt, list_submitted_attempts,
                       list_submitted_history, mark_attempt_submitted,
                       purge_attempts_for_course)
from .question_bank import (count_course_items, get_course_id_for_section,
                            get_exam_by_id, get_lesson_course_id,
                            get_questions_by_ids, list_exam_questions)

__all__ = [
    "count_course_items",
    "find_in_progress_attempt",
    "get_attempt",
    "get_course_id_for_section",
    "get_exam_by_id",
    "get_last_attempt_number",
    "get_latest_submitted_attempt",
    "get_lesson_course_id",
    "get_questions_by_ids",
    "insert_attempt",
    "list_exam_questions",
    "list_submitted_attempts",
    "list_submitted_history",
    "mark_attempt_submitted",
    "purge_attempts_for_course",
]
