# -*- coding: utf-8 -*-
"""
LearnHub/Backend/src/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Enumerations of the LearnHub domain.

Roles, lesson formats, exam attempt states and the kinds of course items
that can be completed.
"""

import enum


class Role(str, enum.Enum):
    """Roles available in the system."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class EnrollmentRole(str, enum.Enum):
    """Role a user holds inside a single course."""

    STUDENT = "student"
    TEACHER = "teacher"
    ASSISTANT = "assistant"


class LessonType(str, enum.Enum):
    """Content delivery formats for lessons."""

    VIDEO = "video"
    DOCUMENT = "document"


class ExamAttemptStatus(str, enum.Enum):
    """Lifecycle of an exam attempt."""

    IN_PROGRESS = "in_progress"  # snapshot created, answers not yet submitted
    SUBMITTED = "submitted"  # write-once, graded


class CompletionItemType(str, enum.Enum):
    """Course items that produce completion records."""

    LESSON = "lesson"
    EXAM = "exam"
