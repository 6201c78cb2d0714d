# -*- coding: utf-8 -*-
"""
Unit tests for completion records and course progress
"""

import pytest

from src.domain.enums import CompletionItemType
from src.domain.items import ExamItem, LessonItem
from src.repository.progress import count_completions, get_enrollment
from src.service.progress import (calculate_course_progress,
                                  calculate_progress_percent,
                                  complete_item_for_user, get_course_progress,
                                  mark_item_completed)
from src.utils.exceptions import NotFoundError, ValidationError
from tests.fixtures import (create_test_attempt, create_test_course,
                            create_test_enrollment, create_test_exam,
                            create_test_lesson, create_test_section,
                            create_test_user)


async def _course_with_content(session):
    """Course with two lessons and one exam, student 1 enrolled."""
    user = await create_test_user(session, user_id=1)
    course = await create_test_course(session)
    section = await create_test_section(session, course.id)
    first = await create_test_lesson(session, section.id, "Lesson 1", order=1)
    second = await create_test_lesson(session, section.id, "Lesson 2", order=2)
    exam = await create_test_exam(session, section.id)
    await create_test_enrollment(session, user.id, course.id)
    return user, course, [first, second], exam


class TestCalculateProgressPercent:
    def test_rounds_down(self):
        assert calculate_progress_percent(1, 3) == 33
        assert calculate_progress_percent(2, 3) == 66

    def test_empty_course(self):
        assert calculate_progress_percent(0, 0) == 0

    def test_capped_at_hundred(self):
        assert calculate_progress_percent(5, 4) == 100


class TestMarkItemCompleted:
    @pytest.mark.asyncio
    async def test_lesson_updates_enrollment(self, test_session):
        # Arrange
        user, course, lessons, _ = await _course_with_content(test_session)

        # Act
        snapshot = await mark_item_completed(
            test_session, user.id, course.id, LessonItem(item_id=lessons[0].id)
        )

        # Assert
        assert snapshot.completed_count == 1
        assert snapshot.total_count == 3
        assert snapshot.progress == 33
        enrollment = await get_enrollment(test_session, user.id, course.id)
        assert enrollment.progress == 33
        assert enrollment.completed_count == 1

    @pytest.mark.asyncio
    async def test_repeated_completion_is_idempotent(self, test_session):
        user, course, lessons, _ = await _course_with_content(test_session)
        item = LessonItem(item_id=lessons[0].id)

        await mark_item_completed(test_session, user.id, course.id, item)
        snapshot = await mark_item_completed(test_session, user.id, course.id, item)

        assert snapshot.completed_count == 1
        assert await count_completions(test_session, user.id, course.id) == 1

    @pytest.mark.asyncio
    async def test_same_id_different_type_counts_separately(self, test_session):
        user, course, lessons, _ = await _course_with_content(test_session)

        await mark_item_completed(test_session, user.id, course.id, LessonItem(item_id=1))
        await mark_item_completed(test_session, user.id, course.id, ExamItem(item_id=1))

        assert await count_completions(test_session, user.id, course.id) == 2

    @pytest.mark.asyncio
    async def test_recalculation_without_enrollment(self, test_session):
        user = await create_test_user(test_session, user_id=3)
        course = await create_test_course(test_session)

        snapshot = await calculate_course_progress(test_session, user.id, course.id)

        assert snapshot.progress == 0
        assert await get_enrollment(test_session, user.id, course.id) is None


class TestCompleteItemForUser:
    @pytest.mark.asyncio
    async def test_lesson_of_course(self, test_session):
        user, course, lessons, _ = await _course_with_content(test_session)

        snapshot = await complete_item_for_user(
            test_session, user.id, course.id, LessonItem(item_id=lessons[1].id)
        )

        assert snapshot.completed_count == 1

    @pytest.mark.asyncio
    async def test_unknown_lesson(self, test_session):
        user, course, _, _ = await _course_with_content(test_session)

        with pytest.raises(NotFoundError):
            await complete_item_for_user(
                test_session, user.id, course.id, LessonItem(item_id=999)
            )

    @pytest.mark.asyncio
    async def test_lesson_of_other_course(self, test_session):
        # Arrange
        user, course, _, _ = await _course_with_content(test_session)
        other_course = await create_test_course(test_session, title="Other")
        other_section = await create_test_section(test_session, other_course.id)
        foreign_lesson = await create_test_lesson(test_session, other_section.id)

        # Act / Assert
        with pytest.raises(ValidationError):
            await complete_item_for_user(
                test_session, user.id, course.id, LessonItem(item_id=foreign_lesson.id)
            )
        assert await count_completions(test_session, user.id, course.id) == 0

    @pytest.mark.asyncio
    async def test_exam_not_passed(self, test_session):
        # Arrange
        user, course, _, exam = await _course_with_content(test_session)
        await create_test_attempt(
            test_session, user.id, exam.id, course.id, 1, achieved_score=2.0
        )

        # Act / Assert
        with pytest.raises(ValidationError):
            await complete_item_for_user(
                test_session, user.id, course.id, ExamItem(item_id=exam.id)
            )

    @pytest.mark.asyncio
    async def test_exam_passed(self, test_session):
        user, course, _, exam = await _course_with_content(test_session)
        await create_test_attempt(
            test_session, user.id, exam.id, course.id, 1, achieved_score=9.0
        )

        snapshot = await complete_item_for_user(
            test_session, user.id, course.id, ExamItem(item_id=exam.id)
        )

        assert snapshot.completed_count == 1
        assert snapshot.progress == 33

    @pytest.mark.asyncio
    async def test_unknown_exam(self, test_session):
        user, course, _, _ = await _course_with_content(test_session)

        with pytest.raises(NotFoundError):
            await complete_item_for_user(
                test_session, user.id, course.id, ExamItem(item_id=404)
            )


class TestGetCourseProgress:
    @pytest.mark.asyncio
    async def test_lists_items_with_counters(self, test_session):
        # Arrange
        user, course, lessons, _ = await _course_with_content(test_session)
        for lesson in lessons:
            await mark_item_completed(
                test_session, user.id, course.id, LessonItem(item_id=lesson.id)
            )

        # Act
        page = await get_course_progress(test_session, user.id, course.id)

        # Assert
        assert page.total == 2
        assert {completed.item.item_id for completed in page.items} == {
            lesson.id for lesson in lessons
        }
        assert all(isinstance(completed.item, LessonItem) for completed in page.items)
        assert page.progress == 66
        assert page.completed_count == 2
        assert page.total_count == 3

    @pytest.mark.asyncio
    async def test_filter_by_item_type(self, test_session):
        user, course, lessons, exam = await _course_with_content(test_session)
        await mark_item_completed(
            test_session, user.id, course.id, LessonItem(item_id=lessons[0].id)
        )
        await mark_item_completed(
            test_session, user.id, course.id, ExamItem(item_id=exam.id)
        )

        page = await get_course_progress(
            test_session, user.id, course.id, item_type=CompletionItemType.EXAM
        )

        assert page.total == 1
        assert page.items[0].item == ExamItem(item_id=exam.id)

    @pytest.mark.asyncio
    async def test_not_enrolled(self, test_session):
        user = await create_test_user(test_session, user_id=1)
        course = await create_test_course(test_session)

        page = await get_course_progress(test_session, user.id, course.id)

        assert page.total == 0
        assert page.progress is None

    @pytest.mark.asyncio
    async def test_unknown_course(self, test_session):
        with pytest.raises(NotFoundError):
            await get_course_progress(test_session, 1, 404)
