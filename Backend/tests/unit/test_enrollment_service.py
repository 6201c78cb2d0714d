# -*- coding: utf-8 -*-
"""
Unit tests for enrolling and unenrolling
"""

import pytest

from src.domain.enums import EnrollmentRole, Role
from src.domain.items import LessonItem
from src.repository.enrollment import list_enrollments
from src.repository.exams import get_last_attempt_number
from src.repository.progress import count_completions, get_enrollment
from src.service.enrollment import enroll_user, unenroll_user
from src.service.exams.session import get_or_create_active, submit
from src.service.exams.views import SubmittedAnswer
from src.service.progress import mark_item_completed
from src.utils.exceptions import ConflictError, NotFoundError, ValidationError
from tests.fixtures import (create_exam_setup, create_test_attempt,
                            create_test_course, create_test_lesson,
                            create_test_section, create_test_user)


class TestEnrollUser:
    @pytest.mark.asyncio
    async def test_enroll_counts_course_items(self, test_session):
        # Arrange
        user = await create_test_user(test_session, user_id=1)
        course = await create_test_course(test_session)
        section = await create_test_section(test_session, course.id)
        await create_test_lesson(test_session, section.id, order=1)
        await create_test_lesson(test_session, section.id, order=2)

        # Act
        enrollment = await enroll_user(test_session, user.id, course.id)

        # Assert
        assert enrollment.user_id == user.id
        assert enrollment.role == EnrollmentRole.STUDENT
        assert enrollment.total_count == 2
        assert enrollment.progress == 0

    @pytest.mark.asyncio
    async def test_enroll_twice(self, test_session):
        user = await create_test_user(test_session, user_id=1)
        course = await create_test_course(test_session)
        user_id, course_id = user.id, course.id
        await enroll_user(test_session, user_id, course_id)

        with pytest.raises(ConflictError):
            await enroll_user(test_session, user_id, course_id)

        _, total = await list_enrollments(test_session, user_id=user_id)
        assert total == 1

    @pytest.mark.asyncio
    async def test_unknown_course(self, test_session):
        await create_test_user(test_session, user_id=1)

        with pytest.raises(NotFoundError):
            await enroll_user(test_session, 1, 404)

    @pytest.mark.asyncio
    async def test_teacher_cannot_join_own_course_as_teacher(self, test_session):
        teacher = await create_test_user(test_session, user_id=5, role=Role.TEACHER)
        course = await create_test_course(test_session, teacher_id=teacher.id)

        with pytest.raises(ValidationError):
            await enroll_user(
                test_session, teacher.id, course.id, role=EnrollmentRole.TEACHER
            )

    @pytest.mark.asyncio
    async def test_teacher_joins_other_course(self, test_session):
        teacher = await create_test_user(test_session, user_id=5, role=Role.TEACHER)
        course = await create_test_course(test_session, teacher_id=None)

        enrollment = await enroll_user(
            test_session, teacher.id, course.id, role=EnrollmentRole.TEACHER
        )

        assert enrollment.role == EnrollmentRole.TEACHER


class TestUnenrollUser:
    @pytest.mark.asyncio
    async def test_purges_attempts_and_completions_of_course(self, test_session):
        # Arrange
        user, course, section, exam, _ = await create_exam_setup(test_session)
        lesson = await create_test_lesson(test_session, section.id)
        await create_test_attempt(test_session, user.id, exam.id, course.id, 1)
        await create_test_attempt(test_session, user.id, exam.id, course.id, 2)
        await mark_item_completed(
            test_session, user.id, course.id, LessonItem(item_id=lesson.id)
        )

        other_course = await create_test_course(test_session, title="Other")
        await mark_item_completed(
            test_session, user.id, other_course.id, LessonItem(item_id=lesson.id)
        )

        # Act
        result = await unenroll_user(test_session, user.id, course.id)

        # Assert
        assert result.purged_attempts == 2
        assert result.purged_completions == 1
        assert await get_enrollment(test_session, user.id, course.id) is None
        assert await get_last_attempt_number(test_session, user.id, exam.id) == 0
        assert await count_completions(test_session, user.id, course.id) == 0
        assert await count_completions(test_session, user.id, other_course.id) == 1

    @pytest.mark.asyncio
    async def test_not_enrolled(self, test_session):
        user = await create_test_user(test_session, user_id=1)
        course = await create_test_course(test_session)
        user_id, course_id = user.id, course.id

        with pytest.raises(NotFoundError):
            await unenroll_user(test_session, user_id, course_id)

    @pytest.mark.asyncio
    async def test_reenrolling_restarts_attempt_numbers(self, test_session):
        # Arrange
        user, course, _, exam, _ = await create_exam_setup(test_session)
        view = await get_or_create_active(test_session, user.id, exam.id)
        answers = [
            SubmittedAnswer(question_id=q.question_id, selected_option_indexes=[0])
            for q in view.questions
        ]
        await submit(test_session, user.id, exam.id, 1, answers)
        await get_or_create_active(test_session, user.id, exam.id)

        # Act
        await unenroll_user(test_session, user.id, course.id)
        enrollment = await enroll_user(test_session, user.id, course.id)
        fresh = await get_or_create_active(test_session, user.id, exam.id)

        # Assert
        assert enrollment.progress == 0
        assert fresh.attempt_number == 1
        assert fresh.resumed is False
