# -*- coding: utf-8 -*-
"""
Integration tests for the enrollment endpoints
"""

import pytest

from src.domain.enums import Role
from tests.fixtures import (auth_headers, create_exam_setup,
                            create_test_attempt, create_test_course,
                            create_test_user)

API = "/api/v1/enrollments"


class TestEnrollmentAPI:
    @pytest.mark.asyncio
    async def test_enroll(self, async_client, test_session):
        # Arrange
        user = await create_test_user(test_session, user_id=1)
        course = await create_test_course(test_session)

        # Act
        response = await async_client.post(
            f"{API}/{course.id}", headers=auth_headers(user.id)
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == user.id
        assert data["course_id"] == course.id
        assert data["role"] == "student"
        assert data["progress"] == 0

    @pytest.mark.asyncio
    async def test_student_cannot_pick_teacher_role(self, async_client, test_session):
        await create_test_user(test_session, user_id=1)
        course = await create_test_course(test_session)

        response = await async_client.post(
            f"{API}/{course.id}", params={"role": "teacher"}, headers=auth_headers(1)
        )

        assert response.status_code == 201
        assert response.json()["role"] == "student"

    @pytest.mark.asyncio
    async def test_enroll_twice(self, async_client, test_session):
        await create_test_user(test_session, user_id=1)
        course = await create_test_course(test_session)
        course_id = course.id
        await async_client.post(f"{API}/{course_id}", headers=auth_headers(1))

        response = await async_client.post(f"{API}/{course_id}", headers=auth_headers(1))

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_student_cannot_enroll_someone_else(self, async_client, test_session):
        await create_test_user(test_session, user_id=1)
        await create_test_user(test_session, user_id=2)
        course = await create_test_course(test_session)

        response = await async_client.post(
            f"{API}/{course.id}", params={"user_id": 2}, headers=auth_headers(1)
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "PERMISSION_DENIED"

    @pytest.mark.asyncio
    async def test_admin_enrolls_someone_else(self, async_client, test_session):
        await create_test_user(test_session, user_id=2)
        course = await create_test_course(test_session)

        response = await async_client.post(
            f"{API}/{course.id}",
            params={"user_id": 2},
            headers=auth_headers(9, Role.ADMIN),
        )

        assert response.status_code == 201
        assert response.json()["user_id"] == 2

    @pytest.mark.asyncio
    async def test_list_own_and_course_enrollments(self, async_client, test_session):
        # Arrange
        _, course, _, _, _ = await create_exam_setup(test_session)

        # Act
        mine = await async_client.get(f"{API}/me", headers=auth_headers(1))
        as_student = await async_client.get(
            f"{API}/course/{course.id}", headers=auth_headers(1)
        )
        as_teacher = await async_client.get(
            f"{API}/course/{course.id}", headers=auth_headers(5, Role.TEACHER)
        )

        # Assert
        assert mine.status_code == 200
        assert mine.json()["total"] == 1
        assert as_student.status_code == 403
        assert as_teacher.status_code == 200
        assert as_teacher.json()["items"][0]["user_id"] == 1

    @pytest.mark.asyncio
    async def test_unenroll_purges_attempts(self, async_client, test_session):
        # Arrange
        user, course, _, exam, _ = await create_exam_setup(test_session)
        course_id = course.id
        await create_test_attempt(test_session, user.id, exam.id, course_id, 1)

        # Act
        response = await async_client.delete(f"{API}/{course_id}", headers=auth_headers(1))
        again = await async_client.delete(f"{API}/{course_id}", headers=auth_headers(1))

        # Assert
        assert response.status_code == 200
        assert response.json() == {
            "user_id": 1,
            "course_id": course_id,
            "purged_attempts": 1,
            "purged_completions": 0,
        }
        assert again.status_code == 404
