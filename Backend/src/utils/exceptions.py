# -*- coding: utf-8 -*-
"""
Custom exceptions for the LearnHub API.

Every client-facing error is an ``APIException`` carrying an HTTP status code,
a message and a stable error code. ``DuplicateCreateRace`` and
``MalformedQuestionError`` are internal signals and never reach a client
directly.
"""

from enum import Enum

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Unique error codes."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EMPTY_EXAM = "EMPTY_EXAM"
    INVALID_ATTEMPT = "INVALID_ATTEMPT"
    DATA_INTEGRITY = "DATA_INTEGRITY"


class APIException(HTTPException):
    """Base class for API exceptions."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str,
        headers: dict | None = None,
    ):
        """
        Initialize the exception.

        Args:
            status_code (int): HTTP status code.
            detail (str): Error message.
            error_code (str): Stable error code.
            headers (dict, optional): Extra response headers.
        """
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class NotFoundError(APIException):
    """Raised when a resource does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str | int | None = None,
        details: str | None = None,
    ):
        """
        Initialize NotFoundError.

        Args:
            resource_type (str): Kind of resource (e.g. "Exam", "Course").
            resource_id (str or int, optional): Resource ID.
            details (str, optional): Extra information.
        """
        detail = f"{resource_type} not found"
        if resource_id is not None:
            detail = f"{resource_type} with ID {resource_id} not found"
        if details:
            detail = f"{detail}: {details}"
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=ErrorCode.NOT_FOUND,
        )


class ConflictError(APIException):
    """Raised when a resource already exists or a conflict occurs."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=ErrorCode.CONFLICT,
        )


class PermissionDeniedError(APIException):
    """Raised when the user lacks the required rights."""

    def __init__(self, detail: str = "Insufficient permissions"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=ErrorCode.PERMISSION_DENIED,
        )


class ValidationError(APIException):
    """Raised when input data is invalid."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code=ErrorCode.VALIDATION_ERROR,
        )


class EmptyExamError(APIException):
    """Raised when an exam has no questions and cannot be taken."""

    def __init__(self, exam_id: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Exam {exam_id} has no questions",
            error_code=ErrorCode.EMPTY_EXAM,
        )


class InvalidAttemptError(APIException):
    """
    Raised when a submission does not target an open attempt of the caller.

    Wrong owner, already submitted and unknown attempt number all produce
    the same message.
    """

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid attempt",
            error_code=ErrorCode.INVALID_ATTEMPT,
        )


class DataIntegrityError(APIException):
    """Raised when stored content is inconsistent (dangling section, bad options)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=ErrorCode.DATA_INTEGRITY,
        )


class DuplicateCreateRace(Exception):
    """A concurrent request already inserted the same attempt number."""

    def __init__(self, user_id: int, exam_id: int, attempt_number: int):
        super().__init__(
            f"Attempt {attempt_number} for user {user_id}, exam {exam_id} already exists"
        )
        self.user_id = user_id
        self.exam_id = exam_id
        self.attempt_number = attempt_number


class MalformedQuestionError(ValueError):
    """A question's options cannot be shuffled or graded."""

    def __init__(self, question_id: int | None, reason: str):
        super().__init__(f"Question {question_id} is malformed: {reason}")
        self.question_id = question_id
        self.reason = reason
