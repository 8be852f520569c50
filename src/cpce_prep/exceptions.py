"""Errors raised by the quiz engine.

Database failures are not wrapped: ``sqlite3.Error`` reaches the caller as-is.
"""
from typing import Any, Optional


class TutorError(Exception):
    """Base class for errors the presentation layer is expected to report."""

    def __init__(self, message: str, error_code: str = "TUTOR_ERROR",
                 details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(TutorError):
    def __init__(self, resource: str = "Resource", details: Optional[dict[str, Any]] = None):
        super().__init__(f"{resource} not found", error_code="NOT_FOUND", details=details)


class ValidationError(TutorError):
    def __init__(self, message: str = "Validation failed", details: Optional[dict[str, Any]] = None,
                 error_code: str = "VALIDATION_ERROR"):
        super().__init__(message, error_code=error_code, details=details)


class DuplicateAnswerError(ValidationError):
    """A question was answered twice within the same session."""

    def __init__(self, session_id: int, question_id: int):
        super().__init__(
            f"Question {question_id} was already answered in session {session_id}",
            details={"session_id": session_id, "question_id": question_id},
            error_code="DUPLICATE_ANSWER",
        )
