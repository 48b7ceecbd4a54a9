"""
Unit tests for Exception classes.

This module contains unit tests for the custom exception classes and the
consistency warning reporter.
"""

import logging

import pytest
from fastapi import HTTPException

from app.exceptions.base import (
    BaseAppException,
    ConsistencyWarning,
    NotFoundError,
    PersistenceError,
    ValidationError,
    report_consistency,
)
from app.exceptions.board import (
    CommentNotFoundError,
    FolderNotFoundError,
    InvalidTaskOperationError,
    ProjectNotFoundError,
    TaskListNotFoundError,
    TaskNotFoundError,
)


class TestBaseAppException:
    """Test cases for BaseAppException."""

    def test_base_exception_default_values(self):
        """Test BaseAppException with default values."""
        exc = BaseAppException("Test error")

        assert exc.message == "Test error"
        assert exc.status_code == 500
        assert exc.error_code == "INTERNAL_ERROR"
        assert exc.details == {}
        assert exc.detail == {"message": "Test error", "error_code": "INTERNAL_ERROR", "details": {}}

    def test_base_exception_custom_values(self):
        """Test BaseAppException with custom values."""
        details = {"field": "value"}
        exc = BaseAppException("Custom error", status_code=400, error_code="CUSTOM", details=details)

        assert exc.status_code == 400
        assert exc.detail["error_code"] == "CUSTOM"
        assert exc.detail["details"] == details

    def test_base_exception_inheritance(self):
        """Test that BaseAppException inherits from HTTPException."""
        assert isinstance(BaseAppException("Test error"), HTTPException)


class TestCommonExceptions:
    """Test cases for NotFoundError and ValidationError."""

    def test_not_found_error(self):
        exc = NotFoundError("Resource not found")

        assert exc.status_code == 404
        assert exc.error_code == "NOT_FOUND"

    def test_validation_error(self):
        exc = ValidationError("Folder not found", details={"folder_id": "x"})

        assert exc.status_code == 422
        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.details == {"folder_id": "x"}

    def test_persistence_error_is_not_http(self):
        assert not isinstance(PersistenceError("disk"), HTTPException)


class TestBoardExceptions:
    """Test cases for board-related exceptions."""

    @pytest.mark.parametrize(
        "exc_class, error_code",
        [
            (FolderNotFoundError, "FOLDER_NOT_FOUND"),
            (ProjectNotFoundError, "PROJECT_NOT_FOUND"),
            (TaskListNotFoundError, "TASK_LIST_NOT_FOUND"),
            (TaskNotFoundError, "TASK_NOT_FOUND"),
            (CommentNotFoundError, "COMMENT_NOT_FOUND"),
        ],
    )
    def test_not_found_errors(self, exc_class, error_code):
        exc = exc_class()

        assert isinstance(exc, NotFoundError)
        assert exc.status_code == 404
        assert exc.error_code == error_code
        assert exc.detail["error_code"] == error_code

    def test_invalid_task_operation_error(self):
        exc = InvalidTaskOperationError("Task is not blocked")

        assert exc.message == "Task is not blocked"
        assert exc.status_code == 400
        assert exc.error_code == "INVALID_TASK_OPERATION"


class TestConsistencyReporting:
    """Test cases for report_consistency."""

    def test_report_logs_warning_with_details(self, caplog):
        with caplog.at_level(logging.WARNING, logger="app.exceptions.base"):
            report_consistency("stale task_count", entity_id="p1", stored=3, actual=2)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "ConsistencyWarning: stale task_count" in record.getMessage()
        assert record.consistency_details == {"entity_id": "p1", "stored": 3, "actual": 2}

    def test_report_never_raises(self):
        assert report_consistency("anything") is None

    def test_consistency_warning_is_a_warning(self):
        assert issubclass(ConsistencyWarning, UserWarning)

