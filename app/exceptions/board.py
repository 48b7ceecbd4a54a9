"""Board-related exceptions."""

from .base import BaseAppException, NotFoundError


class FolderNotFoundError(NotFoundError):
    """Raised when a folder is not found."""

    def __init__(self, message: str = "Folder not found"):
        super().__init__(message=message, error_code="FOLDER_NOT_FOUND")


class ProjectNotFoundError(NotFoundError):
    """Raised when a project is not found."""

    def __init__(self, message: str = "Project not found"):
        super().__init__(message=message, error_code="PROJECT_NOT_FOUND")


class TaskListNotFoundError(NotFoundError):
    """Raised when a task list is not found."""

    def __init__(self, message: str = "Task list not found"):
        super().__init__(message=message, error_code="TASK_LIST_NOT_FOUND")


class TaskNotFoundError(NotFoundError):
    """Raised when a task is not found."""

    def __init__(self, message: str = "Task not found"):
        super().__init__(message=message, error_code="TASK_NOT_FOUND")


class CommentNotFoundError(NotFoundError):
    """Raised when a comment is not found."""

    def __init__(self, message: str = "Comment not found"):
        super().__init__(message=message, error_code="COMMENT_NOT_FOUND")


class InvalidTaskOperationError(BaseAppException):
    """Raised when an invalid operation is performed on a task."""

    def __init__(self, message: str = "Invalid task operation"):
        super().__init__(message=message, status_code=400, error_code="INVALID_TASK_OPERATION")
