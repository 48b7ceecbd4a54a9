"""Comment service layer: comments keyed by task."""

import logging
from typing import List, Optional

from app.domains.activity.service import ActivityLogService
from app.domains.project.service import ProjectService
from app.exceptions.base import ValidationError
from app.schemas.comment import CommentCreate, CommentUpdate
from app.store import BoardStore
from models import ActivityAction, EntityType, TaskComment, utcnow

logger = logging.getLogger(__name__)


class CommentService:
    """Service class for task comments. Comments never modify task fields."""

    def __init__(self, store: BoardStore, user_id: Optional[str] = None):
        self.store = store
        self.projects = ProjectService(store, user_id)
        self.activity = ActivityLogService(store, user_id)

    def add_comment(self, comment_data: CommentCreate) -> TaskComment:
        """Add a comment to an existing task."""

        task = self.store.tasks.get(comment_data.task_id)
        if not task:
            raise ValidationError("Task not found", details={"task_id": comment_data.task_id})

        now = utcnow()
        comment = TaskComment(**comment_data.model_dump(), created_at=now, updated_at=now)
        self.store.comments[comment.id] = comment

        self.projects.bump_last_modified(task.project_id, now)
        self.activity.record(
            EntityType.task,
            task.id,
            ActivityAction.commented,
            f'{comment.author_name} commented on "{task.title}"',
            metadata={"comment_id": comment.id},
        )
        self.store.commit()
        return comment.model_copy(deep=True)

    def get_comment(self, comment_id: str) -> Optional[TaskComment]:
        comment = self.store.comments.get(comment_id)
        return comment.model_copy(deep=True) if comment else None

    def get_comments_for_task(self, task_id: str) -> List[TaskComment]:
        """Get a task's comments, oldest first."""
        comments = [c for c in self.store.comments.values() if c.task_id == task_id]
        comments.sort(key=lambda c: c.created_at)
        return [comment.model_copy(deep=True) for comment in comments]

    def update_comment(self, comment_id: str, comment_data: CommentUpdate) -> Optional[TaskComment]:
        """Edit a comment's content. Returns None when the comment does not exist."""
        comment = self.store.comments.get(comment_id)
        if not comment:
            return None

        comment.content = comment_data.content
        now = comment.touch()

        task = self.store.tasks.get(comment.task_id)
        if task:
            self.projects.bump_last_modified(task.project_id, now)
        self.store.commit()
        return comment.model_copy(deep=True)

    def delete_comment(self, comment_id: str) -> bool:
        """Delete a comment. Returns False when it does not exist."""
        comment = self.store.comments.pop(comment_id, None)
        if not comment:
            return False

        task = self.store.tasks.get(comment.task_id)
        if task:
            self.projects.bump_last_modified(task.project_id)
        logger.info(f"Deleted comment {comment_id} on task {comment.task_id}")
        self.store.commit()
        return True
