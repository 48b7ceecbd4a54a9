"""Board service layer: task lists, tasks and their ordering.

Task positions are kept compact (0..n-1) inside every list: each add, move and
delete renumbers the lists it touches. List positions are a plain sort key
that only ``reorder_task_lists`` rewrites. Reads sort by position with a
stable sort, so equal positions keep insertion order.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from app.domains.activity.service import ActivityLogService
from app.domains.project.service import ProjectService
from app.exceptions.base import ValidationError, report_consistency
from app.exceptions.board import InvalidTaskOperationError
from app.schemas.board import TaskCreate, TaskFilter, TaskListCreate, TaskListUpdate, TaskUpdate
from app.shared.pagination import PaginationParams, paginate
from app.store import BoardStore
from models import ActivityAction, EntityType, Task, TaskList, TaskPriority, TaskStatus, utcnow

logger = logging.getLogger(__name__)

TASK_PRIORITY_ORDER = {
    TaskPriority.lowest: 0,
    TaskPriority.low: 1,
    TaskPriority.medium: 2,
    TaskPriority.high: 3,
    TaskPriority.highest: 4,
}


class BoardService:
    """Service class for task list and task business logic."""

    def __init__(self, store: BoardStore, user_id: Optional[str] = None):
        self.store = store
        self.user_id = user_id
        self.projects = ProjectService(store, user_id)
        self.activity = ActivityLogService(store, user_id)

    # -------------------- task lists --------------------

    def add_task_list(self, list_data: TaskListCreate) -> TaskList:
        """Create a board column. Without a position it goes after the last column."""

        if list_data.project_id not in self.store.projects:
            raise ValidationError("Project not found", details={"project_id": list_data.project_id})

        position = list_data.position
        if position is None:
            siblings = self._lists_of(list_data.project_id)
            position = max((tl.position for tl in siblings), default=-1) + 1

        now = utcnow()
        task_list = TaskList(
            **list_data.model_dump(exclude={"position"}),
            position=position,
            created_at=now,
            updated_at=now,
        )
        if task_list.is_default:
            self._clear_default(task_list.project_id)
        self.store.task_lists[task_list.id] = task_list

        self.projects.bump_last_modified(task_list.project_id, now)
        self.activity.record(
            EntityType.list,
            task_list.id,
            ActivityAction.created,
            f'Created list "{task_list.name}"',
            metadata={"project_id": task_list.project_id, "position": position},
        )
        self.store.commit()
        return task_list.model_copy(deep=True)

    def get_task_list(self, list_id: str) -> Optional[TaskList]:
        """Get a task list by ID."""
        task_list = self.store.task_lists.get(list_id)
        return task_list.model_copy(deep=True) if task_list else None

    def get_task_lists_by_project(self, project_id: str) -> List[TaskList]:
        """Get a project's lists in left-to-right order."""
        return [task_list.model_copy(deep=True) for task_list in self._lists_of(project_id)]

    def update_task_list(self, list_id: str, list_data: TaskListUpdate) -> Optional[TaskList]:
        """Apply a partial update. Returns None when the list does not exist."""

        task_list = self.store.task_lists.get(list_id)
        if not task_list:
            return None

        update_data = list_data.model_dump(exclude_unset=True)
        if update_data.get("is_default"):
            self._clear_default(task_list.project_id)
        for field, value in update_data.items():
            if value is None and field in ("name", "color", "is_default"):
                continue
            setattr(task_list, field, value)

        now = task_list.touch()
        self.projects.bump_last_modified(task_list.project_id, now)
        self.activity.record(
            EntityType.list,
            task_list.id,
            ActivityAction.updated,
            f'Updated list "{task_list.name}"',
            metadata={"fields": sorted(update_data)},
        )
        self.store.commit()
        return task_list.model_copy(deep=True)

    def reorder_task_lists(self, project_id: str, ordered_list_ids: List[str]) -> bool:
        """Rewrite every list position of a project to its index in ``ordered_list_ids``.

        The ids must be exactly the project's lists. Returns False when the
        project does not exist.
        """
        if project_id not in self.store.projects:
            return False

        current_ids = {tl.id for tl in self._lists_of(project_id)}
        if len(ordered_list_ids) != len(set(ordered_list_ids)) or set(ordered_list_ids) != current_ids:
            raise ValidationError(
                "List order must contain every list of the project exactly once",
                details={
                    "missing": sorted(current_ids - set(ordered_list_ids)),
                    "unexpected": sorted(set(ordered_list_ids) - current_ids),
                },
            )

        now = utcnow()
        for index, list_id in enumerate(ordered_list_ids):
            task_list = self.store.task_lists[list_id]
            if task_list.position != index:
                task_list.position = index
                task_list.updated_at = now

        self.projects.bump_last_modified(project_id, now)
        self.activity.record(
            EntityType.project,
            project_id,
            ActivityAction.updated,
            "Reordered lists",
            metadata={"ordered_list_ids": list(ordered_list_ids)},
        )
        self.store.commit()
        return True

    def delete_task_list(self, list_id: str) -> bool:
        """Delete a list together with its tasks and their comments."""
        task_list = self.store.task_lists.get(list_id)
        if not task_list:
            return False

        self.remove_list_tree(list_id)
        self.projects.bump_last_modified(task_list.project_id)
        self.store.commit()
        return True

    def remove_list_tree(self, list_id: str) -> None:
        """Remove a list and its tasks, without committing."""
        for task_id in [task.id for task in self._tasks_of(list_id)]:
            self.remove_task_tree(task_id)
        task_list = self.store.task_lists.pop(list_id)
        self.projects.refresh_task_counts(task_list.project_id)
        self.activity.record(
            EntityType.list, list_id, ActivityAction.deleted, f'Deleted list "{task_list.name}"'
        )

    # -------------------- tasks --------------------

    def add_task(self, task_data: TaskCreate) -> Task:
        """Create a task in a list at ``position`` (default: the end of the list)."""

        task_list = self.store.task_lists.get(task_data.list_id)
        if not task_list:
            raise ValidationError("Task list not found", details={"list_id": task_data.list_id})
        if task_list.project_id not in self.store.projects:
            raise ValidationError(
                "Task list does not belong to an existing project",
                details={"list_id": task_list.id, "project_id": task_list.project_id},
            )

        now = utcnow()
        task = Task(
            **task_data.model_dump(exclude={"position"}),
            project_id=task_list.project_id,
            completed_at=now if task_data.status == TaskStatus.done else None,
            created_at=now,
            updated_at=now,
        )

        siblings = self._tasks_of(task_list.id)
        index = len(siblings) if task_data.position is None else min(task_data.position, len(siblings))
        siblings.insert(index, task)
        self.store.tasks[task.id] = task
        self._renumber(siblings)

        self._refresh_counts([task_list.id], [task.project_id])
        self.projects.bump_last_modified(task.project_id, now)

        logger.info(f"Created task {task.id} in list {task_list.id} at position {task.position}")
        self.activity.record(
            EntityType.task,
            task.id,
            ActivityAction.created,
            f'Created task "{task.title}"',
            metadata={"list_id": task_list.id, "position": task.position},
        )
        self.store.commit()
        return task.model_copy(deep=True)

    def get_task(self, task_id: str) -> Optional[Task]:
        """Get a task by ID."""
        task = self.store.tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    def get_tasks_by_list(self, list_id: str) -> List[Task]:
        """Get the tasks of a list in position order."""
        return [task.model_copy(deep=True) for task in self._tasks_of(list_id)]

    def get_tasks_by_project(self, project_id: str) -> List[Task]:
        """Get a project's tasks, column by column."""
        return [
            task.model_copy(deep=True)
            for task_list in self._lists_of(project_id)
            for task in self._tasks_of(task_list.id)
        ]

    def get_in_progress_tasks(self) -> List[Task]:
        """Get every task currently in progress."""
        return [
            task.model_copy(deep=True)
            for task in self.store.tasks.values()
            if task.status == TaskStatus.in_progress
        ]

    def list_tasks(self, filters: TaskFilter, pagination: PaginationParams) -> Dict[str, Any]:
        """Get paginated list of tasks with filters."""

        tasks = list(self.store.tasks.values())

        if filters.project_id:
            tasks = [t for t in tasks if t.project_id == filters.project_id]
        if filters.list_id:
            tasks = [t for t in tasks if t.list_id == filters.list_id]
        if filters.status:
            tasks = [t for t in tasks if t.status == filters.status]
        if filters.priority:
            tasks = [t for t in tasks if t.priority == filters.priority]
        if filters.type:
            tasks = [t for t in tasks if t.type == filters.type]
        if filters.assignee_id:
            tasks = [t for t in tasks if t.assignee_id == filters.assignee_id]
        if filters.label:
            tasks = [t for t in tasks if filters.label in t.labels]
        if filters.due_date_from:
            tasks = [t for t in tasks if t.due_date and t.due_date >= filters.due_date_from]
        if filters.due_date_to:
            tasks = [t for t in tasks if t.due_date and t.due_date <= filters.due_date_to]
        if filters.search:
            term = filters.search.lower()
            tasks = [
                t
                for t in tasks
                if term in t.title.lower() or (t.description and term in t.description.lower())
            ]

        # Order by priority (desc) and created_at (desc)
        tasks.sort(key=lambda t: (TASK_PRIORITY_ORDER[t.priority], t.created_at), reverse=True)

        result = paginate(tasks, pagination)
        result["items"] = [task.model_copy(deep=True) for task in result["items"]]
        return result

    def update_task(self, task_id: str, task_data: TaskUpdate) -> Optional[Task]:
        """Apply a partial update. Returns None when the task does not exist."""

        task = self.store.tasks.get(task_id)
        if not task:
            logger.debug(f"update_task: unknown task {task_id}")
            return None

        update_data = task_data.model_dump(exclude_unset=True)
        if "title" in update_data and update_data["title"] is None:
            raise ValidationError("Task title cannot be empty")

        now = utcnow()
        new_status = update_data.pop("status", None)
        if new_status is not None:
            self._set_status(task, new_status, now)

        time_spent = update_data.get("time_spent")
        if time_spent is not None and time_spent < task.time_spent:
            report_consistency(
                "task time spent decreased",
                task_id=task.id,
                previous=task.time_spent,
                new=time_spent,
            )

        for field, value in update_data.items():
            if value is None and field in ("priority", "type", "time_spent", "labels", "xp_value",
                                           "estimated_pomodoros", "actual_pomodoros"):
                continue
            setattr(task, field, value)
        task.updated_at = now

        if new_status is not None:
            self._refresh_counts([task.list_id], [task.project_id])
        self.projects.bump_last_modified(task.project_id, now)

        fields = sorted([*update_data, *(["status"] if new_status is not None else [])])
        self.activity.record(
            EntityType.task,
            task.id,
            ActivityAction.updated,
            f'Updated task "{task.title}"',
            metadata={"fields": fields},
        )
        self.store.commit()
        return task.model_copy(deep=True)

    def move_task(self, task_id: str, new_list_id: str, new_position: int) -> Optional[Task]:
        """Move a task to ``new_position`` of ``new_list_id``.

        The destination may belong to another project; ``project_id`` then
        follows the destination list. Source and destination lists are
        renumbered. Returns None when the task does not exist.
        """
        task = self.store.tasks.get(task_id)
        if not task:
            logger.debug(f"move_task: unknown task {task_id}")
            return None

        destination = self.store.task_lists.get(new_list_id)
        if not destination:
            raise ValidationError("Task list not found", details={"list_id": new_list_id})
        if destination.project_id not in self.store.projects:
            raise ValidationError(
                "Task list does not belong to an existing project",
                details={"list_id": new_list_id, "project_id": destination.project_id},
            )
        if new_position < 0:
            raise ValidationError("Position cannot be negative", details={"position": new_position})

        source_list_id = task.list_id
        source_project_id = task.project_id

        siblings = [t for t in self._tasks_of(new_list_id) if t.id != task_id]
        index = min(new_position, len(siblings))

        now = utcnow()
        moved = task.model_copy(
            update={
                "list_id": new_list_id,
                "project_id": destination.project_id,
                "position": index,
                "updated_at": now,
            }
        )
        self.store.tasks[task_id] = moved

        siblings.insert(index, moved)
        self._renumber(siblings)
        if source_list_id != new_list_id:
            self._renumber(self._tasks_of(source_list_id))

        self._refresh_counts(
            {source_list_id, new_list_id}, {source_project_id, destination.project_id}
        )
        self.projects.bump_last_modified(source_project_id, now)
        if destination.project_id != source_project_id:
            self.projects.bump_last_modified(destination.project_id, now)

        logger.info(f"Moved task {task_id} from list {source_list_id} to {new_list_id}[{index}]")
        self.activity.record(
            EntityType.task,
            task_id,
            ActivityAction.moved,
            f'Moved task "{moved.title}"',
            metadata={
                "from_list_id": source_list_id,
                "to_list_id": new_list_id,
                "position": index,
            },
        )
        self.store.commit()
        return moved.model_copy(deep=True)

    def complete_task(self, task_id: str) -> Optional[Task]:
        """Mark a task done. Granting XP is left to the reward subscribers."""
        task = self.store.tasks.get(task_id)
        if not task:
            return None

        now = utcnow()
        self._set_status(task, TaskStatus.done, now)
        task.completed_at = now
        task.updated_at = now

        self._refresh_counts([task.list_id], [task.project_id])
        self.projects.bump_last_modified(task.project_id, now)
        self.activity.record(
            EntityType.task,
            task.id,
            ActivityAction.updated,
            f'Completed task "{task.title}"',
            metadata={"status": TaskStatus.done.value, "xp_value": task.xp_value},
        )
        self.store.commit()
        return task.model_copy(deep=True)

    def block_task(self, task_id: str) -> Optional[Task]:
        """Block a task, remembering the status it was blocked from."""
        return self.update_task(task_id, TaskUpdate(status=TaskStatus.blocked))

    def unblock_task(self, task_id: str) -> Optional[Task]:
        """Return a blocked task to the status it was blocked from."""
        task = self.store.tasks.get(task_id)
        if not task:
            return None
        if task.status != TaskStatus.blocked:
            raise InvalidTaskOperationError("Task is not blocked")
        return self.update_task(task_id, TaskUpdate(status=task.blocked_from or TaskStatus.todo))

    def delete_task(self, task_id: str) -> bool:
        """Delete a task and its comments. Returns False when it does not exist."""
        task = self.store.tasks.get(task_id)
        if not task:
            logger.debug(f"delete_task: unknown task {task_id}")
            return False

        self.remove_task_tree(task_id)
        self._renumber(self._tasks_of(task.list_id))
        self._refresh_counts([task.list_id], [task.project_id])
        self.projects.bump_last_modified(task.project_id)
        self.store.commit()
        return True

    def remove_task_tree(self, task_id: str) -> None:
        """Remove a task and its comments, without committing."""
        for comment_id in [c.id for c in self.store.comments.values() if c.task_id == task_id]:
            del self.store.comments[comment_id]
        task = self.store.tasks.pop(task_id)
        self.activity.record(
            EntityType.task, task_id, ActivityAction.deleted, f'Deleted task "{task.title}"'
        )

    # Private helper methods

    def _lists_of(self, project_id: str) -> List[TaskList]:
        return sorted(
            (tl for tl in self.store.task_lists.values() if tl.project_id == project_id),
            key=lambda tl: tl.position,
        )

    def _tasks_of(self, list_id: str) -> List[Task]:
        return sorted(
            (t for t in self.store.tasks.values() if t.list_id == list_id),
            key=lambda t: t.position,
        )

    @staticmethod
    def _renumber(ordered: List[Task]) -> None:
        for index, task in enumerate(ordered):
            if task.position != index:
                task.position = index

    def _clear_default(self, project_id: str) -> None:
        for task_list in self.store.task_lists.values():
            if task_list.project_id == project_id and task_list.is_default:
                task_list.is_default = False

    def _refresh_counts(self, list_ids: Iterable[str], project_ids: Iterable[str]) -> None:
        for list_id in list_ids:
            task_list = self.store.task_lists.get(list_id)
            if task_list:
                task_list.task_count = sum(
                    1 for t in self.store.tasks.values() if t.list_id == list_id
                )
        for project_id in project_ids:
            self.projects.refresh_task_counts(project_id)

    @staticmethod
    def _set_status(task: Task, new_status: TaskStatus, now: datetime) -> None:
        """Apply a status change, keeping completed_at and blocked_from in step."""
        old_status = task.status
        if new_status == old_status:
            return
        if new_status == TaskStatus.blocked:
            task.blocked_from = old_status
        elif old_status == TaskStatus.blocked:
            task.blocked_from = None
        if new_status == TaskStatus.done:
            task.completed_at = now
        elif old_status == TaskStatus.done:
            task.completed_at = None
        task.status = new_status
