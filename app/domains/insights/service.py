"""Derived read-side queries computed from canonical board state.

Nothing here reads the denormalized counters stored on entities; every value
is derived from the task and project collections on demand.
"""

import logging
from typing import Any, Dict, List, Optional

from app.domains.folder.service import FolderService
from app.store import BoardStore
from models import Folder, ProjectStatus, TaskStatus

logger = logging.getLogger(__name__)


class InsightsService:
    """Service class for progress, recency and summary queries."""

    def __init__(self, store: BoardStore):
        self.store = store

    def get_project_progress(self, project_id: str) -> Optional[float]:
        """Percentage of a project's tasks that are done, in [0, 100].

        Returns None when the project does not exist and 0.0 when it has no tasks.
        """
        if project_id not in self.store.projects:
            return None
        tasks = [task for task in self.store.tasks.values() if task.project_id == project_id]
        return _percentage(tasks)

    def get_folder_progress(self, folder_id: str) -> Optional[float]:
        """Completion percentage over every project in a folder and its subfolders."""
        if folder_id not in self.store.folders:
            return None
        folder_ids = {folder_id, *FolderService(self.store).descendant_ids(folder_id)}
        project_ids = {
            project.id for project in self.store.projects.values() if project.folder_id in folder_ids
        }
        tasks = [task for task in self.store.tasks.values() if task.project_id in project_ids]
        return _percentage(tasks)

    def get_recently_modified_folders(self, limit: int = 5) -> List[Folder]:
        """Folders ordered by ``last_modified``, most recent first."""
        folders = sorted(
            self.store.folders.values(),
            key=lambda folder: (folder.last_modified, folder.name),
            reverse=True,
        )
        return [folder.model_copy(deep=True) for folder in folders[: max(limit, 0)]]

    def get_board_summary(self) -> Dict[str, Any]:
        """Get counts by status and XP totals for the whole board."""

        tasks = list(self.store.tasks.values())
        projects = list(self.store.projects.values())

        tasks_by_status = {status.value: 0 for status in TaskStatus}
        for task in tasks:
            tasks_by_status[task.status.value] += 1

        projects_by_status = {status.value: 0 for status in ProjectStatus}
        for project in projects:
            projects_by_status[project.status.value] += 1

        return {
            "total_folders": len(self.store.folders),
            "total_projects": len(projects),
            "total_tasks": len(tasks),
            "tasks_by_status": tasks_by_status,
            "projects_by_status": projects_by_status,
            "total_xp_earned": sum(project.xp_earned for project in projects),
            "completed_task_xp": sum(t.xp_value for t in tasks if t.status == TaskStatus.done),
            "completion_rate": _percentage(tasks),
        }


def _percentage(tasks) -> float:
    if not tasks:
        return 0.0
    completed = sum(1 for task in tasks if task.status == TaskStatus.done)
    return 100 * completed / len(tasks)
