"""Project service layer with business logic."""

import logging
from datetime import datetime
from typing import List, Optional

from app.domains.activity.service import ActivityLogService
from app.domains.folder.service import FolderService
from app.exceptions.base import ValidationError
from app.schemas.project import ProjectCreate, ProjectFilter, ProjectSortEnum, ProjectUpdate
from app.store import BoardStore
from models import ActivityAction, EntityType, Project, TaskStatus, utcnow
from models.project import PROJECT_PRIORITY_ORDER

logger = logging.getLogger(__name__)


class ProjectService:
    """Service class for project business logic."""

    def __init__(self, store: BoardStore, user_id: Optional[str] = None):
        self.store = store
        self.user_id = user_id
        self.folders = FolderService(store, user_id)
        self.activity = ActivityLogService(store, user_id)

    def add_project(self, project_data: ProjectCreate) -> Project:
        """Create a new project inside an existing folder."""

        if project_data.folder_id not in self.store.folders:
            raise ValidationError(
                "Folder not found", details={"folder_id": project_data.folder_id}
            )

        now = utcnow()
        project = Project(
            **project_data.model_dump(),
            last_modified=now,
            created_at=now,
            updated_at=now,
        )
        self.store.projects[project.id] = project

        self.folders.refresh_project_count(project.folder_id)
        self.folders.bump_last_modified(project.folder_id, now)

        logger.info(f"Created project {project.id} ({project.name}) in folder {project.folder_id}")
        self.activity.record(
            EntityType.project,
            project.id,
            ActivityAction.created,
            f'Created project "{project.name}"',
            metadata={"folder_id": project.folder_id},
        )
        self.store.commit()
        return project.model_copy(deep=True)

    def get_project(self, project_id: str) -> Optional[Project]:
        """Get a project by ID."""
        project = self.store.projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    def get_projects_by_folder(self, folder_id: str) -> List[Project]:
        """Get the projects directly inside one folder."""
        return [
            project.model_copy(deep=True)
            for project in self.store.projects.values()
            if project.folder_id == folder_id
        ]

    def list_projects(self, filters: Optional[ProjectFilter] = None) -> List[Project]:
        """Get projects matching the filters, in the requested order."""

        filters = filters or ProjectFilter()
        projects = list(self.store.projects.values())

        if filters.folder_id:
            projects = [p for p in projects if p.folder_id == filters.folder_id]
        if filters.status:
            projects = [p for p in projects if p.status == filters.status]
        if filters.search:
            term = filters.search.lower()
            projects = [
                p
                for p in projects
                if term in p.name.lower() or (p.description and term in p.description.lower())
            ]

        if filters.sort_by == ProjectSortEnum.name:
            projects.sort(key=lambda p: p.name.lower())
        elif filters.sort_by == ProjectSortEnum.status:
            projects.sort(key=lambda p: p.status.value)
        elif filters.sort_by == ProjectSortEnum.priority:
            projects.sort(key=lambda p: PROJECT_PRIORITY_ORDER[p.priority], reverse=True)
        elif filters.sort_by == ProjectSortEnum.last_modified:
            projects.sort(key=lambda p: p.last_modified, reverse=True)
        else:
            projects.sort(key=lambda p: p.created_at, reverse=True)

        return [project.model_copy(deep=True) for project in projects]

    def update_project(self, project_id: str, project_data: ProjectUpdate) -> Optional[Project]:
        """Apply a partial update. Returns None when the project does not exist."""

        project = self.store.projects.get(project_id)
        if not project:
            logger.debug(f"update_project: unknown project {project_id}")
            return None

        update_data = project_data.model_dump(exclude_unset=True)
        old_folder_id = project.folder_id

        if "folder_id" in update_data:
            new_folder_id = update_data["folder_id"]
            if new_folder_id is None:
                raise ValidationError("A project must belong to a folder")
            if new_folder_id not in self.store.folders:
                raise ValidationError("Folder not found", details={"folder_id": new_folder_id})
        if "name" in update_data and update_data["name"] is None:
            raise ValidationError("Project name cannot be empty")

        for field, value in update_data.items():
            if value is None and field in ("status", "priority", "xp_earned"):
                continue
            setattr(project, field, value)

        now = utcnow()
        project.updated_at = now
        project.last_modified = now
        self.folders.bump_last_modified(project.folder_id, now)

        moved = project.folder_id != old_folder_id
        if moved:
            self.folders.bump_last_modified(old_folder_id, now)
            self.folders.refresh_project_count(old_folder_id)
            self.folders.refresh_project_count(project.folder_id)
            logger.info(f"Moved project {project.id} from {old_folder_id} to {project.folder_id}")

        self.activity.record(
            EntityType.project,
            project.id,
            ActivityAction.moved if moved else ActivityAction.updated,
            f'Moved project "{project.name}"' if moved else f'Updated project "{project.name}"',
            metadata={"fields": sorted(update_data), "from_folder_id": old_folder_id}
            if moved
            else {"fields": sorted(update_data)},
        )
        self.store.commit()
        return project.model_copy(deep=True)

    def delete_project(self, project_id: str) -> bool:
        """Delete a project with its lists, tasks and comments.

        Returns False when the project does not exist.
        """
        project = self.store.projects.get(project_id)
        if not project:
            logger.debug(f"delete_project: unknown project {project_id}")
            return False

        self.remove_project_tree(project_id)
        self.folders.bump_last_modified(project.folder_id)
        self.store.commit()
        return True

    def remove_project_tree(self, project_id: str) -> None:
        """Remove a project and everything it owns, without committing."""
        from app.domains.board.service import BoardService

        board = BoardService(self.store, self.user_id)
        for list_id in [
            task_list.id
            for task_list in self.store.task_lists.values()
            if task_list.project_id == project_id
        ]:
            board.remove_list_tree(list_id)

        project = self.store.projects.pop(project_id)
        if self.store.selected_project_id == project_id:
            self.store.selected_project_id = None
        self.folders.refresh_project_count(project.folder_id)

        logger.info(f"Deleted project {project_id} ({project.name})")
        self.activity.record(
            EntityType.project,
            project_id,
            ActivityAction.deleted,
            f'Deleted project "{project.name}"',
        )

    def bump_last_modified(self, project_id: str, now: Optional[datetime] = None) -> bool:
        """Set ``last_modified`` on a project and cascade to its folder."""
        project = self.store.projects.get(project_id)
        if not project:
            return False
        now = now or utcnow()
        if project.last_modified < now:
            project.last_modified = now
        self.folders.bump_last_modified(project.folder_id, now)
        return True

    def refresh_task_counts(self, project_id: str) -> None:
        """Recompute the denormalized task counters of one project."""
        project = self.store.projects.get(project_id)
        if not project:
            return
        tasks = [task for task in self.store.tasks.values() if task.project_id == project_id]
        project.task_count = len(tasks)
        project.completed_task_count = sum(1 for task in tasks if task.status == TaskStatus.done)

    def add_xp(self, project_id: str, amount: int) -> bool:
        project = self.store.projects.get(project_id)
        if not project:
            return False
        project.xp_earned += amount
        return True
