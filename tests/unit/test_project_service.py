"""
Unit tests for ProjectService.

This module contains unit tests for the ProjectService class, covering project
creation inside folders, filtering and sorting, moves between folders and the
counters kept on folders and projects.
"""

import pytest

from app.exceptions.base import ValidationError
from app.schemas.board import TaskCreate, TaskListCreate, TaskUpdate
from app.schemas.folder import FolderCreate
from app.schemas.project import ProjectCreate, ProjectFilter, ProjectSortEnum, ProjectUpdate
from models import ActivityAction, ProjectPriority, ProjectStatus, TaskStatus, utcnow


class TestProjectService:
    """Test cases for ProjectService."""

    def test_create_project_success(self, project_service, folder_service, test_folder):
        """Test successful project creation."""
        before = utcnow()

        project = project_service.add_project(
            ProjectCreate(name="New Project", folder_id=test_folder.id, description="Desc")
        )

        assert project.name == "New Project"
        assert project.description == "Desc"
        assert project.folder_id == test_folder.id
        assert project.status == ProjectStatus.active
        assert project.priority == ProjectPriority.medium
        assert project.task_count == 0
        assert project.xp_earned == 0

        folder = folder_service.get_folder(test_folder.id)
        assert folder.project_count == 1
        assert folder.last_modified >= before

    def test_create_project_unknown_folder(self, project_service, store):
        """Test that a project cannot reference a missing folder."""
        with pytest.raises(ValidationError):
            project_service.add_project(ProjectCreate(name="Orphan", folder_id="missing"))

        assert store.projects == {}

    def test_create_project_bumps_ancestor_folders(self, project_service, folder_service):
        """Test that last_modified propagates up the folder chain."""
        root = folder_service.add_folder(FolderCreate(name="Root"))
        child = folder_service.add_folder(FolderCreate(name="Child", parent_id=root.id))
        before = utcnow()

        project_service.add_project(ProjectCreate(name="Deep", folder_id=child.id))

        assert folder_service.get_folder(root.id).last_modified >= before

    def test_get_project_not_found(self, project_service):
        assert project_service.get_project("missing") is None

    def test_get_projects_by_folder(self, project_service, folder_service, test_folder):
        other = folder_service.add_folder(FolderCreate(name="Home"))
        a = project_service.add_project(ProjectCreate(name="A", folder_id=test_folder.id))
        project_service.add_project(ProjectCreate(name="B", folder_id=other.id))

        projects = project_service.get_projects_by_folder(test_folder.id)

        assert [p.id for p in projects] == [a.id]

    def test_list_projects_filters(self, project_service, test_folder):
        """Test filtering projects by status and search term."""
        project_service.add_project(
            ProjectCreate(name="Launch site", folder_id=test_folder.id, status=ProjectStatus.active)
        )
        project_service.add_project(
            ProjectCreate(
                name="Old archive",
                folder_id=test_folder.id,
                status=ProjectStatus.completed,
                description="site backups",
            )
        )

        active = project_service.list_projects(ProjectFilter(status=ProjectStatus.active))
        searched = project_service.list_projects(ProjectFilter(search="SITE"))

        assert [p.name for p in active] == ["Launch site"]
        assert {p.name for p in searched} == {"Launch site", "Old archive"}

    def test_list_projects_sorting(self, project_service, test_folder):
        """Test sorting by name and by priority."""
        project_service.add_project(
            ProjectCreate(name="beta", folder_id=test_folder.id, priority=ProjectPriority.low)
        )
        project_service.add_project(
            ProjectCreate(name="Alpha", folder_id=test_folder.id, priority=ProjectPriority.high)
        )

        by_name = project_service.list_projects(ProjectFilter(sort_by=ProjectSortEnum.name))
        by_priority = project_service.list_projects(
            ProjectFilter(sort_by=ProjectSortEnum.priority)
        )

        assert [p.name for p in by_name] == ["Alpha", "beta"]
        assert [p.name for p in by_priority] == ["Alpha", "beta"]

    def test_update_project(self, project_service, test_project):
        """Test updating project fields."""
        before = utcnow()

        updated = project_service.update_project(
            test_project.id,
            ProjectUpdate(name="Renamed", status=ProjectStatus.on_hold),
        )

        assert updated.name == "Renamed"
        assert updated.status == ProjectStatus.on_hold
        assert updated.updated_at >= before
        assert updated.last_modified >= before

    def test_update_project_not_found(self, project_service):
        assert project_service.update_project("missing", ProjectUpdate(name="X")) is None

    def test_move_project_between_folders(
        self, project_service, folder_service, store, test_folder, test_project
    ):
        """Test that moving a project updates both folders' counts and logs a move."""
        other = folder_service.add_folder(FolderCreate(name="Home"))
        before = utcnow()

        moved = project_service.update_project(test_project.id, ProjectUpdate(folder_id=other.id))

        assert moved.folder_id == other.id
        assert folder_service.get_folder(test_folder.id).project_count == 0
        assert folder_service.get_folder(other.id).project_count == 1
        assert folder_service.get_folder(test_folder.id).last_modified >= before
        assert folder_service.get_folder(other.id).last_modified >= before

        entry = store.activity[0]
        assert entry.action == ActivityAction.moved
        assert entry.metadata["from_folder_id"] == test_folder.id

    def test_move_project_to_missing_folder(self, project_service, test_project):
        with pytest.raises(ValidationError):
            project_service.update_project(test_project.id, ProjectUpdate(folder_id="missing"))

    def test_project_requires_folder(self, project_service, test_project):
        """Test that folder_id cannot be cleared."""
        with pytest.raises(ValidationError):
            project_service.update_project(test_project.id, ProjectUpdate(folder_id=None))

    def test_task_counters_follow_tasks(self, project_service, board_service, test_project):
        """Test that task_count and completed_task_count track the task collection."""
        task_list = board_service.add_task_list(
            TaskListCreate(project_id=test_project.id, name="To Do")
        )
        first = board_service.add_task(TaskCreate(list_id=task_list.id, title="One"))
        board_service.add_task(TaskCreate(list_id=task_list.id, title="Two"))

        board_service.update_task(first.id, TaskUpdate(status=TaskStatus.done))

        project = project_service.get_project(test_project.id)
        assert project.task_count == 2
        assert project.completed_task_count == 1

        board_service.delete_task(first.id)

        project = project_service.get_project(test_project.id)
        assert project.task_count == 1
        assert project.completed_task_count == 0

    def test_delete_project_cascades(
        self, project_service, folder_service, board_service, store, test_folder, test_project
    ):
        """Test that deleting a project removes its lists and tasks."""
        task_list = board_service.add_task_list(
            TaskListCreate(project_id=test_project.id, name="To Do")
        )
        board_service.add_task(TaskCreate(list_id=task_list.id, title="One"))
        store.selected_project_id = test_project.id

        assert project_service.delete_project(test_project.id) is True

        assert store.projects == {}
        assert store.task_lists == {}
        assert store.tasks == {}
        assert store.selected_project_id is None
        assert folder_service.get_folder(test_folder.id).project_count == 0

    def test_delete_project_not_found(self, project_service):
        assert project_service.delete_project("missing") is False

    def test_add_xp(self, project_service, test_project):
        assert project_service.add_xp(test_project.id, 40) is True
        assert project_service.get_project(test_project.id).xp_earned == 40
        assert project_service.add_xp("missing", 10) is False
