"""
Unit tests for FolderService.

This module covers folder creation, the parent/child hierarchy, path
maintenance, expansion state and the cascading delete.
"""

import pytest

from app.exceptions.base import ValidationError
from app.schemas.board import TaskCreate, TaskListCreate
from app.schemas.comment import CommentCreate
from app.schemas.folder import FolderCreate, FolderUpdate
from app.schemas.project import ProjectCreate
from models import ActivityAction, EntityType, utcnow


class TestFolderService:
    """Test cases for FolderService."""

    def test_add_root_folder(self, folder_service, store):
        """Test creating a folder without a parent."""
        folder = folder_service.add_folder(FolderCreate(name="Work"))

        assert folder.name == "Work"
        assert folder.parent_id is None
        assert folder.path == ["Work"]
        assert folder.project_count == 0
        assert folder.is_expanded is False
        assert folder.color == "#3b82f6"
        assert folder.id in store.folders

    def test_add_folder_logs_created(self, folder_service, store):
        """Test that creating a folder appends an activity entry."""
        folder = folder_service.add_folder(FolderCreate(name="Work"))

        entry = store.activity[0]
        assert entry.entity_type == EntityType.folder
        assert entry.entity_id == folder.id
        assert entry.action == ActivityAction.created
        assert entry.user_id == "test-user"

    def test_add_nested_folder_builds_path_and_bumps_parent(self, folder_service):
        """Test that a child folder extends the parent's path and touches the parent."""
        parent = folder_service.add_folder(FolderCreate(name="Work"))
        before = utcnow()

        child = folder_service.add_folder(FolderCreate(name="Clients", parent_id=parent.id))

        assert child.path == ["Work", "Clients"]
        assert folder_service.get_folder(parent.id).last_modified >= before

    def test_add_folder_unknown_parent(self, folder_service, store):
        """Test that a dangling parent reference is rejected."""
        with pytest.raises(ValidationError):
            folder_service.add_folder(FolderCreate(name="Orphan", parent_id="missing"))

        assert store.folders == {}

    def test_name_is_trimmed(self):
        """Test that folder names are stripped and must not be blank."""
        assert FolderCreate(name="  Home  ").name == "Home"
        with pytest.raises(ValueError):
            FolderCreate(name="   ")

    def test_get_folder_returns_copy(self, folder_service, store, test_folder):
        """Test that callers cannot mutate stored folders through a read."""
        copy = folder_service.get_folder(test_folder.id)
        copy.name = "Changed"

        assert store.folders[test_folder.id].name == "Work"

    def test_get_folder_not_found(self, folder_service):
        assert folder_service.get_folder("missing") is None

    def test_get_child_folders(self, folder_service, test_folder):
        """Test listing root folders and direct children."""
        child = folder_service.add_folder(FolderCreate(name="A", parent_id=test_folder.id))
        folder_service.add_folder(FolderCreate(name="B", parent_id=child.id))
        other_root = folder_service.add_folder(FolderCreate(name="Home"))

        roots = folder_service.get_child_folders(None)
        children = folder_service.get_child_folders(test_folder.id)

        assert [f.id for f in roots] == [test_folder.id, other_root.id]
        assert [f.id for f in children] == [child.id]

    def test_rename_rebuilds_descendant_paths(self, folder_service, test_folder):
        """Test that renaming a folder updates the path of its whole subtree."""
        child = folder_service.add_folder(FolderCreate(name="A", parent_id=test_folder.id))
        grandchild = folder_service.add_folder(FolderCreate(name="B", parent_id=child.id))

        folder_service.update_folder(test_folder.id, FolderUpdate(name="Office"))

        assert folder_service.get_folder(child.id).path == ["Office", "A"]
        assert folder_service.get_folder(grandchild.id).path == ["Office", "A", "B"]

    def test_move_folder_to_new_parent(self, folder_service, test_folder):
        """Test re-parenting a folder and moving it back to the root."""
        other = folder_service.add_folder(FolderCreate(name="Home"))

        moved = folder_service.update_folder(other.id, FolderUpdate(parent_id=test_folder.id))
        assert moved.parent_id == test_folder.id
        assert moved.path == ["Work", "Home"]

        back = folder_service.update_folder(other.id, FolderUpdate(parent_id=None))
        assert back.parent_id is None
        assert back.path == ["Home"]

    def test_move_folder_into_itself_rejected(self, folder_service, test_folder):
        with pytest.raises(ValidationError):
            folder_service.update_folder(test_folder.id, FolderUpdate(parent_id=test_folder.id))

    def test_move_folder_into_descendant_rejected(self, folder_service, test_folder):
        """Test that the hierarchy stays acyclic."""
        child = folder_service.add_folder(FolderCreate(name="A", parent_id=test_folder.id))
        grandchild = folder_service.add_folder(FolderCreate(name="B", parent_id=child.id))

        with pytest.raises(ValidationError):
            folder_service.update_folder(test_folder.id, FolderUpdate(parent_id=grandchild.id))

        assert folder_service.get_folder(test_folder.id).parent_id is None

    def test_move_folder_unknown_parent_rejected(self, folder_service, test_folder):
        with pytest.raises(ValidationError):
            folder_service.update_folder(test_folder.id, FolderUpdate(parent_id="missing"))

    def test_update_unknown_folder_returns_none(self, folder_service):
        assert folder_service.update_folder("missing", FolderUpdate(name="X")) is None

    def test_update_sets_timestamps(self, folder_service, test_folder):
        before = utcnow()

        updated = folder_service.update_folder(test_folder.id, FolderUpdate(color="#ff0000"))

        assert updated.color == "#ff0000"
        assert updated.updated_at >= before
        assert updated.last_modified >= before

    def test_toggle_expansion(self, folder_service, store, test_folder):
        """Test that expansion flips the set membership without logging activity."""
        entries_before = len(store.activity)

        assert folder_service.toggle_expansion(test_folder.id) is True
        assert test_folder.id in store.expanded_folder_ids
        assert folder_service.get_folder(test_folder.id).is_expanded is True

        assert folder_service.toggle_expansion(test_folder.id) is False
        assert test_folder.id not in store.expanded_folder_ids
        assert len(store.activity) == entries_before

    def test_toggle_expansion_unknown_folder(self, folder_service):
        assert folder_service.toggle_expansion("missing") is None

    def test_delete_unknown_folder(self, folder_service):
        assert folder_service.delete_folder("missing") is False

    def test_delete_folder_cascades(
        self, folder_service, project_service, board_service, comment_service, store, test_folder
    ):
        """Test that deleting a folder removes its subtree and everything it owns."""
        child = folder_service.add_folder(FolderCreate(name="Sub", parent_id=test_folder.id))
        project = project_service.add_project(ProjectCreate(name="P", folder_id=child.id))
        task_list = board_service.add_task_list(TaskListCreate(project_id=project.id, name="L"))
        task = board_service.add_task(TaskCreate(list_id=task_list.id, title="T"))
        comment_service.add_comment(
            CommentCreate(task_id=task.id, author_id="u", author_name="U", content="hi")
        )
        folder_service.toggle_expansion(child.id)
        store.selected_folder_id = child.id
        survivor = folder_service.add_folder(FolderCreate(name="Home"))

        assert folder_service.delete_folder(test_folder.id) is True

        assert list(store.folders) == [survivor.id]
        assert store.projects == {}
        assert store.task_lists == {}
        assert store.tasks == {}
        assert store.comments == {}
        assert child.id not in store.expanded_folder_ids
        assert store.selected_folder_id is None

        deleted = {
            (entry.entity_type, entry.entity_id)
            for entry in store.activity
            if entry.action == ActivityAction.deleted
        }
        assert deleted == {
            (EntityType.folder, test_folder.id),
            (EntityType.folder, child.id),
            (EntityType.project, project.id),
            (EntityType.list, task_list.id),
            (EntityType.task, task.id),
        }

    def test_delete_child_bumps_parent(self, folder_service, test_folder):
        child = folder_service.add_folder(FolderCreate(name="Sub", parent_id=test_folder.id))
        before = utcnow()

        folder_service.delete_folder(child.id)

        assert folder_service.get_folder(test_folder.id).last_modified >= before

    def test_commands_commit(self, folder_service, store):
        """Test that every folder command notifies commit listeners once."""
        commits = []
        store.add_commit_listener(lambda s: commits.append(s))

        folder = folder_service.add_folder(FolderCreate(name="Work"))
        folder_service.update_folder(folder.id, FolderUpdate(name="Office"))
        folder_service.toggle_expansion(folder.id)
        folder_service.delete_folder(folder.id)

        assert len(commits) == 4
