"""Folder service layer: the folder registry and its hierarchy."""

import logging
from datetime import datetime
from typing import List, Optional

from app.domains.activity.service import ActivityLogService
from app.exceptions.base import ValidationError
from app.schemas.folder import FolderCreate, FolderUpdate
from app.store import BoardStore
from models import ActivityAction, EntityType, Folder, utcnow

logger = logging.getLogger(__name__)


class FolderService:
    """Service class for folder business logic."""

    def __init__(self, store: BoardStore, user_id: Optional[str] = None):
        self.store = store
        self.user_id = user_id
        self.activity = ActivityLogService(store, user_id)

    def add_folder(self, folder_data: FolderCreate) -> Folder:
        """Create a new folder, optionally nested under an existing parent."""

        parent = None
        if folder_data.parent_id is not None:
            parent = self.store.folders.get(folder_data.parent_id)
            if not parent:
                raise ValidationError(
                    "Parent folder not found", details={"parent_id": folder_data.parent_id}
                )

        now = utcnow()
        folder = Folder(
            name=folder_data.name,
            description=folder_data.description,
            color=folder_data.color,
            icon=folder_data.icon,
            parent_id=folder_data.parent_id,
            path=[*(parent.path if parent else []), folder_data.name],
            is_expanded=False,
            last_modified=now,
            created_at=now,
            updated_at=now,
        )
        self.store.folders[folder.id] = folder

        if parent:
            self.bump_last_modified(parent.id, now)

        logger.info(f"Created folder {folder.id} ({folder.name})")
        self.activity.record(
            EntityType.folder, folder.id, ActivityAction.created, f'Created folder "{folder.name}"'
        )
        self.store.commit()
        return folder.model_copy(deep=True)

    def get_folder(self, folder_id: str) -> Optional[Folder]:
        """Get a folder by ID."""
        folder = self.store.folders.get(folder_id)
        return folder.model_copy(deep=True) if folder else None

    def list_folders(self) -> List[Folder]:
        """Get all folders in insertion order."""
        return [folder.model_copy(deep=True) for folder in self.store.folders.values()]

    def get_child_folders(self, parent_id: Optional[str]) -> List[Folder]:
        """Get the direct children of a folder, or the root folders for ``None``."""
        return [
            folder.model_copy(deep=True)
            for folder in self.store.folders.values()
            if folder.parent_id == parent_id
        ]

    def update_folder(self, folder_id: str, folder_data: FolderUpdate) -> Optional[Folder]:
        """Apply a partial update. Returns None when the folder does not exist."""

        folder = self.store.folders.get(folder_id)
        if not folder:
            logger.debug(f"update_folder: unknown folder {folder_id}")
            return None

        update_data = folder_data.model_dump(exclude_unset=True)
        old_parent_id = folder.parent_id

        if "parent_id" in update_data and update_data["parent_id"] != old_parent_id:
            self._validate_new_parent(folder_id, update_data["parent_id"])
        if "name" in update_data and update_data["name"] is None:
            raise ValidationError("Folder name cannot be empty")

        for field, value in update_data.items():
            if value is None and field in ("color", "icon"):
                continue
            setattr(folder, field, value)

        now = utcnow()
        folder.updated_at = now
        folder.last_modified = now

        if "name" in update_data or "parent_id" in update_data:
            self._rebuild_paths(folder_id)

        if folder.parent_id:
            self.bump_last_modified(folder.parent_id, now)
        if old_parent_id and old_parent_id != folder.parent_id:
            self.bump_last_modified(old_parent_id, now)

        self.activity.record(
            EntityType.folder,
            folder.id,
            ActivityAction.updated,
            f'Updated folder "{folder.name}"',
            metadata={"fields": sorted(update_data)},
        )
        self.store.commit()
        return folder.model_copy(deep=True)

    def delete_folder(self, folder_id: str) -> bool:
        """Delete a folder together with its subfolders and their projects.

        Returns False when the folder does not exist.
        """
        from app.domains.project.service import ProjectService

        folder = self.store.folders.get(folder_id)
        if not folder:
            logger.debug(f"delete_folder: unknown folder {folder_id}")
            return False

        subtree = [folder_id, *self.descendant_ids(folder_id)]
        project_service = ProjectService(self.store, self.user_id)
        for project_id in [
            project.id for project in self.store.projects.values() if project.folder_id in subtree
        ]:
            project_service.remove_project_tree(project_id)

        # Children first so every logged folder still has its name
        for doomed_id in reversed(subtree):
            doomed = self.store.folders.pop(doomed_id)
            self.store.expanded_folder_ids.discard(doomed_id)
            if self.store.selected_folder_id == doomed_id:
                self.store.selected_folder_id = None
            self.activity.record(
                EntityType.folder,
                doomed_id,
                ActivityAction.deleted,
                f'Deleted folder "{doomed.name}"',
            )

        if folder.parent_id:
            self.bump_last_modified(folder.parent_id)

        logger.info(f"Deleted folder {folder_id} and {len(subtree) - 1} subfolders")
        self.store.commit()
        return True

    def toggle_expansion(self, folder_id: str) -> Optional[bool]:
        """Flip the UI-only expanded flag. Not logged and not a structural change."""
        folder = self.store.folders.get(folder_id)
        if not folder:
            return None
        expanded = self.store.expanded_folder_ids.toggle(folder_id)
        folder.is_expanded = expanded
        self.store.commit()
        return expanded

    def bump_last_modified(self, folder_id: str, now: Optional[datetime] = None) -> bool:
        """Set ``last_modified`` on a folder and its ancestors, leaving ``updated_at``."""
        now = now or utcnow()
        seen: set[str] = set()
        current = self.store.folders.get(folder_id)
        if not current:
            return False
        while current and current.id not in seen:
            seen.add(current.id)
            if current.last_modified < now:
                current.last_modified = now
            current = self.store.folders.get(current.parent_id) if current.parent_id else None
        return True

    def refresh_project_count(self, folder_id: str) -> None:
        """Recompute the denormalized project count of one folder."""
        folder = self.store.folders.get(folder_id)
        if not folder:
            return
        folder.project_count = sum(
            1 for project in self.store.projects.values() if project.folder_id == folder_id
        )

    def descendant_ids(self, folder_id: str) -> List[str]:
        """Collect descendant folder ids breadth first."""
        found: List[str] = []
        frontier = [folder_id]
        while frontier:
            parent = frontier.pop(0)
            for folder in self.store.folders.values():
                if folder.parent_id == parent and folder.id not in found and folder.id != folder_id:
                    found.append(folder.id)
                    frontier.append(folder.id)
        return found

    # Private helper methods

    def _validate_new_parent(self, folder_id: str, parent_id: Optional[str]) -> None:
        if parent_id is None:
            return
        if parent_id not in self.store.folders:
            raise ValidationError("Parent folder not found", details={"parent_id": parent_id})
        if parent_id == folder_id or parent_id in self.descendant_ids(folder_id):
            raise ValidationError(
                "A folder cannot be moved inside itself",
                details={"folder_id": folder_id, "parent_id": parent_id},
            )

    def _rebuild_paths(self, folder_id: str) -> None:
        """Recompute ``path`` for a folder and its whole subtree."""
        for current_id in [folder_id, *self.descendant_ids(folder_id)]:
            current = self.store.folders[current_id]
            parent = self.store.folders.get(current.parent_id) if current.parent_id else None
            current.path = [*(parent.path if parent else []), current.name]
