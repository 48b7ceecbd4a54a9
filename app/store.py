"""In-memory board store.

This module holds the canonical collections of the board engine in one
explicit ``BoardStore`` object that services receive by reference, instead of
a hidden global. Collections are insertion-ordered dicts keyed by id, so
stable sorts over their values break position ties by insertion order.

The store also owns the bounded activity list, the set of expanded folder
ids and the UI-only selection state, and notifies listeners after every
committed command (the persistence adapter is one of them).
"""
import logging
from collections.abc import Callable, Iterable, Iterator

from models import ActivityLogEntry, Folder, Project, Task, TaskComment, TaskList

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_CAPACITY = 1000

CommitListener = Callable[["BoardStore"], None]
ActivityListener = Callable[[ActivityLogEntry], None]


class ExpandedFolderSet:
    """Set of expanded folder ids with an explicit array form for snapshots."""

    def __init__(self, folder_ids: Iterable[str] = ()):
        self._ids: set[str] = set(folder_ids)

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ExpandedFolderSet):
            return self._ids == other._ids
        if isinstance(other, (set, frozenset)):
            return self._ids == other
        return NotImplemented

    def add(self, folder_id: str) -> None:
        self._ids.add(folder_id)

    def discard(self, folder_id: str) -> None:
        self._ids.discard(folder_id)

    def toggle(self, folder_id: str) -> bool:
        """Flip membership and return whether the folder is now expanded."""
        if folder_id in self._ids:
            self._ids.remove(folder_id)
            return False
        self._ids.add(folder_id)
        return True

    def to_array(self) -> list[str]:
        """Return the ids as a sorted list, the only form written to a snapshot."""
        return sorted(self._ids)

    @classmethod
    def from_array(cls, folder_ids: Iterable[str] | None) -> "ExpandedFolderSet":
        return cls(str(folder_id) for folder_id in (folder_ids or ()))


class BoardStore:
    """Canonical state shared by every board service."""

    def __init__(self, activity_capacity: int = DEFAULT_ACTIVITY_CAPACITY):
        if activity_capacity < 1:
            raise ValueError("Activity capacity must be at least 1")
        self.activity_capacity = activity_capacity

        self.folders: dict[str, Folder] = {}
        self.projects: dict[str, Project] = {}
        self.task_lists: dict[str, TaskList] = {}
        self.tasks: dict[str, Task] = {}
        self.comments: dict[str, TaskComment] = {}

        # Newest first
        self.activity: list[ActivityLogEntry] = []
        self.expanded_folder_ids = ExpandedFolderSet()

        # UI-only, never persisted
        self.selected_folder_id: str | None = None
        self.selected_project_id: str | None = None

        self._commit_listeners: list[CommitListener] = []
        self._activity_listeners: list[ActivityListener] = []

    # -------------------- listeners --------------------
    def add_commit_listener(self, listener: CommitListener) -> Callable[[], None]:
        self._commit_listeners.append(listener)
        return lambda: self._remove(self._commit_listeners, listener)

    def add_activity_listener(self, listener: ActivityListener) -> Callable[[], None]:
        self._activity_listeners.append(listener)
        return lambda: self._remove(self._activity_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def commit(self) -> None:
        """Notify commit listeners that a command finished mutating state."""
        for listener in list(self._commit_listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Commit listener failed")

    def publish_activity(self, entry: ActivityLogEntry) -> None:
        for listener in list(self._activity_listeners):
            try:
                listener(entry)
            except Exception:
                logger.exception("Activity listener failed for entry %s", entry.id)

    # -------------------- bulk state --------------------
    def replace_state(self, other: "BoardStore") -> None:
        """Adopt another store's collections, keeping listeners and capacity."""
        self.folders = other.folders
        self.projects = other.projects
        self.task_lists = other.task_lists
        self.tasks = other.tasks
        self.comments = other.comments
        self.expanded_folder_ids = other.expanded_folder_ids
        self.activity = other.activity[: self.activity_capacity]
        self.selected_folder_id = None
        self.selected_project_id = None

    def clear(self) -> None:
        self.replace_state(BoardStore(self.activity_capacity))

