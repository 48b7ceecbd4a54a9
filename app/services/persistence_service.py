"""Snapshot persistence for the board store.

The board is saved as one JSON document under a single key of a local
key-value storage. Saves triggered by commands are coalesced: while a save is
pending, newer snapshots replace the pending one, and at most one write is in
flight at a time. Storage failures never reach domain commands; the service
logs them and keeps working in memory ("degraded") until a write succeeds.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from app.exceptions.base import PersistenceError, report_consistency
from app.schemas.base import BaseSchema
from app.store import BoardStore, ExpandedFolderSet
from models import Folder, Project, Task, TaskComment, TaskList, TaskStatus

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


# -------------------- storage backends --------------------


class KeyValueStorage(ABC):
    """Minimal string key-value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key if present."""


class MemoryStorage(KeyValueStorage):
    def __init__(self):
        self.data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """One ``<key>.json`` file per key inside a directory, written atomically."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to delete {self._path(key)}: {e}") from e


# -------------------- snapshot codec --------------------


class Snapshot(BaseSchema):
    """Persisted shape of the board. UI selection and the activity log are excluded."""

    version: int = SNAPSHOT_VERSION
    folders: list[Folder] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    task_lists: list[TaskList] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    comments: list[TaskComment] = Field(default_factory=list)
    expanded_folder_ids: list[str] = Field(default_factory=list)


def serialize(store: BoardStore) -> Dict[str, Any]:
    """Convert the store's persisted collections to a JSON-ready snapshot."""
    snapshot = Snapshot(
        folders=list(store.folders.values()),
        projects=list(store.projects.values()),
        task_lists=list(store.task_lists.values()),
        tasks=list(store.tasks.values()),
        comments=list(store.comments.values()),
        expanded_folder_ids=store.expanded_folder_ids.to_array(),
    )
    return snapshot.model_dump(mode="json", by_alias=True)


def deserialize(data: Any, activity_capacity: int = 1000) -> BoardStore:
    """Rebuild a store from a snapshot.

    An absent, malformed or newer-versioned snapshot yields an empty store.
    Dangling references are dropped and stale counters recomputed, each
    reported as a consistency warning.
    """
    store = BoardStore(activity_capacity=activity_capacity)
    if data is None:
        return store
    if not isinstance(data, dict):
        logger.warning("Ignoring snapshot that is not an object")
        return store

    try:
        snapshot = Snapshot.model_validate(data)
    except PydanticValidationError as e:
        logger.warning(f"Ignoring malformed snapshot: {e.error_count()} validation errors")
        return store

    if snapshot.version > SNAPSHOT_VERSION:
        logger.warning(f"Ignoring snapshot with unsupported version {snapshot.version}")
        return store

    store.expanded_folder_ids = ExpandedFolderSet.from_array(snapshot.expanded_folder_ids)
    _restore_folders(store, snapshot.folders)

    for project in snapshot.projects:
        if project.folder_id not in store.folders:
            report_consistency("dropped project without folder", project_id=project.id)
            continue
        store.projects[project.id] = project

    for task_list in snapshot.task_lists:
        if task_list.project_id not in store.projects:
            report_consistency("dropped list without project", list_id=task_list.id)
            continue
        store.task_lists[task_list.id] = task_list

    for task in snapshot.tasks:
        task_list = store.task_lists.get(task.list_id)
        if not task_list:
            report_consistency("dropped task without list", task_id=task.id)
            continue
        if task.project_id != task_list.project_id:
            report_consistency(
                "task project differed from its list's project",
                task_id=task.id,
                stored=task.project_id,
                actual=task_list.project_id,
            )
            task.project_id = task_list.project_id
        store.tasks[task.id] = task

    for comment in snapshot.comments:
        if comment.task_id not in store.tasks:
            report_consistency("dropped comment without task", comment_id=comment.id)
            continue
        store.comments[comment.id] = comment

    _recount(store)
    return store


def _restore_folders(store: BoardStore, folders: list[Folder]) -> None:
    for folder in folders:
        store.folders[folder.id] = folder

    for folder in store.folders.values():
        if folder.parent_id and folder.parent_id not in store.folders:
            report_consistency("moved folder with missing parent to root", folder_id=folder.id)
            folder.parent_id = None

    # Break any parent cycle by moving the first folder seen on it to the root
    for folder in store.folders.values():
        seen = {folder.id}
        current = folder
        while current.parent_id:
            if current.parent_id in seen:
                report_consistency("broke folder parent cycle", folder_id=current.id)
                current.parent_id = None
                break
            seen.add(current.parent_id)
            current = store.folders[current.parent_id]

    for folder in store.folders.values():
        chain = []
        current = folder
        while current:
            chain.append(current.name)
            current = store.folders.get(current.parent_id) if current.parent_id else None
        folder.path = list(reversed(chain))
        folder.is_expanded = folder.id in store.expanded_folder_ids

    for folder_id in [fid for fid in store.expanded_folder_ids if fid not in store.folders]:
        store.expanded_folder_ids.discard(folder_id)


def _recount(store: BoardStore) -> None:
    def _sync(entity, field: str, actual: int) -> None:
        stored = getattr(entity, field)
        if stored != actual:
            report_consistency(
                f"stale {field}", entity_id=entity.id, stored=stored, actual=actual
            )
            setattr(entity, field, actual)

    for folder in store.folders.values():
        _sync(
            folder,
            "project_count",
            sum(1 for p in store.projects.values() if p.folder_id == folder.id),
        )
    for project in store.projects.values():
        tasks = [t for t in store.tasks.values() if t.project_id == project.id]
        _sync(project, "task_count", len(tasks))
        _sync(
            project,
            "completed_task_count",
            sum(1 for t in tasks if t.status == TaskStatus.done),
        )
    for task_list in store.task_lists.values():
        _sync(
            task_list,
            "task_count",
            sum(1 for t in store.tasks.values() if t.list_id == task_list.id),
        )


# -------------------- persistence service --------------------


class PersistenceService:
    """Loads and saves the store through a key-value storage backend."""

    def __init__(
        self,
        store: BoardStore,
        storage: KeyValueStorage,
        key: str = "board-store",
        debounce_seconds: float = 0.0,
        retries: int = 1,
    ):
        self.store = store
        self.storage = storage
        self.key = key
        self.debounce_seconds = debounce_seconds
        self.retries = retries
        self.degraded = False

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._writes_in_flight = 0
        self._write_lock = threading.Lock()
        self._pending: Optional[str] = None
        self._timer: Optional[threading.Timer] = None
        self._detach: Optional[Callable[[], None]] = None

    def attach(self) -> None:
        """Save (debounced) after every committed command."""
        if self._detach is None:
            self._detach = self.store.add_commit_listener(lambda _store: self.schedule_save())

    def detach(self) -> None:
        if self._detach is not None:
            self._detach()
            self._detach = None

    def load(self) -> bool:
        """Replace the store's state with the persisted snapshot.

        Returns True when a snapshot was found and parsed. A missing, unreadable
        or malformed snapshot leaves an empty store.
        """
        try:
            raw = self.storage.get(self.key)
        except PersistenceError as e:
            logger.error(f"❌ Could not read snapshot, continuing in memory: {e}")
            self.degraded = True
            self.store.replace_state(BoardStore(self.store.activity_capacity))
            return False

        data = None
        if raw is not None:
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.warning(f"Ignoring unreadable snapshot: {e}")

        self.store.replace_state(deserialize(data, self.store.activity_capacity))
        if data is not None:
            logger.info(
                f"✅ Loaded snapshot with {len(self.store.folders)} folders, "
                f"{len(self.store.projects)} projects and {len(self.store.tasks)} tasks"
            )
        return data is not None

    def save(self) -> bool:
        """Write the current state immediately."""
        with self._lock:
            self._cancel_timer()
            self._pending = None
        return self._write(json.dumps(serialize(self.store), ensure_ascii=False, indent=2))

    def schedule_save(self) -> None:
        """Queue a save, coalescing with any save still waiting to run."""
        if self.debounce_seconds <= 0:
            self.save()
            return

        payload = json.dumps(serialize(self.store), ensure_ascii=False, indent=2)
        with self._lock:
            self._pending = payload
            if self._timer is None:
                self._timer = threading.Timer(self.debounce_seconds, self._flush_pending)
                self._timer.daemon = True
                self._timer.start()

    def flush(self) -> bool:
        """Write any pending snapshot now and wait for writes already running.

        Returns False if a write failed.
        """
        with self._lock:
            self._cancel_timer()
        written = self._flush_pending()
        with self._idle:
            self._idle.wait_for(lambda: self._writes_in_flight == 0)
        return written

    @property
    def has_pending_save(self) -> bool:
        return self._pending is not None

    def _flush_pending(self) -> bool:
        with self._lock:
            payload, self._pending = self._pending, None
            self._timer = None
            if payload is None:
                return True
            self._writes_in_flight += 1
        try:
            return self._write(payload)
        finally:
            with self._idle:
                self._writes_in_flight -= 1
                self._idle.notify_all()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _write(self, payload: str) -> bool:
        with self._write_lock:
            for attempt in range(self.retries + 1):
                try:
                    self.storage.set(self.key, payload)
                except PersistenceError as e:
                    logger.warning(f"Snapshot write attempt {attempt + 1} failed: {e}")
                    continue
                if self.degraded:
                    logger.info("✅ Snapshot storage recovered")
                self.degraded = False
                return True

        logger.error("❌ Snapshot storage unavailable, continuing in memory only")
        self.degraded = True
        return False
