"""Activity log service: bounded, newest-first audit trail."""

import logging
from collections.abc import Callable
from typing import Any, Dict, Optional

from app.shared.pagination import PaginationParams, paginate
from app.store import ActivityListener, BoardStore
from models import ActivityAction, ActivityLogEntry, EntityType

logger = logging.getLogger(__name__)


class ActivityLogService:
    """Service class for the activity log."""

    def __init__(self, store: BoardStore, user_id: Optional[str] = None):
        self.store = store
        self.user_id = user_id or _default_user_id()

    def log(self, entry: ActivityLogEntry) -> ActivityLogEntry:
        """Prepend an entry and drop the oldest entries beyond capacity."""
        self.store.activity.insert(0, entry)
        overflow = len(self.store.activity) - self.store.activity_capacity
        if overflow > 0:
            del self.store.activity[self.store.activity_capacity:]
            logger.debug(f"Evicted {overflow} activity entries over capacity")
        self.store.publish_activity(entry)
        return entry.model_copy(deep=True)

    def record(
        self,
        entity_type: EntityType,
        entity_id: str,
        action: ActivityAction,
        description: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ActivityLogEntry:
        """Build an entry for the current actor and log it."""
        entry = ActivityLogEntry(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            description=description,
            user_id=self.user_id,
            metadata=metadata,
        )
        return self.log(entry)

    def get_recent(self, limit: int = 20) -> list[ActivityLogEntry]:
        """Get the newest entries first."""
        return [entry.model_copy(deep=True) for entry in self.store.activity[: max(limit, 0)]]

    def get_for_entity(self, entity_type: EntityType, entity_id: str) -> list[ActivityLogEntry]:
        """Get every retained entry about one entity, newest first."""
        return [
            entry.model_copy(deep=True)
            for entry in self.store.activity
            if entry.entity_type == entity_type and entry.entity_id == entity_id
        ]

    def list_entries(
        self,
        pagination: PaginationParams,
        entity_type: Optional[EntityType] = None,
        action: Optional[ActivityAction] = None,
    ) -> Dict[str, Any]:
        """Get a paginated list of entries with optional filters."""
        entries = [
            entry
            for entry in self.store.activity
            if (entity_type is None or entry.entity_type == entity_type)
            and (action is None or entry.action == action)
        ]
        result = paginate(entries, pagination)
        result["items"] = [entry.model_copy(deep=True) for entry in result["items"]]
        return result

    def subscribe(self, listener: ActivityListener) -> Callable[[], None]:
        """Register a listener for new entries; returns an unsubscribe callable."""
        return self.store.add_activity_listener(listener)


def _default_user_id() -> str:
    from app.core.config import settings

    return settings.default_user_id
