"""Focus session service.

Translates completion events from the focus timer into task progress and
project XP. The timer itself lives outside the board engine.
"""

import logging
from typing import Optional

from app.domains.activity.service import ActivityLogService
from app.domains.project.service import ProjectService
from app.schemas.focus import FocusSessionCompleted
from app.store import BoardStore
from models import ActivityAction, EntityType, Task, utcnow

logger = logging.getLogger(__name__)


class FocusService:
    """Service class for focus session events."""

    def __init__(
        self,
        store: BoardStore,
        user_id: Optional[str] = None,
        default_xp: Optional[int] = None,
    ):
        self.store = store
        self.projects = ProjectService(store, user_id)
        self.activity = ActivityLogService(store, user_id)
        self.default_xp = default_xp if default_xp is not None else _default_focus_xp()

    def session_completed(self, event: FocusSessionCompleted) -> Optional[Task]:
        """Credit a finished session to its task and project.

        Returns the updated task, or None when the session was not tied to a
        known task.
        """
        if not event.task_id:
            logger.debug("Focus session completed without a task")
            return None

        task = self.store.tasks.get(event.task_id)
        if not task:
            logger.warning(f"Focus session completed for unknown task {event.task_id}")
            return None

        xp = event.xp_amount if event.xp_amount is not None else self.default_xp
        hours = event.duration_minutes / 60

        now = utcnow()
        task.actual_pomodoros += 1
        task.time_spent = round(task.time_spent + hours, 4)
        if task.remaining_estimate is not None:
            task.remaining_estimate = max(round(task.remaining_estimate - hours, 4), 0.0)
        task.updated_at = now

        self.projects.add_xp(task.project_id, xp)
        self.projects.bump_last_modified(task.project_id, now)

        logger.info(f"Credited {xp} XP to project {task.project_id} for task {task.id}")
        self.activity.record(
            EntityType.task,
            task.id,
            ActivityAction.updated,
            f'Completed a focus session on "{task.title}"',
            metadata={"source": "focus-session", "xp": xp, "minutes": event.duration_minutes},
        )
        self.store.commit()
        return task.model_copy(deep=True)


def _default_focus_xp() -> int:
    from app.core.config import settings

    return settings.default_focus_xp
