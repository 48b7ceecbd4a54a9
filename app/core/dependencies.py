# app/core/dependencies.py
import logging
from typing import Optional

from fastapi import Depends, Header, Request

from app.core.config import settings
from app.domains.activity.service import ActivityLogService
from app.domains.board.service import BoardService
from app.domains.comment.service import CommentService
from app.domains.focus.service import FocusService
from app.domains.folder.service import FolderService
from app.domains.insights.service import InsightsService
from app.domains.project.service import ProjectService
from app.services.persistence_service import PersistenceService
from app.store import BoardStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> BoardStore:
    """Get the board store owned by the running application."""
    return request.app.state.store


def get_persistence(request: Request) -> Optional[PersistenceService]:
    """Get the persistence adapter, or None when persistence is disabled."""
    return getattr(request.app.state, "persistence", None)


def get_actor_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Actor recorded on activity entries.

    There is no authentication; a client may name itself with ``X-User-ID``,
    otherwise the configured local user is used.
    """
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return settings.default_user_id


def get_folder_service(
    store: BoardStore = Depends(get_store), actor_id: str = Depends(get_actor_id)
) -> FolderService:
    return FolderService(store, actor_id)


def get_project_service(
    store: BoardStore = Depends(get_store), actor_id: str = Depends(get_actor_id)
) -> ProjectService:
    return ProjectService(store, actor_id)


def get_board_service(
    store: BoardStore = Depends(get_store), actor_id: str = Depends(get_actor_id)
) -> BoardService:
    return BoardService(store, actor_id)


def get_comment_service(
    store: BoardStore = Depends(get_store), actor_id: str = Depends(get_actor_id)
) -> CommentService:
    return CommentService(store, actor_id)


def get_activity_service(
    store: BoardStore = Depends(get_store), actor_id: str = Depends(get_actor_id)
) -> ActivityLogService:
    return ActivityLogService(store, actor_id)


def get_focus_service(
    store: BoardStore = Depends(get_store), actor_id: str = Depends(get_actor_id)
) -> FocusService:
    return FocusService(store, actor_id)


def get_insights_service(store: BoardStore = Depends(get_store)) -> InsightsService:
    return InsightsService(store)
