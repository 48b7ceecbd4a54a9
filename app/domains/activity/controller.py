"""Activity log API controller."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from app.core.dependencies import get_activity_service
from app.domains.activity.service import ActivityLogService
from app.schemas.base import ResponseSchema, dump
from app.shared.pagination import PaginationParams
from models import ActivityAction, EntityType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("/", response_model=ResponseSchema)
async def get_activity(
    entity_type: Optional[EntityType] = Query(None),
    action: Optional[ActivityAction] = Query(None),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    service: ActivityLogService = Depends(get_activity_service),
):
    """Get paginated activity entries, newest first."""

    result = service.list_entries(PaginationParams(page=page, size=size), entity_type, action)
    result["items"] = [dump(entry) for entry in result["items"]]

    return ResponseSchema(
        status="success",
        message="Activity retrieved successfully",
        data=result,
    )


@router.get("/recent", response_model=ResponseSchema)
async def get_recent_activity(
    limit: int = Query(20, ge=1, le=100),
    service: ActivityLogService = Depends(get_activity_service),
):
    """Get the most recent activity entries."""

    return ResponseSchema(
        status="success",
        message="Recent activity retrieved successfully",
        data=[dump(entry) for entry in service.get_recent(limit)],
    )


@router.get("/{entity_type}/{entity_id}", response_model=ResponseSchema)
async def get_entity_activity(
    entity_type: EntityType = Path(...),
    entity_id: str = Path(...),
    service: ActivityLogService = Depends(get_activity_service),
):
    """Get the retained history of one folder, project, list or task."""

    return ResponseSchema(
        status="success",
        message="Entity activity retrieved successfully",
        data=[dump(entry) for entry in service.get_for_entity(entity_type, entity_id)],
    )
