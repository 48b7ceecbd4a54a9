"""Insights API controller: progress, recency and board summary."""

import logging

from fastapi import APIRouter, Depends, Path, Query

from app.core.dependencies import get_insights_service
from app.domains.insights.service import InsightsService
from app.exceptions.board import FolderNotFoundError, ProjectNotFoundError
from app.schemas.base import ResponseSchema, dump

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get("/summary", response_model=ResponseSchema)
async def get_board_summary(service: InsightsService = Depends(get_insights_service)):
    """Get task and project counts by status and XP totals."""

    return ResponseSchema(
        status="success",
        message="Board summary retrieved successfully",
        data=service.get_board_summary(),
    )


@router.get("/projects/{project_id}/progress", response_model=ResponseSchema)
async def get_project_progress(
    project_id: str = Path(..., description="Project ID"),
    service: InsightsService = Depends(get_insights_service),
):
    """Get the percentage of a project's tasks that are done."""

    progress = service.get_project_progress(project_id)
    if progress is None:
        raise ProjectNotFoundError()

    return ResponseSchema(
        status="success",
        message="Project progress retrieved successfully",
        data={"project_id": project_id, "progress": progress},
    )


@router.get("/folders/{folder_id}/progress", response_model=ResponseSchema)
async def get_folder_progress(
    folder_id: str = Path(..., description="Folder ID"),
    service: InsightsService = Depends(get_insights_service),
):
    """Get completion over every project in a folder and its subfolders."""

    progress = service.get_folder_progress(folder_id)
    if progress is None:
        raise FolderNotFoundError()

    return ResponseSchema(
        status="success",
        message="Folder progress retrieved successfully",
        data={"folder_id": folder_id, "progress": progress},
    )


@router.get("/folders/recent", response_model=ResponseSchema)
async def get_recent_folders(
    limit: int = Query(5, ge=1, le=50),
    service: InsightsService = Depends(get_insights_service),
):
    """Get the most recently modified folders."""

    return ResponseSchema(
        status="success",
        message="Recent folders retrieved successfully",
        data=[dump(folder) for folder in service.get_recently_modified_folders(limit)],
    )
