"""Folder API controller with FastAPI endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from app.core.dependencies import get_folder_service, get_project_service
from app.domains.folder.service import FolderService
from app.domains.project.service import ProjectService
from app.exceptions.board import FolderNotFoundError
from app.schemas.base import ResponseSchema, dump
from app.schemas.folder import FolderCreate, FolderUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/folders", tags=["folders"])


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_folder(
    folder_data: FolderCreate,
    service: FolderService = Depends(get_folder_service),
):
    """Create a new folder."""

    folder = service.add_folder(folder_data)

    return ResponseSchema(
        status="success",
        message="Folder created successfully",
        data=dump(folder),
    )


@router.get("/", response_model=ResponseSchema)
async def get_folders(
    parent_id: Optional[str] = Query(None, description="Only direct children of this folder"),
    root_only: bool = Query(False, description="Only folders without a parent"),
    service: FolderService = Depends(get_folder_service),
):
    """Get folders, optionally restricted to one level of the tree."""

    if root_only:
        folders = service.get_child_folders(None)
    elif parent_id:
        folders = service.get_child_folders(parent_id)
    else:
        folders = service.list_folders()

    return ResponseSchema(
        status="success",
        message="Folders retrieved successfully",
        data=[dump(folder) for folder in folders],
    )


@router.get("/{folder_id}", response_model=ResponseSchema)
async def get_folder(
    folder_id: str = Path(..., description="Folder ID"),
    service: FolderService = Depends(get_folder_service),
):
    """Get a specific folder by ID."""

    folder = service.get_folder(folder_id)
    if not folder:
        raise FolderNotFoundError()

    return ResponseSchema(
        status="success",
        message="Folder retrieved successfully",
        data=dump(folder),
    )


@router.put("/{folder_id}", response_model=ResponseSchema)
async def update_folder(
    folder_id: str = Path(..., description="Folder ID"),
    folder_data: FolderUpdate = Body(...),
    service: FolderService = Depends(get_folder_service),
):
    """Update a folder. Moving it under another parent rebuilds the subtree paths."""

    folder = service.update_folder(folder_id, folder_data)
    if not folder:
        raise FolderNotFoundError()

    return ResponseSchema(
        status="success",
        message="Folder updated successfully",
        data=dump(folder),
    )


@router.delete("/{folder_id}", response_model=ResponseSchema)
async def delete_folder(
    folder_id: str = Path(..., description="Folder ID"),
    service: FolderService = Depends(get_folder_service),
):
    """Delete a folder with its subfolders, projects, lists and tasks."""

    if not service.delete_folder(folder_id):
        raise FolderNotFoundError()

    return ResponseSchema(status="success", message="Folder deleted successfully", data=None)


@router.post("/{folder_id}/toggle", response_model=ResponseSchema)
async def toggle_folder_expansion(
    folder_id: str = Path(..., description="Folder ID"),
    service: FolderService = Depends(get_folder_service),
):
    """Expand or collapse a folder in the sidebar."""

    expanded = service.toggle_expansion(folder_id)
    if expanded is None:
        raise FolderNotFoundError()

    return ResponseSchema(
        status="success",
        message="Folder expansion toggled successfully",
        data={"folder_id": folder_id, "is_expanded": expanded},
    )


@router.get("/{folder_id}/projects", response_model=ResponseSchema)
async def get_folder_projects(
    folder_id: str = Path(..., description="Folder ID"),
    folder_service: FolderService = Depends(get_folder_service),
    project_service: ProjectService = Depends(get_project_service),
):
    """Get the projects directly inside a folder."""

    if not folder_service.get_folder(folder_id):
        raise FolderNotFoundError()

    projects = project_service.get_projects_by_folder(folder_id)

    return ResponseSchema(
        status="success",
        message="Folder projects retrieved successfully",
        data=[dump(project) for project in projects],
    )
