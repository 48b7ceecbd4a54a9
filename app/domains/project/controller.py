"""Project API controller with FastAPI endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from app.core.dependencies import get_board_service, get_project_service
from app.domains.board.service import BoardService
from app.domains.project.service import ProjectService
from app.exceptions.board import ProjectNotFoundError
from app.schemas.base import ResponseSchema, dump
from app.schemas.board import TaskListReorder
from app.schemas.project import ProjectCreate, ProjectFilter, ProjectSortEnum, ProjectUpdate
from app.shared.pagination import PaginationParams, paginate
from models import ProjectStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
):
    """Create a new project inside a folder."""

    project = service.add_project(project_data)

    return ResponseSchema(
        status="success",
        message="Project created successfully",
        data=dump(project),
    )


@router.get("/", response_model=ResponseSchema)
async def get_projects(
    folder_id: Optional[str] = Query(None),
    status: Optional[ProjectStatus] = Query(None),
    search: Optional[str] = Query(None),
    sort_by: ProjectSortEnum = Query(ProjectSortEnum.created),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    service: ProjectService = Depends(get_project_service),
):
    """Get paginated list of projects with optional filters."""

    filters = ProjectFilter(folder_id=folder_id, status=status, search=search, sort_by=sort_by)
    result = paginate(service.list_projects(filters), PaginationParams(page=page, size=size))
    result["items"] = [dump(project) for project in result["items"]]

    return ResponseSchema(
        status="success",
        message="Projects retrieved successfully",
        data=result,
    )


@router.get("/{project_id}", response_model=ResponseSchema)
async def get_project(
    project_id: str = Path(..., description="Project ID"),
    service: ProjectService = Depends(get_project_service),
):
    """Get a specific project by ID."""

    project = service.get_project(project_id)
    if not project:
        raise ProjectNotFoundError()

    return ResponseSchema(
        status="success",
        message="Project retrieved successfully",
        data=dump(project),
    )


@router.put("/{project_id}", response_model=ResponseSchema)
async def update_project(
    project_id: str = Path(..., description="Project ID"),
    project_data: ProjectUpdate = Body(...),
    service: ProjectService = Depends(get_project_service),
):
    """Update a specific project. A new ``folderId`` moves it between folders."""

    project = service.update_project(project_id, project_data)
    if not project:
        raise ProjectNotFoundError()

    return ResponseSchema(
        status="success",
        message="Project updated successfully",
        data=dump(project),
    )


@router.delete("/{project_id}", response_model=ResponseSchema)
async def delete_project(
    project_id: str = Path(..., description="Project ID"),
    service: ProjectService = Depends(get_project_service),
):
    """Delete a project with its lists, tasks and comments."""

    if not service.delete_project(project_id):
        raise ProjectNotFoundError()

    return ResponseSchema(status="success", message="Project deleted successfully", data=None)


@router.get("/{project_id}/board", response_model=ResponseSchema)
async def get_project_board(
    project_id: str = Path(..., description="Project ID"),
    project_service: ProjectService = Depends(get_project_service),
    board_service: BoardService = Depends(get_board_service),
):
    """Get a project with its lists in order, each with its tasks in order."""

    project = project_service.get_project(project_id)
    if not project:
        raise ProjectNotFoundError()

    lists = []
    for task_list in board_service.get_task_lists_by_project(project_id):
        list_data = dump(task_list)
        list_data["tasks"] = [dump(task) for task in board_service.get_tasks_by_list(task_list.id)]
        lists.append(list_data)

    return ResponseSchema(
        status="success",
        message="Project board retrieved successfully",
        data={"project": dump(project), "lists": lists},
    )


@router.get("/{project_id}/tasks", response_model=ResponseSchema)
async def get_project_tasks(
    project_id: str = Path(..., description="Project ID"),
    project_service: ProjectService = Depends(get_project_service),
    board_service: BoardService = Depends(get_board_service),
):
    """Get all tasks of a project, column by column."""

    if not project_service.get_project(project_id):
        raise ProjectNotFoundError()

    tasks = board_service.get_tasks_by_project(project_id)

    return ResponseSchema(
        status="success",
        message="Project tasks retrieved successfully",
        data=[dump(task) for task in tasks],
    )


@router.put("/{project_id}/lists/order", response_model=ResponseSchema)
async def reorder_project_lists(
    project_id: str = Path(..., description="Project ID"),
    reorder: TaskListReorder = Body(...),
    service: BoardService = Depends(get_board_service),
):
    """Rewrite the left-to-right order of a project's lists."""

    if not service.reorder_task_lists(project_id, reorder.ordered_list_ids):
        raise ProjectNotFoundError()

    return ResponseSchema(
        status="success",
        message="Lists reordered successfully",
        data=[dump(task_list) for task_list in service.get_task_lists_by_project(project_id)],
    )
