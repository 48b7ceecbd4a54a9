"""Board API controller: task lists (columns) and tasks."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from app.core.dependencies import get_board_service
from app.domains.board.service import BoardService
from app.exceptions.board import TaskListNotFoundError, TaskNotFoundError
from app.schemas.base import ResponseSchema, dump
from app.schemas.board import (
    TaskCreate,
    TaskFilter,
    TaskListCreate,
    TaskListUpdate,
    TaskMove,
    TaskUpdate,
)
from app.shared.pagination import PaginationParams
from models import TaskPriority, TaskStatus, TaskType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["board"])


# -------------------- task lists --------------------


@router.post("/lists", response_model=ResponseSchema, status_code=201)
async def create_task_list(
    list_data: TaskListCreate,
    service: BoardService = Depends(get_board_service),
):
    """Create a new list in a project."""

    task_list = service.add_task_list(list_data)

    return ResponseSchema(
        status="success",
        message="List created successfully",
        data=dump(task_list),
    )


@router.get("/lists", response_model=ResponseSchema)
async def get_task_lists(
    project_id: str = Query(..., description="Project ID"),
    service: BoardService = Depends(get_board_service),
):
    """Get a project's lists in left-to-right order."""

    lists = service.get_task_lists_by_project(project_id)

    return ResponseSchema(
        status="success",
        message="Lists retrieved successfully",
        data=[dump(task_list) for task_list in lists],
    )


@router.get("/lists/{list_id}", response_model=ResponseSchema)
async def get_task_list(
    list_id: str = Path(..., description="List ID"),
    service: BoardService = Depends(get_board_service),
):
    """Get a specific list by ID."""

    task_list = service.get_task_list(list_id)
    if not task_list:
        raise TaskListNotFoundError()

    return ResponseSchema(
        status="success",
        message="List retrieved successfully",
        data=dump(task_list),
    )


@router.put("/lists/{list_id}", response_model=ResponseSchema)
async def update_task_list(
    list_id: str = Path(..., description="List ID"),
    list_data: TaskListUpdate = Body(...),
    service: BoardService = Depends(get_board_service),
):
    """Update a list's name, description, color or default flag."""

    task_list = service.update_task_list(list_id, list_data)
    if not task_list:
        raise TaskListNotFoundError()

    return ResponseSchema(
        status="success",
        message="List updated successfully",
        data=dump(task_list),
    )


@router.delete("/lists/{list_id}", response_model=ResponseSchema)
async def delete_task_list(
    list_id: str = Path(..., description="List ID"),
    service: BoardService = Depends(get_board_service),
):
    """Delete a list with its tasks."""

    if not service.delete_task_list(list_id):
        raise TaskListNotFoundError()

    return ResponseSchema(status="success", message="List deleted successfully", data=None)


@router.get("/lists/{list_id}/tasks", response_model=ResponseSchema)
async def get_list_tasks(
    list_id: str = Path(..., description="List ID"),
    service: BoardService = Depends(get_board_service),
):
    """Get the tasks of a list in position order."""

    if not service.get_task_list(list_id):
        raise TaskListNotFoundError()

    return ResponseSchema(
        status="success",
        message="List tasks retrieved successfully",
        data=[dump(task) for task in service.get_tasks_by_list(list_id)],
    )


# -------------------- tasks --------------------


@router.post("/tasks", response_model=ResponseSchema, status_code=201)
async def create_task(
    task_data: TaskCreate,
    service: BoardService = Depends(get_board_service),
):
    """Create a new task in a list."""

    task = service.add_task(task_data)

    return ResponseSchema(
        status="success",
        message="Task created successfully",
        data=dump(task),
    )


@router.get("/tasks", response_model=ResponseSchema)
async def get_tasks(
    project_id: Optional[str] = Query(None),
    list_id: Optional[str] = Query(None),
    status: Optional[TaskStatus] = Query(None),
    priority: Optional[TaskPriority] = Query(None),
    type: Optional[TaskType] = Query(None),
    assignee_id: Optional[str] = Query(None),
    label: Optional[str] = Query(None),
    due_date_from: Optional[datetime] = Query(None),
    due_date_to: Optional[datetime] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    service: BoardService = Depends(get_board_service),
):
    """Get paginated list of tasks with optional filters."""

    filters = TaskFilter(
        project_id=project_id,
        list_id=list_id,
        status=status,
        priority=priority,
        type=type,
        assignee_id=assignee_id,
        label=label,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
        search=search,
    )
    result = service.list_tasks(filters, PaginationParams(page=page, size=size))
    result["items"] = [dump(task) for task in result["items"]]

    return ResponseSchema(
        status="success",
        message="Tasks retrieved successfully",
        data=result,
    )


@router.get("/tasks/in-progress", response_model=ResponseSchema)
async def get_in_progress_tasks(service: BoardService = Depends(get_board_service)):
    """Get every task currently in progress."""

    return ResponseSchema(
        status="success",
        message="In-progress tasks retrieved successfully",
        data=[dump(task) for task in service.get_in_progress_tasks()],
    )


@router.get("/tasks/{task_id}", response_model=ResponseSchema)
async def get_task(
    task_id: str = Path(..., description="Task ID"),
    service: BoardService = Depends(get_board_service),
):
    """Get a specific task by ID."""

    task = service.get_task(task_id)
    if not task:
        raise TaskNotFoundError()

    return ResponseSchema(
        status="success",
        message="Task retrieved successfully",
        data=dump(task),
    )


@router.put("/tasks/{task_id}", response_model=ResponseSchema)
async def update_task(
    task_id: str = Path(..., description="Task ID"),
    task_data: TaskUpdate = Body(...),
    service: BoardService = Depends(get_board_service),
):
    """Update a task's fields. Use the move endpoint to change list or position."""

    task = service.update_task(task_id, task_data)
    if not task:
        raise TaskNotFoundError()

    return ResponseSchema(
        status="success",
        message="Task updated successfully",
        data=dump(task),
    )


@router.post("/tasks/{task_id}/move", response_model=ResponseSchema)
async def move_task(
    task_id: str = Path(..., description="Task ID"),
    move: TaskMove = Body(...),
    service: BoardService = Depends(get_board_service),
):
    """Move a task to a position in the same or another list."""

    task = service.move_task(task_id, move.list_id, move.position)
    if not task:
        raise TaskNotFoundError()

    return ResponseSchema(
        status="success",
        message="Task moved successfully",
        data=dump(task),
    )


@router.post("/tasks/{task_id}/complete", response_model=ResponseSchema)
async def complete_task(
    task_id: str = Path(..., description="Task ID"),
    service: BoardService = Depends(get_board_service),
):
    """Mark a task as done."""

    task = service.complete_task(task_id)
    if not task:
        raise TaskNotFoundError()

    return ResponseSchema(
        status="success",
        message="Task completed successfully",
        data=dump(task),
    )


@router.post("/tasks/{task_id}/block", response_model=ResponseSchema)
async def block_task(
    task_id: str = Path(..., description="Task ID"),
    service: BoardService = Depends(get_board_service),
):
    """Block a task."""

    task = service.block_task(task_id)
    if not task:
        raise TaskNotFoundError()

    return ResponseSchema(status="success", message="Task blocked successfully", data=dump(task))


@router.post("/tasks/{task_id}/unblock", response_model=ResponseSchema)
async def unblock_task(
    task_id: str = Path(..., description="Task ID"),
    service: BoardService = Depends(get_board_service),
):
    """Return a blocked task to its previous status."""

    task = service.unblock_task(task_id)
    if not task:
        raise TaskNotFoundError()

    return ResponseSchema(status="success", message="Task unblocked successfully", data=dump(task))


@router.delete("/tasks/{task_id}", response_model=ResponseSchema)
async def delete_task(
    task_id: str = Path(..., description="Task ID"),
    service: BoardService = Depends(get_board_service),
):
    """Delete a task and its comments."""

    if not service.delete_task(task_id):
        raise TaskNotFoundError()

    return ResponseSchema(status="success", message="Task deleted successfully", data=None)
