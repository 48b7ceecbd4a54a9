"""Comment API controller with FastAPI endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, Path, Query

from app.core.dependencies import get_comment_service
from app.domains.comment.service import CommentService
from app.exceptions.board import CommentNotFoundError
from app.schemas.base import ResponseSchema, dump
from app.schemas.comment import CommentCreate, CommentUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_comment(
    comment_data: CommentCreate,
    service: CommentService = Depends(get_comment_service),
):
    """Add a comment to a task."""

    comment = service.add_comment(comment_data)

    return ResponseSchema(
        status="success",
        message="Comment created successfully",
        data=dump(comment),
    )


@router.get("/", response_model=ResponseSchema)
async def get_task_comments(
    task_id: str = Query(..., description="Task ID"),
    service: CommentService = Depends(get_comment_service),
):
    """Get a task's comments, oldest first."""

    comments = service.get_comments_for_task(task_id)

    return ResponseSchema(
        status="success",
        message="Comments retrieved successfully",
        data=[dump(comment) for comment in comments],
    )


@router.get("/{comment_id}", response_model=ResponseSchema)
async def get_comment(
    comment_id: str = Path(..., description="Comment ID"),
    service: CommentService = Depends(get_comment_service),
):
    comment = service.get_comment(comment_id)
    if not comment:
        raise CommentNotFoundError()

    return ResponseSchema(
        status="success",
        message="Comment retrieved successfully",
        data=dump(comment),
    )


@router.put("/{comment_id}", response_model=ResponseSchema)
async def update_comment(
    comment_id: str = Path(..., description="Comment ID"),
    comment_data: CommentUpdate = Body(...),
    service: CommentService = Depends(get_comment_service),
):
    """Edit a comment."""

    comment = service.update_comment(comment_id, comment_data)
    if not comment:
        raise CommentNotFoundError()

    return ResponseSchema(
        status="success",
        message="Comment updated successfully",
        data=dump(comment),
    )


@router.delete("/{comment_id}", response_model=ResponseSchema)
async def delete_comment(
    comment_id: str = Path(..., description="Comment ID"),
    service: CommentService = Depends(get_comment_service),
):
    if not service.delete_comment(comment_id):
        raise CommentNotFoundError()

    return ResponseSchema(status="success", message="Comment deleted successfully", data=None)
