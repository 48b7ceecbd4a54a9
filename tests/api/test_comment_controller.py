"""
API tests for Comment controller.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.factories import CommentCreateFactory


class TestCommentController:
    """Test cases for Comment API endpoints."""

    @pytest.mark.asyncio
    async def test_create_comment(self, client: AsyncClient, test_task):
        comment_data = {
            "taskId": test_task.id,
            "authorId": "u-1",
            "authorName": "Dana",
            "content": "Looks good",
        }

        response = await client.post("/api/comments/", json=comment_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "Comment created successfully"
        assert data["data"]["taskId"] == test_task.id
        assert data["data"]["authorName"] == "Dana"

    @pytest.mark.asyncio
    async def test_create_comment_logs_activity(self, client: AsyncClient, store, test_task):
        await client.post(
            "/api/comments/",
            json={"taskId": test_task.id, "authorId": "u", "authorName": "Dana", "content": "Hi"},
        )

        entry = store.activity[0]
        assert entry.action.value == "commented"
        assert entry.entity_id == test_task.id

    @pytest.mark.asyncio
    async def test_create_comment_unknown_task(self, client: AsyncClient):
        response = await client.post(
            "/api/comments/",
            json={"taskId": "nope", "authorId": "u", "authorName": "Dana", "content": "Hi"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_create_comment_empty_content(self, client: AsyncClient, test_task):
        response = await client.post(
            "/api/comments/",
            json={"taskId": test_task.id, "authorId": "u", "authorName": "Dana", "content": ""},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_create_comment_whitespace_content(self, client: AsyncClient, test_task):
        response = await client.post(
            "/api/comments/",
            json={"taskId": test_task.id, "authorId": "u", "authorName": "  ", "content": "   "},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_get_comments_for_task(self, client: AsyncClient, comment_service, test_task):
        first = comment_service.add_comment(CommentCreateFactory(task_id=test_task.id))
        second = comment_service.add_comment(CommentCreateFactory(task_id=test_task.id))

        response = await client.get("/api/comments/", params={"task_id": test_task.id})

        assert response.status_code == status.HTTP_200_OK
        assert {c["id"] for c in response.json()["data"]} == {first.id, second.id}

    @pytest.mark.asyncio
    async def test_update_comment(self, client: AsyncClient, comment_service, test_task):
        comment = comment_service.add_comment(CommentCreateFactory(task_id=test_task.id))

        response = await client.put(f"/api/comments/{comment.id}", json={"content": "Edited"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["content"] == "Edited"

    @pytest.mark.asyncio
    async def test_get_comment_not_found(self, client: AsyncClient):
        response = await client.get("/api/comments/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error_code"] == "COMMENT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete_comment(self, client: AsyncClient, store, comment_service, test_task):
        comment = comment_service.add_comment(CommentCreateFactory(task_id=test_task.id))

        response = await client.delete(f"/api/comments/{comment.id}")
        missing = await client.delete(f"/api/comments/{comment.id}")

        assert response.status_code == status.HTTP_200_OK
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert store.comments == {}
