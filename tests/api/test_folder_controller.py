"""
API tests for Folder controller.

This module contains API endpoint tests for the folder controller, covering
CRUD operations, nesting, expansion state and cascading deletes.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.factories import FolderCreateFactory


class TestFolderController:
    """Test cases for Folder API endpoints."""

    @pytest.mark.asyncio
    async def test_create_folder_success(self, client: AsyncClient):
        """Test successful folder creation."""
        response = await client.post("/api/folders/", json={"name": "Work"})

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "success"
        assert data["message"] == "Folder created successfully"
        assert data["data"]["name"] == "Work"
        assert data["data"]["path"] == ["Work"]
        assert data["data"]["parentId"] is None
        assert data["data"]["projectCount"] == 0

    @pytest.mark.asyncio
    async def test_create_nested_folder(self, client: AsyncClient, test_folder):
        """Test creating a subfolder with a camelCase parent reference."""
        response = await client.post(
            "/api/folders/", json={"name": "Clients", "parentId": test_folder.id}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["path"] == ["Work", "Clients"]

    @pytest.mark.asyncio
    async def test_create_folder_unknown_parent(self, client: AsyncClient):
        """Test that a dangling parent reference is rejected."""
        response = await client.post("/api/folders/", json={"name": "Orphan", "parentId": "nope"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["status"] == "error"
        assert data["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_create_folder_blank_name(self, client: AsyncClient):
        """Test that whitespace-only names fail request validation."""
        response = await client.post("/api/folders/", json={"name": "   "})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_list_folders_filters(self, client: AsyncClient, folder_service, test_folder):
        """Test listing all folders, root folders and direct children."""
        child = folder_service.add_folder(FolderCreateFactory(parent_id=test_folder.id))

        all_folders = (await client.get("/api/folders/")).json()["data"]
        roots = (await client.get("/api/folders/", params={"root_only": True})).json()["data"]
        children = (
            await client.get("/api/folders/", params={"parent_id": test_folder.id})
        ).json()["data"]

        assert {f["id"] for f in all_folders} == {test_folder.id, child.id}
        assert [f["id"] for f in roots] == [test_folder.id]
        assert [f["id"] for f in children] == [child.id]

    @pytest.mark.asyncio
    async def test_get_folder_not_found(self, client: AsyncClient):
        """Test getting an unknown folder."""
        response = await client.get("/api/folders/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        data = response.json()
        assert data["error_code"] == "FOLDER_NOT_FOUND"
        assert "request_id" in data

    @pytest.mark.asyncio
    async def test_update_folder_rename(self, client: AsyncClient, test_folder):
        """Test renaming a folder."""
        response = await client.put(f"/api/folders/{test_folder.id}", json={"name": "Office"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["name"] == "Office"
        assert data["path"] == ["Office"]

    @pytest.mark.asyncio
    async def test_update_folder_cycle_rejected(
        self, client: AsyncClient, folder_service, test_folder
    ):
        """Test that a folder cannot be moved under its own descendant."""
        child = folder_service.add_folder(FolderCreateFactory(parent_id=test_folder.id))

        response = await client.put(f"/api/folders/{test_folder.id}", json={"parentId": child.id})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_update_folder_not_found(self, client: AsyncClient):
        response = await client.put("/api/folders/missing", json={"name": "X"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_toggle_folder(self, client: AsyncClient, test_folder):
        """Test expanding and collapsing a folder."""
        first = await client.post(f"/api/folders/{test_folder.id}/toggle")
        second = await client.post(f"/api/folders/{test_folder.id}/toggle")

        assert first.json()["data"] == {"folder_id": test_folder.id, "is_expanded": True}
        assert second.json()["data"]["is_expanded"] is False

    @pytest.mark.asyncio
    async def test_toggle_folder_not_found(self, client: AsyncClient):
        response = await client.post("/api/folders/missing/toggle")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_get_folder_projects(self, client: AsyncClient, test_folder, test_project):
        """Test listing the projects of a folder."""
        response = await client.get(f"/api/folders/{test_folder.id}/projects")

        assert response.status_code == status.HTTP_200_OK
        assert [p["id"] for p in response.json()["data"]] == [test_project.id]

    @pytest.mark.asyncio
    async def test_delete_folder_cascades(self, client: AsyncClient, store, test_folder, test_task):
        """Test that deleting a folder removes everything beneath it."""
        response = await client.delete(f"/api/folders/{test_folder.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Folder deleted successfully"
        assert store.folders == {}
        assert store.projects == {}
        assert store.task_lists == {}
        assert store.tasks == {}

    @pytest.mark.asyncio
    async def test_delete_folder_not_found(self, client: AsyncClient):
        response = await client.delete("/api/folders/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
