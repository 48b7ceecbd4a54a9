# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("PERSISTENCE_ENABLED", "false")
os.environ.setdefault("SAVE_DEBOUNCE_SECONDS", "0")
os.environ.setdefault("DEFAULT_USER_ID", "test-user")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.domains.activity.service import ActivityLogService
from app.domains.board.service import BoardService
from app.domains.comment.service import CommentService
from app.domains.focus.service import FocusService
from app.domains.folder.service import FolderService
from app.domains.insights.service import InsightsService
from app.domains.project.service import ProjectService
from app.main import create_app
from app.services.persistence_service import MemoryStorage, PersistenceService
from app.store import BoardStore
from tests.factories import (
    FolderCreateFactory,
    ProjectCreateFactory,
    TaskCreateFactory,
    TaskListCreateFactory,
)

TEST_USER_ID = "test-user"


# Store and service fixtures
@pytest.fixture
def store():
    """Create an empty board store."""
    return BoardStore(activity_capacity=1000)


@pytest.fixture
def folder_service(store):
    return FolderService(store, TEST_USER_ID)


@pytest.fixture
def project_service(store):
    return ProjectService(store, TEST_USER_ID)


@pytest.fixture
def board_service(store):
    return BoardService(store, TEST_USER_ID)


@pytest.fixture
def comment_service(store):
    return CommentService(store, TEST_USER_ID)


@pytest.fixture
def activity_service(store):
    return ActivityLogService(store, TEST_USER_ID)


@pytest.fixture
def focus_service(store):
    return FocusService(store, TEST_USER_ID, default_xp=25)


@pytest.fixture
def insights_service(store):
    return InsightsService(store)


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def persistence(store, memory_storage):
    """Persistence adapter saving synchronously into memory."""
    return PersistenceService(store, memory_storage, key="board-store", debounce_seconds=0)


# Board data fixtures
@pytest.fixture
def test_folder(folder_service):
    """Create a root folder."""
    return folder_service.add_folder(FolderCreateFactory(name="Work"))


@pytest.fixture
def test_project(project_service, test_folder):
    """Create a project inside the test folder."""
    return project_service.add_project(
        ProjectCreateFactory(folder_id=test_folder.id, name="Website")
    )


@pytest.fixture
def test_lists(board_service, test_project):
    """Create the three default columns of the test project."""
    return [
        board_service.add_task_list(TaskListCreateFactory(project_id=test_project.id, name=name))
        for name in ("To Do", "In Progress", "Done")
    ]


@pytest.fixture
def test_task(board_service, test_lists):
    """Create a task in the first column."""
    return board_service.add_task(TaskCreateFactory(list_id=test_lists[0].id, title="Write copy"))


# HTTP client fixtures
@pytest_asyncio.fixture
async def client(store):
    """Create a test client bound to the test store."""
    app = create_app(store=store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
