"""
TIMEBOX API - Test Configuration

Shared fixtures for CI-safe testing without MongoDB.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional

from fastapi.testclient import TestClient

from timebox.main import app
from timebox.auth.service import AuthService
from timebox.tasks.enums import TaskPriority
from timebox.tasks.models import Task
from timebox.tasks.repository import InMemoryTaskRepository
from timebox.tasks.router import get_task_repository, get_task_service
from timebox.tasks.service import TaskService


# Global in-memory repository for tests
_test_repository = InMemoryTaskRepository()

auth_service = AuthService()

OWNER_ID = "owner-1"
SECOND_OWNER_ID = "owner-2"


async def override_get_task_repository():
    """Override dependency to use in-memory repository."""
    return _test_repository


def make_task(
    start_time,
    end_time,
    owner_id: str = OWNER_ID,
    title: str = "Task",
    category: str = "work",
    priority: TaskPriority = TaskPriority.MEDIUM,
    description: str = "Something to do",
    created_at: Optional[datetime] = None,
) -> Task:
    """Build a task with a fixed window, bypassing validation."""
    task = Task.create(
        owner_id=owner_id,
        title=title,
        description=description,
        category=category,
        priority=priority,
        start_time=start_time,
        end_time=end_time,
    )
    if created_at is not None:
        task.created_at = created_at
        task.updated_at = created_at
    return task


# Time control fixtures for deterministic classification testing
class FrozenClock:
    """A clock that returns a fixed time for deterministic testing."""

    def __init__(self, frozen_time: datetime):
        self._frozen_time = frozen_time

    def __call__(self) -> datetime:
        return self._frozen_time

    def set(self, new_time: datetime) -> None:
        self._frozen_time = new_time

    def advance(self, delta: timedelta) -> None:
        self._frozen_time += delta


@pytest.fixture
def frozen_now() -> datetime:
    """A fixed 'now' time for testing."""
    return datetime(2024, 6, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock(frozen_now) -> FrozenClock:
    """A controllable clock for classification testing."""
    return FrozenClock(frozen_now)


@pytest.fixture
def task_repository():
    """Provide a fresh in-memory task repository for each test."""
    _test_repository.clear()
    return _test_repository


@pytest.fixture
def task_service(task_repository, frozen_clock):
    """Task service over the in-memory repository with a frozen clock in UTC."""
    return TaskService(task_repository, clock=frozen_clock, tz=timezone.utc)


@pytest.fixture
def api_overrides(task_repository, task_service):
    """Route the app to the in-memory repository and frozen clock."""
    app.dependency_overrides[get_task_repository] = override_get_task_repository
    app.dependency_overrides[get_task_service] = lambda: task_service
    yield app
    # Clean up override after test
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_overrides):
    """Create test client with in-memory repository and frozen clock."""
    return TestClient(api_overrides)


@pytest.fixture
def auth_token():
    """An access token for the first owner, shaped like the provider's."""
    return auth_service.create_access_token(OWNER_ID, email="owner@example.com")


@pytest.fixture
def auth_headers(auth_token):
    """Create Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def second_auth_headers():
    """Authorization headers for the second owner."""
    token = auth_service.create_access_token(SECOND_OWNER_ID)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def task_payload():
    """A valid create/update body for a window later on the frozen day."""
    return {
        "title": "Write report",
        "category": "work",
        "priority": "high",
        "description": "Quarterly numbers",
        "start_time": "2024-06-10T14:00:00+00:00",
        "end_time": "2024-06-10T15:00:00+00:00",
    }
