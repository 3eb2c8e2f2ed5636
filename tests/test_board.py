"""
TIMEBOX Board - Client Tests

Board session and poller, against the real app over ASGI and against
a mocked transport for failure paths.
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import httpx
import pydantic
import pytest

from timebox.board import BoardPoller, BoardSession, TasksApiClient
from timebox.tasks.errors import NotFoundError
from timebox.tasks.schemas import TaskBoardResponse, TaskResponse

from tests.conftest import make_task


def task_json(task_id: str, completed: bool = False, overdue_days=None) -> dict:
    return {
        "id": task_id,
        "owner_id": "owner-1",
        "title": f"Task {task_id}",
        "description": "",
        "category": "work",
        "priority": "medium",
        "start_time": "2024-06-10T14:00:00Z",
        "end_time": "2024-06-10T15:00:00Z",
        "time_slot": "2024-06-10T14:00:00+00:00 - 2024-06-10T15:00:00+00:00",
        "time_slot_label": "Today",
        "color": "blue",
        "completed": completed,
        "overdue_days": overdue_days,
        "created_at": "2024-06-01T00:00:00Z",
        "updated_at": "2024-06-01T00:00:00Z",
    }


def board_json(today=(), overdue=(), upcoming=()) -> dict:
    return {
        "today": list(today),
        "overdue": list(overdue),
        "upcoming": list(upcoming),
        "skipped": [],
        "total": len(today) + len(overdue) + len(upcoming),
    }


class FakeApi:
    """Mock transport: serves a fixed board and fails writes on demand."""

    def __init__(self, board: dict, write_status: int = 500, read_status: int = 200, write_body=None):
        self.board = board
        self.write_status = write_status
        self.read_status = read_status
        self.write_body = write_body if write_body is not None else {"detail": "boom"}
        self.calls: list[tuple[str, str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, request.url.path))
        if request.method == "GET":
            return httpx.Response(self.read_status, json=self.board)
        return httpx.Response(self.write_status, json=self.write_body)

    @property
    def reads(self) -> int:
        return sum(1 for method, _ in self.calls if method == "GET")


@pytest.fixture
async def api_client(api_overrides, auth_token):
    client = TasksApiClient(
        auth_token,
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=api_overrides),
    )
    yield client
    await client.close()


@pytest.fixture
def session(api_client):
    return BoardSession(api_client)


class TestSessionAgainstApi:
    """Happy paths through the real routes."""

    async def test_refresh(self, session, task_repository, frozen_now):
        today = make_task(frozen_now + timedelta(hours=1), frozen_now + timedelta(hours=2))
        late = make_task(frozen_now - timedelta(days=1, hours=2), frozen_now - timedelta(days=1, hours=1))
        await task_repository.create(today)
        await task_repository.create(late)

        board = await session.refresh()
        assert [t.id for t in board.today] == [today.id]
        assert [t.id for t in board.overdue] == [late.id]
        assert board.overdue[0].overdue_days == 1
        assert session.find(late.id).id == late.id

    async def test_toggle_complete(self, session, task_repository, frozen_now):
        task = make_task(frozen_now + timedelta(hours=1), frozen_now + timedelta(hours=2))
        await task_repository.create(task)
        await session.refresh()

        stored = await session.toggle_complete(task.id)
        assert stored.completed is True
        assert session.find(task.id).completed is True
        assert (await task_repository.get_by_id(task.id, task.owner_id)).completed is True

    async def test_renew(self, session, task_repository, frozen_now):
        task = make_task(frozen_now - timedelta(days=3), frozen_now - timedelta(days=3) + timedelta(hours=1))
        task.completed = True
        await task_repository.create(task)
        await session.refresh()

        await session.renew_task(task.id)
        assert session.board.overdue == []
        assert [t.id for t in session.board.today] == [task.id]
        assert session.board.today[0].completed is False

        server_board = await session.refresh()
        assert [t.id for t in server_board.today] == [task.id]

    async def test_delete(self, session, task_repository, frozen_now):
        task = make_task(frozen_now + timedelta(days=2), frozen_now + timedelta(days=2, hours=1))
        await task_repository.create(task)
        await session.refresh()

        await session.delete_task(task.id)
        assert session.find(task.id) is None
        assert session.board.total == 0
        assert await task_repository.get_by_id(task.id, task.owner_id) is None

    async def test_create_and_update_refresh(self, session, task_payload):
        created = await session.create_task(task_payload)
        assert [t.id for t in session.board.today] == [created.id]

        updated = await session.update_task(created.id, {
            **task_payload,
            "start_time": "2024-06-11T09:00:00Z",
            "end_time": "2024-06-11T10:00:00Z",
        })
        assert updated.time_slot_label == "Tomorrow"
        assert session.board.today == []
        assert [t.id for t in session.board.upcoming] == [created.id]

    async def test_create_validation_error_raises(self, session, task_payload):
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await session.create_task({**task_payload, "title": ""})
        assert exc_info.value.response.status_code == 422

    async def test_unknown_task(self, session):
        with pytest.raises(NotFoundError):
            await session.toggle_complete("missing")


class TestOptimisticRollback:
    """A failed write never leaves the speculative state behind."""

    def make_session(self, api: FakeApi) -> BoardSession:
        client = TasksApiClient("token", base_url="http://api", transport=httpx.MockTransport(api))
        return BoardSession(client)

    async def test_failed_toggle_refreshes_from_server(self):
        api = FakeApi(board_json(today=[task_json("a")]))
        session = self.make_session(api)
        await session.refresh()

        # Another client added a task in the meantime
        api.board = board_json(today=[task_json("a"), task_json("b")])

        with pytest.raises(httpx.HTTPStatusError):
            await session.toggle_complete("a")

        assert ("PATCH", "/tasks/a/complete") in api.calls
        assert api.reads == 2
        assert session.find("a").completed is False
        assert session.find("b") is not None

    async def test_failed_renew_restores_snapshot_when_refresh_fails(self):
        api = FakeApi(board_json(overdue=[task_json("a", completed=True, overdue_days=4)]))
        session = self.make_session(api)
        before = await session.refresh()

        api.read_status = 503
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await session.renew_task("a")

        assert exc_info.value.request.url.path == "/tasks/a/renew"
        assert session.board == before
        assert session.board.today == []
        assert session.board.overdue[0].overdue_days == 4

    async def test_failed_delete_puts_task_back(self):
        api = FakeApi(board_json(upcoming=[task_json("a"), task_json("b")]), write_status=404)
        session = self.make_session(api)
        await session.refresh()

        with pytest.raises(httpx.HTTPStatusError):
            await session.delete_task("a")

        assert [t.id for t in session.board.upcoming] == ["a", "b"]

    async def test_transport_error_rolls_back(self):
        board = TaskBoardResponse.model_validate(board_json(today=[task_json("a")]))
        client = MagicMock()
        client.fetch_board = AsyncMock(side_effect=httpx.ConnectError("offline"))
        client.set_completed = AsyncMock(side_effect=httpx.ConnectError("offline"))
        session = BoardSession(client)
        session.board = board

        with pytest.raises(httpx.ConnectError):
            await session.toggle_complete("a")
        assert session.board is board

    async def test_unreadable_write_response_rolls_back(self):
        api = FakeApi(board_json(today=[task_json("a")]), write_status=200, write_body={"unexpected": True})
        session = self.make_session(api)
        await session.refresh()

        with pytest.raises(pydantic.ValidationError):
            await session.toggle_complete("a")

        assert session.find("a").completed is False
        assert api.reads == 2

    async def test_cancelled_write_restores_snapshot(self):
        board = TaskBoardResponse.model_validate(board_json(today=[task_json("a")]))
        client = MagicMock()
        client.fetch_board = AsyncMock()
        client.delete_task = AsyncMock(side_effect=asyncio.CancelledError())
        session = BoardSession(client)
        session.board = board

        with pytest.raises(asyncio.CancelledError):
            await session.delete_task("a")
        assert session.board is board
        client.fetch_board.assert_not_awaited()


class TestSpeculativeCounters:
    """Local transitions keep total and today_completion in step with the groups."""

    async def test_toggle_updates_today_completion(self):
        board = TaskBoardResponse.model_validate(
            board_json(today=[task_json("a"), task_json("b", completed=True)])
        )
        assert board.today_completion == 0.0
        seen = []
        client = MagicMock()

        async def set_completed(task_id, completed):
            seen.append(session.board.today_completion)
            return TaskResponse.model_validate(task_json(task_id, completed=completed))

        client.set_completed = AsyncMock(side_effect=set_completed)
        session = BoardSession(client)
        session.board = board

        await session.toggle_complete("a")
        assert seen == [100.0]
        assert session.board.today_completion == 100.0

    async def test_renew_counts_moved_task(self):
        board = TaskBoardResponse.model_validate(
            board_json(today=[task_json("a", completed=True)], overdue=[task_json("b", overdue_days=2)])
        )
        client = MagicMock()
        client.renew_task = AsyncMock(return_value=TaskResponse.model_validate(task_json("b")))
        session = BoardSession(client)
        session.board = board

        await session.renew_task("b")
        assert session.board.total == 2
        assert [t.id for t in session.board.today] == ["a", "b"]
        assert session.board.today_completion == 50.0


class TestBoardPoller:
    """Background refresh loop."""

    async def test_polls_until_stopped(self):
        session = MagicMock()
        session.refresh = AsyncMock()
        poller = BoardPoller(session, interval=0.01)

        await poller.start()
        assert poller.running
        await asyncio.sleep(0.05)
        await poller.stop()

        calls = session.refresh.await_count
        assert calls >= 2
        assert not poller.running

        await asyncio.sleep(0.03)
        assert session.refresh.await_count == calls

    async def test_keeps_polling_after_errors(self):
        session = MagicMock()
        failures = iter([httpx.ConnectError("offline")])

        async def refresh():
            error = next(failures, None)
            if error is not None:
                raise error

        session.refresh = AsyncMock(side_effect=refresh)
        poller = BoardPoller(session, interval=0.01)

        await poller.start()
        await asyncio.sleep(0.05)
        await poller.stop()

        assert session.refresh.await_count >= 2

    async def test_start_twice_is_noop(self):
        session = MagicMock()
        session.refresh = AsyncMock()
        poller = BoardPoller(session, interval=10)

        await poller.start()
        first = poller._task
        await poller.start()
        assert poller._task is first
        await poller.stop()
