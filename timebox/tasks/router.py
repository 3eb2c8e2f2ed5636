"""
TIMEBOX API - Task Router

Board and CRUD endpoints for task management.
All endpoints are JWT-protected and owner-scoped.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, HTTPException, Query, status, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from timebox.database import get_database
from timebox.auth.dependencies import CurrentOwner
from timebox.tasks.errors import NotFoundError, ValidationError
from timebox.tasks.service import TaskService
from timebox.tasks.repository import TaskRepository, TaskRepositoryInterface
from timebox.tasks.schemas import (
    TaskBoardResponse,
    TaskCompleteRequest,
    TaskCreateRequest,
    TaskUpdateRequest,
    TaskResponse,
    TaskDeleteResponse,
)


router = APIRouter(prefix="/tasks", tags=["Tasks"])


async def get_task_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> TaskRepositoryInterface:
    """Dependency to get task repository instance."""
    return TaskRepository(db)


async def get_task_service(
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)]
) -> TaskService:
    """Dependency to get task service instance."""
    return TaskService(repository)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Task not found",
    )


def _invalid(error: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"field": error.field, "message": error.message},
    )


@router.get(
    "",
    response_model=TaskBoardResponse,
    summary="Get the task board",
)
async def get_board(
    current_owner: CurrentOwner,
    service: Annotated[TaskService, Depends(get_task_service)],
    q: Optional[str] = Query(
        default=None,
        max_length=200,
        description="Case-insensitive search over title, description and category",
    ),
) -> TaskBoardResponse:
    """
    All of the user's tasks, grouped into today, overdue and upcoming.

    Tasks with unreadable windows are listed by ID under `skipped`.
    `today_completion` is the percentage of today's tasks already done.
    """
    return await service.get_board(current_owner.id, q)


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    request: TaskCreateRequest,
    current_owner: CurrentOwner,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Create a new task for the authenticated user.

    Title, category, priority, description and a window with start before
    end are required. The card colour is derived from the category.
    """
    try:
        return await service.create_task(owner_id=current_owner.id, request=request)
    except ValidationError as e:
        raise _invalid(e)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get a task by ID",
)
async def get_task(
    task_id: str,
    current_owner: CurrentOwner,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Get a specific task by ID.

    Returns 404 if the task doesn't exist or belongs to another user.
    """
    try:
        return await service.get_task(task_id, current_owner.id)
    except NotFoundError:
        raise _not_found()


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Edit a task",
)
async def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    current_owner: CurrentOwner,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Replace a task's title, window, category, priority and description.

    Completion state and colour are kept. Returns 404 if the task doesn't
    exist or belongs to another user.
    """
    try:
        return await service.update_task(task_id, current_owner.id, request)
    except NotFoundError:
        raise _not_found()
    except ValidationError as e:
        raise _invalid(e)


@router.patch(
    "/{task_id}/complete",
    response_model=TaskResponse,
    summary="Set task completion",
)
async def complete_task(
    task_id: str,
    request: TaskCompleteRequest,
    current_owner: CurrentOwner,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    try:
        return await service.set_completed(task_id, current_owner.id, request.completed)
    except NotFoundError:
        raise _not_found()


@router.post(
    "/{task_id}/renew",
    response_model=TaskResponse,
    summary="Move a task into today",
)
async def renew_task(
    task_id: str,
    current_owner: CurrentOwner,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Reschedule a task to start now, keeping its duration within today,
    and mark it not completed.
    """
    try:
        return await service.renew_task(task_id, current_owner.id)
    except NotFoundError:
        raise _not_found()


@router.delete(
    "/{task_id}",
    response_model=TaskDeleteResponse,
    summary="Delete a task",
)
async def delete_task(
    task_id: str,
    current_owner: CurrentOwner,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskDeleteResponse:
    """
    Delete a task by ID.

    Returns 404 if the task doesn't exist or belongs to another user.
    """
    try:
        await service.delete_task(task_id, current_owner.id)
    except NotFoundError:
        raise _not_found()
    return TaskDeleteResponse(message="Task deleted successfully", id=task_id)
