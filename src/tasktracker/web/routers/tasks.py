"""Task endpoints. Tasks of other users behave exactly like missing ones."""

from typing import Annotated

from fastapi import APIRouter, Query

from tasktracker.core.modules.task.models import TaskFields, TaskStatus, TaskView
from tasktracker.web.deps import AppDep, SessionTokenDep
from tasktracker.web.openapi import CreatedResponse, ErrorResponse, MessageResponse

router: APIRouter = APIRouter(tags=["tasks"])


@router.get(
    "/tasks",
    summary="List tasks",
    description="Get the current user's tasks ordered by date and time.",
    operation_id="listTasks",
    responses={
        200: {"description": "Tasks of the current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_tasks(
    app: AppDep,
    token: SessionTokenDep,
    status: Annotated[TaskStatus | None, Query(description="Only tasks with this status")] = None,
) -> list[TaskView]:
    return await app.get_tasks(token, status)


@router.post(
    "/tasks",
    summary="Create task",
    description="Create a task owned by the current user.",
    operation_id="createTask",
    status_code=201,
    responses={
        201: {"description": "Task created"},
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_task(fields: TaskFields, app: AppDep, token: SessionTokenDep) -> CreatedResponse:
    task_id = await app.create_task(token, fields)
    return CreatedResponse(id=task_id)


@router.get(
    "/tasks/{task_id}",
    summary="Get task",
    description="Get one task of the current user.",
    operation_id="getTask",
    responses={
        200: {"description": "Task"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def get_task(task_id: str, app: AppDep, token: SessionTokenDep) -> TaskView:
    return await app.get_task(token, task_id)


@router.put(
    "/tasks/{task_id}",
    summary="Update task",
    description="Replace title, date, time, status and optionally details of a task. Other fields are ignored.",
    operation_id="updateTask",
    responses={
        200: {"description": "Updated task"},
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def update_task(task_id: str, fields: TaskFields, app: AppDep, token: SessionTokenDep) -> TaskView:
    return await app.update_task(token, task_id, fields)


@router.delete(
    "/tasks/{task_id}",
    summary="Delete task",
    description="Delete a task of the current user.",
    operation_id="deleteTask",
    responses={
        200: {"description": "Task deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Task not found"},
    },
)
async def delete_task(task_id: str, app: AppDep, token: SessionTokenDep) -> MessageResponse:
    await app.delete_task(token, task_id)
    return MessageResponse(message="Task deleted")
