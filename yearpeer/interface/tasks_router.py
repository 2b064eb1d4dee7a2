"""REST endpoints for tasks."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from yearpeer.core.config import PlannerLimits
from yearpeer.domain.create_models import TaskCreate
from yearpeer.domain.task import Task
from yearpeer.domain.update_models import TaskUpdate
from yearpeer.interface.dependencies import get_limits
from yearpeer.interface.session import current_user_id
from yearpeer.services import task_service


router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[Task])
async def list_tasks(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    user_id: str = Depends(current_user_id),
) -> list[Task]:
    """List the caller's tasks between two calendar days (inclusive)."""
    return await task_service.list_tasks(user_id=user_id, start_date=start_date, end_date=end_date)


# Declared before /{task_id} so "by-date" is not parsed as an ID
@router.get("/by-date", response_model=dict[str, list[Task]])
async def list_tasks_by_date(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    user_id: str = Depends(current_user_id),
) -> dict[str, list[Task]]:
    """List the caller's tasks bucketed by calendar day."""
    return await task_service.group_tasks_by_date(user_id=user_id, start_date=start_date, end_date=end_date)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: UUID, user_id: str = Depends(current_user_id)) -> Task:
    return await task_service.get_task(task_id=str(task_id), user_id=user_id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    response: Response,
    user_id: str = Depends(current_user_id),
    limits: PlannerLimits = Depends(get_limits),
) -> Task:
    """Create a task and point the Location header at it."""
    task = await task_service.create_task(user_id=user_id, payload=payload, limits=limits)
    response.headers["Location"] = f"{router.prefix}/{task.id}"
    return task


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    user_id: str = Depends(current_user_id),
    limits: PlannerLimits = Depends(get_limits),
) -> Task:
    """Replace the task's fields; the daily cap applies only when its day changes."""
    return await task_service.update_task(task_id=str(task_id), user_id=user_id, payload=payload, limits=limits)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: UUID, user_id: str = Depends(current_user_id)) -> Response:
    await task_service.delete_task(task_id=str(task_id), user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
