"""Task service for CRUD operations guarded by the daily task cap."""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Any

from yearpeer.core import db_client
from yearpeer.core.config import PlannerLimits, constants
from yearpeer.core.db_client import RecordNotFoundError, sanitize_param
from yearpeer.core.errors import DomainValidationError, ErrorCode, NotFoundError
from yearpeer.core.logging import span
from yearpeer.domain.create_models import TaskCreate
from yearpeer.domain.task import Task
from yearpeer.domain.update_models import TaskUpdate
from yearpeer.services import validators


logger = logging.getLogger(__name__)


def _task_limit_error(limits: PlannerLimits) -> DomainValidationError:
    return DomainValidationError(
        f"Cannot exceed {limits.task_limit} tasks per day",
        code=ErrorCode.ERR_TASK_LIMIT,
    )


def _task_data(payload: TaskCreate) -> dict[str, Any]:
    return {
        "title": payload.title,
        "description": payload.description,
        "date": validators.format_task_datetime(payload.date),
        "goal_id": payload.goal_id,
        "completed": payload.completed,
    }


def _calendar_day(value: datetime) -> date:
    return validators.normalize_datetime(value).date()


async def _validate_fields(*, user_id: str, payload: TaskCreate, limits: PlannerLimits) -> None:
    """Check the description length and that a linked goal belongs to the user."""
    if payload.description is not None and len(payload.description) > limits.max_description_length:
        raise DomainValidationError(
            f"Description cannot exceed {limits.max_description_length} characters",
        )

    if payload.goal_id:
        try:
            goal = await db_client.get_record(collection="goals", record_id=payload.goal_id)
        except RecordNotFoundError:
            goal = None
        if goal is None or goal["user_id"] != user_id:
            raise DomainValidationError(f"Goal with ID {payload.goal_id} not found")


async def _get_task_record(*, task_id: str, user_id: str) -> dict[str, Any]:
    """Load a task record owned by the user.

    Absent and foreign tasks raise the same NotFoundError.
    """
    try:
        record = await db_client.get_record(collection="tasks", record_id=task_id)
    except RecordNotFoundError:
        record = None

    if record is None or record["user_id"] != user_id:
        raise NotFoundError(f"Task with ID {task_id} not found")
    return record


async def list_tasks(*, user_id: str, start_date: date, end_date: date) -> list[Task]:
    """List a user's tasks whose calendar day lies in [start_date, end_date].

    Args:
        user_id: Owner of the tasks
        start_date: First day of the range (inclusive)
        end_date: Last day of the range (inclusive)

    Returns:
        Tasks ordered by date ascending
    """
    with span("task_service.list_tasks"):
        range_start, _ = validators.day_bounds(start_date)
        _, range_end = validators.day_bounds(end_date)

        filter_query = (
            f'user_id = "{sanitize_param(user_id)}" && '
            f'date >= "{validators.format_task_datetime(range_start)}" && '
            f'date <= "{validators.format_task_datetime(range_end)}"'
        )
        records = await db_client.get_full_list(collection="tasks", filter_query=filter_query, sort="+date")

        logger.debug("Retrieved %d tasks for user %s", len(records), user_id)
        return [Task.model_validate(record) for record in records]


async def group_tasks_by_date(*, user_id: str, start_date: date, end_date: date) -> dict[str, list[Task]]:
    """Bucket a user's tasks in a range by calendar day (YYYY-MM-DD)."""
    tasks = await list_tasks(user_id=user_id, start_date=start_date, end_date=end_date)

    grouped: dict[str, list[Task]] = defaultdict(list)
    for task in tasks:
        grouped[task.date.strftime(constants.DATE_KEY_FORMAT)].append(task)
    return dict(grouped)


async def get_task(*, task_id: str, user_id: str) -> Task:
    """Get a task by ID.

    Raises:
        NotFoundError: If the task does not exist or belongs to another user
    """
    with span("task_service.get_task"):
        record = await _get_task_record(task_id=task_id, user_id=user_id)
        return Task.model_validate(record)


async def check_task_limit(
    *,
    date: date | datetime,
    user_id: str,
    limits: PlannerLimits,
    additional_count: int = 1,
) -> bool:
    """Check whether the user can add tasks on a day."""
    return await validators.validate_task_limit(
        date=date,
        user_id=user_id,
        additional_count=additional_count,
        limits=limits,
    )


async def create_task(*, user_id: str, payload: TaskCreate, limits: PlannerLimits) -> Task:
    """Create a task if the target day is below the daily cap.

    Args:
        user_id: Owner of the new task
        payload: Validated task fields
        limits: Deployment limits

    Returns:
        The created task

    Raises:
        DomainValidationError: If the day is full, the description is too long,
            or the linked goal is not the user's
        db_client.DatabaseError: If database operation fails
    """
    with span("task_service.create_task"):
        async with db_client.serialized_write():
            await _validate_fields(user_id=user_id, payload=payload, limits=limits)

            if not await validators.validate_task_limit(
                date=payload.date,
                user_id=user_id,
                additional_count=1,
                limits=limits,
            ):
                raise _task_limit_error(limits)

            record = await db_client.create_record(collection="tasks", data={"user_id": user_id, **_task_data(payload)})

        logger.info("Created task %s for user %s", record["id"], user_id)
        return Task.model_validate(record)


async def update_task(*, task_id: str, user_id: str, payload: TaskUpdate, limits: PlannerLimits) -> Task:
    """Replace all mutable fields of a task.

    The daily cap is only re-checked when the task moves to a different
    calendar day. The destination count does not include the task itself
    because it is not on that day yet.

    Raises:
        NotFoundError: If the task does not exist or belongs to another user
        DomainValidationError: If the destination day is full or a field is invalid
    """
    with span("task_service.update_task"):
        async with db_client.serialized_write():
            await _validate_fields(user_id=user_id, payload=payload, limits=limits)

            existing = Task.model_validate(await _get_task_record(task_id=task_id, user_id=user_id))

            if _calendar_day(existing.date) != _calendar_day(payload.date) and not (
                await validators.validate_task_limit(
                    date=payload.date,
                    user_id=user_id,
                    additional_count=1,
                    limits=limits,
                )
            ):
                raise _task_limit_error(limits)

            record = await db_client.update_record(collection="tasks", record_id=task_id, data=_task_data(payload))

        logger.info("Updated task %s for user %s", task_id, user_id)
        return Task.model_validate(record)


async def delete_task(*, task_id: str, user_id: str) -> None:
    """Delete a task.

    Raises:
        NotFoundError: If the task does not exist or belongs to another user
    """
    with span("task_service.delete_task"):
        await _get_task_record(task_id=task_id, user_id=user_id)
        await db_client.delete_record(collection="tasks", record_id=task_id)
        logger.info("Deleted task %s for user %s", task_id, user_id)
