"""Goal service for CRUD operations guarded by the overlap rule."""

import logging
from collections import defaultdict
from datetime import date
from typing import Any

from yearpeer.core import db_client
from yearpeer.core.config import PlannerLimits
from yearpeer.core.db_client import RecordNotFoundError, sanitize_param
from yearpeer.core.errors import DomainValidationError, ErrorCode, NotFoundError
from yearpeer.core.logging import span
from yearpeer.domain.create_models import GoalCreate
from yearpeer.domain.goal import Goal
from yearpeer.domain.task import Task
from yearpeer.domain.update_models import GoalUpdate
from yearpeer.services import validators


logger = logging.getLogger(__name__)

OVERLAP_MESSAGE = "A goal already exists during this time period"
DATE_ORDER_MESSAGE = "End date must be after start date"


def _goal_data(payload: GoalCreate) -> dict[str, Any]:
    return {
        "title": payload.title,
        "description": payload.description,
        "start_date": payload.start_date.isoformat(),
        "end_date": payload.end_date.isoformat(),
        "color": payload.color,
        "impact": payload.impact,
    }


def _ensure_date_order(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise DomainValidationError(DATE_ORDER_MESSAGE)


async def _tasks_by_goal(*, user_id: str) -> dict[str, list[Task]]:
    """Fetch the user's goal-linked tasks, bucketed by goal ID."""
    records = await db_client.get_full_list(
        collection="tasks",
        filter_query=f'user_id = "{sanitize_param(user_id)}"',
        sort="+date",
    )
    grouped: dict[str, list[Task]] = defaultdict(list)
    for record in records:
        if record.get("goal_id"):
            grouped[record["goal_id"]].append(Task.model_validate(record))
    return grouped


async def _get_goal_record(*, goal_id: str, user_id: str) -> dict[str, Any]:
    """Load a goal record owned by the user.

    Absent and foreign goals raise the same NotFoundError.
    """
    try:
        record = await db_client.get_record(collection="goals", record_id=goal_id)
    except RecordNotFoundError:
        record = None

    if record is None or record["user_id"] != user_id:
        raise NotFoundError(f"Goal with ID {goal_id} not found")
    return record


async def list_goals(
    *,
    user_id: str,
    year: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Goal]:
    """List a user's goals with their tasks attached.

    An explicit date range takes precedence and selects goals overlapping it.
    Otherwise a year selects goals that start or end in that year.

    Args:
        user_id: Owner of the goals
        year: Optional calendar year filter
        start_date: Optional start of an inclusive range filter
        end_date: Optional end of an inclusive range filter

    Returns:
        Goals ordered by start date
    """
    with span("goal_service.list_goals"):
        filters = [f'user_id = "{sanitize_param(user_id)}"']

        if start_date is not None and end_date is not None:
            filters.append(f'start_date <= "{end_date.isoformat()}"')
            filters.append(f'end_date >= "{start_date.isoformat()}"')
        elif year:
            filters.append(f'start_date <= "{date(year, 12, 31).isoformat()}"')
            filters.append(f'end_date >= "{date(year, 1, 1).isoformat()}"')

        records = await db_client.get_full_list(
            collection="goals",
            filter_query=" && ".join(filters),
            sort="+start_date",
        )
        tasks_by_goal = await _tasks_by_goal(user_id=user_id)

        goals = [Goal.model_validate({**record, "tasks": tasks_by_goal.get(record["id"], [])}) for record in records]

        if (start_date is None or end_date is None) and year:
            goals = [goal for goal in goals if year in (goal.start_date.year, goal.end_date.year)]

        logger.debug("Retrieved %d goals for user %s", len(goals), user_id)
        return goals


async def get_goal(*, goal_id: str, user_id: str) -> Goal:
    """Get a goal by ID with its tasks attached.

    Raises:
        NotFoundError: If the goal does not exist or belongs to another user
    """
    with span("goal_service.get_goal"):
        record = await _get_goal_record(goal_id=goal_id, user_id=user_id)
        tasks_by_goal = await _tasks_by_goal(user_id=user_id)
        return Goal.model_validate({**record, "tasks": tasks_by_goal.get(goal_id, [])})


async def has_overlapping_goals(
    *,
    start_date: date,
    end_date: date,
    user_id: str,
    exclude_goal_id: str | None = None,
) -> bool:
    """Check whether a range collides with any of the user's goals."""
    return await validators.has_goal_overlap(
        start_date=start_date,
        end_date=end_date,
        user_id=user_id,
        exclude_goal_id=exclude_goal_id,
    )


async def _count_goals_starting_in_year(*, user_id: str, year: int) -> int:
    filter_query = (
        f'user_id = "{sanitize_param(user_id)}" && '
        f'start_date >= "{date(year, 1, 1).isoformat()}" && '
        f'start_date <= "{date(year, 12, 31).isoformat()}"'
    )
    return await db_client.count_records(collection="goals", filter_query=filter_query)


async def create_goal(*, user_id: str, payload: GoalCreate, limits: PlannerLimits) -> Goal:
    """Create a goal after checking date order, overlap and the yearly cap.

    Args:
        user_id: Owner of the new goal
        payload: Validated goal fields
        limits: Deployment limits

    Returns:
        The created goal

    Raises:
        DomainValidationError: If the range is inverted, overlaps another goal,
            or the start year already holds the maximum number of goals
        db_client.DatabaseError: If database operation fails
    """
    with span("goal_service.create_goal"):
        _ensure_date_order(payload.start_date, payload.end_date)

        async with db_client.serialized_write():
            if await validators.has_goal_overlap(
                start_date=payload.start_date,
                end_date=payload.end_date,
                user_id=user_id,
            ):
                logger.warning(
                    "Rejected overlapping goal",
                    extra={"user_id": user_id, "start_date": str(payload.start_date)},
                )
                raise DomainValidationError(OVERLAP_MESSAGE, code=ErrorCode.ERR_GOAL_OVERLAP)

            year = payload.start_date.year
            if await _count_goals_starting_in_year(user_id=user_id, year=year) >= limits.max_goals_per_year:
                raise DomainValidationError(
                    f"Cannot exceed {limits.max_goals_per_year} goals per year",
                    code=ErrorCode.ERR_GOAL_LIMIT,
                )

            record = await db_client.create_record(collection="goals", data={"user_id": user_id, **_goal_data(payload)})

        logger.info("Created goal %s for user %s", record["id"], user_id)
        return Goal.model_validate(record)


async def update_goal(*, goal_id: str, user_id: str, payload: GoalUpdate) -> Goal:
    """Replace all mutable fields of a goal.

    Raises:
        NotFoundError: If the goal does not exist or belongs to another user
        DomainValidationError: If the new range is inverted or overlaps another goal
    """
    with span("goal_service.update_goal"):
        _ensure_date_order(payload.start_date, payload.end_date)

        async with db_client.serialized_write():
            await _get_goal_record(goal_id=goal_id, user_id=user_id)

            if await validators.has_goal_overlap(
                start_date=payload.start_date,
                end_date=payload.end_date,
                user_id=user_id,
                exclude_goal_id=goal_id,
            ):
                raise DomainValidationError(OVERLAP_MESSAGE, code=ErrorCode.ERR_GOAL_OVERLAP)

            await db_client.update_record(collection="goals", record_id=goal_id, data=_goal_data(payload))

        logger.info("Updated goal %s for user %s", goal_id, user_id)
        return await get_goal(goal_id=goal_id, user_id=user_id)


async def delete_goal(*, goal_id: str, user_id: str) -> None:
    """Delete a goal; its tasks survive with their goal reference cleared.

    Raises:
        NotFoundError: If the goal does not exist or belongs to another user
    """
    with span("goal_service.delete_goal"):
        async with db_client.serialized_write():
            await _get_goal_record(goal_id=goal_id, user_id=user_id)
            await db_client.delete_record(collection="goals", record_id=goal_id)

        logger.info("Deleted goal %s for user %s", goal_id, user_id)
