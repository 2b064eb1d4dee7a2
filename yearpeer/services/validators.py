"""Consistency checks for goals and tasks.

Both validators are pure reads that answer a yes/no question. The calling
service decides whether a negative answer becomes a validation failure.
"""

import logging
from datetime import UTC, date, datetime, time, timedelta

from yearpeer.core import db_client
from yearpeer.core.config import PlannerLimits
from yearpeer.core.db_client import sanitize_param
from yearpeer.core.logging import span


logger = logging.getLogger(__name__)


def normalize_datetime(value: datetime) -> datetime:
    """Convert aware datetimes to naive UTC so stored values compare consistently."""
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def format_task_datetime(value: datetime) -> str:
    """Format a task date with a fixed width so string order matches time order."""
    return normalize_datetime(value).isoformat(timespec="microseconds")


def day_bounds(value: date | datetime) -> tuple[datetime, datetime]:
    """Return the first and last representable instant of a calendar day."""
    day = normalize_datetime(value).date() if isinstance(value, datetime) else value
    start_of_day = datetime.combine(day, time.min)
    end_of_day = start_of_day + timedelta(days=1) - timedelta(microseconds=1)
    return start_of_day, end_of_day


async def has_goal_overlap(
    *,
    start_date: date,
    end_date: date,
    user_id: str,
    exclude_goal_id: str | None = None,
) -> bool:
    """Check whether a date range intersects any existing goal of the user.

    The caller is responsible for ensuring start_date <= end_date.

    Args:
        start_date: First day of the candidate range
        end_date: Last day of the candidate range
        user_id: Owner whose goals are compared
        exclude_goal_id: Goal to leave out of the comparison (the goal being updated)

    Returns:
        True if at least one goal overlaps the range
    """
    with span("validators.has_goal_overlap"):
        filters = [
            f'user_id = "{sanitize_param(user_id)}"',
            f'start_date <= "{end_date.isoformat()}"',
            f'end_date >= "{start_date.isoformat()}"',
        ]
        if exclude_goal_id:
            filters.append(f'id != "{sanitize_param(exclude_goal_id)}"')

        count = await db_client.count_records(collection="goals", filter_query=" && ".join(filters))
        logger.debug("Overlap check for %s..%s found %d goals", start_date, end_date, count)
        return count > 0


async def count_tasks_on_day(*, day: date | datetime, user_id: str) -> int:
    """Count the user's tasks on the calendar day containing `day`."""
    start_of_day, end_of_day = day_bounds(day)
    filter_query = (
        f'user_id = "{sanitize_param(user_id)}" && '
        f'date >= "{format_task_datetime(start_of_day)}" && '
        f'date <= "{format_task_datetime(end_of_day)}"'
    )
    return await db_client.count_records(collection="tasks", filter_query=filter_query)


async def validate_task_limit(
    *,
    date: date | datetime,
    user_id: str,
    additional_count: int = 1,
    limits: PlannerLimits,
) -> bool:
    """Check whether adding tasks to a day keeps the user within the daily cap.

    Args:
        date: Any instant on the target calendar day
        user_id: Owner whose tasks are counted
        additional_count: Number of tasks about to be added
        limits: Deployment limits holding the per-day cap

    Returns:
        True if existing + additional tasks stay within the cap
    """
    with span("validators.validate_task_limit"):
        existing_count = await count_tasks_on_day(day=date, user_id=user_id)
        within_limit = existing_count + additional_count <= limits.task_limit
        if not within_limit:
            logger.info(
                "Task limit reached",
                extra={"user_id": user_id, "existing": existing_count, "limit": limits.task_limit},
            )
        return within_limit
