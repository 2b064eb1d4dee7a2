"""Unit tests for the overlap and task-limit validators."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from yearpeer.core.config import PlannerLimits
from yearpeer.services import validators


async def _add_goal(db, user_id: str, start: date, end: date) -> dict:
    return await db.create_record(
        "goals",
        {
            "user_id": user_id,
            "title": "Goal",
            "description": "",
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "color": "#112233",
            "impact": 3,
        },
    )


async def _add_task(db, user_id: str, when: datetime) -> dict:
    return await db.create_record(
        "tasks",
        {
            "user_id": user_id,
            "title": "Task",
            "description": None,
            "date": validators.format_task_datetime(when),
            "goal_id": None,
            "completed": False,
        },
    )


@pytest.mark.unit
class TestDateHelpers:
    """Tests for datetime normalization helpers."""

    def test_day_bounds_cover_whole_day(self):
        start, end = validators.day_bounds(date(2025, 3, 10))

        assert start == datetime(2025, 3, 10, 0, 0)
        assert end == datetime(2025, 3, 10, 23, 59, 59, 999999)

    def test_day_bounds_use_utc_day_of_aware_datetime(self):
        # 01:00 at UTC+2 is still the previous day in UTC
        aware = datetime(2025, 3, 10, 1, 0, tzinfo=timezone(timedelta(hours=2)))

        start, _ = validators.day_bounds(aware)

        assert start.date() == date(2025, 3, 9)

    def test_format_task_datetime_is_fixed_width(self):
        assert validators.format_task_datetime(datetime(2025, 3, 10)) == "2025-03-10T00:00:00.000000"
        assert validators.format_task_datetime(datetime(2025, 3, 10, 9, 30, tzinfo=UTC)) == "2025-03-10T09:30:00.000000"


@pytest.mark.unit
class TestHasGoalOverlap:
    """Tests for has_goal_overlap."""

    async def test_no_goals_means_no_overlap(self, patched_db):
        assert not await validators.has_goal_overlap(
            start_date=date(2025, 1, 1), end_date=date(2025, 1, 31), user_id="u1"
        )

    async def test_boundary_day_counts_as_overlap(self, patched_db):
        await _add_goal(patched_db, "u1", date(2025, 1, 1), date(2025, 1, 31))

        assert await validators.has_goal_overlap(
            start_date=date(2025, 1, 31), end_date=date(2025, 2, 15), user_id="u1"
        )

    async def test_next_day_is_free(self, patched_db):
        await _add_goal(patched_db, "u1", date(2025, 1, 1), date(2025, 1, 31))

        assert not await validators.has_goal_overlap(
            start_date=date(2025, 2, 1), end_date=date(2025, 2, 15), user_id="u1"
        )

    async def test_other_users_goals_are_ignored(self, patched_db):
        await _add_goal(patched_db, "u2", date(2025, 1, 1), date(2025, 1, 31))

        assert not await validators.has_goal_overlap(
            start_date=date(2025, 1, 10), end_date=date(2025, 1, 20), user_id="u1"
        )

    async def test_excluded_goal_is_ignored(self, patched_db):
        goal = await _add_goal(patched_db, "u1", date(2025, 1, 1), date(2025, 1, 31))

        assert not await validators.has_goal_overlap(
            start_date=date(2025, 1, 5),
            end_date=date(2025, 1, 25),
            user_id="u1",
            exclude_goal_id=goal["id"],
        )


@pytest.mark.unit
class TestValidateTaskLimit:
    """Tests for validate_task_limit."""

    async def test_four_existing_tasks_allow_one_more(self, patched_db, limits):
        for hour in range(4):
            await _add_task(patched_db, "u1", datetime(2025, 3, 10, hour))

        assert await validators.validate_task_limit(date=date(2025, 3, 10), user_id="u1", limits=limits)

    async def test_five_existing_tasks_reject_another(self, patched_db, limits):
        for hour in range(5):
            await _add_task(patched_db, "u1", datetime(2025, 3, 10, hour))

        assert not await validators.validate_task_limit(date=date(2025, 3, 10), user_id="u1", limits=limits)

    async def test_additional_count_is_added_to_existing(self, patched_db, limits):
        for hour in range(3):
            await _add_task(patched_db, "u1", datetime(2025, 3, 10, hour))

        assert await validators.validate_task_limit(
            date=date(2025, 3, 10), user_id="u1", additional_count=2, limits=limits
        )
        assert not await validators.validate_task_limit(
            date=date(2025, 3, 10), user_id="u1", additional_count=3, limits=limits
        )

    async def test_count_is_per_calendar_day(self, patched_db, limits):
        for hour in range(5):
            await _add_task(patched_db, "u1", datetime(2025, 3, 10, hour))
        await _add_task(patched_db, "u1", datetime(2025, 3, 11, 23, 59))

        assert await validators.validate_task_limit(date=datetime(2025, 3, 11, 8), user_id="u1", limits=limits)
        assert await validators.count_tasks_on_day(day=date(2025, 3, 10), user_id="u1") == 5

    async def test_count_is_per_user(self, patched_db, limits):
        for hour in range(5):
            await _add_task(patched_db, "u2", datetime(2025, 3, 10, hour))

        assert await validators.validate_task_limit(date=date(2025, 3, 10), user_id="u1", limits=limits)

    async def test_custom_limit(self, patched_db):
        await _add_task(patched_db, "u1", datetime(2025, 3, 10, 9))

        assert not await validators.validate_task_limit(
            date=date(2025, 3, 10), user_id="u1", limits=PlannerLimits(task_limit=1)
        )
