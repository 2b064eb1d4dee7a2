"""Integration tests running the services against a real SQLite database."""

from datetime import date, datetime

import pytest

from yearpeer.core import db_client
from yearpeer.core.config import PlannerLimits
from yearpeer.core.db_client import DatabaseError, RecordNotFoundError
from yearpeer.core.errors import DomainValidationError
from yearpeer.domain.create_models import ExternalIdentity, GoalCreate, TaskCreate
from yearpeer.domain.update_models import TaskUpdate
from yearpeer.services import goal_service, task_service, user_service


LIMITS = PlannerLimits()


def _goal(start: date, end: date, title: str = "Goal") -> GoalCreate:
    return GoalCreate(title=title, start_date=start, end_date=end, color="#0A0B0C", impact=2)


@pytest.mark.integration
class TestSchema:
    """Tests for schema creation and raw CRUD."""

    async def test_init_db_is_idempotent(self, sqlite_db):
        await db_client.init_db()

        assert await db_client.count_records(collection="goals") == 0

    async def test_update_missing_record_raises(self, sqlite_db):
        with pytest.raises(RecordNotFoundError):
            await db_client.update_record(collection="users", record_id="missing", data={"first_name": "X"})

    async def test_check_constraint_surfaces_as_database_error(self, sqlite_db, member):
        with pytest.raises(DatabaseError):
            await db_client.create_record(
                collection="goals",
                data={
                    "user_id": member.id,
                    "title": "Bad impact",
                    "start_date": "2025-01-01",
                    "end_date": "2025-01-02",
                    "color": "#000000",
                    "impact": 9,
                },
            )

    async def test_unknown_user_is_rejected_by_foreign_key(self, sqlite_db):
        with pytest.raises(DatabaseError):
            await goal_service.create_goal(
                user_id="no-such-user", payload=_goal(date(2025, 1, 1), date(2025, 1, 2)), limits=LIMITS
            )

    async def test_invalid_sort_falls_back_to_insertion_order(self, sqlite_db, member):
        await goal_service.create_goal(
            user_id=member.id, payload=_goal(date(2025, 5, 1), date(2025, 5, 2)), limits=LIMITS
        )
        await goal_service.create_goal(
            user_id=member.id, payload=_goal(date(2025, 1, 1), date(2025, 1, 2)), limits=LIMITS
        )

        records = await db_client.get_full_list(collection="goals", sort="start_date; DROP TABLE goals")

        assert [r["start_date"] for r in records] == ["2025-05-01", "2025-01-01"]

    async def test_email_with_apostrophe_round_trips(self, sqlite_db):
        identity = ExternalIdentity(subject="google-7", email="o'brien@example.com")

        created = await user_service.sign_in_external_user(identity=identity)
        matched = await user_service.sign_in_external_user(identity=identity)

        assert matched.id == created.id
        assert await db_client.count_records(collection="users") == 1


@pytest.mark.integration
class TestPlannerRules:
    """Tests for the overlap rule, the daily cap and relation handling in SQL."""

    async def test_boundary_day_overlap(self, sqlite_db, member):
        await goal_service.create_goal(
            user_id=member.id, payload=_goal(date(2025, 1, 1), date(2025, 1, 31)), limits=LIMITS
        )

        with pytest.raises(DomainValidationError):
            await goal_service.create_goal(
                user_id=member.id, payload=_goal(date(2025, 1, 31), date(2025, 2, 15)), limits=LIMITS
            )

        goal = await goal_service.create_goal(
            user_id=member.id, payload=_goal(date(2025, 2, 1), date(2025, 2, 15)), limits=LIMITS
        )
        assert goal.start_date == date(2025, 2, 1)

    async def test_daily_cap_and_move(self, sqlite_db, member):
        for hour in range(5):
            await task_service.create_task(
                user_id=member.id, payload=TaskCreate(title=f"A{hour}", date=datetime(2025, 3, 10, hour)), limits=LIMITS
            )
        day_b = [
            await task_service.create_task(
                user_id=member.id, payload=TaskCreate(title=f"B{hour}", date=datetime(2025, 3, 11, hour)), limits=LIMITS
            )
            for hour in range(5)
        ]

        with pytest.raises(DomainValidationError, match="Cannot exceed 5 tasks per day"):
            await task_service.create_task(
                user_id=member.id, payload=TaskCreate(title="A6", date=datetime(2025, 3, 10, 23)), limits=LIMITS
            )

        with pytest.raises(DomainValidationError):
            await task_service.update_task(
                task_id=day_b[0].id,
                user_id=member.id,
                payload=TaskUpdate(title="B0", date=datetime(2025, 3, 10, 12)),
                limits=LIMITS,
            )

        renamed = await task_service.update_task(
            task_id=day_b[0].id,
            user_id=member.id,
            payload=TaskUpdate(title="Renamed", date=day_b[0].date, completed=True),
            limits=LIMITS,
        )
        assert renamed.title == "Renamed"
        assert renamed.completed is True
        assert renamed.updated_at >= renamed.created_at

    async def test_deleting_goal_detaches_tasks(self, sqlite_db, member):
        goal = await goal_service.create_goal(
            user_id=member.id, payload=_goal(date(2025, 1, 1), date(2025, 1, 31)), limits=LIMITS
        )
        task = await task_service.create_task(
            user_id=member.id,
            payload=TaskCreate(title="Linked", date=datetime(2025, 1, 3, 9), goal_id=goal.id),
            limits=LIMITS,
        )

        assert [t.id for t in (await goal_service.get_goal(goal_id=goal.id, user_id=member.id)).tasks] == [task.id]

        await goal_service.delete_goal(goal_id=goal.id, user_id=member.id)

        surviving = await task_service.get_task(task_id=task.id, user_id=member.id)
        assert surviving.goal_id is None

    async def test_list_tasks_inclusive_range(self, sqlite_db, member):
        for moment in [datetime(2025, 3, 10, 0), datetime(2025, 3, 12, 23, 59, 59), datetime(2025, 3, 13, 0)]:
            await task_service.create_task(
                user_id=member.id, payload=TaskCreate(title=moment.isoformat(), date=moment), limits=LIMITS
            )

        tasks = await task_service.list_tasks(
            user_id=member.id, start_date=date(2025, 3, 10), end_date=date(2025, 3, 12)
        )

        assert [t.date for t in tasks] == [datetime(2025, 3, 10, 0), datetime(2025, 3, 12, 23, 59, 59)]
