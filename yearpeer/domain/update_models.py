"""Update models for database operations."""

from pydantic import BaseModel

from yearpeer.domain.create_models import GoalCreate, TaskCreate


class GoalUpdate(GoalCreate):
    """Full replacement payload for a goal."""


class TaskUpdate(TaskCreate):
    """Full replacement payload for a task."""


class UserProfileUpdate(BaseModel):
    """Profile fields refreshed on every external sign-in."""

    first_name: str
    last_name: str
    picture_url: str | None
    external_id: str | None
