"""Domain models and DTOs."""

from yearpeer.domain.create_models import ExternalIdentity, GoalCreate, TaskCreate
from yearpeer.domain.goal import Goal
from yearpeer.domain.task import Task
from yearpeer.domain.update_models import GoalUpdate, TaskUpdate, UserProfileUpdate
from yearpeer.domain.user import User


__all__ = [
    "ExternalIdentity",
    "Goal",
    "GoalCreate",
    "GoalUpdate",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "User",
    "UserProfileUpdate",
]
