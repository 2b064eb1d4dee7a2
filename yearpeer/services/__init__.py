from yearpeer.services import (
    goal_service,
    task_service,
    user_service,
    validators,
)


__all__ = [
    "goal_service",
    "task_service",
    "user_service",
    "validators",
]
