"""REST endpoints for goals."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from yearpeer.core.config import PlannerLimits
from yearpeer.domain.create_models import GoalCreate
from yearpeer.domain.goal import Goal
from yearpeer.domain.update_models import GoalUpdate
from yearpeer.interface.dependencies import get_limits
from yearpeer.interface.session import current_user_id
from yearpeer.services import goal_service


router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=list[Goal])
async def list_goals(
    year: int | None = Query(default=None),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    user_id: str = Depends(current_user_id),
) -> list[Goal]:
    """List the caller's goals, optionally filtered by range or year."""
    return await goal_service.list_goals(user_id=user_id, year=year, start_date=start_date, end_date=end_date)


@router.get("/{goal_id}", response_model=Goal)
async def get_goal(goal_id: UUID, user_id: str = Depends(current_user_id)) -> Goal:
    return await goal_service.get_goal(goal_id=str(goal_id), user_id=user_id)


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: GoalCreate,
    response: Response,
    user_id: str = Depends(current_user_id),
    limits: PlannerLimits = Depends(get_limits),
) -> Goal:
    """Create a goal and point the Location header at it."""
    goal = await goal_service.create_goal(user_id=user_id, payload=payload, limits=limits)
    response.headers["Location"] = f"{router.prefix}/{goal.id}"
    return goal


@router.put("/{goal_id}", response_model=Goal)
async def update_goal(goal_id: UUID, payload: GoalUpdate, user_id: str = Depends(current_user_id)) -> Goal:
    return await goal_service.update_goal(goal_id=str(goal_id), user_id=user_id, payload=payload)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: UUID, user_id: str = Depends(current_user_id)) -> Response:
    await goal_service.delete_goal(goal_id=str(goal_id), user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
