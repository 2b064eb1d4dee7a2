"""Shared FastAPI dependencies for the planner routers."""

from fastapi import Request

from yearpeer.core.config import PlannerLimits


def get_limits(request: Request) -> PlannerLimits:
    """Return the limits the application was started with."""
    return request.app.state.limits
