"""yearpeer - Personal year planner for goals and daily tasks."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from yearpeer.core.config import DEFAULT_SECRET_KEY, PlannerLimits, settings
from yearpeer.core.db_client import close_connection, init_db
from yearpeer.core.logging import configure_logfire, instrument_fastapi
from yearpeer.interface.auth_router import router as auth_router
from yearpeer.interface.error_handlers import register_error_handlers
from yearpeer.interface.goals_router import router as goals_router
from yearpeer.interface.tasks_router import router as tasks_router


logger = logging.getLogger(__name__)


def validate_startup_configuration() -> PlannerLimits:
    """Validate settings before the application accepts requests.

    Exits the process when a production deployment still uses the default
    session secret, or when a planner limit is not a positive number.

    Returns:
        The planner limits the application will enforce
    """
    logger.info("startup_validation_begin")

    try:
        settings.require_credential("secret_key", "Session secret")
        if settings.is_production and settings.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be changed from the default in production")

        limits = PlannerLimits.from_settings(settings)
        logger.info("startup_validation_complete", extra={"status": "ok"})

    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    return limits


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    # Configure logging first so validation logs are captured
    configure_logfire()

    # Limits are fixed for the lifetime of the process
    application.state.limits = validate_startup_configuration()

    await init_db()
    logger.info("Database initialized")

    yield
    # Shutdown
    await close_connection()


app = FastAPI(
    title="yearpeer",
    description="Personal year planner for goals and daily tasks",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

register_error_handlers(app)

# Register routers
app.include_router(auth_router)
app.include_router(goals_router)
app.include_router(tasks_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
