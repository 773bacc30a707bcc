"""homestreak - household chores, groceries and fitness with streaks and badges."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.db_client import close_connection, init_db
from src.core.errors import register_exception_handlers
from src.core.logging import configure_logfire, instrument_fastapi
from src.core.scheduler import get_scheduler_status, start_scheduler, stop_scheduler
from src.interface.auth_router import router as auth_router
from src.interface.chore_router import router as chore_router
from src.interface.fitness_router import exercise_router, routine_router
from src.interface.grocery_router import router as grocery_router
from src.interface.stats_router import router as stats_router


logger = logging.getLogger(__name__)


def validate_startup_configuration() -> None:
    """Fail fast when production runs without its required credentials."""
    logger.info("startup_validation_begin")

    if not settings.is_production:
        logger.info("startup_validation", extra={"stage": "credentials", "status": "skipped"})
        return

    try:
        settings.require_credential("secret_key", "Session signing")
        logger.info("startup_validation_complete", extra={"status": "ok"})
    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so validation logs are captured
    configure_logfire()
    validate_startup_configuration()

    await init_db()
    logger.info("Database initialized")

    if settings.enable_scheduler:
        start_scheduler()
    yield
    stop_scheduler()
    await close_connection()


app = FastAPI(
    title="homestreak",
    description="Household chores, groceries and fitness with points, streaks and badges",
    version="0.1.0",
    lifespan=lifespan,
)

instrument_fastapi(app)
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(chore_router)
app.include_router(grocery_router)
app.include_router(exercise_router)
app.include_router(routine_router)
app.include_router(stats_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)


@app.get("/health/scheduler")
async def scheduler_health_check() -> JSONResponse:
    """Scheduler health check endpoint with job statuses."""
    report = await get_scheduler_status()
    job_statuses = report["jobs"]
    dlq = report["dead_letter_queue"]

    has_failures = any(status["consecutive_failures"] > 0 for status in job_statuses.values())

    overall_status = "degraded" if has_failures else "healthy"
    if len(dlq) > 0:
        overall_status = "critical"

    return JSONResponse(
        content={
            "status": overall_status,
            "scheduler_running": report["scheduler_running"],
            "jobs": job_statuses,
            "dead_letter_queue_size": len(dlq),
            "dead_letter_queue": dlq,
        },
        status_code=200 if overall_status == "healthy" else 503,
    )
