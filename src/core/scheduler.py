"""In-process scheduler running each registered module's periodic jobs."""

import logging
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from src.core import module_registry
from src.core.config import settings
from src.core.module import ScheduledJob
from src.core.scheduler_tracker import job_tracker, retry_job_with_backoff


logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler(timezone=settings.tzinfo)


def _make_runner(job: ScheduledJob) -> Any:
    async def run() -> None:
        await retry_job_with_backoff(job.func, job.id)

    return run


def register_jobs(target: AsyncIOScheduler | None = None) -> list[str]:
    """Add every module-declared job to the scheduler.

    Returns:
        IDs of the registered jobs
    """
    sched = target or scheduler
    job_ids = []
    for job in module_registry.get_all_scheduled_jobs():
        sched.add_job(
            _make_runner(job),
            trigger=CronTrigger.from_crontab(job.cron, timezone=settings.tzinfo),
            id=job.id,
            name=job.name,
            replace_existing=True,
        )
        job_ids.append(job.id)
        logger.info("Scheduled job", extra={"job_id": job.id, "cron": job.cron, "timezone": settings.timezone})
    return job_ids


def start_scheduler() -> None:
    """Start the scheduler and register all jobs.

    This should be called during FastAPI app startup.
    """
    logger.info("Starting scheduler")
    job_ids = register_jobs()
    scheduler.start()
    logger.info("Scheduler started", extra={"job_count": len(job_ids)})


def stop_scheduler() -> None:
    """Stop the scheduler gracefully.

    This should be called during FastAPI app shutdown.
    """
    if scheduler.running:
        logger.info("Stopping scheduler")
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


async def get_scheduler_status() -> dict[str, Any]:
    """Collect tracker status for every declared job plus the dead letter queue."""
    jobs = {}
    for job in module_registry.get_all_scheduled_jobs():
        status = await job_tracker.get_job_status(job.id)
        scheduled = scheduler.get_job(job.id) if scheduler.running else None
        status["next_run"] = scheduled.next_run_time.isoformat() if scheduled and scheduled.next_run_time else None
        jobs[job.id] = status
    return {
        "scheduler_running": scheduler.running,
        "jobs": jobs,
        "dead_letter_queue": job_tracker.get_dead_letter_queue(),
    }
