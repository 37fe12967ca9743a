"""
Background scheduler for periodic housekeeping.

Uses APScheduler on the FastAPI event loop.
"""

import logging
from datetime import timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from eido.background.queue_cleanup import purge_finished_jobs

logger = logging.getLogger(__name__)

QUEUE_CLEANUP_JOB_ID = "purge_finished_jobs_task"

# Singleton scheduler instance
scheduler = AsyncIOScheduler(timezone=timezone.utc)


def register_jobs(target: AsyncIOScheduler = scheduler) -> None:
    """Add the housekeeping jobs (idempotent thanks to replace_existing)."""
    # Finished queue rows are purged every 6 hours
    target.add_job(
        purge_finished_jobs,
        "interval",
        hours=6,
        id=QUEUE_CLEANUP_JOB_ID,
        replace_existing=True,
    )


def init_scheduler() -> None:
    """Register jobs and start the scheduler.

    Called during FastAPI lifespan startup.
    """
    register_jobs()
    scheduler.start()

    for job in scheduler.get_jobs():
        logger.info(f"📅 Scheduled {job.id}: next run at {job.next_run_time}")


def shutdown_scheduler() -> None:
    """Gracefully shutdown the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("📅 Scheduler shut down.")
