"""
Background cleanup job: purge finished rows from `processing_queue`.

Jobs in a terminal status (complete / error) older than
QUEUE_RETENTION_HOURS are deleted. Jobs still pending, uploading or
processing are never touched, whatever their age.
"""

import logging
from datetime import datetime, timedelta, timezone

from eido.config import get_settings
from eido.core.database import get_supabase_admin_client
from eido.features.uploads.schemas import TERMINAL_STATUSES

logger = logging.getLogger(__name__)


def purge_finished_jobs(db=None, now: datetime | None = None) -> dict:
    """Delete terminal jobs past the retention window.

    Args:
        db: Supabase client; the service-role client when omitted.
        now: Reference time (defaults to current UTC time).

    Returns:
        dict: { "deleted": int, "errors": int }
    """
    stats = {"deleted": 0, "errors": 0}
    settings = get_settings()
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(hours=settings.QUEUE_RETENTION_HOURS)

    try:
        db = db or get_supabase_admin_client()
        result = (
            db.table("processing_queue")
            .delete()
            .in_("status", sorted(s.value for s in TERMINAL_STATUSES))
            .lt("created_at", cutoff.isoformat())
            .execute()
        )
        stats["deleted"] = len(result.data or [])
    except Exception as e:
        logger.error(f"purge_finished_jobs failed: {e}")
        stats["errors"] += 1

    logger.info(
        f"Queue cleanup finished: deleted={stats['deleted']}, errors={stats['errors']} "
        f"(cutoff {cutoff.isoformat()})"
    )
    return stats
