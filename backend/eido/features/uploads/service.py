"""
Uploads feature: producer and status contract of the processing queue.

The uploader puts the file in object storage first, then hands the path to
``enqueue``. An external worker picks ``pending`` rows up, does the
chunking/embedding, and reports progress through ``transition``.
"""

import logging
from supabase import Client

from eido.core.exceptions import NotFoundError, PermissionDeniedError, UpstreamError, ValidationError
from eido.features.uploads.schemas import BatchSummary, EnqueueRequest, JobStatus
from eido.features.uploads.summary import DEFAULT_DISMISS_SECONDS, summarize_batch

logger = logging.getLogger(__name__)

TABLE = "processing_queue"


class ProcessingQueue:
    """Typed access to the ``processing_queue`` table."""

    def __init__(self, db: Client):
        self.db = db

    def _execute(self, query, operation: str):
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"processing_queue {operation} failed: {e}")
            raise UpstreamError(operation, str(e)) from e

    def enqueue(self, user_id: str, payload: EnqueueRequest) -> dict:
        """Insert one ``pending`` job for an already-uploaded file.

        Raises:
            ValidationError: storage_path or class_id missing.
            PermissionDeniedError: storage_path outside the caller's folder.
            UpstreamError: the insert failed.
        """
        storage_path = (payload.storage_path or "").strip()
        class_id = (payload.class_id or "").strip()
        if not storage_path:
            raise ValidationError("storage_path is required")
        if not class_id:
            raise ValidationError("class_id is required")

        # Uploader layout: {user_id}/{class_id}/{folder_id|root}/{ts}-{name}
        if not storage_path.startswith(f"{user_id}/"):
            raise PermissionDeniedError(
                "storage_path does not belong to the caller",
                detail=storage_path,
            )

        logger.info(f"[QUEUE] Adding job for file: {payload.original_name or storage_path}")
        result = self._execute(
            self.db.table(TABLE).insert({
                "user_id": user_id,
                "class_id": class_id,
                "folder_id": payload.folder_id,
                "storage_path": storage_path,
                "original_name": payload.original_name,
                "mime_type": payload.mime_type,
                "size": payload.size,
                "status": JobStatus.PENDING.value,
            }),
            "insert",
        )
        job = result.data[0]
        logger.info(f"[QUEUE] Job {job['id']} queued for user {user_id}")
        return job

    def get_job(self, job_id: str | int, user_id: str | None = None) -> dict:
        """Fetch a job. With ``user_id`` the lookup is owner-scoped."""
        query = self.db.table(TABLE).select("*").eq("id", job_id)
        if user_id is not None:
            query = query.eq("user_id", user_id)
        result = self._execute(query, "select")
        if not result.data:
            raise NotFoundError(f"Job '{job_id}' not found")
        return result.data[0]

    def list_jobs(
        self,
        user_id: str,
        class_id: str | None = None,
        status: JobStatus | None = None,
        job_ids: list[str] | None = None,
    ) -> list[dict]:
        query = self.db.table(TABLE).select("*").eq("user_id", user_id)
        if class_id:
            query = query.eq("class_id", class_id)
        if status:
            query = query.eq("status", JobStatus.parse(status).value)
        if job_ids:
            query = query.in_("id", job_ids)
        result = self._execute(query.order("created_at", desc=True), "select")
        return result.data

    def transition(
        self,
        job_id: str | int,
        new_status: JobStatus | str,
        error_message: str | None = None,
    ) -> dict:
        """Move a job forward. Used by the processing worker.

        The update only matches while the row still has the status that was
        read, so two workers racing on one job cannot move it backwards.

        Raises:
            ValidationError: unknown status, a backwards move, a move out of a
                terminal status, or a race lost to another writer.
        """
        new_status = JobStatus.parse(new_status)
        job = self.get_job(job_id)
        current = JobStatus.parse(job["status"])

        if new_status == current:
            return job
        if not current.can_transition_to(new_status):
            raise ValidationError(
                f"Illegal status transition {current.value} -> {new_status.value}",
                detail=f"job {job_id}",
            )

        changes = {"status": new_status.value}
        if new_status == JobStatus.ERROR:
            changes["error_message"] = error_message

        result = self._execute(
            self.db.table(TABLE).update(changes).eq("id", job_id).eq("status", current.value),
            "update",
        )
        if not result.data:
            raise ValidationError(
                "Job status changed concurrently",
                detail=f"job {job_id} is no longer {current.value}",
            )

        logger.info(f"[QUEUE] Job {job_id}: {current.value} -> {new_status.value}")
        return result.data[0]

    def summarize(
        self,
        user_id: str,
        job_ids: list[str],
        dismiss_after: int = DEFAULT_DISMISS_SECONDS,
    ) -> BatchSummary:
        """Summary of the caller's jobs among ``job_ids``; foreign or unknown ids are ignored."""
        jobs = self.list_jobs(user_id, job_ids=job_ids) if job_ids else []
        return summarize_batch((job["status"] for job in jobs), dismiss_after=dismiss_after)
