"""
Uploads feature: API routes for handing files to the processing queue.
"""

from fastapi import APIRouter, Depends, Query, status
from supabase import Client

from eido.config import get_settings
from eido.core.dependencies import get_admin_db, get_db, get_current_user_id
from eido.core.exceptions import AppBaseError, app_error_to_http
from eido.features.uploads.schemas import EnqueueRequest, JobStatus
from eido.features.uploads.service import ProcessingQueue

router = APIRouter()


@router.post("/", status_code=status.HTTP_202_ACCEPTED)
async def enqueue_upload(
    data: EnqueueRequest,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_admin_db),
):
    """Queue an uploaded file for processing. Returns before processing starts."""
    queue = ProcessingQueue(db)
    try:
        job = queue.enqueue(user_id, data)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {
        "success": True,
        "message": "File upload acknowledged. Processing has started.",
        "data": {"job_id": job["id"], "status": job["status"]},
    }


@router.get("/")
async def list_uploads(
    class_id: str | None = None,
    status: JobStatus | None = None,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """List the caller's queued jobs, newest first."""
    queue = ProcessingQueue(db)
    try:
        jobs = queue.list_jobs(user_id, class_id=class_id, status=status)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": jobs}


@router.get("/summary")
async def upload_summary(
    job_ids: list[str] = Query(default=[]),
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Progress header for one upload batch."""
    settings = get_settings()
    queue = ProcessingQueue(db)
    try:
        summary = queue.summarize(user_id, job_ids, settings.UPLOAD_SUMMARY_DISMISS_SECONDS)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": summary.model_dump()}


@router.get("/{job_id}")
async def get_upload(
    job_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    queue = ProcessingQueue(db)
    try:
        job = queue.get_job(job_id, user_id=user_id)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": job}
