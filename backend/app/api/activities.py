"""
API routes for activities.
"""

import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import PlainTextResponse, Response

from app.api.schemas import (
    ActivityDetailResponse,
    ActivityStatsResponse,
    ActivitySummaryResponse,
    UploadResponse,
)
from app.models.activity import Activity
from app.services.errors import IngestError, StatsSerializationError, StorageError
from app.services.ingest import MAX_UPLOAD_BYTES, ingest_fit_bytes, validate_filename, validate_size
from app.services.repository import ActivityRepository


logger = logging.getLogger(__name__)


MAX_UPLOAD_BYTES_ENV = "OWNPATH_MAX_UPLOAD_BYTES"
MISSING_FILE_FIELD = "Missing file field 'fit_file'"

router = APIRouter(prefix="/api", tags=["activities"])


def get_repository(request: Request) -> ActivityRepository:
    """Activity store attached to the app at startup."""
    return request.app.state.repository


def get_max_upload_bytes() -> int:
    return int(os.getenv(MAX_UPLOAD_BYTES_ENV, str(MAX_UPLOAD_BYTES)))


def _build_summary(activity: Activity) -> dict:
    stats = activity.stats
    return {
        "id": activity.id,
        "timestamp": activity.timestamp.isoformat(),
        "type": activity.type,
        "stats": ActivityStatsResponse(
            distance=stats.get("distance", 0.0),
            elevation=stats.get("elevation", 0.0),
            record_count=stats.get("record_count", 0),
        ),
        "has_track": activity.has_track,
    }


def _get_or_404(repo: ActivityRepository, activity_id: str) -> Activity:
    try:
        activity = repo.get(activity_id)
    except StorageError as e:
        logger.error(f"Failed to load activity {activity_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load activity")

    if activity is None:
        raise HTTPException(status_code=404, detail=f"Activity not found: {activity_id}")
    return activity


@router.post("/upload", response_model=UploadResponse)
async def upload_activity(
    fit_file: Optional[UploadFile] = File(None),
    repo: ActivityRepository = Depends(get_repository),
):
    """
    Ingest a FIT file.

    Client errors (missing field, wrong extension, oversized body, undecodable
    file, missing file_id/session) return 400 with a plain-text reason;
    storage failures return 500.
    """
    if fit_file is None:
        return PlainTextResponse(MISSING_FILE_FIELD, status_code=400)

    max_bytes = get_max_upload_bytes()

    try:
        validate_filename(fit_file.filename)
        # One byte past the limit is enough to know it is too large
        data = await fit_file.read(max_bytes + 1)
        validate_size(len(data), max_bytes)
        activity = ingest_fit_bytes(data, repo)
    except IngestError as e:
        logger.info(f"Rejected upload {fit_file.filename!r}: {e}")
        return PlainTextResponse(str(e), status_code=400)
    except (StorageError, StatsSerializationError) as e:
        logger.error(f"Failed to store upload {fit_file.filename!r}: {e}")
        return PlainTextResponse("Failed to save activity", status_code=500)

    return UploadResponse(status="success", id=activity.id)


@router.get("/activities", response_model=list[ActivitySummaryResponse])
async def list_activities(repo: ActivityRepository = Depends(get_repository)):
    """
    List all activities, newest first.
    """
    try:
        activities = repo.list_activities()
    except StorageError as e:
        logger.error(f"Failed to list activities: {e}")
        raise HTTPException(status_code=500, detail="Failed to list activities")

    return [ActivitySummaryResponse(**_build_summary(a)) for a in activities]


@router.get("/activities/{activity_id}", response_model=ActivityDetailResponse)
async def get_activity(activity_id: str, repo: ActivityRepository = Depends(get_repository)):
    """
    Get one activity including its GPX track.
    """
    activity = _get_or_404(repo, activity_id)
    return ActivityDetailResponse(**_build_summary(activity), gpx_data=activity.gpx_data)


@router.get("/activities/{activity_id}/gpx")
async def download_gpx(activity_id: str, repo: ActivityRepository = Depends(get_repository)):
    """
    Download the GPX track of an activity.
    """
    activity = _get_or_404(repo, activity_id)
    if not activity.has_track:
        raise HTTPException(status_code=404, detail=f"Activity has no track: {activity_id}")

    return Response(
        content=activity.gpx_data,
        media_type="application/gpx+xml",
        headers={"Content-Disposition": f'attachment; filename="{activity_id}.gpx"'},
    )
