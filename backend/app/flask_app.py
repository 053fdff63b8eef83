"""
OwnPath Activity Backend - Flask

Alternative to FastAPI for environments where FastAPI isn't available.
Same API structure, different framework.
"""

import logging
import os
from typing import Optional

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from app.models.activity import Activity
from app.services.errors import IngestError, StatsSerializationError, StorageError
from app.services.ingest import MAX_UPLOAD_BYTES, ingest_fit_bytes, validate_filename, validate_size
from app.services.repository import ActivityRepository, SQLiteActivityRepository


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Create Flask app
app = Flask(__name__)


DEFAULT_DB_PATH = "./ownpath.db"


def _repository() -> ActivityRepository:
    return current_app.config["REPOSITORY"]


def _text(message: str, status: int) -> Response:
    return Response(message, status=status, mimetype="text/plain")


def _build_summary_dict(activity: Activity) -> dict:
    """Build summary dict from Activity."""
    stats = activity.stats
    return {
        "id": activity.id,
        "timestamp": activity.timestamp.isoformat(),
        "type": activity.type,
        "stats": {
            "distance": stats.get("distance", 0.0),
            "elevation": stats.get("elevation", 0.0),
            "record_count": stats.get("record_count", 0),
        },
        "has_track": activity.has_track,
    }


@app.before_request
def log_request():
    logger.info(f"Received request: {request.method} {request.path}")


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    # Routing errors (404, 405) keep their own responses
    if isinstance(e, HTTPException):
        return e
    logger.exception(f"Unhandled error for {request.method} {request.path}")
    return _text("Internal Server Error", 500)


# ============================================================================
# Health Endpoints
# ============================================================================

@app.route("/")
def root():
    """Root endpoint - basic health check."""
    return jsonify({
        "name": "OwnPath",
        "version": "0.1.0",
        "status": "running",
    })


@app.route("/health")
def health_check():
    """Health check endpoint."""
    repo = _repository()
    return jsonify({
        "status": "healthy",
        "database": getattr(repo, "db_path", type(repo).__name__),
        "activity_count": repo.count(),
    })


# ============================================================================
# Activity Endpoints
# ============================================================================

@app.route("/api/upload", methods=["POST"])
def upload_activity():
    """Ingest a FIT file sent as multipart field 'fit_file'."""
    fit_file = request.files.get("fit_file")
    if fit_file is None:
        return _text("Missing file field 'fit_file'", 400)

    max_bytes = current_app.config["MAX_UPLOAD_BYTES"]

    try:
        validate_filename(fit_file.filename)
        data = fit_file.stream.read(max_bytes + 1)
        validate_size(len(data), max_bytes)
        activity = ingest_fit_bytes(data, _repository())
    except IngestError as e:
        logger.info(f"Rejected upload {fit_file.filename!r}: {e}")
        return _text(str(e), 400)
    except (StorageError, StatsSerializationError) as e:
        logger.error(f"Failed to store upload {fit_file.filename!r}: {e}")
        return _text("Failed to save activity", 500)

    return jsonify({"status": "success", "id": activity.id})


@app.route("/api/activities", methods=["GET"])
def list_activities():
    """List all activities, newest first."""
    try:
        activities = _repository().list_activities()
    except StorageError as e:
        logger.error(f"Failed to list activities: {e}")
        return jsonify({"detail": "Failed to list activities"}), 500

    return jsonify([_build_summary_dict(a) for a in activities])


@app.route("/api/activities/<activity_id>", methods=["GET"])
def get_activity(activity_id: str):
    """Get one activity including its GPX track."""
    try:
        activity = _repository().get(activity_id)
    except StorageError as e:
        logger.error(f"Failed to load activity {activity_id}: {e}")
        return jsonify({"detail": "Failed to load activity"}), 500

    if activity is None:
        return jsonify({"detail": f"Activity not found: {activity_id}"}), 404

    return jsonify({**_build_summary_dict(activity), "gpx_data": activity.gpx_data})


@app.route("/api/activities/<activity_id>/gpx", methods=["GET"])
def download_gpx(activity_id: str):
    """Download the GPX track of an activity."""
    try:
        activity = _repository().get(activity_id)
    except StorageError as e:
        logger.error(f"Failed to load activity {activity_id}: {e}")
        return jsonify({"detail": "Failed to load activity"}), 500

    if activity is None or not activity.has_track:
        return jsonify({"detail": f"No track for activity: {activity_id}"}), 404

    return Response(
        activity.gpx_data,
        mimetype="application/gpx+xml",
        headers={"Content-Disposition": f'attachment; filename="{activity_id}.gpx"'},
    )


# ============================================================================
# Startup
# ============================================================================

def create_app(
    repository: Optional[ActivityRepository] = None,
    max_upload_bytes: Optional[int] = None,
) -> Flask:
    """Create and configure the Flask app."""
    if repository is None:
        db_path = os.getenv("OWNPATH_DB_PATH", DEFAULT_DB_PATH)
        repository = SQLiteActivityRepository(db_path)
        logger.info(f"Using activity database: {db_path}")

    if max_upload_bytes is None:
        max_upload_bytes = int(os.getenv("OWNPATH_MAX_UPLOAD_BYTES", str(MAX_UPLOAD_BYTES)))

    app.config["REPOSITORY"] = repository
    app.config["MAX_UPLOAD_BYTES"] = max_upload_bytes
    return app


if __name__ == "__main__":
    create_app()
    app.run(host="0.0.0.0", port=8080, debug=True)
