"""
Activity ingestion pipeline.

    bytes -> decode -> classify -> canonicalize -> GPX + stats -> Activity -> store

Everything except decode and store is pure. Nothing is written unless every
step succeeds.
"""

import json
import logging
import uuid
from collections.abc import Callable, Iterable
from typing import Optional

from app.models.activity import Activity, ActivityStats
from app.models.raw import DecodedMessage, FileIdentity
from app.services.canonicalizer import canonicalize_samples
from app.services.errors import StatsSerializationError, UploadRejectedError
from app.services.extractor import extract_messages
from app.services.fit_decoder import decode_fit
from app.services.gpx_writer import build_gpx
from app.services.repository import ActivityRepository
from app.services.stats import compute_stats
from app.utils.coordinates import fit_to_datetime


logger = logging.getLogger(__name__)


Decoder = Callable[[bytes], list[DecodedMessage]]

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
FIT_EXTENSION = ".fit"


def validate_filename(filename: Optional[str]) -> None:
    """Reject anything without a .fit extension (case-insensitive)."""
    if not filename or not filename.lower().endswith(FIT_EXTENSION):
        raise UploadRejectedError(f"Only {FIT_EXTENSION} files are accepted")


def validate_size(size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    if size > max_bytes:
        raise UploadRejectedError(f"File too large (limit {max_bytes} bytes)")


def assemble_activity(identity: FileIdentity, stats: ActivityStats, gpx_data: str) -> Activity:
    """
    Build the persistable record with a freshly generated id.

    Raises:
        StatsSerializationError: if the stats cannot be encoded as JSON
    """
    try:
        stats_json = json.dumps(stats.to_blob(), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise StatsSerializationError(f"Failed to serialize activity stats: {e}") from e

    return Activity(
        id=str(uuid.uuid4()),
        timestamp=fit_to_datetime(identity.time_created),
        type=stats.kind,
        stats_json=stats_json,
        gpx_data=gpx_data,
    )


def build_activity(messages: Iterable[DecodedMessage]) -> Activity:
    """
    Turn decoded messages into an Activity.

    Raises:
        MissingMessageError: if file_id or session is absent
        StatsSerializationError: if the stats cannot be encoded
    """
    extracted = extract_messages(messages)
    identity, summary = extracted.require_complete()

    points = canonicalize_samples(extracted.samples)
    gpx_data = build_gpx(points)
    stats = compute_stats(summary, points)

    return assemble_activity(identity, stats, gpx_data)


def ingest_fit_bytes(
    data: bytes,
    repository: ActivityRepository,
    decoder: Decoder = decode_fit,
) -> Activity:
    """
    Decode, assemble and store one uploaded FIT file.

    Args:
        data: Raw upload body
        repository: Store the activity is inserted into (once, on success)
        decoder: Byte-stream decoder

    Returns:
        The stored Activity

    Raises:
        DecodeError, MissingMessageError: the upload is unusable
        StatsSerializationError, StorageError: server-side failure
    """
    messages = decoder(data)
    activity = build_activity(messages)
    repository.insert(activity)

    logger.info(
        f"Ingested activity {activity.id}: {activity.type}, "
        f"{activity.stats.get('record_count', 0)} track points"
    )
    return activity
