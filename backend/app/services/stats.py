"""
Activity stats aggregation.

Distance and elevation gain come from the device's session totals; they are
not recomputed from the track. Elevation gain is the session's total ascent
and is independent of the per-point elevations in the GPX document.
"""

from collections.abc import Sequence
from typing import Optional

from app.models.activity import ActivityStats, TrackPoint
from app.models.raw import SessionSummary


# session.total_distance is stored in centimetres
DISTANCE_SCALE = 100.0

UNKNOWN_SPORT = "Unknown"

SPORT_LABELS: dict[int, str] = {
    1: "Running",
    2: "Cycling",
    5: "Swimming",
    11: "Walking",
    17: "Hiking",
}


def sport_label(sport: Optional[int]) -> str:
    """Human-readable label for a FIT sport code."""
    return SPORT_LABELS.get(sport, UNKNOWN_SPORT)


def compute_stats(summary: SessionSummary, points: Sequence[TrackPoint]) -> ActivityStats:
    distance = summary.total_distance / DISTANCE_SCALE if summary.total_distance is not None else 0.0
    elevation_gain = float(summary.total_ascent) if summary.total_ascent is not None else 0.0

    return ActivityStats(
        distance=distance,
        elevation_gain=elevation_gain,
        record_count=len(points),
        kind=sport_label(summary.sport),
    )
