"""
Canonical activity data model.

Everything downstream of the canonicalizer works with these types:
- TrackPoint: one validated GPS sample in physical units
- ActivityStats: summary metrics for an activity
- Activity: the persisted record
"""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TrackPoint:
    """A validated track point."""

    lat: float   # decimal degrees
    lon: float   # decimal degrees
    ele: float   # meters
    time: Optional[int] = None  # Unix epoch seconds


@dataclass(frozen=True)
class ActivityStats:
    """Summary metrics derived from the session message and the track."""

    distance: float        # meters
    elevation_gain: float  # meters, as reported by the session
    record_count: int      # retained track points
    kind: str

    def to_blob(self) -> dict:
        """Key-value form stored in Activity.stats_json."""
        return {
            "distance": self.distance,
            "elevation": self.elevation_gain,
            "record_count": self.record_count,
        }


@dataclass(frozen=True)
class Activity:
    """
    Persistable activity record.

    The kind label and timestamp are first-class fields; the remaining stats
    live in the stats_json blob.
    """

    id: str
    timestamp: datetime
    type: str
    stats_json: str
    gpx_data: str = ""

    @property
    def stats(self) -> dict:
        return json.loads(self.stats_json) if self.stats_json else {}

    @property
    def has_track(self) -> bool:
        return bool(self.gpx_data)
