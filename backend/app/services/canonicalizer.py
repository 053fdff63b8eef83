"""
Canonicalizer for raw FIT samples.

Applies the format's sentinel checks and converts raw integer encodings to
physical units. Samples without a position fix are dropped; samples without
altitude keep their position with elevation 0.0.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from app.models.activity import TrackPoint
from app.models.raw import RawSample
from app.utils.coordinates import (
    fit_to_unix,
    raw_altitude_to_meters,
    semicircles_to_degrees,
)


logger = logging.getLogger(__name__)


SINT32_INVALID = 0x7FFFFFFF  # "no fix"
UINT16_INVALID = 0xFFFF      # "no altitude"
UINT32_INVALID = 0xFFFFFFFF

# Elevation used when a sample has no altitude
MISSING_ELEVATION = 0.0


def canonicalize_samples(samples: Sequence[RawSample]) -> list[TrackPoint]:
    """
    Convert raw samples into track points.

    Output order equals input order; invalid samples produce no point.
    """
    if not samples:
        return []

    lat_raw = _raw_array([s.position_lat for s in samples], SINT32_INVALID)
    lon_raw = _raw_array([s.position_long for s in samples], SINT32_INVALID)
    alt_raw = _raw_array([s.altitude for s in samples], UINT16_INVALID)

    # Both coordinates must be present
    valid = (lat_raw != SINT32_INVALID) & (lon_raw != SINT32_INVALID)

    lat = semicircles_to_degrees(lat_raw)
    lon = semicircles_to_degrees(lon_raw)
    ele = np.where(
        alt_raw == UINT16_INVALID,
        MISSING_ELEVATION,
        raw_altitude_to_meters(alt_raw),
    )

    points = [
        TrackPoint(
            lat=float(lat[i]),
            lon=float(lon[i]),
            ele=float(ele[i]),
            time=_unix_time(samples[i].timestamp),
        )
        for i in np.flatnonzero(valid)
    ]

    dropped = len(samples) - len(points)
    if dropped:
        logger.debug(f"Dropped {dropped} of {len(samples)} samples without a position fix")
    return points


def convert_sample(sample: RawSample) -> Optional[TrackPoint]:
    """Convert a single sample; None if it has no position fix."""
    points = canonicalize_samples([sample])
    return points[0] if points else None


def _raw_array(values: list[Optional[int]], sentinel: int) -> NDArray[np.int64]:
    # fitparse reports invalid values as None; fold them into the sentinel
    return np.array(
        [sentinel if v is None else v for v in values],
        dtype=np.int64,
    )


def _unix_time(fit_timestamp: Optional[int]) -> Optional[int]:
    if fit_timestamp is None or fit_timestamp == UINT32_INVALID:
        return None
    return fit_to_unix(fit_timestamp)
