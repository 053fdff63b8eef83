"""
Coordinate and unit conversion utilities.

FIT stores positions as signed 32-bit semicircles (the full +/-180 degree
range mapped onto the sint32 range), altitude as a scaled/offset uint16 and
timestamps as seconds since the FIT epoch (1989-12-31T00:00:00Z).
"""

from datetime import datetime, timezone

import numpy as np
from numpy.typing import ArrayLike, NDArray


SEMICIRCLES_PER_DEGREE = 2**31 / 180.0

# altitude (m) = raw / ALTITUDE_SCALE - ALTITUDE_OFFSET
ALTITUDE_SCALE = 5.0
ALTITUDE_OFFSET = 500.0

# Seconds between the Unix epoch and the FIT epoch
FIT_EPOCH_OFFSET = 631065600


def semicircles_to_degrees(semicircles: ArrayLike) -> NDArray[np.float64]:
    """
    Convert semicircles to decimal degrees.

    Args:
        semicircles: Raw sint32 position values

    Returns:
        Degrees as float64
    """
    return np.asarray(semicircles, dtype=np.float64) / SEMICIRCLES_PER_DEGREE


def degrees_to_semicircles(degrees: ArrayLike) -> NDArray[np.int64]:
    """Inverse of semicircles_to_degrees, rounded to the nearest semicircle."""
    return np.rint(np.asarray(degrees, dtype=np.float64) * SEMICIRCLES_PER_DEGREE).astype(np.int64)


def raw_altitude_to_meters(raw: ArrayLike) -> NDArray[np.float64]:
    """Convert raw uint16 altitude to meters."""
    return np.asarray(raw, dtype=np.float64) / ALTITUDE_SCALE - ALTITUDE_OFFSET


def meters_to_raw_altitude(meters: ArrayLike) -> NDArray[np.int64]:
    """Inverse of raw_altitude_to_meters."""
    return np.rint((np.asarray(meters, dtype=np.float64) + ALTITUDE_OFFSET) * ALTITUDE_SCALE).astype(np.int64)


def fit_to_unix(fit_timestamp: int) -> int:
    return int(fit_timestamp) + FIT_EPOCH_OFFSET


def unix_to_fit(unix_timestamp: int) -> int:
    return int(unix_timestamp) - FIT_EPOCH_OFFSET


def fit_to_datetime(fit_timestamp: int) -> datetime:
    """FIT timestamp to a timezone-aware UTC datetime."""
    return datetime.fromtimestamp(fit_to_unix(fit_timestamp), tz=timezone.utc)
