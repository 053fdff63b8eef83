"""
Sample data generator for testing.

Writes minimal but valid FIT activity files (file_id, event, record and
session messages) so the full decode path can be exercised without device
recordings.
"""

import struct
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import numpy as np

from app.models.raw import (
    MESG_FILE_ID,
    MESG_RECORD,
    MESG_SESSION,
    FileIdentity,
    RawSample,
    SessionSummary,
)
from app.utils.coordinates import (
    degrees_to_semicircles,
    meters_to_raw_altitude,
    unix_to_fit,
)


MESG_EVENT = 21

PROTOCOL_VERSION = 0x10
PROFILE_VERSION = 2093
HEADER_SIZE = 14

# Base types: (type byte, struct format, invalid value)
ENUM = (0x00, "B", 0xFF)
UINT16 = (0x84, "H", 0xFFFF)
SINT32 = (0x85, "i", 0x7FFFFFFF)
UINT32 = (0x86, "I", 0xFFFFFFFF)

# (field number, base type) per message, in write order
FILE_ID_FIELDS = [(0, ENUM), (4, UINT32)]            # type, time_created
EVENT_FIELDS = [(253, UINT32), (0, ENUM), (1, ENUM)]  # timestamp, event, event_type
RECORD_FIELDS = [(253, UINT32), (0, SINT32), (1, SINT32), (2, UINT16)]  # timestamp, lat, long, altitude
SESSION_FIELDS = [(5, ENUM), (9, UINT32), (22, UINT16)]  # sport, total_distance, total_ascent

FILE_TYPE_ACTIVITY = 4

CRC_TABLE = [
    0x0000, 0xCC01, 0xD801, 0x1400, 0xF001, 0x3C00, 0x2800, 0xE401,
    0xA001, 0x6C00, 0x7800, 0xB401, 0x5000, 0x9C01, 0x8801, 0x4400,
]


def fit_crc(data: bytes, crc: int = 0) -> int:
    """FIT CRC-16 over data."""
    for byte in data:
        tmp = CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ CRC_TABLE[byte & 0xF]
        tmp = CRC_TABLE[crc & 0xF]
        crc = (crc >> 4) & 0x0FFF
        crc = crc ^ tmp ^ CRC_TABLE[(byte >> 4) & 0xF]
    return crc


def definition_record(local: int, global_num: int, fields) -> bytes:
    """Definition message; a field whose struct format repeats is an array field."""
    out = struct.pack("<BBBHB", 0x40 | local, 0, 0, global_num, len(fields))
    for num, (base_type, fmt, _) in fields:
        out += struct.pack("<BBB", num, struct.calcsize(fmt), base_type)
    return out


def data_record(local: int, fields, values: Sequence) -> bytes:
    """Data message; array fields take a tuple value."""
    fmt = "<B" + "".join(f[1][1] for f in fields)
    packed = []
    for value, (_, (_, field_fmt, invalid)) in zip(values, fields):
        if value is None:
            value = (invalid,) * len(field_fmt)
        packed.extend(value if isinstance(value, tuple) else (value,))
    return struct.pack(fmt, local, *packed)


def frame_fit(body: bytes) -> bytes:
    """Wrap encoded records in a FIT header and trailing CRC."""
    header = struct.pack("<BBHI4s", HEADER_SIZE, PROTOCOL_VERSION, PROFILE_VERSION, len(body), b".FIT")
    header += struct.pack("<H", fit_crc(header))

    content = header + body
    return content + struct.pack("<H", fit_crc(content))


def build_fit_file(
    identity: Optional[FileIdentity],
    summary: Optional[SessionSummary],
    samples: Sequence[RawSample] = (),
    n_events: int = 1,
) -> bytes:
    """
    Encode an activity as FIT bytes.

    Values of None are written as the base type's invalid value. Passing
    identity or summary as None leaves that message out entirely.

    Args:
        identity: file_id message
        summary: session message (written after the records)
        samples: record messages in order
        n_events: number of event messages to write (not used by ingestion)
    """
    body = b""

    if identity is not None:
        body += definition_record(0, MESG_FILE_ID, FILE_ID_FIELDS)
        body += data_record(0, FILE_ID_FIELDS, [FILE_TYPE_ACTIVITY, identity.time_created])

    if n_events:
        start = identity.time_created if identity is not None else None
        body += definition_record(3, MESG_EVENT, EVENT_FIELDS)
        for _ in range(n_events):
            body += data_record(3, EVENT_FIELDS, [start, 0, 0])  # timer start

    if samples:
        body += definition_record(1, MESG_RECORD, RECORD_FIELDS)
        for s in samples:
            body += data_record(1, RECORD_FIELDS, [s.timestamp, s.position_lat, s.position_long, s.altitude])

    if summary is not None:
        body += definition_record(2, MESG_SESSION, SESSION_FIELDS)
        body += data_record(2, SESSION_FIELDS, [summary.sport, summary.total_distance, summary.total_ascent])

    return frame_fit(body)


def generate_loop_activity(
    output_path: Path,
    start: datetime = datetime(2024, 5, 4, 7, 30, tzinfo=timezone.utc),
    duration_s: int = 600,
    sample_interval_s: int = 1,
    center_lat: float = 46.5197,  # Lausanne
    center_lon: float = 6.6323,
    radius_m: float = 250.0,
    base_altitude_m: float = 420.0,
    sport: int = 1,
    gps_dropouts: int = 5,
) -> Path:
    """
    Generate a loop run around a centre point.

    A few samples in the middle are written without a position fix to mimic
    GPS dropouts.
    """
    timestamps = np.arange(0, duration_s, sample_interval_s)
    n_samples = len(timestamps)

    # One full loop
    theta = timestamps / duration_s * 2 * np.pi

    meters_per_deg_lat = 111000
    meters_per_deg_lon = 111000 * np.cos(np.radians(center_lat))

    lat = center_lat + radius_m * np.sin(theta) / meters_per_deg_lat
    lon = center_lon + radius_m * np.cos(theta) / meters_per_deg_lon

    # Gentle hill on one side of the loop
    altitude = base_altitude_m + 15.0 * (1 + np.sin(theta)) / 2

    lat_raw = degrees_to_semicircles(lat)
    lon_raw = degrees_to_semicircles(lon)
    alt_raw = meters_to_raw_altitude(altitude)

    dropout_start = n_samples // 2
    dropouts = set(range(dropout_start, min(dropout_start + gps_dropouts, n_samples)))

    fit_start = unix_to_fit(int(start.timestamp()))
    samples = [
        RawSample(
            position_lat=None if i in dropouts else int(lat_raw[i]),
            position_long=None if i in dropouts else int(lon_raw[i]),
            altitude=int(alt_raw[i]),
            timestamp=fit_start + int(timestamps[i]),
        )
        for i in range(n_samples)
    ]

    circumference_cm = int(round(2 * np.pi * radius_m * 100))
    content = build_fit_file(
        FileIdentity(time_created=fit_start),
        SessionSummary(sport=sport, total_distance=circumference_cm, total_ascent=15),
        samples,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(content)
    return output_path


def generate_test_data_set(output_folder: Path) -> list[Path]:
    """Generate a set of test data files."""
    output_folder.mkdir(parents=True, exist_ok=True)

    files = []

    files.append(generate_loop_activity(
        output_folder / "loop_run.fit",
    ))

    files.append(generate_loop_activity(
        output_folder / "loop_ride.fit",
        duration_s=900,
        radius_m=1200.0,
        sport=2,
        gps_dropouts=0,
    ))

    return files


if __name__ == "__main__":
    # Generate test data when run directly
    output = Path("./data/fit")
    files = generate_test_data_set(output)
    print(f"Generated {len(files)} test files in {output}")
    for f in files:
        print(f"  - {f.name}")
