"""
Shared fixtures: FIT messages and files for the standard test activity.
"""

from datetime import datetime, timezone

import pytest

from app.models.activity import Activity
from app.models.raw import (
    MESG_FILE_ID,
    MESG_RECORD,
    MESG_SESSION,
    DecodedMessage,
    FileIdentity,
    RawSample,
    SessionSummary,
)
from app.services.errors import StorageError
from app.services.repository import SQLiteActivityRepository
from app.utils.sample_data import (
    ENUM,
    FILE_ID_FIELDS,
    FILE_TYPE_ACTIVITY,
    SESSION_FIELDS,
    SINT32,
    UINT16,
    UINT32,
    build_fit_file,
    data_record,
    definition_record,
    frame_fit,
)


# 2024-05-04T07:30:00Z in FIT time
FIT_TIME = 1083742200
INVALID_LAT = 0x7FFFFFFF

# Two-element array variants of the scalar base types
UINT32_PAIR = (UINT32[0], "II", UINT32[2])
SINT32_PAIR = (SINT32[0], "ii", SINT32[2])


class RecordingRepository:
    """In-memory repository that records calls and can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.inserted: list[Activity] = []

    def insert(self, activity: Activity) -> None:
        if self.fail:
            raise StorageError("disk full")
        self.inserted.append(activity)

    def get(self, activity_id: str):
        return next((a for a in self.inserted if a.id == activity_id), None)

    def list_activities(self) -> list[Activity]:
        return sorted(self.inserted, key=lambda a: a.timestamp, reverse=True)

    def count(self) -> int:
        return len(self.inserted)


@pytest.fixture
def valid_sample():
    return RawSample(position_lat=100000000, position_long=200000000, altitude=1000, timestamp=FIT_TIME)


@pytest.fixture
def invalid_sample():
    return RawSample(position_lat=INVALID_LAT, position_long=200000000, altitude=1000, timestamp=FIT_TIME + 1)


@pytest.fixture
def identity():
    return FileIdentity(time_created=FIT_TIME)


@pytest.fixture
def summary():
    return SessionSummary(sport=1, total_distance=500000, total_ascent=120)


@pytest.fixture
def messages(valid_sample, invalid_sample):
    """Decoded messages for the standard activity, including an unknown tag."""
    return [
        DecodedMessage(MESG_FILE_ID, {"type": 4, "time_created": FIT_TIME}),
        DecodedMessage(21, {"timestamp": FIT_TIME, "event": 0, "event_type": 0}),
        DecodedMessage(MESG_RECORD, {
            "timestamp": valid_sample.timestamp,
            "position_lat": valid_sample.position_lat,
            "position_long": valid_sample.position_long,
            "altitude": valid_sample.altitude,
        }),
        DecodedMessage(MESG_RECORD, {
            "timestamp": invalid_sample.timestamp,
            "position_lat": invalid_sample.position_lat,
            "position_long": invalid_sample.position_long,
            "altitude": invalid_sample.altitude,
        }),
        DecodedMessage(MESG_SESSION, {"sport": 1, "total_distance": 500000, "total_ascent": 120}),
    ]


@pytest.fixture
def fit_bytes(identity, summary, valid_sample, invalid_sample):
    """The standard activity encoded as a FIT file."""
    return build_fit_file(identity, summary, [valid_sample, invalid_sample])


@pytest.fixture
def expected_timestamp():
    return datetime(2024, 5, 4, 7, 30, tzinfo=timezone.utc)


@pytest.fixture
def recording_repo():
    return RecordingRepository()


@pytest.fixture
def sqlite_repo():
    repo = SQLiteActivityRepository()
    yield repo
    repo.close()


def _session_records(summary):
    return (
        definition_record(2, MESG_SESSION, SESSION_FIELDS)
        + data_record(2, SESSION_FIELDS, [summary.sport, summary.total_distance, summary.total_ascent])
    )


@pytest.fixture
def corrupt_fit_bytes(summary):
    """CRC-valid file whose file_id declares time_created as a uint32 array."""
    fields = [(0, ENUM), (4, UINT32_PAIR)]
    body = (
        definition_record(0, MESG_FILE_ID, fields)
        + data_record(0, fields, [FILE_TYPE_ACTIVITY, (FIT_TIME, FIT_TIME)])
        + _session_records(summary)
    )
    return frame_fit(body)


@pytest.fixture
def array_position_fit_bytes(summary):
    """Well-formed file whose only record carries position_lat as a sint32 array."""
    record_fields = [(253, UINT32), (0, SINT32_PAIR), (1, SINT32), (2, UINT16)]
    body = (
        definition_record(0, MESG_FILE_ID, FILE_ID_FIELDS)
        + data_record(0, FILE_ID_FIELDS, [FILE_TYPE_ACTIVITY, FIT_TIME])
        + definition_record(1, MESG_RECORD, record_fields)
        + data_record(1, record_fields, [FIT_TIME, (100000000, 100000001), 200000000, 1000])
        + _session_records(summary)
    )
    return frame_fit(body)
