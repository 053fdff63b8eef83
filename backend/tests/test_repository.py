"""
Tests for the SQLite activity repository.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.models.activity import Activity
from app.services.errors import StorageError
from app.services.repository import SQLiteActivityRepository


def _activity(activity_id, hours=0, gpx_data="<gpx/>"):
    return Activity(
        id=activity_id,
        timestamp=datetime(2024, 5, 4, 7, 30, tzinfo=timezone.utc) + timedelta(hours=hours),
        type="Running",
        stats_json='{"distance": 5000.0, "elevation": 120.0, "record_count": 1}',
        gpx_data=gpx_data,
    )


class TestInsertAndGet:

    def test_round_trip(self, sqlite_repo):
        activity = _activity("a1")
        sqlite_repo.insert(activity)

        stored = sqlite_repo.get("a1")
        assert stored == activity
        assert stored.timestamp.tzinfo is not None

    def test_unknown_id(self, sqlite_repo):
        assert sqlite_repo.get("missing") is None

    def test_empty_track(self, sqlite_repo):
        sqlite_repo.insert(_activity("a1", gpx_data=""))
        stored = sqlite_repo.get("a1")

        assert stored.gpx_data == ""
        assert not stored.has_track

    def test_duplicate_id(self, sqlite_repo):
        sqlite_repo.insert(_activity("a1"))
        with pytest.raises(StorageError):
            sqlite_repo.insert(_activity("a1", hours=1))
        assert sqlite_repo.count() == 1


class TestListing:

    def test_newest_first(self, sqlite_repo):
        sqlite_repo.insert(_activity("old", hours=0))
        sqlite_repo.insert(_activity("new", hours=48))
        sqlite_repo.insert(_activity("mid", hours=24))

        assert [a.id for a in sqlite_repo.list_activities()] == ["new", "mid", "old"]

    def test_empty(self, sqlite_repo):
        assert sqlite_repo.list_activities() == []
        assert sqlite_repo.count() == 0

    def test_count(self, sqlite_repo):
        for i in range(3):
            sqlite_repo.insert(_activity(f"a{i}", hours=i))
        assert sqlite_repo.count() == 3


class TestFileDatabase:
    """Data survives reopening the same file."""

    def test_persists(self, tmp_path):
        path = tmp_path / "ownpath.db"

        repo = SQLiteActivityRepository(path)
        repo.insert(_activity("a1"))
        repo.close()

        reopened = SQLiteActivityRepository(path)
        try:
            assert reopened.db_path == str(path)
            assert reopened.get("a1") == _activity("a1")
        finally:
            reopened.close()

    def test_separate_in_memory_databases(self):
        first = SQLiteActivityRepository()
        second = SQLiteActivityRepository()
        first.insert(_activity("a1"))

        assert second.count() == 0
        first.close()
        second.close()
