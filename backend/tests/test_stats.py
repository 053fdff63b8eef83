"""
Tests for activity stats aggregation.
"""

import pytest

from app.models.activity import TrackPoint
from app.models.raw import SessionSummary
from app.services.stats import SPORT_LABELS, UNKNOWN_SPORT, compute_stats, sport_label


def _points(n):
    return [TrackPoint(lat=46.5, lon=6.6, ele=1000.0 + i) for i in range(n)]


class TestComputeStats:

    def test_distance_in_meters(self):
        stats = compute_stats(SessionSummary(sport=1, total_distance=500000, total_ascent=120), [])
        assert stats.distance == 5000.0

    def test_elevation_from_session(self):
        """Elevation gain is the session total ascent, not derived from points."""
        points = _points(50)  # climbs 49 m
        stats = compute_stats(SessionSummary(sport=1, total_distance=0, total_ascent=120), points)
        assert stats.elevation_gain == 120.0

    def test_record_count_is_point_count(self):
        stats = compute_stats(SessionSummary(sport=1, total_distance=0, total_ascent=0), _points(7))
        assert stats.record_count == 7

    def test_missing_totals_default_to_zero(self):
        stats = compute_stats(SessionSummary(sport=None, total_distance=None, total_ascent=None), [])
        assert stats.distance == 0.0
        assert stats.elevation_gain == 0.0
        assert stats.kind == UNKNOWN_SPORT

    def test_blob(self):
        stats = compute_stats(SessionSummary(sport=2, total_distance=123456, total_ascent=7), _points(3))
        assert stats.to_blob() == {"distance": 1234.56, "elevation": 7.0, "record_count": 3}


class TestSportLabel:

    @pytest.mark.parametrize("code,label", [
        (1, "Running"),
        (2, "Cycling"),
        (5, "Swimming"),
        (11, "Walking"),
        (17, "Hiking"),
    ])
    def test_known(self, code, label):
        assert sport_label(code) == label

    @pytest.mark.parametrize("code", [0, 3, 4, 254, 255, None, -1])
    def test_unknown(self, code):
        assert sport_label(code) == UNKNOWN_SPORT

    def test_total_over_uint8(self):
        for code in range(256):
            assert sport_label(code) in set(SPORT_LABELS.values()) | {UNKNOWN_SPORT}
