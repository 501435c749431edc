"""Unit tests for daily threat trends."""

from __future__ import annotations

from datetime import date

from maiscam.detections.schema import CanonicalDetection
from maiscam.reports.trends import build_threat_trends, detection_date


def _detection(identifier: str, content_type: str, created_at: str) -> CanonicalDetection:
    return CanonicalDetection(id=identifier, content_type=content_type, created_at=created_at)


def test_trends_window_ends_on_latest_detection_day():
    detections = [
        _detection("1", "website", "2025-09-07T07:01:12.418203"),
        _detection("2", "email", "2025-09-07T06:57:37.544023"),
        _detection("3", "socialmedia", "2025-09-06T02:08:19"),
        _detection("4", "website", "2025-09-01T00:00:00Z"),
        _detection("5", "website", "2025-08-31T23:59:59"),
    ]

    points = build_threat_trends(detections)

    assert [point.date for point in points] == [
        "2025-09-01",
        "2025-09-02",
        "2025-09-03",
        "2025-09-04",
        "2025-09-05",
        "2025-09-06",
        "2025-09-07",
    ]
    last = points[-1]
    assert (last.websites, last.emails, last.social_media, last.total) == (1, 1, 0, 2)
    assert points[-2].social_media == 1
    assert points[0].websites == 1
    assert sum(point.total for point in points) == 4


def test_trends_skip_unknown_times_and_content_types():
    detections = [
        _detection("1", "website", "unknown"),
        _detection("2", "sms", "2025-09-07T00:00:00"),
        _detection("3", "email", "2025-09-07T00:00:00"),
    ]

    points = build_threat_trends(detections, days=3)

    assert len(points) == 3
    assert points[-1].emails == 1
    assert points[-1].total == 1


def test_trends_with_explicit_end_day():
    detections = [_detection("1", "website", "2025-09-07T00:00:00")]

    points = build_threat_trends(detections, days=2, end=date(2025, 9, 10))

    assert [point.date for point in points] == ["2025-09-09", "2025-09-10"]
    assert all(point.total == 0 for point in points)


def test_trends_empty_without_dated_detections():
    assert build_threat_trends([]) == []
    assert build_threat_trends([_detection("1", "website", "unknown")]) == []


def test_detection_date():
    assert detection_date(_detection("1", "email", "2025-09-07T06:57:37Z")) == date(2025, 9, 7)
    assert detection_date(_detection("2", "email", "unknown")) is None


def test_trend_points_serialize_camel_case():
    (point,) = build_threat_trends([_detection("1", "socialmedia", "2025-09-07T00:00:00")], days=1)

    assert point.model_dump(by_alias=True) == {
        "date": "2025-09-07",
        "websites": 0,
        "emails": 0,
        "socialMedia": 1,
        "total": 1,
    }
