"""Daily threat trends derived from detection timestamps."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from maiscam.detections.schema import CanonicalDetection, ContentType
from maiscam.reports.models import ThreatTrendPoint

DEFAULT_TREND_DAYS = 7


def detection_date(detection: CanonicalDetection) -> Optional[date]:
    """Return the calendar day of a detection, or ``None`` for unknown times."""

    if not detection.has_known_time:
        return None
    raw = detection.created_at
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


def build_threat_trends(
    detections: Sequence[CanonicalDetection],
    days: int = DEFAULT_TREND_DAYS,
    *,
    end: date | None = None,
) -> List[ThreatTrendPoint]:
    """Count detections per day over a ``days`` long window.

    The window ends on ``end`` when given, else on the most recent day present
    in the data, so identical input always yields identical trends. Detections
    with unknown timestamps are left out; an input without any dated detection
    yields an empty list.
    """

    dated = [(detection_date(detection), detection) for detection in detections]
    dated = [(day, detection) for day, detection in dated if day is not None]
    if end is None:
        if not dated:
            return []
        end = max(day for day, _ in dated)

    start = end - timedelta(days=days - 1)
    points: Dict[date, ThreatTrendPoint] = {
        start + timedelta(days=offset): ThreatTrendPoint(date=(start + timedelta(days=offset)).isoformat())
        for offset in range(days)
    }
    for day, detection in dated:
        point = points.get(day)
        if point is None:
            continue
        if detection.content_type == ContentType.WEBSITE.value:
            point.websites += 1
        elif detection.content_type == ContentType.EMAIL.value:
            point.emails += 1
        elif detection.content_type == ContentType.SOCIAL_MEDIA.value:
            point.social_media += 1
        else:
            continue
        point.total += 1
    return list(points.values())


__all__ = ["build_threat_trends", "detection_date", "DEFAULT_TREND_DAYS"]
