"""Report pipeline: raw detection records in, dashboard report out.

``process`` is a pure function of its input. It holds no state between calls
and performs no I/O, so it is safe to call concurrently and returns equal
reports for equal input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from maiscam.detections.normalizer import normalize_many
from maiscam.detections.schema import CanonicalDetection, ContentType
from maiscam.reports.domains import DEFAULT_TOP_DOMAINS, rank_domains
from maiscam.reports.language_insights import (
    DEFAULT_TOP_CONTENT_TYPES,
    build_country_insights,
    build_language_insights,
)
from maiscam.reports.models import Report
from maiscam.reports.statistics import DEFAULT_TOP_LANGUAGES, aggregate
from maiscam.reports.trends import DEFAULT_TREND_DAYS, build_threat_trends
from maiscam.settings.config import ReportSettings


@dataclass(frozen=True)
class ReportOptions:
    """Caps and windows used while assembling a report."""

    top_languages_limit: int = DEFAULT_TOP_LANGUAGES
    top_content_types_limit: int = DEFAULT_TOP_CONTENT_TYPES
    top_domains_limit: int = DEFAULT_TOP_DOMAINS
    language_insights_limit: Optional[int] = 8
    trend_days: int = DEFAULT_TREND_DAYS

    @classmethod
    def from_settings(cls, report_settings: ReportSettings) -> "ReportOptions":
        """Build options from the ``report`` settings section."""

        return cls(
            top_languages_limit=report_settings.top_languages_limit,
            top_content_types_limit=report_settings.top_content_types_limit,
            top_domains_limit=report_settings.top_domains_limit,
            language_insights_limit=report_settings.language_insights_limit,
            trend_days=report_settings.trend_days,
        )


def _of_type(detections: Sequence[CanonicalDetection], content_type: ContentType) -> List[CanonicalDetection]:
    return [detection for detection in detections if detection.content_type == content_type.value]


def build_report(detections: Sequence[CanonicalDetection], options: ReportOptions | None = None) -> Report:
    """Assemble a report from already-normalized detections."""

    opts = options or ReportOptions()
    language_insights = build_language_insights(
        detections,
        top_content_types=opts.top_content_types_limit,
        limit=opts.language_insights_limit,
    )
    return Report(
        stats=aggregate(detections, top_languages_limit=opts.top_languages_limit),
        recent_detections=list(detections),
        website_detections=_of_type(detections, ContentType.WEBSITE),
        email_detections=_of_type(detections, ContentType.EMAIL),
        social_media_detections=_of_type(detections, ContentType.SOCIAL_MEDIA),
        language_insights=language_insights,
        country_insights=build_country_insights(language_insights),
        threat_trends=build_threat_trends(detections, opts.trend_days),
        top_domains=rank_domains(detections, opts.top_domains_limit),
    )


def process(raw_records: Iterable[Any], options: ReportOptions | None = None) -> Report:
    """Normalize raw detection records and aggregate them into a report.

    Args:
        raw_records: Records exactly as returned by the detection store.
        options: Optional caps; defaults match the dashboard layout.

    Returns:
        :class:`Report`. An empty input yields zeroed statistics and empty
        lists rather than an error.
    """

    return build_report(normalize_many(raw_records), options)


__all__ = ["ReportOptions", "build_report", "process"]
