"""Summary statistics over canonical detections."""

from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, List, Sequence, Tuple, TypeVar

from maiscam.detections.reference_data import language_display_name
from maiscam.detections.schema import RISK_BUCKET_ORDER, CanonicalDetection, ContentType
from maiscam.reports.models import LanguageCount, RiskShare, ScamStats

DEFAULT_TOP_LANGUAGES = 5

T = TypeVar("T")


def percentage(count: int, total: int) -> float:
    """Return ``count / total`` as a percentage with one decimal place.

    Rounds half up on the float ``count / total * 100 * 10`` (JavaScript
    ``Math.round`` semantics, so 23/80 gives 28.7) and returns ``0.0`` when
    ``total`` is zero.
    """

    if total <= 0:
        return 0.0
    return math.floor(count / total * 100 * 10 + 0.5) / 10


def rank_counts(counter: Counter, limit: int | None = None) -> List[Tuple[T, int]]:
    """Sort counter items by count descending, ties kept in first-seen order."""

    ranked = sorted(counter.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        return ranked[:limit]
    return ranked


def count_content_type(detections: Iterable[CanonicalDetection], content_type: ContentType) -> int:
    return sum(1 for detection in detections if detection.content_type == content_type.value)


def top_detected_languages(
    detections: Sequence[CanonicalDetection],
    limit: int = DEFAULT_TOP_LANGUAGES,
) -> List[LanguageCount]:
    """Rank detected languages by number of detections."""

    counter = Counter(detection.detected_language for detection in detections)
    return [
        LanguageCount(language=language_display_name(code), language_code=code, count=count)
        for code, count in rank_counts(counter, limit)
    ]


def risk_distribution(detections: Sequence[CanonicalDetection]) -> List[RiskShare]:
    """Return low, medium and high shares in that order, including empty buckets."""

    total = len(detections)
    counter = Counter(detection.risk_bucket for detection in detections)
    return [
        RiskShare(
            risk=bucket.label,
            bucket=bucket,
            count=counter.get(bucket, 0),
            percentage=percentage(counter.get(bucket, 0), total),
        )
        for bucket in RISK_BUCKET_ORDER
    ]


def aggregate(
    detections: Sequence[CanonicalDetection],
    *,
    top_languages_limit: int = DEFAULT_TOP_LANGUAGES,
) -> ScamStats:
    """Compute the overview statistics for a batch of detections.

    Args:
        detections: Normalized detections.
        top_languages_limit: Maximum number of ranked languages to keep.

    Returns:
        :class:`ScamStats` with totals, per-content-type counts, ranked
        languages and the three-bucket risk distribution.
    """

    return ScamStats(
        total_detections=len(detections),
        high_risk_detections=sum(1 for detection in detections if detection.is_high_risk),
        website_scams=count_content_type(detections, ContentType.WEBSITE),
        email_scams=count_content_type(detections, ContentType.EMAIL),
        social_media_scams=count_content_type(detections, ContentType.SOCIAL_MEDIA),
        top_detected_languages=top_detected_languages(detections, top_languages_limit),
        risk_distribution=risk_distribution(detections),
    )


__all__ = [
    "aggregate",
    "percentage",
    "rank_counts",
    "risk_distribution",
    "top_detected_languages",
]
