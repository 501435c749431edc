"""Per-language rollups and regional (country) attribution.

Detections are grouped by their exact ``detected_language`` code; ``en`` and
``EN`` are distinct groups because the upstream analyzer is trusted to emit
consistent codes.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from maiscam.detections.reference_data import country_info, language_display_name, possible_countries
from maiscam.detections.schema import CanonicalDetection, RiskBucket
from maiscam.reports.models import ContentTypeCount, CountryInsight, LanguageInsight, RiskLabel
from maiscam.reports.statistics import percentage, rank_counts

DEFAULT_TOP_CONTENT_TYPES = 3

_RISK_RANK = {"High": 0, "Medium": 1, "Low": 2}


@dataclass
class _LanguageGroup:
    code: str
    buckets: Counter = field(default_factory=Counter)
    content_types: Counter = field(default_factory=Counter)

    @property
    def total(self) -> int:
        return sum(self.buckets.values())


@dataclass
class _CountryTally:
    detections: int = 0
    high_risk: int = 0
    languages: List[str] = field(default_factory=list)


def weighted_risk_score(high: int, medium: int, low: int) -> float:
    """Return ``(3*high + 2*medium + low) / total``, or 0.0 for an empty group."""

    total = high + medium + low
    if total == 0:
        return 0.0
    return (high * 3 + medium * 2 + low) / total


def classify_language_risk(high: int, medium: int, low: int) -> RiskLabel:
    """Classify a language group from its severity counts.

    A group is High when more than half of its detections are high risk, or
    when more than 30% are high risk or the weighted score exceeds 2.2. It is
    Medium when medium plus high exceed 40% or the score exceeds 1.8, else Low.
    Comparisons are done on integers so boundary values (exactly 40%, a score
    of exactly 2.2) do not tip over through float error.
    """

    total = high + medium + low
    if total == 0:
        return "Low"
    weighted = high * 3 + medium * 2 + low
    if high * 100 > 50 * total:
        return "High"
    if high * 100 > 30 * total or weighted * 10 > 22 * total:
        return "High"
    if (medium + high) * 100 > 40 * total or weighted * 10 > 18 * total:
        return "Medium"
    return "Low"


def _group_by_language(detections: Sequence[CanonicalDetection]) -> Dict[str, _LanguageGroup]:
    groups: Dict[str, _LanguageGroup] = {}
    for detection in detections:
        code = detection.detected_language
        group = groups.get(code)
        if group is None:
            group = groups[code] = _LanguageGroup(code=code)
        group.buckets[detection.risk_bucket] += 1
        group.content_types[detection.content_type] += 1
    return groups


def build_language_insights(
    detections: Sequence[CanonicalDetection],
    *,
    top_content_types: int = DEFAULT_TOP_CONTENT_TYPES,
    limit: int | None = None,
) -> List[LanguageInsight]:
    """Group detections by detected language and score each group.

    Args:
        detections: Normalized detections.
        top_content_types: Cap on the ranked content types kept per language.
        limit: Optional cap on the number of language groups returned.

    Returns:
        Language insights ordered by detection count (descending, stable).
    """

    total = len(detections)
    insights: List[LanguageInsight] = []
    for code, group in _group_by_language(detections).items():
        high = group.buckets[RiskBucket.HIGH]
        medium = group.buckets[RiskBucket.MEDIUM]
        low = group.buckets[RiskBucket.LOW]
        display_name = language_display_name(code)
        insights.append(
            LanguageInsight(
                language=display_name,
                language_code=code,
                detections=group.total,
                high_risk=high,
                medium_risk=medium,
                low_risk=low,
                percentage=percentage(group.total, total),
                weighted_score=round(weighted_risk_score(high, medium, low), 2),
                risk_level=classify_language_risk(high, medium, low),
                top_content_types=[
                    ContentTypeCount(type=content_type, count=count)
                    for content_type, count in rank_counts(group.content_types, top_content_types)
                ],
                possible_countries=possible_countries(display_name),
            )
        )

    insights.sort(key=lambda insight: insight.detections, reverse=True)
    if limit is not None:
        return insights[:limit]
    return insights


def sort_insights_by_risk(insights: Sequence[LanguageInsight]) -> List[LanguageInsight]:
    """Order insights High, Medium, Low; detection count breaks ties."""

    return sorted(insights, key=lambda insight: (_RISK_RANK[insight.risk_level], -insight.detections))


def build_country_insights(insights: Sequence[LanguageInsight]) -> List[CountryInsight]:
    """Attribute each language group to every country where the language is used.

    A language spoken in several countries counts toward each of them, so the
    country totals may exceed the number of detections.
    """

    rollup: Dict[str, _CountryTally] = {}
    for insight in insights:
        for country in insight.possible_countries:
            tally = rollup.setdefault(country, _CountryTally())
            tally.detections += insight.detections
            tally.high_risk += insight.high_risk
            if insight.language not in tally.languages:
                tally.languages.append(insight.language)

    countries = []
    for country, tally in rollup.items():
        info = country_info(country)
        countries.append(
            CountryInsight(
                country=country,
                flag=info["flag"],
                population=info["population"],
                detections=tally.detections,
                high_risk=tally.high_risk,
                languages=tally.languages,
            )
        )
    countries.sort(key=lambda item: item.detections, reverse=True)
    return countries


__all__ = [
    "build_country_insights",
    "build_language_insights",
    "classify_language_risk",
    "sort_insights_by_risk",
    "weighted_risk_score",
]
