"""Pydantic models describing the dashboard report payload.

Field names serialize to camelCase (``totalDetections``, ``languageInsights``)
because the dashboard charts and tables key off those names. Detections
themselves keep their snake_case store field names.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from maiscam.detections.schema import CanonicalDetection, RiskBucket

RiskLabel = Literal["Low", "Medium", "High"]
TrendDirection = Literal["up", "down", "stable"]


class ReportModel(BaseModel):
    """Base model applying the camelCase wire format."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LanguageCount(ReportModel):
    """Detected-language tally used by the overview chart."""

    language: str
    language_code: str
    count: int


class RiskShare(ReportModel):
    """Count and percentage of detections in one severity bucket."""

    risk: RiskLabel
    bucket: RiskBucket
    count: int
    percentage: float


class ScamStats(ReportModel):
    """Headline counters for the overview screen."""

    total_detections: int = 0
    high_risk_detections: int = 0
    website_scams: int = 0
    email_scams: int = 0
    social_media_scams: int = 0
    top_detected_languages: List[LanguageCount] = Field(default_factory=list)
    risk_distribution: List[RiskShare] = Field(default_factory=list)


class ContentTypeCount(ReportModel):
    """Detections of one content type within a language group."""

    type: str
    count: int


class LanguageInsight(ReportModel):
    """Per-detected-language rollup."""

    language: str
    language_code: str
    detections: int
    high_risk: int
    medium_risk: int
    low_risk: int
    percentage: float
    weighted_score: float
    risk_level: RiskLabel
    top_content_types: List[ContentTypeCount] = Field(default_factory=list)
    possible_countries: List[str] = Field(default_factory=list)
    trend: TrendDirection = "stable"
    trend_percentage: str = "0%"


class CountryInsight(ReportModel):
    """Detections attributed to a country through its languages."""

    country: str
    flag: str
    population: str
    detections: int
    high_risk: int
    languages: List[str] = Field(default_factory=list)


class DomainRank(ReportModel):
    """One row of the top malicious domains table."""

    domain: str
    count: int
    risk_level: str


class ThreatTrendPoint(ReportModel):
    """Daily detection counts split by content type."""

    date: str
    websites: int = 0
    emails: int = 0
    social_media: int = 0
    total: int = 0


class Report(ReportModel):
    """Complete aggregation output for one batch of raw records."""

    stats: ScamStats = Field(default_factory=ScamStats)
    recent_detections: List[CanonicalDetection] = Field(default_factory=list)
    website_detections: List[CanonicalDetection] = Field(default_factory=list)
    email_detections: List[CanonicalDetection] = Field(default_factory=list)
    social_media_detections: List[CanonicalDetection] = Field(default_factory=list)
    language_insights: List[LanguageInsight] = Field(default_factory=list)
    country_insights: List[CountryInsight] = Field(default_factory=list)
    threat_trends: List[ThreatTrendPoint] = Field(default_factory=list)
    top_domains: List[DomainRank] = Field(default_factory=list)


__all__ = [
    "ContentTypeCount",
    "CountryInsight",
    "DomainRank",
    "LanguageCount",
    "LanguageInsight",
    "Report",
    "RiskLabel",
    "RiskShare",
    "ScamStats",
    "ThreatTrendPoint",
]
