"""Canonical schema for normalized scam detections.

Every raw record pulled from the detection store is reshaped into a
:class:`CanonicalDetection` before any aggregation runs. Consumers rely on
``content_type``, ``risk_level`` and ``detected_language`` always being
non-empty strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_LANGUAGE = "unknown"
UNKNOWN_TIME = "unknown"
UNKNOWN_CONTENT_TYPE = "unknown"
UNKNOWN_RISK_LABEL = "Unknown"
DEFAULT_ANALYSIS = "No analysis available"
DEFAULT_RECOMMENDED_ACTION = "Review manually"


class ContentType(str, Enum):
    """Content categories produced by the upstream analyzers."""

    WEBSITE = "website"
    EMAIL = "email"
    SOCIAL_MEDIA = "socialmedia"


class RiskBucket(str, Enum):
    """Internal severity bucket derived from free-text risk labels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        """int: Weight used for per-language risk scoring (low=1, medium=2, high=3)."""

        return _BUCKET_WEIGHTS[self]

    @property
    def label(self) -> str:
        """str: Title-cased label shown on the dashboard."""

        return self.value.title()


_BUCKET_WEIGHTS = {RiskBucket.LOW: 1, RiskBucket.MEDIUM: 2, RiskBucket.HIGH: 3}

# Presentation order consumed positionally by the dashboard charts.
RISK_BUCKET_ORDER: Tuple[RiskBucket, ...] = (RiskBucket.LOW, RiskBucket.MEDIUM, RiskBucket.HIGH)

KNOWN_CONTENT_TYPES: Tuple[str, ...] = tuple(item.value for item in ContentType)


class DetectionImage(BaseModel):
    """Externally hosted screenshot reference, passed through untouched."""

    model_config = ConfigDict(frozen=True)

    s3_url: str = ""
    s3_key: str = ""


class CanonicalDetection(BaseModel):
    """Normalized detection entity shared by every report builder.

    Attributes:
        id: Identifier unique within a report.
        detection_id: Upstream analysis run identifier, when present.
        content_type: ``website``, ``email`` or ``socialmedia``; other values pass through.
        risk_level: Original risk label kept for display.
        risk_bucket: Severity bucket derived from ``risk_level``.
        detected_language: Language code of the scam content.
        url: Scanned URL, or the metadata domain when no URL was recorded.
        domain: Host the detection points at.
        platform: Social platform name for social media detections.
        post_url: Link to the social media post.
        images: Screenshot references.
        analysis: Analyzer explanation.
        recommended_action: Suggested follow-up for the end user.
        legitimate_url: Official site the scam imitates, when identified.
        created_at: ISO-8601 timestamp, or ``"unknown"``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    detection_id: Optional[str] = None
    content_type: str = Field(default=UNKNOWN_CONTENT_TYPE, min_length=1)
    risk_level: str = Field(default=UNKNOWN_RISK_LABEL, min_length=1)
    risk_bucket: RiskBucket = RiskBucket.LOW
    detected_language: str = Field(default=UNKNOWN_LANGUAGE, min_length=1)
    url: Optional[str] = None
    domain: Optional[str] = None
    platform: Optional[str] = None
    post_url: Optional[str] = None
    images: Tuple[DetectionImage, ...] = ()
    analysis: str = DEFAULT_ANALYSIS
    recommended_action: str = DEFAULT_RECOMMENDED_ACTION
    legitimate_url: Optional[str] = None
    created_at: str = UNKNOWN_TIME

    @property
    def is_high_risk(self) -> bool:
        """bool: True when the detection falls in the high severity bucket."""

        return self.risk_bucket is RiskBucket.HIGH

    @property
    def has_known_time(self) -> bool:
        """bool: False when the upstream timestamp was missing or malformed."""

        return self.created_at != UNKNOWN_TIME
