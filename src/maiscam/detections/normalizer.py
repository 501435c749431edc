"""Detection normalization for the MAI Scam dashboard.

Raw detection records come straight out of a schemaless document store, so
every field is optional and may carry an unexpected type. ``normalize``
reshapes one record into a :class:`CanonicalDetection`, substituting
documented defaults instead of raising.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Any, List, Mapping, Optional

from maiscam.detections.schema import (
    DEFAULT_ANALYSIS,
    DEFAULT_RECOMMENDED_ACTION,
    KNOWN_CONTENT_TYPES,
    UNKNOWN_CONTENT_TYPE,
    UNKNOWN_LANGUAGE,
    UNKNOWN_RISK_LABEL,
    UNKNOWN_TIME,
    CanonicalDetection,
    DetectionImage,
    RiskBucket,
)

PARTITION_KEY = "mai-scam"

# Checked in order; the first bucket with a matching marker wins.
_RISK_MARKERS = (
    (RiskBucket.HIGH, ("high", "critical", "高")),
    (RiskBucket.MEDIUM, ("medium", "中")),
)


def safe_string(value: Any) -> str:
    """Coerce a loosely typed value into a stripped string.

    ``None`` and containers become an empty string; other scalars use ``str``.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (Mapping, list, tuple, set, bytes, bytearray)):
        return ""
    return str(value).strip()


def _dig(record: Any, *path: str) -> Any:
    """Walk nested mappings, returning ``None`` as soon as a level is missing."""

    current = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _first_text(*values: Any) -> str:
    for value in values:
        text = safe_string(value)
        if text:
            return text
    return ""


def risk_bucket(risk_level: Any) -> RiskBucket:
    """Map a free-text risk label to a severity bucket.

    Matching is a case-insensitive substring test, ``high``/``critical`` first,
    then ``medium``; anything else is low.
    """

    text = safe_string(risk_level).lower()
    for bucket, markers in _RISK_MARKERS:
        if any(marker in text for marker in markers):
            return bucket
    return RiskBucket.LOW


def normalize_content_type(value: Any) -> str:
    """Lower-case known content types and pass unknown ones through."""

    text = safe_string(value)
    if not text:
        return UNKNOWN_CONTENT_TYPE
    lowered = text.lower()
    if lowered in KNOWN_CONTENT_TYPES:
        return lowered
    return text


def domain_from_url(url: str) -> Optional[str]:
    """Return the host segment of ``scheme://host/path`` or ``None``."""

    if not url:
        return None
    parts = url.split("/")
    if len(parts) < 3:
        return None
    return parts[2].strip() or None


def normalize_timestamp(value: Any) -> str:
    """Return an ISO-8601 string, or the unknown-time sentinel for bad input."""

    if isinstance(value, datetime):
        return value.isoformat()
    text = safe_string(value)
    if not text:
        return UNKNOWN_TIME
    candidate = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        datetime.fromisoformat(candidate)
    except ValueError:
        return UNKNOWN_TIME
    return text


def _extract_images(record: Any) -> tuple[DetectionImage, ...]:
    raw_images = _dig(record, "extracted_data", "images")
    if not isinstance(raw_images, list):
        return ()
    images: List[DetectionImage] = []
    for item in raw_images:
        if not isinstance(item, Mapping):
            continue
        s3_url = _first_text(item.get("s3_url"), item.get("s3Url"))
        s3_key = _first_text(item.get("s3_key"), item.get("s3Key"))
        if s3_url or s3_key:
            images.append(DetectionImage(s3_url=s3_url, s3_key=s3_key))
    return tuple(images)


def _fingerprint(record: Any) -> str:
    digest = hashlib.sha1(repr(record).encode("utf-8", "replace")).hexdigest()
    return f"detection-{digest[:12]}"


def normalize(raw: Any, *, fallback_id: str | None = None) -> CanonicalDetection:
    """Normalize one raw detection record.

    Args:
        raw: Record as returned by the detection store. Non-mapping input is
            tolerated and yields a detection made entirely of defaults.
        fallback_id: Identifier used when the record carries none. When
            omitted, a stable fingerprint of the record is used instead.

    Returns:
        Immutable :class:`CanonicalDetection`.
    """

    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    analysis_result = _dig(record, "analysis_result")

    detection_id = safe_string(record.get("detection_id")) or None
    identifier = _first_text(record.get(PARTITION_KEY), detection_id, record.get("id"))
    if not identifier:
        identifier = fallback_id or _fingerprint(raw)

    metadata_domain = safe_string(_dig(record, "extracted_data", "metadata", "domain"))
    url = _first_text(record.get("url"), metadata_domain)
    domain = metadata_domain or domain_from_url(url) or safe_string(record.get("domain")) or None

    risk_label = safe_string(_dig(analysis_result, "risk_level"))
    detected_language = _first_text(
        _dig(analysis_result, "detected_language"),
        record.get("target_language"),
    )
    platform = _first_text(
        _dig(record, "extracted_data", "signals", "platform_meta", "platform"),
        record.get("platform"),
    )
    created_at = record.get("created_at")
    if created_at is None:
        created_at = record.get("timestamp")

    return CanonicalDetection(
        id=identifier,
        detection_id=detection_id,
        content_type=normalize_content_type(record.get("content_type")),
        risk_level=risk_label or UNKNOWN_RISK_LABEL,
        risk_bucket=risk_bucket(risk_label),
        detected_language=detected_language or UNKNOWN_LANGUAGE,
        url=url or None,
        domain=domain,
        platform=platform or None,
        post_url=safe_string(record.get("post_url")) or None,
        images=_extract_images(record),
        analysis=safe_string(_dig(analysis_result, "analysis")) or DEFAULT_ANALYSIS,
        recommended_action=safe_string(_dig(analysis_result, "recommended_action")) or DEFAULT_RECOMMENDED_ACTION,
        legitimate_url=safe_string(_dig(analysis_result, "legitimate_url")) or None,
        created_at=normalize_timestamp(created_at),
    )


def normalize_many(records: Any) -> List[CanonicalDetection]:
    """Normalize a batch, assigning positional ids and keeping ids unique."""

    if records is None or isinstance(records, (str, bytes, Mapping)):
        return []
    detections: List[CanonicalDetection] = []
    used: set[str] = set()
    for index, raw in enumerate(records):
        detection = normalize(raw, fallback_id=f"detection-{index}")
        candidate = detection.id
        suffix = 0
        while candidate in used:
            suffix += 1
            candidate = f"{detection.id}-{suffix}"
        used.add(candidate)
        if candidate != detection.id:
            detection = detection.model_copy(update={"id": candidate})
        detections.append(detection)
    return detections


__all__ = [
    "PARTITION_KEY",
    "domain_from_url",
    "normalize",
    "normalize_content_type",
    "normalize_many",
    "normalize_timestamp",
    "risk_bucket",
    "safe_string",
]
