"""Unit tests for raw detection normalization."""

from __future__ import annotations

import random
from datetime import datetime

import pytest

from maiscam.detections.normalizer import (
    domain_from_url,
    normalize,
    normalize_content_type,
    normalize_many,
    normalize_timestamp,
    risk_bucket,
    safe_string,
)
from maiscam.detections.schema import (
    DEFAULT_ANALYSIS,
    DEFAULT_RECOMMENDED_ACTION,
    CanonicalDetection,
    RiskBucket,
)


def _website_record(**overrides):
    record = {
        "mai-scam": "896588eeb859d3f3",
        "detection_id": "0b6c1f7e-5a0e-4f55-9f0a-6a2f3a2d8c11",
        "content_type": "website",
        "created_at": "2025-09-07T07:01:12.418203",
        "url": "https://shoppe123.vercel.app/promo",
        "analysis_result": {
            "risk_level": "High",
            "detected_language": "ms",
            "analysis": "Phishing storefront",
            "recommended_action": "Do not pay",
        },
    }
    record.update(overrides)
    return record


def test_normalize_website_record():
    detection = normalize(_website_record())

    assert detection.id == "896588eeb859d3f3"
    assert detection.detection_id == "0b6c1f7e-5a0e-4f55-9f0a-6a2f3a2d8c11"
    assert detection.content_type == "website"
    assert detection.risk_level == "High"
    assert detection.risk_bucket is RiskBucket.HIGH
    assert detection.detected_language == "ms"
    assert detection.url == "https://shoppe123.vercel.app/promo"
    assert detection.domain == "shoppe123.vercel.app"
    assert detection.analysis == "Phishing storefront"
    assert detection.recommended_action == "Do not pay"
    assert detection.created_at == "2025-09-07T07:01:12.418203"


def test_normalize_social_media_record_keeps_platform_and_images():
    raw = {
        "mai-scam": "63f90c9086563d51",
        "content_type": "socialmedia",
        "platform": "facebook",
        "post_url": "https://www.facebook.com/photo/?fbid=1",
        "analysis_result": {"risk_level": "Critical", "detected_language": "ms"},
        "extracted_data": {
            "images": [
                {"s3_url": "https://bucket/img.jpg", "s3_key": "social_media/img.jpg"},
                "not-an-image",
                {"file_size": 10},
            ]
        },
    }

    detection = normalize(raw)

    assert detection.content_type == "socialmedia"
    assert detection.risk_bucket is RiskBucket.HIGH
    assert detection.platform == "facebook"
    assert detection.post_url == "https://www.facebook.com/photo/?fbid=1"
    assert len(detection.images) == 1
    assert detection.images[0].s3_key == "social_media/img.jpg"
    assert detection.url is None
    assert detection.domain is None


def test_platform_meta_wins_over_top_level_platform():
    raw = {
        "platform": "facebook",
        "extracted_data": {"signals": {"platform_meta": {"platform": "instagram"}}},
    }

    assert normalize(raw).platform == "instagram"


def test_missing_fields_fall_back_to_defaults():
    detection = normalize({}, fallback_id="detection-3")

    assert detection.id == "detection-3"
    assert detection.detection_id is None
    assert detection.content_type == "unknown"
    assert detection.risk_level == "Unknown"
    assert detection.risk_bucket is RiskBucket.LOW
    assert detection.detected_language == "unknown"
    assert detection.analysis == DEFAULT_ANALYSIS
    assert detection.recommended_action == DEFAULT_RECOMMENDED_ACTION
    assert detection.created_at == "unknown"
    assert detection.has_known_time is False


def test_identifier_precedence():
    assert normalize({"mai-scam": "pk", "detection_id": "run", "id": "legacy"}).id == "pk"
    assert normalize({"detection_id": "run", "id": "legacy"}).id == "run"
    assert normalize({"id": "legacy"}).id == "legacy"


def test_identifier_fingerprint_is_stable_without_fallback():
    first = normalize({"content_type": "email"})
    second = normalize({"content_type": "email"})

    assert first.id == second.id
    assert first.id.startswith("detection-")


def test_detected_language_falls_back_to_target_language():
    detection = normalize({"target_language": "zh", "analysis_result": {"risk_level": "Low"}})

    assert detection.detected_language == "zh"


@pytest.mark.parametrize(
    "raw,expected",
    [
        (
            {
                "url": "https://a.example/x",
                "domain": "c.example",
                "extracted_data": {"metadata": {"domain": "b.example"}},
            },
            "b.example",
        ),
        ({"url": "https://a.example/x", "domain": "c.example"}, "a.example"),
        ({"url": "not a url", "domain": "c.example"}, "c.example"),
        ({"domain": "c.example"}, "c.example"),
        ({"url": ""}, None),
    ],
)
def test_domain_precedence(raw, expected):
    assert normalize(raw).domain == expected


def test_metadata_domain_used_as_url_when_url_missing():
    detection = normalize({"extracted_data": {"metadata": {"domain": "www.bk8sgasia.com"}}})

    assert detection.url == "www.bk8sgasia.com"
    assert detection.domain == "www.bk8sgasia.com"


@pytest.mark.parametrize(
    "label,bucket",
    [
        ("High", RiskBucket.HIGH),
        ("CRITICAL", RiskBucket.HIGH),
        ("very high risk", RiskBucket.HIGH),
        ("高风险", RiskBucket.HIGH),
        ("Medium", RiskBucket.MEDIUM),
        ("medium-low", RiskBucket.MEDIUM),
        ("中等", RiskBucket.MEDIUM),
        ("Low", RiskBucket.LOW),
        ("", RiskBucket.LOW),
        (None, RiskBucket.LOW),
        (3, RiskBucket.LOW),
    ],
)
def test_risk_bucket(label, bucket):
    assert risk_bucket(label) is bucket


def test_risk_level_label_is_preserved_for_display():
    detection = normalize({"analysis_result": {"risk_level": "Critical"}})

    assert detection.risk_level == "Critical"
    assert detection.is_high_risk is True


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, ""),
        ("  text  ", "text"),
        (42, "42"),
        (True, "True"),
        ({"nested": "value"}, ""),
        (["a", "b"], ""),
        (b"bytes", ""),
    ],
)
def test_safe_string(value, expected):
    assert safe_string(value) == expected


def test_normalize_content_type():
    assert normalize_content_type("Website") == "website"
    assert normalize_content_type("EMAIL") == "email"
    assert normalize_content_type("sms") == "sms"
    assert normalize_content_type(None) == "unknown"


def test_domain_from_url():
    assert domain_from_url("https://shoppe123.vercel.app/promo") == "shoppe123.vercel.app"
    assert domain_from_url("http://host") == "host"
    assert domain_from_url("host/path") is None
    assert domain_from_url("") is None


def test_normalize_timestamp():
    assert normalize_timestamp("2025-09-07T06:59:05.154062") == "2025-09-07T06:59:05.154062"
    assert normalize_timestamp("2025-09-07T06:59:05Z") == "2025-09-07T06:59:05Z"
    assert normalize_timestamp(datetime(2025, 9, 7, 6, 59)) == "2025-09-07T06:59:00"
    assert normalize_timestamp("yesterday") == "unknown"
    assert normalize_timestamp(None) == "unknown"
    assert normalize_timestamp("2025-13-45T00:00:00") == "unknown"


def test_created_at_falls_back_to_timestamp():
    detection = normalize({"timestamp": "2025-09-07T06:57:37.543988"})

    assert detection.created_at == "2025-09-07T06:57:37.543988"


def test_non_mapping_input_yields_default_detection():
    detection = normalize("garbage", fallback_id="detection-0")

    assert detection.id == "detection-0"
    assert detection.content_type == "unknown"


def test_normalize_many_assigns_positional_fallback_ids():
    detections = normalize_many([{}, {"mai-scam": "abc"}, None])

    assert [detection.id for detection in detections] == ["detection-0", "abc", "detection-2"]


def test_normalize_many_keeps_ids_unique():
    detections = normalize_many([{"mai-scam": "dup"}, {"mai-scam": "dup"}, {"mai-scam": "dup-1"}])

    ids = [detection.id for detection in detections]
    assert ids == ["dup", "dup-1", "dup-1-1"]
    assert len(set(ids)) == len(ids)


@pytest.mark.parametrize("payload", [None, "records", b"records", {"items": []}])
def test_normalize_many_rejects_non_sequences(payload):
    assert normalize_many(payload) == []


def test_normalize_many_accepts_generators():
    detections = normalize_many(_website_record(**{"mai-scam": f"id-{index}"}) for index in range(3))

    assert [detection.id for detection in detections] == ["id-0", "id-1", "id-2"]


def test_normalize_never_raises_on_arbitrary_field_types():
    rng = random.Random(20250907)
    junk_values = [None, 0, -1, 3.5, True, "", " ", "High", [], ["x"], {}, {"k": "v"}, b"\x00", ("t",)]
    keys = [
        "mai-scam",
        "detection_id",
        "id",
        "content_type",
        "url",
        "domain",
        "platform",
        "post_url",
        "created_at",
        "timestamp",
        "target_language",
        "analysis_result",
        "extracted_data",
    ]

    records = []
    for _ in range(200):
        record = {key: rng.choice(junk_values) for key in keys if rng.random() < 0.7}
        if rng.random() < 0.5:
            record["analysis_result"] = {
                "risk_level": rng.choice(junk_values),
                "detected_language": rng.choice(junk_values),
                "analysis": rng.choice(junk_values),
            }
        records.append(record)

    detections = normalize_many(records)

    assert len(detections) == len(records)
    for detection in detections:
        assert isinstance(detection, CanonicalDetection)
        assert detection.content_type
        assert detection.risk_level
        assert detection.detected_language
    assert len({detection.id for detection in detections}) == len(detections)
