"""Detection normalization: raw store records to canonical detections."""

from .normalizer import normalize, normalize_many, risk_bucket
from .schema import CanonicalDetection, ContentType, DetectionImage, RiskBucket

__all__ = [
    "CanonicalDetection",
    "ContentType",
    "DetectionImage",
    "RiskBucket",
    "normalize",
    "normalize_many",
    "risk_bucket",
]
