"""Readers for the scam detection store."""

from .detection_source import (
    DetectionPage,
    DetectionSource,
    DetectionSourceError,
    DetectionSourceNotConfigured,
    FirestoreDetectionSource,
    LocalDetectionSource,
)

__all__ = [
    "DetectionPage",
    "DetectionSource",
    "DetectionSourceError",
    "DetectionSourceNotConfigured",
    "FirestoreDetectionSource",
    "LocalDetectionSource",
]
