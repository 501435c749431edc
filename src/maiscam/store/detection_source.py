"""Paged readers over the scam detection store.

The dashboard reads detection results in capped pages. Each page carries an
opaque cursor for the next call; the reporting pipeline never sees the
cursor and does not retry. Only documents that already carry an
``analysis_result`` are returned, mirroring the store-side filter used by the
analysis service.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from google.auth import exceptions as google_auth_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.field_path import FieldPath

from maiscam.detections.normalizer import PARTITION_KEY

LOGGER = logging.getLogger(__name__)

MAX_PAGE_LIMIT = 1000


class DetectionSourceError(RuntimeError):
    """Raised when the detection store cannot be read."""


class DetectionSourceNotConfigured(DetectionSourceError):
    """Raised when the store backend lacks the settings it needs."""


@dataclass(slots=True)
class DetectionPage:
    """One page of raw detection records."""

    records: List[Dict[str, Any]] = field(default_factory=list)
    next_cursor: Optional[str] = None
    scanned_count: int = 0

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


class DetectionSource(Protocol):
    """Anything that can hand the dashboard a page of raw detections."""

    def fetch_page(self, *, limit: int, cursor: str | None = None) -> DetectionPage:  # pragma: no cover - protocol
        ...


def _clamp_limit(limit: int) -> int:
    return max(1, min(int(limit), MAX_PAGE_LIMIT))


def _is_complete(record: Any) -> bool:
    return isinstance(record, dict) and record.get("analysis_result") is not None


class FirestoreDetectionSource:
    """Read detection documents from a Firestore collection ordered by document ID."""

    def __init__(
        self,
        *,
        project: str | None,
        collection: str,
        client: Optional[firestore.Client] = None,
    ) -> None:
        if not collection:
            raise DetectionSourceNotConfigured("FirestoreDetectionSource requires a collection name")
        if client is None and not project:
            raise DetectionSourceNotConfigured("FirestoreDetectionSource requires a project ID")

        if client is None:
            try:
                client = firestore.Client(project=project)
            except google_auth_exceptions.GoogleAuthError as exc:
                LOGGER.warning("Firestore credentials unavailable for project %s: %s", project, exc)
                raise DetectionSourceNotConfigured(f"Firestore credentials unavailable: {exc}") from exc

        self._client = client
        self._collection = self._client.collection(collection)
        self.collection_name = collection

    def fetch_page(self, *, limit: int, cursor: str | None = None) -> DetectionPage:
        """Return up to ``limit`` documents after ``cursor`` (a document ID)."""

        page_size = _clamp_limit(limit)
        try:
            query = self._collection.order_by(FieldPath.document_id()).limit(page_size)
            if cursor:
                anchor = self._collection.document(cursor).get()
                if not anchor.exists:
                    raise DetectionSourceError(f"Unknown pagination cursor: {cursor}")
                query = query.start_after(anchor)
            snapshots = list(query.stream())
        except DetectionSourceError:
            raise
        except google_auth_exceptions.GoogleAuthError as exc:
            LOGGER.warning("Firestore credentials rejected for collection %s: %s", self.collection_name, exc)
            raise DetectionSourceNotConfigured(f"Firestore credentials unavailable: {exc}") from exc
        except Exception as exc:
            LOGGER.exception("Failed to read detections from Firestore collection %s", self.collection_name)
            raise DetectionSourceError(f"Firestore read failed: {exc}") from exc

        records: List[Dict[str, Any]] = []
        for snapshot in snapshots:
            payload = snapshot.to_dict() or {}
            payload.setdefault(PARTITION_KEY, snapshot.id)
            if _is_complete(payload):
                records.append(payload)

        next_cursor = snapshots[-1].id if len(snapshots) == page_size else None
        LOGGER.debug(
            "Fetched %s/%s detections from %s (next_cursor=%s)",
            len(records),
            len(snapshots),
            self.collection_name,
            next_cursor,
        )
        return DetectionPage(records=records, next_cursor=next_cursor, scanned_count=len(snapshots))


class LocalDetectionSource:
    """Serve detections from a JSON export on disk (demo and test mode).

    The file may hold a list of records or an object with an ``items`` list.
    Cursors are stringified offsets into that list.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise DetectionSourceNotConfigured(f"Detection export not found: {self.path}")

    def _load(self) -> List[Any]:
        if not self.path.exists():
            raise DetectionSourceNotConfigured(f"Detection export not found: {self.path}")
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise DetectionSourceError(f"Unable to read detection export {self.path}: {exc}") from exc
        if isinstance(payload, dict):
            payload = payload.get("items")
        if not isinstance(payload, list):
            raise DetectionSourceError(f"Detection export {self.path} must contain a list of records")
        return payload

    def fetch_page(self, *, limit: int, cursor: str | None = None) -> DetectionPage:
        page_size = _clamp_limit(limit)
        try:
            offset = int(cursor) if cursor else 0
        except ValueError as exc:
            raise DetectionSourceError(f"Unknown pagination cursor: {cursor}") from exc
        if offset < 0:
            raise DetectionSourceError(f"Unknown pagination cursor: {cursor}")

        items = self._load()
        window = items[offset : offset + page_size]
        end = offset + len(window)
        return DetectionPage(
            records=[dict(item) for item in window if _is_complete(item)],
            next_cursor=str(end) if end < len(items) else None,
            scanned_count=len(window),
        )


__all__ = [
    "DetectionPage",
    "DetectionSource",
    "DetectionSourceError",
    "DetectionSourceNotConfigured",
    "FirestoreDetectionSource",
    "LocalDetectionSource",
]
