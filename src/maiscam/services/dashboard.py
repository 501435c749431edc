"""Dashboard orchestration: read one page of detections and build its report."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from maiscam.observability import Observability, get_observability
from maiscam.reports.models import Report
from maiscam.reports.pipeline import ReportOptions, process
from maiscam.services.factories import build_detection_source
from maiscam.settings import Settings, get_settings
from maiscam.store.detection_source import (
    DetectionPage,
    DetectionSource,
    DetectionSourceError,
    DetectionSourceNotConfigured,
)

LOGGER = logging.getLogger(__name__)


class DashboardUnavailableError(RuntimeError):
    """Raised when no report can be produced for the dashboard.

    Attributes:
        reason: ``not_configured``, ``no_data`` or ``store_error``.
        configured: Whether the detection store is configured at all.
    """

    def __init__(self, message: str, *, reason: str, configured: bool) -> None:
        super().__init__(message)
        self.reason = reason
        self.configured = configured


@dataclass(slots=True)
class DashboardResult:
    """Report plus the paging details of the page it was built from."""

    report: Report
    record_count: int
    has_more: bool
    cursor: Optional[str]
    scanned_count: int


class DashboardService:
    """Coordinates the detection store and the report pipeline."""

    def __init__(
        self,
        *,
        source_factory: Callable[[], DetectionSource] | None = None,
        settings: Settings | None = None,
        observability: Observability | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._source_factory = source_factory or self._default_source_factory
        self._source: DetectionSource | None = None
        self.options = ReportOptions.from_settings(self.settings.report)
        self.observability = observability or get_observability(component="dashboard", settings=self.settings)

    def _default_source_factory(self) -> DetectionSource:
        return build_detection_source(self.settings)

    def _resolve_source(self) -> DetectionSource:
        if self._source is None:
            self._source = self._source_factory()
        return self._source

    def is_configured(self) -> bool:
        """Return True when a detection source can be built from current settings."""

        try:
            self._resolve_source()
        except DetectionSourceNotConfigured:
            return False
        return True

    def load(self, *, limit: int | None = None, cursor: str | None = None) -> DashboardResult:
        """Fetch one page of detections and aggregate it.

        Args:
            limit: Page size; defaults to ``store.page_limit``.
            cursor: Opaque continuation token from a previous result.

        Returns:
            :class:`DashboardResult` for the page.

        Raises:
            DashboardUnavailableError: When the store is not configured, fails,
                or has no records left to return.
        """

        page_limit = limit or self.settings.store.page_limit
        try:
            source = self._resolve_source()
        except DetectionSourceNotConfigured as exc:
            LOGGER.warning("Detection store not configured: %s", exc)
            self.observability.increment("dashboard.unavailable", tags={"reason": "not_configured"})
            raise DashboardUnavailableError(str(exc), reason="not_configured", configured=False) from exc

        started = time.perf_counter()
        try:
            page: DetectionPage = source.fetch_page(limit=page_limit, cursor=cursor)
        except DetectionSourceNotConfigured as exc:
            self.observability.increment("dashboard.unavailable", tags={"reason": "not_configured"})
            raise DashboardUnavailableError(str(exc), reason="not_configured", configured=False) from exc
        except DetectionSourceError as exc:
            LOGGER.error("Detection store read failed: %s", exc)
            self.observability.increment("dashboard.unavailable", tags={"reason": "store_error"})
            raise DashboardUnavailableError(str(exc), reason="store_error", configured=True) from exc

        # A page of incomplete documents still hands back its cursor.
        if not page.records and not page.has_more:
            self.observability.increment("dashboard.unavailable", tags={"reason": "no_data"})
            raise DashboardUnavailableError(
                "Detection store is configured but returned no records",
                reason="no_data",
                configured=True,
            )

        result = self.build(page.records, page=page)
        elapsed_ms = (time.perf_counter() - started) * 1000
        self.observability.record_timing("dashboard.load_ms", elapsed_ms)
        self.observability.emit_event(
            "dashboard.loaded",
            record_count=result.record_count,
            scanned_count=page.scanned_count,
            has_more=page.has_more,
            high_risk=result.report.stats.high_risk_detections,
        )
        return result

    def build(self, records: Iterable[Any], *, page: DetectionPage | None = None) -> DashboardResult:
        """Aggregate records that were obtained some other way (uploads, replays)."""

        records = list(records)
        report = process(records, self.options)
        return DashboardResult(
            report=report,
            record_count=len(records),
            has_more=bool(page and page.has_more),
            cursor=page.next_cursor if page else None,
            scanned_count=page.scanned_count if page else len(records),
        )


__all__ = ["DashboardResult", "DashboardService", "DashboardUnavailableError"]
