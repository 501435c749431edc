"""Dashboard data API router."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from maiscam.reports.models import Report, ReportModel
from maiscam.services.dashboard import DashboardResult, DashboardService, DashboardUnavailableError

router = APIRouter(prefix="/dashboard", tags=["dashboard"])
LOGGER = logging.getLogger(__name__)

CONFIGURED_HEADER = "X-Store-Configured"

_STATUS_BY_REASON = {
    "not_configured": status.HTTP_400_BAD_REQUEST,
    "no_data": status.HTTP_404_NOT_FOUND,
    "store_error": status.HTTP_502_BAD_GATEWAY,
}
_ERROR_BY_REASON = {
    "not_configured": "Detection store not configured",
    "no_data": "No data found",
    "store_error": "Detection store unavailable",
}


class Pagination(ReportModel):
    """Continuation details for the page a report was built from."""

    has_more: bool
    cursor: Optional[str] = None
    scanned_count: int
    count: int


class DashboardResponse(ReportModel):
    """Envelope returned by the dashboard endpoints."""

    success: bool = True
    configured: bool = True
    data: Report
    record_count: int
    pagination: Pagination


def get_dashboard_service() -> DashboardService:
    """Dependency provider returning a DashboardService bound to current settings."""

    return DashboardService()


def _to_response(result: DashboardResult) -> DashboardResponse:
    return DashboardResponse(
        data=result.report,
        record_count=result.record_count,
        pagination=Pagination(
            has_more=result.has_more,
            cursor=result.cursor,
            scanned_count=result.scanned_count,
            count=result.record_count,
        ),
    )


def _error_response(exc: DashboardUnavailableError) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_BY_REASON.get(exc.reason, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content={
            "success": False,
            "error": _ERROR_BY_REASON.get(exc.reason, "Internal server error"),
            "configured": exc.configured,
            "message": str(exc),
        },
    )


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Aggregate one page of scam detections into dashboard data",
)
def get_dashboard(
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Page size; defaults to store.page_limit."),
    cursor: Optional[str] = Query(None, description="Continuation cursor from a previous response."),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Fetch detections from the store and return the aggregated report."""

    try:
        result = service.load(limit=limit, cursor=cursor)
    except DashboardUnavailableError as exc:
        LOGGER.info("Dashboard unavailable (%s): %s", exc.reason, exc)
        return _error_response(exc)

    LOGGER.info(
        "Dashboard built from %s records (scanned=%s has_more=%s)",
        result.record_count,
        result.scanned_count,
        result.has_more,
    )
    return _to_response(result)


@router.head("", summary="Report whether the detection store is configured")
def dashboard_configured(service: DashboardService = Depends(get_dashboard_service)) -> Response:
    """Return 200 when the store is configured, else 400."""

    configured = service.is_configured()
    return Response(
        status_code=status.HTTP_200_OK if configured else status.HTTP_400_BAD_REQUEST,
        headers={CONFIGURED_HEADER: str(configured).lower()},
    )


@router.post(
    "/process",
    response_model=DashboardResponse,
    summary="Aggregate raw detection records supplied in the request body",
)
def process_records(
    records: List[Any] = Body(..., description="Raw detection records as exported from the store."),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    """Build a report from posted records without touching the store."""

    return _to_response(service.build(records))


__all__ = ["router", "get_dashboard_service", "DashboardResponse", "Pagination"]
