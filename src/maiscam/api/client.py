"""HTTP client for the dashboard API, used by scripts and front-end proxies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from maiscam.api.dashboard import CONFIGURED_HEADER
from maiscam.settings import Settings, get_settings

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DashboardFetch:
    """Outcome of a dashboard fetch; ``data`` is ``None`` when unavailable."""

    data: Optional[Dict[str, Any]]
    pagination: Optional[Dict[str, Any]] = None
    configured: bool = False
    message: Optional[str] = None


class DashboardClient:
    """Thin wrapper over ``httpx.Client`` for the ``/dashboard`` endpoints.

    Network and HTTP failures are logged and reported through
    :class:`DashboardFetch` instead of raised, so callers can fall back to an
    empty dashboard.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        resolved = settings or get_settings()
        self._client = httpx.Client(
            base_url=(base_url or resolved.api.base_url).rstrip("/"),
            timeout=timeout or resolved.api.timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "DashboardClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def is_configured(self) -> bool:
        """Return True when the server reports a configured detection store."""

        try:
            response = self._client.head("/dashboard")
        except httpx.HTTPError:
            LOGGER.warning("Dashboard configuration check failed", exc_info=True)
            return False
        return response.status_code == 200 and response.headers.get(CONFIGURED_HEADER, "false") == "true"

    def fetch_dashboard(self, *, limit: int = 100, cursor: str | None = None) -> DashboardFetch:
        """Fetch one page of dashboard data."""

        params: Dict[str, Any] = {"limit": limit}
        if cursor:
            params["cursor"] = cursor
        try:
            response = self._client.get("/dashboard", params=params)
        except httpx.HTTPError as exc:
            LOGGER.error("Error fetching dashboard data: %s", exc)
            return DashboardFetch(data=None, message=str(exc))

        try:
            payload = response.json()
        except ValueError:
            LOGGER.error("Dashboard API returned non-JSON body (status=%s)", response.status_code)
            return DashboardFetch(data=None, message=response.text)
        if not isinstance(payload, dict):
            return DashboardFetch(data=None, message="Unexpected dashboard payload")

        if response.is_success and payload.get("success") and payload.get("data") is not None:
            LOGGER.info("Fetched %s records from dashboard API", payload.get("recordCount"))
            return DashboardFetch(
                data=payload["data"],
                pagination=payload.get("pagination"),
                configured=bool(payload.get("configured", True)),
            )

        message = payload.get("message") or payload.get("error") or payload.get("detail")
        LOGGER.warning("Dashboard API request failed (status=%s): %s", response.status_code, message)
        return DashboardFetch(data=None, configured=bool(payload.get("configured")), message=message)


__all__ = ["DashboardClient", "DashboardFetch"]
