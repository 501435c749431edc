"""Service layer wiring the detection store to the report pipeline."""

from .dashboard import DashboardResult, DashboardService, DashboardUnavailableError

__all__ = ["DashboardResult", "DashboardService", "DashboardUnavailableError"]
