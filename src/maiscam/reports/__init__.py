"""Dashboard report builders."""

from .models import Report
from .pipeline import ReportOptions, build_report, process

__all__ = ["Report", "ReportOptions", "build_report", "process"]
