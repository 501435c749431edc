"""Command-line entry point that prints a dashboard report as JSON.

Reads raw detection records either from a JSON export (``--input``) or from
one page of the configured detection store, and writes the aggregated report.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List

from maiscam.observability import configure_logging
from maiscam.services.dashboard import DashboardService, DashboardUnavailableError
from maiscam.settings import get_settings

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Return CLI arguments describing the record source and output.

    Args:
        argv: Optional list of CLI arguments. When ``None``, defaults to ``sys.argv``.

    Returns:
        Parsed :class:`argparse.Namespace` containing CLI options.
    """

    parser = argparse.ArgumentParser(description="Aggregate scam detections into a dashboard report")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="JSON file holding a list of raw detection records (defaults to the configured store)",
    )
    parser.add_argument("--limit", type=int, default=None, help="Page size when reading from the store")
    parser.add_argument("--cursor", default=None, help="Continuation cursor when reading from the store")
    parser.add_argument("--output", type=Path, default=None, help="Write the report here instead of stdout")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (0 for compact output)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override runtime.log_level",
    )
    return parser.parse_args(argv)


def _read_records(path: Path) -> List[Any]:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if isinstance(payload, dict):
        payload = payload.get("items", [])
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a JSON list of detection records")
    return payload


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return a process exit code."""

    args = parse_args(argv)
    configure_logging(args.log_level or get_settings().log_level)
    service = DashboardService()

    try:
        if args.input:
            result = service.build(_read_records(args.input))
        else:
            result = service.load(limit=args.limit, cursor=args.cursor)
    except DashboardUnavailableError as exc:
        LOGGER.error("Dashboard unavailable (%s): %s", exc.reason, exc)
        return 2
    except (OSError, ValueError) as exc:
        LOGGER.error("Unable to read detection records: %s", exc)
        return 1

    document = {
        "recordCount": result.record_count,
        "pagination": {
            "hasMore": result.has_more,
            "cursor": result.cursor,
            "scannedCount": result.scanned_count,
        },
        "data": result.report.model_dump(mode="json", by_alias=True),
    }
    rendered = json.dumps(document, indent=args.indent or None, ensure_ascii=False)
    if args.output:
        args.output.write_text(rendered + "\n", encoding="utf-8")
        LOGGER.info("Wrote report for %s records to %s", result.record_count, args.output)
    else:
        sys.stdout.write(rendered + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
