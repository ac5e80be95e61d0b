"""Sinks that present reconciliation results."""

from __future__ import annotations

import logging
from typing import Iterable, List, Protocol

from ..logging import get_logger
from ..models import ReconciliationResult


class ReportSink(Protocol):
    def report(self, result: ReconciliationResult) -> None: ...


def format_bucket(label: str, paths: Iterable[str]) -> str:
    """Render one result bucket as a count line followed by its sorted members."""
    members = sorted(paths)
    lines = [f"total {label} files in build: {len(members)}", *members]
    return "\n".join(lines)


class LoggingReportSink:
    """Writes results to the assetaudit logger.

    Ignored files are informational; unversioned files are logged as warnings
    since they usually mean a missing ``git add``.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_logger("report")

    def report(self, result: ReconciliationResult) -> None:
        if result.is_clean:
            self.logger.info("No ignored or unversioned assets in build!")
            return
        if result.ignored_in_build:
            self.logger.info("%s", format_bucket("ignored", result.ignored_in_build))
        if result.unversioned_in_build:
            self.logger.warning("%s", format_bucket("unversioned", result.unversioned_in_build))


class CollectingReportSink:
    """Keeps every reported result in memory."""

    def __init__(self) -> None:
        self.results: List[ReconciliationResult] = []

    def report(self, result: ReconciliationResult) -> None:
        self.results.append(result)


__all__ = ["CollectingReportSink", "LoggingReportSink", "ReportSink", "format_bucket"]
