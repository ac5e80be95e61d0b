"""Build log scraping for packed-asset listings."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import LogUnavailable
from ..logging import get_logger
from ..models import AssetPath, ExtractedLog, MarkerState
from .base import AssetListProvider

_REPORT_START = re.compile(r"^Build Report$", re.IGNORECASE)
_DEPENDENCIES_START = re.compile(
    r"^Mono dependencies included in the build$", re.IGNORECASE
)
_DASH_RULE = re.compile(r"^-+$")

_logger = get_logger("providers.log_scraper")


def asset_entry_pattern(asset_root: str = "Assets") -> re.Pattern[str]:
    """Return the regex for ``<size> <percent>% <asset-root>/<path>`` report lines."""
    return re.compile(rf"^.*% ({re.escape(asset_root)}[/\\].*)$")


def scan_build_log(lines: Iterable[str], *, asset_root: str = "Assets") -> ExtractedLog:
    """Extract the last build report region and its asset entries in one pass.

    A start marker discards whatever the matching region accumulated so far and
    reseeds it with the preceding line, so only the last report in the log
    survives. A report still open at end of input is kept as is.
    """
    report_marker = MarkerState.ENDED
    dependency_marker = MarkerState.ENDED
    report: List[str] = []
    dependencies: List[str] = []
    report_line: Optional[int] = None
    previous: Optional[str] = None

    for number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")

        if _REPORT_START.match(line):
            _logger.debug("found a build report at line: %d", number)
            report_marker = MarkerState.FOUND
            report_line = number
            report = [previous] if previous is not None else []
        elif _DEPENDENCIES_START.match(line):
            dependency_marker = MarkerState.FOUND
            dependencies = [previous] if previous is not None else []

        if report_marker is MarkerState.FOUND:
            report.append(line)
        elif dependency_marker is MarkerState.FOUND:
            dependencies.append(line)

        if report_marker is MarkerState.FOUND and _DASH_RULE.match(line):
            report_marker = MarkerState.ENDED
        elif dependency_marker is MarkerState.FOUND and not line.strip():
            dependency_marker = MarkerState.ENDED

        previous = line

    return ExtractedLog(
        report=report,
        dependencies=dependencies,
        assets=extract_asset_paths(report, asset_root=asset_root),
        report_line=report_line,
    )


def extract_asset_paths(lines: Iterable[str], *, asset_root: str = "Assets") -> List[AssetPath]:
    """Return asset paths named by report lines, in order."""
    pattern = asset_entry_pattern(asset_root)
    assets: List[AssetPath] = []
    for line in lines:
        if not line or not line.strip():
            continue
        match = pattern.match(line.rstrip("\r\n"))
        if match is None:
            continue
        asset = match.group(1).rstrip("\r\n").replace("\\", "/")
        if asset:
            assets.append(asset)
    return assets


class LogScraperProvider(AssetListProvider):
    """Reads the packed-asset list out of the editor log.

    The log is opened read-only; on Windows CPython opens files with shared
    read/write access, so an editor still appending to the log is never blocked.
    """

    name = "editor-log"

    def __init__(
        self,
        log_path: Path,
        *,
        previous_log_path: Path | None = None,
        asset_root: str = "Assets",
    ) -> None:
        self.log_path = log_path
        self.previous_log_path = previous_log_path
        self.asset_root = asset_root
        self.logger = get_logger("providers.log_scraper")
        self._extracted: Optional[ExtractedLog] = None

    def provide(self) -> Optional[List[AssetPath]]:
        self._extracted = None
        candidates = [self.log_path]
        if self.previous_log_path is not None:
            candidates.append(self.previous_log_path)

        for path in candidates:
            try:
                extracted = self.extract(path)
            except LogUnavailable as exc:
                self.logger.warning("%s", exc)
                continue
            if extracted.found:
                self._extracted = extracted
                return list(extracted.assets)
            self.logger.debug("no build report found in %s", path)

        self.logger.info("no build report found in log.")
        return None

    def build_log(self) -> Optional[ExtractedLog]:
        return self._extracted

    def extract(self, path: Path) -> ExtractedLog:
        """Scan one log file, raising LogUnavailable when it cannot be read."""
        if not path.is_file():
            raise LogUnavailable(path, "file not found")
        try:
            with path.open("r", encoding="utf-8", errors="replace", newline="") as handle:
                return scan_build_log(handle, asset_root=self.asset_root)
        except OSError as exc:
            raise LogUnavailable(path, str(exc)) from exc


__all__ = [
    "LogScraperProvider",
    "asset_entry_pattern",
    "extract_asset_paths",
    "scan_build_log",
]
