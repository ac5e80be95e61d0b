"""Asset-list providers and selection helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..config import AuditConfig
from .base import AssetListProvider
from .log_scraper import LogScraperProvider, extract_asset_paths, scan_build_log
from .structured import StaticAssetListProvider, StructuredReportProvider


def resolve_provider(
    config: AuditConfig,
    *,
    log_path: Path | None = None,
    build_report: Path | None = None,
    assets: Iterable[str] | None = None,
) -> AssetListProvider:
    """Pick the provider for a run: explicit assets, then a build report, then the log."""
    if assets is not None:
        return StaticAssetListProvider(assets)
    if build_report is not None:
        return StructuredReportProvider(build_report)
    if log_path is not None:
        return LogScraperProvider(log_path, asset_root=config.project.asset_root)
    return LogScraperProvider(
        config.log.resolved_path(),
        previous_log_path=config.log.resolved_previous_path(),
        asset_root=config.project.asset_root,
    )


__all__ = [
    "AssetListProvider",
    "LogScraperProvider",
    "StaticAssetListProvider",
    "StructuredReportProvider",
    "extract_asset_paths",
    "resolve_provider",
    "scan_build_log",
]
