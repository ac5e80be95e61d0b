"""Adapters for asset lists that arrive as structured data instead of log text."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..logging import get_logger
from ..models import AssetPath
from .base import AssetListProvider

_FAILED_RESULTS = {"failed", "cancelled", "canceled"}


class StaticAssetListProvider(AssetListProvider):
    """Serves an asset list handed over directly by the build pipeline."""

    name = "static"

    def __init__(self, assets: Iterable[str]) -> None:
        self._assets = [_normalise(asset) for asset in assets]

    def provide(self) -> Optional[List[AssetPath]]:
        return [asset for asset in self._assets if asset]


class StructuredReportProvider(AssetListProvider):
    """Reads packed assets from a JSON build report.

    Accepts either an object shaped like the editor's build report
    (``summary.result`` plus ``packedAssets[].contents[].sourceAssetPath``,
    snake_case keys work too) or a bare JSON list of asset paths.
    """

    name = "build-report"

    def __init__(self, source: Path | Mapping[str, Any] | Sequence[Any]) -> None:
        self._source = source
        self.logger = get_logger("providers.structured")

    def provide(self) -> Optional[List[AssetPath]]:
        payload = self._load()
        if payload is None:
            return None
        if isinstance(payload, list):
            return _collect_paths(payload)
        if not isinstance(payload, Mapping):
            self.logger.warning("Unsupported build report payload: %s", type(payload).__name__)
            return None

        summary = payload.get("summary")
        if isinstance(summary, Mapping):
            result = str(summary.get("result", "")).strip().lower()
            if result in _FAILED_RESULTS:
                self.logger.info("Build result was %s; nothing to audit", result)
                return None

        packed = payload.get("packedAssets", payload.get("packed_assets"))
        if not isinstance(packed, list):
            return []
        assets: List[AssetPath] = []
        for packed_asset in packed:
            if not isinstance(packed_asset, Mapping):
                continue
            contents = packed_asset.get("contents")
            if not isinstance(contents, list):
                continue
            for info in contents:
                if not isinstance(info, Mapping):
                    continue
                source_path = info.get("sourceAssetPath", info.get("source_asset_path"))
                if isinstance(source_path, str) and source_path.strip():
                    assets.append(_normalise(source_path))
        return assets

    def _load(self) -> Any:
        if not isinstance(self._source, Path):
            return self._source
        try:
            return json.loads(self._source.read_text(encoding="utf-8"))
        except FileNotFoundError:
            self.logger.warning("Build report could not be found at: %s", self._source)
            return None
        except (OSError, json.JSONDecodeError) as exc:
            self.logger.warning("Build report at %s is unreadable: %s", self._source, exc)
            return None


def _collect_paths(values: Sequence[Any]) -> List[AssetPath]:
    return [_normalise(value) for value in values if isinstance(value, str) and value.strip()]


def _normalise(path: str) -> AssetPath:
    return path.rstrip("\r\n").replace("\\", "/")


__all__ = ["StaticAssetListProvider", "StructuredReportProvider"]
