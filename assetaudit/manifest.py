"""Expands packed assets into the set of files git is expected to track."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Iterable, List, Set

from .errors import AssetMissingOnDisk
from .logging import get_logger
from .models import AssetPath, ManifestBuild


class ManifestBuilder:
    """Builds the expected-file set for a build.

    Every asset that exists on disk contributes itself, its metadata companion,
    and the companion of each ancestor directory below the asset root. Assets
    the build lists but that have no file behind them (built-in resources,
    generated movie assets and the like) are reported as diagnostics instead.
    """

    def __init__(
        self,
        project_root: Path,
        *,
        asset_root: str = "Assets",
        meta_suffix: str = ".meta",
    ) -> None:
        self.project_root = project_root
        self.asset_root = asset_root.strip("/")
        self.meta_suffix = meta_suffix
        self.logger = get_logger("manifest")

    def build(self, assets: Iterable[str], scenes: Iterable[str] = ()) -> ManifestBuild:
        expected: Set[AssetPath] = set()
        visited: Set[str] = {self.asset_root}
        missing: List[AssetMissingOnDisk] = []

        for raw in (*assets, *scenes):
            if not raw or not raw.strip():
                continue
            asset = raw.rstrip("\r\n").replace("\\", "/")

            if not (self.project_root / asset).is_file():
                diagnostic = AssetMissingOnDisk(asset)
                self.logger.warning("%s", diagnostic)
                missing.append(diagnostic)
                continue

            expected.add(asset)
            expected.add(self.companion(asset))
            self._add_directories(asset, expected, visited)

        self.logger.debug(
            "Expected %d files (%d missing assets skipped)", len(expected), len(missing)
        )
        return ManifestBuild(expected=expected, missing=missing)

    def companion(self, path: str) -> str:
        """Return the metadata companion path for a file or directory."""
        return f"{path}{self.meta_suffix}"

    def _add_directories(self, asset: str, expected: Set[AssetPath], visited: Set[str]) -> None:
        directory = posixpath.dirname(asset)
        while directory and directory != self.asset_root:
            if directory not in visited:
                expected.add(self.companion(directory))
                visited.add(directory)
            directory = posixpath.dirname(directory)


__all__ = ["ManifestBuilder"]
