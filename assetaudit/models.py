"""Core data models shared across assetaudit components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Optional

from .errors import AssetMissingOnDisk

AssetPath = str


class MarkerState(Enum):
    """Tracking state for one bounded region of the build log."""

    FOUND = "found"
    ENDED = "ended"


@dataclass
class ExtractedLog:
    """Regions and asset entries recovered from one pass over a build log."""

    report: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    assets: List[AssetPath] = field(default_factory=list)
    report_line: Optional[int] = None

    @property
    def found(self) -> bool:
        return bool(self.report)

    @property
    def combined_text(self) -> str:
        lines = [*self.dependencies, *self.report]
        return "\n".join(lines) + "\n" if lines else ""


@dataclass
class ManifestBuild:
    """Expected files for one build plus the assets that were skipped."""

    expected: set[AssetPath]
    missing: List[AssetMissingOnDisk] = field(default_factory=list)


@dataclass(frozen=True)
class ReconciliationResult:
    """Ignored and unversioned assets found in a build."""

    ignored_in_build: FrozenSet[AssetPath] = frozenset()
    unversioned_in_build: FrozenSet[AssetPath] = frozenset()
    remaining: FrozenSet[AssetPath] = frozenset()

    @property
    def count(self) -> int:
        return len(self.ignored_in_build) + len(self.unversioned_in_build)

    @property
    def is_clean(self) -> bool:
        return self.count == 0


class CheckStatus(str, Enum):
    """Outcome class of a check run."""

    SKIPPED = "skipped"
    CLEAN = "clean"
    WARNING = "warning"


@dataclass
class CheckOutcome:
    """Result of one audit run, including why it was skipped when it was."""

    status: CheckStatus
    reason: Optional[str] = None
    result: Optional[ReconciliationResult] = None
    missing: List[AssetMissingOnDisk] = field(default_factory=list)
    report_path: Optional[Path] = None
    unmatched: List[str] = field(default_factory=list)
