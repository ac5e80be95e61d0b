"""Error taxonomy for build audits."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class AuditError(RuntimeError):
    """Base class for failures raised while auditing a build."""


class EnvironmentUnavailable(AuditError):
    """Raised when the VCS tool is missing or the project is not a repository."""


class LogUnavailable(AuditError):
    """Raised when the build log cannot be located or read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"build log unavailable at {path}: {reason}")
        self.path = path
        self.reason = reason


class OutputWriteFailure(AuditError):
    """Raised when the human-readable build report cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"build report could not be written to {path}: {reason}")
        self.path = path
        self.reason = reason


class CommandTimeout(AuditError):
    """Raised when a VCS command stops producing output within the allowed wait."""

    def __init__(self, args: list[str], timeout: float) -> None:
        super().__init__(f"'{' '.join(args)}' produced no output for {timeout:g}s")
        self.args_list = args
        self.timeout = timeout


@dataclass(frozen=True)
class AssetMissingOnDisk:
    """Diagnostic for a build-listed asset that has no backing file."""

    path: str

    def __str__(self) -> str:
        return f"doesn't exist: '{self.path}'"


__all__ = [
    "AssetMissingOnDisk",
    "AuditError",
    "CommandTimeout",
    "EnvironmentUnavailable",
    "LogUnavailable",
    "OutputWriteFailure",
]
