"""Configuration loading for assetaudit (.assetaudit.yml)."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".assetaudit.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ProjectConfig:
    """Layout conventions of the audited project."""

    asset_root: str = "Assets"
    meta_suffix: str = ".meta"


@dataclass
class LogConfig:
    """Where the editor writes its build log."""

    path: Optional[Path] = None
    previous_path: Optional[Path] = None

    def resolved_path(self) -> Path:
        return self.path or default_editor_log()

    def resolved_previous_path(self) -> Path:
        if self.previous_path is not None:
            return self.previous_path
        current = self.resolved_path()
        return current.with_name(f"{current.stem}-prev{current.suffix}")


@dataclass
class VCSConfig:
    """Git invocation settings."""

    executable: str = "git"
    probe_timeout: float = 10.0
    line_timeout: float = 30.0
    yield_interval: float = 0.5
    max_argument_length: int = 2000


@dataclass
class ReportConfig:
    """Human-readable build report output."""

    enabled: bool = True
    output_dir: Optional[Path] = None
    templates_dir: Optional[Path] = None


@dataclass
class AuditConfig:
    """Represents the settings defined in .assetaudit.yml."""

    root: Path
    project: ProjectConfig = field(default_factory=ProjectConfig)
    log: LogConfig = field(default_factory=LogConfig)
    vcs: VCSConfig = field(default_factory=VCSConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    scenes: List[str] = field(default_factory=list)


def default_editor_log(platform: str | None = None, home: Path | None = None) -> Path:
    """Return the editor log location for the given platform."""
    platform = platform or sys.platform
    home = home or Path.home()
    if platform.startswith("win"):
        local = os.environ.get("LOCALAPPDATA")
        base = Path(local) if local else home / "AppData" / "Local"
        return base / "Unity" / "Editor" / "Editor.log"
    if platform == "darwin":
        return home / "Library" / "Logs" / "Unity" / "Editor.log"
    return home / ".config" / "unity3d" / "Editor.log"


def load_config(config_path: Path) -> AuditConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AuditConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project = ProjectConfig()
    project_data = _as_dict(data.get("project"))
    if project_data:
        project.asset_root = (
            _as_str(project_data.get("asset_root")) or project.asset_root
        ).strip("/")
        project.meta_suffix = _as_str(project_data.get("meta_suffix")) or project.meta_suffix

    log = LogConfig()
    log_data = _as_dict(data.get("log"))
    if log_data:
        log.path = _as_path(root, log_data.get("path"))
        log.previous_path = _as_path(root, log_data.get("previous_path"))

    vcs = VCSConfig()
    vcs_data = _as_dict(data.get("vcs"))
    if vcs_data:
        vcs.executable = _as_str(vcs_data.get("executable")) or vcs.executable
        probe_timeout = _as_float(vcs_data.get("probe_timeout"))
        if probe_timeout is not None:
            vcs.probe_timeout = _require_positive("vcs.probe_timeout", probe_timeout)
        line_timeout = _as_float(vcs_data.get("line_timeout"))
        if line_timeout is not None:
            vcs.line_timeout = _require_positive("vcs.line_timeout", line_timeout)
        interval = _as_float(vcs_data.get("yield_interval"))
        if interval is not None:
            vcs.yield_interval = interval
        max_length = _as_int(vcs_data.get("max_argument_length"))
        if max_length is not None:
            vcs.max_argument_length = int(
                _require_positive("vcs.max_argument_length", max_length)
            )

    report = ReportConfig()
    report_data = _as_dict(data.get("report"))
    if report_data:
        enabled = _as_bool(report_data.get("enabled"))
        if enabled is not None:
            report.enabled = enabled
        report.output_dir = _as_path(root, report_data.get("output_dir"))
        report.templates_dir = _as_path(root, report_data.get("templates_dir"))

    scenes = [scene.replace("\\", "/") for scene in _as_str_list(data.get("scenes"))]

    return AuditConfig(
        root=root,
        project=project,
        log=log,
        vcs=vcs,
        report=report,
        scenes=scenes,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else root / path


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _require_positive(key: str, value: float) -> float:
    if value <= 0:
        raise ConfigError(f"{key} must be greater than zero, got {value}")
    return value


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
