"""Tests for assetaudit.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from assetaudit.config import AuditConfig, ConfigError, default_editor_log, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, AuditConfig)
    assert config.root == tmp_path.resolve()
    assert config.project.asset_root == "Assets"
    assert config.project.meta_suffix == ".meta"
    assert config.log.path is None
    assert config.vcs.executable == "git"
    assert config.vcs.yield_interval == 0.5
    assert config.report.enabled is True
    assert config.scenes == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".assetaudit.yml"
    config_file.write_text(
        """
project:
  asset_root: "Assets/"
  meta_suffix: ".meta"
log:
  path: "logs/Editor.log"
  previous_path: "/var/log/unity/Editor-old.log"
vcs:
  executable: "/usr/local/bin/git"
  probe_timeout: 5
  line_timeout: "12.5"
  yield_interval: 0
  max_argument_length: 4000
report:
  enabled: "no"
  output_dir: "Builds/reports"
scenes:
  - "Assets\\\\Scenes\\\\Main.unity"
  - Assets/Scenes/Menu.unity
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.project.asset_root == "Assets"
    assert config.log.path == tmp_path.resolve() / "logs" / "Editor.log"
    assert config.log.previous_path == Path("/var/log/unity/Editor-old.log")
    assert config.vcs.executable == "/usr/local/bin/git"
    assert config.vcs.probe_timeout == 5.0
    assert config.vcs.line_timeout == 12.5
    assert config.vcs.yield_interval == 0.0
    assert config.vcs.max_argument_length == 4000
    assert config.report.enabled is False
    assert config.report.output_dir == tmp_path.resolve() / "Builds" / "reports"
    assert config.scenes == ["Assets/Scenes/Main.unity", "Assets/Scenes/Menu.unity"]


def test_previous_log_defaults_next_to_current(tmp_path: Path) -> None:
    config = AuditConfig(root=tmp_path)
    config.log.path = tmp_path / "Editor.log"

    assert config.log.resolved_previous_path() == tmp_path / "Editor-prev.log"


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".assetaudit.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".assetaudit.yml").write_text("project: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize("key", ["probe_timeout", "line_timeout", "max_argument_length"])
def test_load_config_rejects_zero_limits(tmp_path: Path, key: str) -> None:
    (tmp_path / ".assetaudit.yml").write_text(f"vcs:\n  {key}: 0\n", encoding="utf-8")

    with pytest.raises(ConfigError, match=f"vcs.{key}"):
        load_config(tmp_path)


def test_zero_yield_interval_is_kept(tmp_path: Path) -> None:
    (tmp_path / ".assetaudit.yml").write_text("vcs:\n  yield_interval: 0\n", encoding="utf-8")

    assert load_config(tmp_path).vcs.yield_interval == 0.0


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".assetaudit.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).vcs.executable == "git"


@pytest.mark.parametrize(
    ("platform", "parts"),
    [
        ("darwin", ("Library", "Logs", "Unity", "Editor.log")),
        ("linux", (".config", "unity3d", "Editor.log")),
    ],
)
def test_default_editor_log_per_platform(tmp_path: Path, platform: str, parts: tuple[str, ...]) -> None:
    assert default_editor_log(platform, home=tmp_path) == tmp_path.joinpath(*parts)


def test_default_editor_log_on_windows(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "Local"))

    assert default_editor_log("win32", home=tmp_path) == tmp_path / "Local" / "Unity" / "Editor" / "Editor.log"
