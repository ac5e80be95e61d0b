"""CLI parser and command behaviour tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from assetaudit import cli
from assetaudit.cli import _build_parser
from assetaudit.models import CheckOutcome, CheckStatus, ReconciliationResult


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "check"])
    assert args.verbose is True
    assert args.command == "check"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["check", "--verbose"])
    assert args.verbose is True


def test_cli_collects_repeated_scenes() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["check", "game", "--scene", "Assets/A.unity", "--scene", "Assets/B.unity", "--log", "Editor.log"]
    )
    assert args.path == "game"
    assert args.scenes == ["Assets/A.unity", "Assets/B.unity"]
    assert args.log == Path("Editor.log")
    assert args.fail_on_findings is False


def test_cli_rejects_log_and_build_report_together() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["check", "--log", "a.log", "--build-report", "r.json"])


def test_extract_prints_assets(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log = tmp_path / "Editor.log"
    log.write_text(
        "title\nBuild Report\n 1.0 kb\t 50.0% Assets/Foo/bar.png\n-----\n", encoding="utf-8"
    )

    cli.main(["extract", str(tmp_path), "--log", str(log)])

    assert capsys.readouterr().out.splitlines() == ["Assets/Foo/bar.png"]


def test_extract_without_report_exits_nonzero(tmp_path: Path) -> None:
    log = tmp_path / "Editor.log"
    log.write_text("nothing here\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["extract", str(tmp_path), "--log", str(log)])

    assert excinfo.value.code == 1


class _StubAuditor:
    outcome = CheckOutcome(status=CheckStatus.SKIPPED, reason="no-build-report")

    def run_check(self, path: str, **options: object) -> CheckOutcome:
        return self.outcome


def test_check_prints_skip_reason(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli, "Auditor", _StubAuditor)

    cli.main(["check"])

    assert capsys.readouterr().out.strip() == "Check skipped (no-build-report)"


def test_check_fail_on_findings(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    class _Findings(_StubAuditor):
        outcome = CheckOutcome(
            status=CheckStatus.WARNING,
            result=ReconciliationResult(unversioned_in_build=frozenset({"Assets/a.png"})),
        )

    monkeypatch.setattr(cli, "Auditor", _Findings)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["check", "--fail-on-findings"])

    assert excinfo.value.code == 1
    assert "0 ignored, 1 unversioned assets in build" in capsys.readouterr().out


def test_log_file_records_debug_detail_without_verbose(tmp_path: Path) -> None:
    log = tmp_path / "Editor.log"
    log.write_text("title\nBuild Report\n 1.0 kb\t 50.0% Assets/a.png\n---\n", encoding="utf-8")
    audit_log = tmp_path / "audit.log"

    cli.main(["--log-file", str(audit_log), "extract", str(tmp_path), "--log", str(log)])

    for handler in logging.getLogger("assetaudit").handlers:
        handler.flush()
    assert "found a build report at line: 2" in audit_log.read_text(encoding="utf-8")


def _write_build(project: Path) -> Path:
    (project / "Assets").mkdir(parents=True)
    (project / "Assets" / "a.png").write_text("", encoding="utf-8")
    log = project.parent / "Editor.log"
    log.write_text("title\nBuild Report\n 1.0 kb\t 50.0% Assets/a.png\n---\n", encoding="utf-8")
    return log


def test_verify_outside_repository_is_skipped(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project = tmp_path / "game"
    log = _write_build(project)

    cli.main(["verify", str(project), "--log", str(log)])

    assert capsys.readouterr().out.strip() == "Verify skipped (vcs-unavailable)"


def test_verify_without_git_executable_is_skipped(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project = tmp_path / "game"
    log = _write_build(project)
    (project / ".git").mkdir()
    (project / ".assetaudit.yml").write_text(
        "vcs:\n  executable: assetaudit-no-such-git\n", encoding="utf-8"
    )

    cli.main(["verify", str(project), "--log", str(log)])

    assert capsys.readouterr().out.strip() == "Verify skipped (vcs-unavailable)"
