"""Writes the human-readable build report next to the build output."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from jinja2 import Environment, FileSystemLoader

from ..errors import OutputWriteFailure
from ..logging import get_logger
from ..models import ExtractedLog

_DEFAULT_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"
_TEMPLATE_NAME = "build_report.j2"
_SIBLING_TARGET_PREFIXES = ("standalone", "android")


def report_filename(moment: datetime) -> str:
    """Return ``build <ISO timestamp>.log`` with colons made filesystem safe."""
    stamp = moment.strftime("%Y-%m-%dT%H:%M:%S").replace(":", "-")
    return f"build {stamp}.log"


def report_directory(build_path: Path, target: str = "") -> Path:
    """Return where the report for ``target`` belongs.

    Standalone and Android builds produce a file (or an executable next to a
    data folder), so the report goes beside it; other targets build into a
    directory and the report goes inside.
    """
    if target.lower().startswith(_SIBLING_TARGET_PREFIXES):
        return build_path.parent
    return build_path


class BuildReportWriter:
    """Renders scenes, dependency listing and build report into one log file."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.templates_dir = templates_dir
        self._clock = clock or (lambda: datetime.now(UTC))
        self._env = self._create_env(templates_dir)
        self.logger = get_logger("report.writer")

    def render(self, extracted: ExtractedLog, scenes: Iterable[str], generated_at: datetime) -> str:
        template = self._env.get_template(_TEMPLATE_NAME)
        return template.render(
            generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%SZ"),
            scenes=list(scenes),
            dependencies=extracted.dependencies,
            report=extracted.report,
        )

    def write(
        self,
        extracted: ExtractedLog,
        scenes: Iterable[str],
        build_path: Path,
        *,
        target: str = "",
        output_dir: Path | None = None,
    ) -> Optional[Path]:
        """Write the report and return its path, or None when writing failed."""
        moment = self._clock()
        directory = output_dir or report_directory(build_path, target)
        output_path = directory / report_filename(moment)
        try:
            content = self.render(extracted, scenes, moment)
            directory.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            failure = OutputWriteFailure(output_path, str(exc))
            self.logger.error("%s (target %s)", failure, target or "unknown")
            return None
        self.logger.info("Build report written to %s", output_path)
        return output_path

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(_DEFAULT_TEMPLATES))
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


__all__ = ["BuildReportWriter", "report_directory", "report_filename"]
