"""Pipeline orchestration for post-build audits."""

from __future__ import annotations

import asyncio
import functools
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol, Sequence

from .config import AuditConfig, VCSConfig, load_config
from .errors import CommandTimeout, EnvironmentUnavailable
from .logging import get_logger
from .manifest import ManifestBuilder
from .models import CheckOutcome, CheckStatus, ManifestBuild
from .providers import AssetListProvider, resolve_provider
from .reporting import BuildReportWriter, LoggingReportSink, ReportSink
from .vcs import CommandRunner, TrackedFileVerifier, VCSReconciler, find_repository
from .vcs.reconciler import LineStream


class VCSRunner(Protocol):
    def probe_available(self) -> bool: ...

    async def stream(self, args: Sequence[str]) -> LineStream: ...


def _default_runner(project_root: Path, vcs: VCSConfig) -> VCSRunner:
    return CommandRunner(
        project_root,
        executable=vcs.executable,
        line_timeout=vcs.line_timeout,
        yield_interval=vcs.yield_interval,
        probe_timeout=vcs.probe_timeout,
    )


class Auditor:
    """Coordinates extraction, manifest expansion and reconciliation for one project."""

    def __init__(
        self,
        *,
        runner_factory: Callable[[Path, VCSConfig], VCSRunner] | None = None,
        sink: ReportSink | None = None,
        report_writer: BuildReportWriter | None = None,
        repository_finder: Callable[[Path], Optional[Path]] = find_repository,
        verifier_runner: Callable[..., str] | None = None,
    ) -> None:
        self._runner_factory = runner_factory or _default_runner
        self.sink = sink or LoggingReportSink()
        self._report_writer = report_writer
        self._find_repository = repository_finder
        self._verifier_runner = verifier_runner
        self.logger = get_logger("orchestrator")

    def run_check(self, path: str, **options: object) -> CheckOutcome:
        """Synchronous wrapper around :meth:`check`."""
        return asyncio.run(self.check(path, **options))  # type: ignore[arg-type]

    def run_post_build(self, path: str, build_path: Path, **options: object) -> CheckOutcome:
        """Synchronous wrapper around :meth:`after_build`."""
        return asyncio.run(self.after_build(path, build_path, **options))  # type: ignore[arg-type]

    async def after_build(
        self,
        path: str,
        build_path: Path,
        *,
        target: str = "",
        succeeded: bool = True,
        **options: object,
    ) -> CheckOutcome:
        """Audit a build that just finished.

        The editor flushes its log one tick after the build callback returns,
        so the log is only read after yielding once to the loop.
        """
        if not succeeded:
            self.logger.info("Build did not succeed; skipping audit")
            return CheckOutcome(status=CheckStatus.SKIPPED, reason="build-failed")
        await asyncio.sleep(0)
        return await self.check(path, build_path=build_path, target=target, **options)  # type: ignore[arg-type]

    async def check(
        self,
        path: str,
        *,
        log_path: Path | None = None,
        build_report: Path | None = None,
        assets: Iterable[str] | None = None,
        scenes: Iterable[str] | None = None,
        build_path: Path | None = None,
        target: str = "",
        report_dir: Path | None = None,
    ) -> CheckOutcome:
        """Run one audit; blocking file access and the git availability check run off the event loop."""
        loop = asyncio.get_running_loop()
        project_root = Path(path).expanduser().resolve()
        self.logger.info("Starting audit for %s", project_root)
        config = await loop.run_in_executor(None, load_config, project_root)

        runner = self._runner_factory(project_root, config.vcs)
        available = await loop.run_in_executor(
            None, self._vcs_available, project_root, runner
        )
        if not available:
            return CheckOutcome(status=CheckStatus.SKIPPED, reason="vcs-unavailable")

        provider = resolve_provider(
            config, log_path=log_path, build_report=build_report, assets=assets
        )
        packed = await loop.run_in_executor(None, provider.provide)
        if packed is None:
            self.logger.warning("no builds have been run yet.")
            return CheckOutcome(status=CheckStatus.SKIPPED, reason="no-build-report")

        scene_list = list(scenes) if scenes is not None else list(config.scenes)
        report_path = await loop.run_in_executor(
            None,
            functools.partial(
                self._write_report,
                config,
                provider,
                scene_list,
                build_path=build_path,
                target=target,
                report_dir=report_dir,
            ),
        )

        if not packed:
            self.logger.info("no assets to check.")
            return CheckOutcome(
                status=CheckStatus.SKIPPED, reason="no-assets", report_path=report_path
            )

        manifest = await loop.run_in_executor(
            None, self._build_manifest, config, packed, scene_list
        )
        try:
            result = await VCSReconciler(runner).reconcile(manifest.expected)
        except (EnvironmentUnavailable, CommandTimeout) as exc:
            self.logger.warning("Audit abandoned: %s", exc)
            return CheckOutcome(
                status=CheckStatus.SKIPPED,
                reason="vcs-failed",
                missing=manifest.missing,
                report_path=report_path,
            )

        self.sink.report(result)
        status = CheckStatus.CLEAN if result.is_clean else CheckStatus.WARNING
        return CheckOutcome(
            status=status,
            result=result,
            missing=manifest.missing,
            report_path=report_path,
        )

    def verify_tracked(
        self,
        path: str,
        *,
        log_path: Path | None = None,
        build_report: Path | None = None,
        scenes: Iterable[str] | None = None,
    ) -> CheckOutcome:
        """Ask git's index about every expected file; ``unmatched`` lists the unknown ones."""
        project_root = Path(path).expanduser().resolve()
        config = load_config(project_root)
        runner = self._runner_factory(project_root, config.vcs)
        if not self._vcs_available(project_root, runner):
            return CheckOutcome(status=CheckStatus.SKIPPED, reason="vcs-unavailable")

        provider = resolve_provider(config, log_path=log_path, build_report=build_report)
        packed = provider.provide()
        if packed is None:
            return CheckOutcome(status=CheckStatus.SKIPPED, reason="no-build-report")
        if not packed:
            return CheckOutcome(status=CheckStatus.SKIPPED, reason="no-assets")

        scene_list = list(scenes) if scenes is not None else list(config.scenes)
        manifest = self._build_manifest(config, packed, scene_list)
        verifier = TrackedFileVerifier(
            project_root,
            executable=config.vcs.executable,
            max_argument_length=config.vcs.max_argument_length,
            runner=self._verifier_runner,
        )
        try:
            unmatched = verifier.verify(manifest.expected)
        except EnvironmentUnavailable as exc:
            self.logger.warning("Verification abandoned: %s", exc)
            return CheckOutcome(
                status=CheckStatus.SKIPPED, reason="vcs-failed", missing=manifest.missing
            )

        if unmatched:
            for asset in unmatched:
                self.logger.warning("unversioned asset in build: %s", asset)
        else:
            self.logger.info("No unversioned assets in build!")
        return CheckOutcome(
            status=CheckStatus.WARNING if unmatched else CheckStatus.CLEAN,
            missing=manifest.missing,
            unmatched=unmatched,
        )

    # ------------------------------------------------------------------
    # Internals

    def _vcs_available(self, project_root: Path, runner: VCSRunner) -> bool:
        if not runner.probe_available():
            self.logger.warning("git is not available; skipping audit")
            return False
        if self._find_repository(project_root) is None:
            self.logger.info("%s is not inside a git repository; skipping audit", project_root)
            return False
        return True

    @staticmethod
    def _build_manifest(config: AuditConfig, packed: Sequence[str], scenes: Sequence[str]) -> ManifestBuild:
        builder = ManifestBuilder(
            config.root,
            asset_root=config.project.asset_root,
            meta_suffix=config.project.meta_suffix,
        )
        return builder.build(packed, scenes)

    def _write_report(
        self,
        config: AuditConfig,
        provider: AssetListProvider,
        scenes: Sequence[str],
        *,
        build_path: Path | None,
        target: str,
        report_dir: Path | None,
    ) -> Optional[Path]:
        extracted = provider.build_log()
        if extracted is None or not config.report.enabled:
            return None
        output_dir = report_dir or config.report.output_dir
        if build_path is None and output_dir is None:
            return None
        writer = self._report_writer or BuildReportWriter(config.report.templates_dir)
        return writer.write(
            extracted,
            scenes,
            build_path or output_dir,  # type: ignore[arg-type]
            target=target,
            output_dir=output_dir,
        )


__all__ = ["Auditor"]
