"""CLI entrypoints for assetaudit commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .models import CheckStatus
from .orchestrator import Auditor
from .providers import resolve_provider


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--log",
        type=Path,
        default=None,
        help="Editor log to scrape (defaults to the platform's editor log).",
    )
    source.add_argument(
        "--build-report",
        type=Path,
        default=None,
        help="JSON build report or asset list to use instead of the editor log.",
    )
    parser.add_argument(
        "--scene",
        action="append",
        default=None,
        dest="scenes",
        help="Scene included in the build (repeatable; overrides configured scenes).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetaudit",
        description="Flag ignored or unversioned assets that were packed into a build.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write audit logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Reconcile the last build's assets against git.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_source_options(check_parser)
    check_parser.add_argument(
        "--report-dir",
        type=Path,
        default=None,
        help="Directory to write the human-readable build report into.",
    )
    check_parser.add_argument(
        "--build-path",
        type=Path,
        default=None,
        help="Build output location; the report is written next to or inside it.",
    )
    check_parser.add_argument(
        "--target",
        default="",
        help="Build target name (e.g. StandaloneWindows64, Android, WebGL).",
    )
    check_parser.add_argument(
        "--fail-on-findings",
        action="store_true",
        help="Exit with status 1 when ignored or unversioned assets are found.",
    )

    extract_parser = subparsers.add_parser(
        "extract",
        help="Print the asset paths listed in the last build report.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    extract_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    extract_parser.add_argument(
        "--log",
        type=Path,
        default=None,
        help="Editor log to scrape (defaults to the platform's editor log).",
    )

    verify_parser = subparsers.add_parser(
        "verify",
        help="Ask git which expected build files are not in the index.",
    )
    _add_verbose_option(verify_parser, suppress_default=True)
    _add_source_options(verify_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for assetaudit commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "check":
        auditor = Auditor()
        try:
            outcome = auditor.run_check(
                args.path,
                log_path=args.log,
                build_report=args.build_report,
                scenes=args.scenes,
                build_path=args.build_path,
                target=args.target,
                report_dir=args.report_dir,
            )
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"assetaudit check failed: {exc}\nRun with --verbose for more details.\n")
        if outcome.status is CheckStatus.SKIPPED:
            print(f"Check skipped ({outcome.reason})")
        elif outcome.status is CheckStatus.CLEAN:
            print("No ignored or unversioned assets in build")
        else:
            result = outcome.result
            assert result is not None
            print(
                f"{len(result.ignored_in_build)} ignored, "
                f"{len(result.unversioned_in_build)} unversioned assets in build"
            )
            if args.fail_on_findings:
                parser.exit(1)
    elif args.command == "extract":
        try:
            config = load_config(Path(args.path))
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        provider = resolve_provider(config, log_path=args.log)
        assets = provider.provide()
        if assets is None:
            parser.exit(1, "No build report found in log\n")
        for asset in assets:
            print(asset)
    elif args.command == "verify":
        try:
            outcome = Auditor().verify_tracked(
                args.path,
                log_path=args.log,
                build_report=args.build_report,
                scenes=args.scenes,
            )
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        if outcome.status is CheckStatus.SKIPPED:
            print(f"Verify skipped ({outcome.reason})")
        elif outcome.unmatched:
            for asset in outcome.unmatched:
                print(asset)
            parser.exit(1)
        else:
            print("All build assets are tracked")
    elif args.command == "serve":
        try:
            from .service import run_service
        except ModuleNotFoundError as exc:
            parser.exit(
                1,
                f"Service mode needs the 'service' extra ({exc.name} is missing). "
                "Install it with `pip install assetaudit[service]`.\n",
            )
        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
