"""CLI entrypoints for stackscan commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .analyser import analyse_path
from .config import ConfigError, StackScanConfig, load_config
from .logging import configure_logging, get_logger
from .rules.loader import RuleConfigError, build_catalog
from .rules.types import Rule
from .scan.input import InputError, parse_input_file
from .scan.repo_manager import RepoManager
from .scan.reporter import categorise
from .scan.runner import scan_repositories


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


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .stackscan.yml file (defaults to the current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackscan",
        description="Detect the technology stack of repositories from static signals.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write timestamped log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan every repository listed in an input file and write a JSON report.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_config_option(scan_parser)
    scan_parser.add_argument(
        "-i",
        "--input",
        required=True,
        help="JSON array of {name, url} objects, or one URL per line.",
    )
    scan_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Report path (defaults to scan.output from the config, then report.json).",
    )
    scan_parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Number of repositories scanned in parallel.",
    )
    scan_parser.add_argument(
        "--cleanup",
        action="store_true",
        default=None,
        help="Remove temporary clones after scanning.",
    )

    analyse_parser = subparsers.add_parser(
        "analyse",
        help="Analyse one local directory and print the detected stack.",
    )
    _add_verbose_option(analyse_parser, suppress_default=True)
    _add_config_option(analyse_parser)
    analyse_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for stackscan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = load_config(Path(args.config) if args.config else Path.cwd())
        rules = _load_catalog(config)
    except (ConfigError, RuleConfigError) as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "scan":
        _run_scan(parser, args, config, rules)
    elif args.command == "analyse":
        target = Path(args.path).expanduser().resolve()
        if not target.is_dir():
            parser.exit(1, f"Directory not found: {target}\n")
        try:
            matches = analyse_path(target, rules)
        except Exception as exc:  # pragma: no cover
            parser.exit(1, f"stackscan analyse failed: {exc}\nRun with --verbose for more details.\n")
        print(json.dumps(categorise(matches), indent=2))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _load_catalog(config: StackScanConfig) -> List[Rule]:
    return build_catalog(extra=config.rules.extra, disabled=config.rules.disabled)


def _run_scan(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: StackScanConfig,
    rules: List[Rule],
) -> None:
    logger = get_logger("cli")
    try:
        repos = parse_input_file(args.input)
    except InputError as exc:
        parser.exit(1, f"{exc}\n")

    if not repos:
        logger.warning("No repositories found in %s", args.input)
        return

    concurrency = args.concurrency if args.concurrency is not None else config.scan.concurrency
    cleanup = args.cleanup if args.cleanup is not None else config.scan.cleanup
    output = Path(args.output or config.scan.output)

    reports = scan_repositories(
        repos,
        concurrency=concurrency,
        cleanup=cleanup,
        rules=rules,
        manager=RepoManager(workspace=config.scan.workspace),
    )

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        json.dumps([report.to_dict() for report in reports], indent=2) + "\n",
        encoding="utf-8",
    )

    succeeded = sum(1 for report in reports if report.ok)
    failed = len(reports) - succeeded
    logger.info("%d succeeded, %d failed out of %d", succeeded, failed, len(reports))
    logger.info("Report written to %s", _relativize(output))


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
