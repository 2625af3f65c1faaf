"""Scanning several repositories with bounded concurrency."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from ..analyser import analyse_path
from ..logging import get_logger
from ..rules.types import Rule
from .repo_manager import RepoEntry, RepoManager
from .reporter import RepoReport, build_error_report, build_success_report

_logger = get_logger("scan")


def scan_repository(
    entry: RepoEntry,
    *,
    manager: RepoManager,
    rules: Sequence[Rule] | None = None,
    cleanup: bool = False,
) -> RepoReport:
    """Prepare and analyse one repository, converting failures into an error report."""
    _logger.info('Scanning "%s"', entry.name)
    try:
        prepared = manager.prepare(entry)
    except Exception as exc:
        _logger.error('Failed to prepare "%s": %s', entry.name, exc)
        return build_error_report(entry.name, exc)

    try:
        matches = analyse_path(prepared.local_path, rules)
    except Exception as exc:
        _logger.error('Failed to analyse "%s": %s', entry.name, exc)
        return build_error_report(entry.name, exc)
    finally:
        if cleanup and prepared.is_temporary:
            manager.cleanup(prepared.local_path)

    _logger.info('Finished "%s": %d match(es)', entry.name, len(matches))
    return build_success_report(entry.name, matches)


def scan_repositories(
    repos: Sequence[RepoEntry],
    *,
    concurrency: int = 1,
    cleanup: bool = False,
    rules: Sequence[Rule] | None = None,
    manager: RepoManager | None = None,
) -> List[RepoReport]:
    """Scan ``repos`` and return one report per entry in input order."""
    if not repos:
        return []
    manager = manager or RepoManager()
    workers = max(1, concurrency)
    _logger.info("Scanning %d repositories with concurrency %d", len(repos), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(
                scan_repository, entry, manager=manager, rules=rules, cleanup=cleanup
            )
            for entry in repos
        ]
        return [future.result() for future in futures]


__all__ = ["scan_repositories", "scan_repository"]
