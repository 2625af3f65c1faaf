"""Multi-repository scanning: input parsing, preparation, reporting."""

from .input import InputError, name_from_url, parse_input_file, parse_input_text
from .repo_manager import PrepareResult, RepoEntry, RepoManager, RepoPreparationError
from .reporter import RepoReport, build_error_report, build_success_report, categorise
from .runner import scan_repositories, scan_repository

__all__ = [
    "InputError",
    "PrepareResult",
    "RepoEntry",
    "RepoManager",
    "RepoPreparationError",
    "RepoReport",
    "build_error_report",
    "build_success_report",
    "categorise",
    "name_from_url",
    "parse_input_file",
    "parse_input_text",
    "scan_repositories",
    "scan_repository",
]
