"""Grouping of matches into named buckets and per-repository reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models import MatchResult

# Bucket order is the order buckets appear in a report.
CATEGORY_BUCKETS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("languages", ("language",)),
    ("frameworks", ("framework",)),
    ("ui", ("ui_framework", "ui")),
    ("databases", ("db",)),
    ("orm", ("orm",)),
    ("ai", ("ai",)),
    ("monitoring", ("monitoring",)),
    ("analytics", ("analytics",)),
    ("cloud", ("cloud",)),
    ("hosting", ("hosting",)),
    ("ci", ("ci",)),
    ("testing", ("test",)),
    ("auth", ("auth",)),
    ("payment", ("payment",)),
    ("notification", ("notification",)),
    ("cms", ("cms",)),
    ("queue", ("queue",)),
    ("storage", ("storage",)),
    ("iac", ("iac",)),
    ("security", ("security",)),
    ("automation", ("automation",)),
    ("builders", ("builder",)),
    ("linters", ("linter",)),
    ("packageManagers", ("package_manager",)),
    ("ssg", ("ssg",)),
    ("validation", ("validation",)),
    ("tools", ("tool", "saas", "runtime", "app", "network", "unknown")),
)

_BUCKET_FOR_CATEGORY: Dict[str, str] = {
    category: bucket for bucket, categories in CATEGORY_BUCKETS for category in categories
}

CategorisedResults = Dict[str, List[str]]


def bucket_for(category: str) -> str:
    return _BUCKET_FOR_CATEGORY.get(category, "tools")


def categorise(matches: Iterable[MatchResult]) -> CategorisedResults:
    """Group match names by bucket, keeping first occurrences and dropping empty buckets."""
    grouped: Dict[str, List[str]] = {bucket: [] for bucket, _ in CATEGORY_BUCKETS}
    for match in matches:
        names = grouped[bucket_for(match.category)]
        if match.name not in names:
            names.append(match.name)
    return {bucket: names for bucket, names in grouped.items() if names}


@dataclass
class RepoReport:
    """Outcome of scanning one repository."""

    repo: str
    status: str
    results: Optional[CategorisedResults] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"repo": self.repo, "status": self.status}
        if self.results is not None:
            payload["results"] = self.results
        if self.error is not None:
            payload["error"] = self.error
        return payload


def build_success_report(repo: str, matches: Iterable[MatchResult]) -> RepoReport:
    return RepoReport(repo=repo, status="success", results=categorise(matches))


def build_error_report(repo: str, error: BaseException | str) -> RepoReport:
    return RepoReport(repo=repo, status="error", error=str(error))


__all__ = [
    "CATEGORY_BUCKETS",
    "CategorisedResults",
    "RepoReport",
    "bucket_for",
    "build_error_report",
    "build_success_report",
    "categorise",
]
