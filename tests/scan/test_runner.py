"""Tests for multi-repository scanning."""

from __future__ import annotations

import json
import threading
import time
from pathlib import Path
from typing import List

from stackscan.scan.repo_manager import PrepareResult, RepoEntry, RepoPreparationError
from stackscan.scan.runner import scan_repositories


class _StubManager:
    """Maps entries straight to local directories, failing for unknown ones."""

    def __init__(self, paths: dict[str, Path], *, temporary: bool = False, delay: float = 0.0) -> None:
        self.paths = paths
        self.temporary = temporary
        self.delay = delay
        self.cleaned: List[Path] = []
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def prepare(self, entry: RepoEntry) -> PrepareResult:
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(self.delay)
            if entry.url not in self.paths:
                raise RepoPreparationError(f"Failed to clone {entry.url}")
            return PrepareResult(local_path=self.paths[entry.url], is_temporary=self.temporary)
        finally:
            with self._lock:
                self.active -= 1

    def cleanup(self, local_path: Path) -> None:
        self.cleaned.append(local_path)


def _make_repo(root: Path, files: dict[str, str]) -> Path:
    root.mkdir(parents=True)
    for name, content in files.items():
        (root / name).write_text(content, encoding="utf-8")
    return root


def test_reports_follow_input_order_and_isolate_failures(tmp_path: Path) -> None:
    node = _make_repo(
        tmp_path / "node",
        {"package.json": json.dumps({"dependencies": {"react": "18"}}), "index.tsx": ""},
    )
    go = _make_repo(tmp_path / "go", {"go.mod": "module x\n\nrequire (\n\tgithub.com/redis/go-redis/v9 v9.0.0\n)\n"})
    manager = _StubManager({"https://x/node": node, "https://x/go": go})
    repos = [
        RepoEntry("node", "https://x/node"),
        RepoEntry("broken", "https://x/broken"),
        RepoEntry("go", "https://x/go"),
    ]

    reports = scan_repositories(repos, concurrency=3, manager=manager)  # type: ignore[arg-type]

    assert [report.repo for report in reports] == ["node", "broken", "go"]
    assert [report.status for report in reports] == ["success", "error", "success"]
    assert reports[0].results is not None
    assert "React" in reports[0].results["ui"]
    assert reports[1].error == "Failed to clone https://x/broken"
    assert reports[2].results is not None
    assert reports[2].results["databases"] == ["Redis"]


def test_concurrency_is_bounded(tmp_path: Path) -> None:
    paths = {f"https://x/{index}": _make_repo(tmp_path / str(index), {}) for index in range(6)}
    manager = _StubManager(paths, delay=0.05)
    repos = [RepoEntry(str(index), url) for index, url in enumerate(paths)]

    reports = scan_repositories(repos, concurrency=2, manager=manager)  # type: ignore[arg-type]

    assert len(reports) == 6
    assert manager.peak <= 2


def test_non_positive_concurrency_runs_sequentially(tmp_path: Path) -> None:
    paths = {f"https://x/{index}": _make_repo(tmp_path / str(index), {}) for index in range(3)}
    manager = _StubManager(paths, delay=0.01)

    reports = scan_repositories(
        [RepoEntry(str(index), url) for index, url in enumerate(paths)],
        concurrency=0,
        manager=manager,  # type: ignore[arg-type]
    )

    assert all(report.ok for report in reports)
    assert manager.peak == 1


def test_cleanup_only_removes_temporary_clones(tmp_path: Path) -> None:
    repo = _make_repo(tmp_path / "repo", {})
    temporary = _StubManager({"https://x/repo": repo}, temporary=True)
    local = _StubManager({"https://x/repo": repo}, temporary=False)
    entry = [RepoEntry("repo", "https://x/repo")]

    scan_repositories(entry, cleanup=True, manager=temporary)  # type: ignore[arg-type]
    scan_repositories(entry, cleanup=True, manager=local)  # type: ignore[arg-type]

    assert temporary.cleaned == [repo]
    assert local.cleaned == []


def test_empty_input_returns_no_reports() -> None:
    assert scan_repositories([]) == []
