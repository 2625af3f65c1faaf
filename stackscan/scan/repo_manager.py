"""Preparation of local working copies for repositories to scan."""

from __future__ import annotations

import hashlib
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence

from ..logging import get_logger

_ALLOWED_PREFIXES: Sequence[str] = ("http:", "https:", "ssh:", "file:", "git@")
_SUSPICIOUS_CHARS = re.compile(r"[;&|`$]")
_SENSITIVE_PREFIXES: Sequence[str] = (
    "/etc",
    "/usr",
    "/bin",
    "/sbin",
    "C:\\Windows",
    "C:\\Program Files",
)
_WINDOWS_DRIVE = re.compile(r"^[a-zA-Z]:\\")

Runner = Callable[..., str]


class RepoPreparationError(RuntimeError):
    """Raised when a repository cannot be made available locally."""


@dataclass(frozen=True)
class RepoEntry:
    """A repository to scan: display name plus git URL or local path."""

    name: str
    url: str


@dataclass(frozen=True)
class PrepareResult:
    """Local directory ready for analysis."""

    local_path: Path
    is_temporary: bool


def default_workspace() -> Path:
    return Path(tempfile.gettempdir()) / "stackscan-workspace"


def safe_folder_name(name: str, url: str) -> str:
    """Slugify ``name`` and append a short hash of ``url``."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:8]
    return f"{slug}-{digest}"


def validate_url(url: str) -> None:
    lower = url.lower()
    if not any(lower.startswith(prefix) for prefix in _ALLOWED_PREFIXES):
        allowed = ", ".join(_ALLOWED_PREFIXES)
        raise RepoPreparationError(f'Unsupported URL protocol in "{url}". Allowed: {allowed}')
    if _SUSPICIOUS_CHARS.search(url):
        raise RepoPreparationError(f'URL contains suspicious characters: "{url}"')


def is_local_path(url: str) -> bool:
    return url.startswith(("/", ".", "~")) or bool(_WINDOWS_DRIVE.match(url))


class RepoManager:
    """Validates local paths and clones or refreshes remote repositories."""

    def __init__(self, workspace: Path | None = None, runner: Runner | None = None) -> None:
        self.workspace = Path(workspace) if workspace is not None else default_workspace()
        self._runner = runner or self._default_runner
        self.logger = get_logger("scan.repo_manager")

    def prepare(self, entry: RepoEntry) -> PrepareResult:
        """Return a local directory for ``entry``, cloning or pulling if needed."""
        if is_local_path(entry.url):
            return self._prepare_local(entry.url)
        validate_url(entry.url)
        return self._prepare_remote(entry.name, entry.url)

    def cleanup(self, local_path: Path) -> None:
        """Remove a temporary clone."""
        self.logger.info("Cleaning up %s", local_path)
        shutil.rmtree(local_path, ignore_errors=True)

    # ------------------------------------------------------------------
    # Internals

    def _prepare_local(self, url: str) -> PrepareResult:
        resolved = Path(url).expanduser().resolve()
        if not resolved.exists():
            raise RepoPreparationError(f"Local path does not exist: {resolved}")
        lowered = str(resolved).lower()
        for prefix in _SENSITIVE_PREFIXES:
            if lowered.startswith(prefix.lower()):
                raise RepoPreparationError(f'Path "{resolved}" is inside a sensitive directory.')
        return PrepareResult(local_path=resolved, is_temporary=False)

    def _prepare_remote(self, name: str, url: str) -> PrepareResult:
        target = self.workspace / safe_folder_name(name, url)
        self.workspace.mkdir(parents=True, exist_ok=True)

        if target.exists():
            self._refresh(name, url, target)
        else:
            self._clone(name, url, target)
        return PrepareResult(local_path=target, is_temporary=True)

    def _refresh(self, name: str, url: str, target: Path) -> None:
        try:
            origin = self._run(
                ["git", "remote", "get-url", "origin"], cwd=target, capture_output=True
            ).strip()
        except (subprocess.CalledProcessError, OSError) as exc:
            self.logger.warning('Cannot read origin of "%s", re-cloning: %s', name, exc)
            self._reclone(name, url, target)
            return

        if origin != url.strip():
            raise RepoPreparationError(
                f'Directory "{target}" already exists with a different origin.\n'
                f"  Expected: {url}\n  Found:    {origin}"
            )

        self.logger.info('Pulling latest for "%s"', name)
        try:
            self._run(["git", "pull"], cwd=target)
        except (subprocess.CalledProcessError, OSError) as exc:
            self.logger.warning('Pull failed for "%s", re-cloning: %s', name, exc)
            self._reclone(name, url, target)

    def _reclone(self, name: str, url: str, target: Path) -> None:
        shutil.rmtree(target, ignore_errors=True)
        self._clone(name, url, target)

    def _clone(self, name: str, url: str, target: Path) -> None:
        self.logger.info('Cloning "%s" from %s', name, url)
        try:
            self._run(["git", "clone", "--depth", "1", url, str(target)], cwd=self.workspace)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise RepoPreparationError(f'Failed to clone "{name}" from {url}: {exc}') from exc

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        return self._runner(args, cwd=cwd, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


__all__ = [
    "PrepareResult",
    "RepoEntry",
    "RepoManager",
    "RepoPreparationError",
    "default_workspace",
    "is_local_path",
    "safe_folder_name",
    "validate_url",
]
