"""Bounded repository index and per-scan content cache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set

from ..logging import get_logger
from ..models import TreeEntry
from ..providers.base import Provider

_logger = get_logger("analyser.index")


@dataclass(frozen=True)
class RepositoryIndex:
    """Paths, root names and root extensions discovered for one scan.

    ``paths`` covers three levels (root, children of root directories and
    their children); ``root_names`` and ``extensions`` only describe the root.
    """

    paths: FrozenSet[str]
    root_names: FrozenSet[str]
    extensions: FrozenSet[str]

    def has_path(self, path: str) -> bool:
        return path in self.paths or path in self.root_names


def file_extension(name: str) -> Optional[str]:
    """Return the extension including its dot, ignoring dotfile prefixes."""
    dot = name.rfind(".")
    if dot > 0:
        return name[dot:]
    return None


def build_index(provider: Provider) -> RepositoryIndex:
    """Walk the tree source three levels deep and record what it exposes."""
    paths: Set[str] = set()
    root_names: Set[str] = set()
    extensions: Set[str] = set()

    directories: List[TreeEntry] = []
    for entry in provider.list_files("."):
        paths.add(entry.path)
        root_names.add(entry.name)
        if entry.is_directory:
            directories.append(entry)
        else:
            extension = file_extension(entry.name)
            if extension:
                extensions.add(extension)

    for directory in directories:
        for child in _safe_list(provider, directory.path):
            paths.add(child.path)
            if child.is_directory:
                for grandchild in _safe_list(provider, child.path):
                    paths.add(grandchild.path)

    _logger.debug(
        "Indexed %d paths (%d at root, %d extensions)",
        len(paths),
        len(root_names),
        len(extensions),
    )
    return RepositoryIndex(
        paths=frozenset(paths),
        root_names=frozenset(root_names),
        extensions=frozenset(extensions),
    )


def _safe_list(provider: Provider, directory: str) -> List[TreeEntry]:
    try:
        return list(provider.list_files(directory))
    except Exception as exc:
        _logger.debug("Listing %s failed; treating as empty: %s", directory, exc)
        return []


class ContentCache:
    """Reads each path at most once per scan, remembering failures as ``None``."""

    def __init__(self, provider: Provider) -> None:
        self._provider = provider
        self._entries: Dict[str, Optional[str]] = {}

    def read(self, path: str) -> Optional[str]:
        if path in self._entries:
            return self._entries[path]
        try:
            content: Optional[str] = self._provider.read_file(path)
        except Exception as exc:
            _logger.debug("Read of %s failed; caching as absent: %s", path, exc)
            content = None
        self._entries[path] = content
        return content

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["ContentCache", "RepositoryIndex", "build_index", "file_extension"]
