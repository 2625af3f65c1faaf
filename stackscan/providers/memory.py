"""Tree source backed by an in-memory mapping of paths to contents."""

from __future__ import annotations

from typing import Dict, List, Mapping, Set

from ..models import TreeEntry
from .base import NotFoundError, is_hidden, join_path


class MemoryProvider:
    """Serves a repository described as ``{relative_path: text}``.

    Directories are implied by the file paths; an explicit empty directory can
    be declared by a key ending in ``/``.
    """

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self._files: Dict[str, str] = {}
        self._dirs: Set[str] = set()
        for path, content in (files or {}).items():
            self.add(path, content)

    def add(self, path: str, content: str = "") -> None:
        normalised = path.strip("/")
        parts = normalised.split("/")
        for depth in range(1, len(parts)):
            self._dirs.add("/".join(parts[:depth]))
        if path.endswith("/"):
            self._dirs.add(normalised)
        else:
            self._files[normalised] = content

    def list_files(self, directory: str = ".") -> List[TreeEntry]:
        prefix = directory.strip("/")
        if prefix in {"", "."}:
            prefix = ""
        elif prefix not in self._dirs:
            return []

        children: Dict[str, bool] = {}
        for path in [*self._files, *self._dirs]:
            if prefix:
                if not path.startswith(f"{prefix}/"):
                    continue
                remainder = path[len(prefix) + 1 :]
            else:
                remainder = path
            if not remainder:
                continue
            name, _, rest = remainder.partition("/")
            is_dir = bool(rest) or path in self._dirs
            children[name] = children.get(name, False) or is_dir

        return [
            TreeEntry(path=join_path(prefix, name), name=name, is_directory=is_dir)
            for name, is_dir in sorted(children.items())
            if not is_hidden(name)
        ]

    def read_file(self, path: str) -> str:
        normalised = path.strip("/")
        if normalised not in self._files:
            raise NotFoundError(f"Cannot read {path}: no such file")
        return self._files[normalised]

    def exists(self, path: str) -> bool:
        normalised = path.strip("/")
        return normalised in self._files or normalised in self._dirs
