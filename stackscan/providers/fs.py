"""Tree source backed by the local file system."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from ..models import TreeEntry
from .base import NotFoundError, is_hidden, join_path


class FSProvider:
    """Serves listings and file contents from a directory on disk.

    Paths that resolve outside the root are treated as absent.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve()

    def list_files(self, directory: str = ".") -> List[TreeEntry]:
        target = self._resolve(directory)
        if target is None or not target.is_dir():
            return []

        entries: List[TreeEntry] = []
        for child in sorted(target.iterdir(), key=lambda item: item.name):
            if is_hidden(child.name):
                continue
            entries.append(
                TreeEntry(
                    path=join_path(directory, child.name),
                    name=child.name,
                    is_directory=child.is_dir(),
                )
            )
        return entries

    def read_file(self, path: str) -> str:
        target = self._resolve(path)
        if target is None:
            raise NotFoundError(f"Cannot read {path}: outside the repository root")
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise NotFoundError(f"Cannot read {path}: {exc}") from exc

    def exists(self, path: str) -> bool:
        target = self._resolve(path)
        return target is not None and target.exists()

    def _resolve(self, path: str) -> Optional[Path]:
        if path in {"", "."}:
            return self.root
        candidate = (self.root / path.strip("/")).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            return None
        return candidate

    def __repr__(self) -> str:
        return f"FSProvider(root={str(self.root)!r})"
