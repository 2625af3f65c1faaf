"""Tree source contract consumed by the analyser."""

from __future__ import annotations

from typing import List, Protocol

from ..models import TreeEntry


class ProviderError(RuntimeError):
    """Raised when a tree source cannot serve a request."""


class NotFoundError(ProviderError):
    """Raised when a file is absent or cannot be read as text."""


class Provider(Protocol):
    """Read-only view of a repository tree.

    Paths are slash-separated and relative to the repository root; ``"."``
    names the root itself. Listings skip entries whose name starts with a dot,
    so rules that depend on dotfiles go through :meth:`exists` or
    :meth:`read_file` instead.
    """

    def list_files(self, directory: str = ".") -> List[TreeEntry]:
        """Return the entries of ``directory``, or an empty list if it does not exist."""

    def read_file(self, path: str) -> str:
        """Return the UTF-8 text of ``path`` or raise :class:`NotFoundError`."""

    def exists(self, path: str) -> bool:
        """Return True when ``path`` names a file or directory."""


def join_path(directory: str, name: str) -> str:
    """Join a listing directory and an entry name into a relative path."""
    directory = directory.strip("/")
    if directory in {"", "."}:
        return name
    return f"{directory}/{name}"


def is_hidden(name: str) -> bool:
    return name.startswith(".")
