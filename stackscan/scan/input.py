"""Repository list parsing (JSON array or one URL per line)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from .repo_manager import RepoEntry


class InputError(RuntimeError):
    """Raised when the repository list cannot be read."""


def name_from_url(url: str) -> str:
    """Derive a repository name, e.g. ``https://host/org/repo.git`` -> ``repo``."""
    cleaned = url.rstrip("/")
    if cleaned.endswith(".git"):
        cleaned = cleaned[: -len(".git")]
    last = cleaned.split("/")[-1]
    return last or "unknown"


def parse_input_text(text: str) -> List[RepoEntry]:
    trimmed = text.strip()
    if trimmed.startswith("["):
        try:
            items = json.loads(trimmed)
        except json.JSONDecodeError as exc:
            raise InputError(f"Invalid JSON repository list: {exc}") from exc
        entries: List[RepoEntry] = []
        for item in items:
            if not isinstance(item, dict) or not isinstance(item.get("url"), str):
                raise InputError(f"Repository entries need a 'url' string: {item!r}")
            url = item["url"]
            name = item.get("name")
            entries.append(RepoEntry(name=name if isinstance(name, str) and name else name_from_url(url), url=url))
        return entries

    return [
        RepoEntry(name=name_from_url(line), url=line)
        for line in (raw.strip() for raw in trimmed.splitlines())
        if line and not line.startswith("#")
    ]


def parse_input_file(path: str | Path) -> List[RepoEntry]:
    """Read the repository list at ``path``."""
    target = Path(path).expanduser().resolve()
    if not target.exists():
        raise InputError(f"Input file not found: {target}")
    try:
        text = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Cannot read input file {target}: {exc}") from exc
    return parse_input_text(text)


__all__ = ["InputError", "name_from_url", "parse_input_file", "parse_input_text"]
