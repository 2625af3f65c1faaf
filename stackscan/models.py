"""Core data models shared across stackscan components."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TreeEntry:
    """One entry returned by a tree source listing."""

    path: str
    name: str
    is_directory: bool


@dataclass(frozen=True)
class MatchResult:
    """A rule that fired during a scan."""

    name: str
    category: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "category": self.category}
