"""Declarative rule model evaluated by the analyser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

# Closed set of technology categories a rule may carry.
CATEGORIES = frozenset(
    {
        "language",
        "framework",
        "ui_framework",
        "ui",
        "runtime",
        "tool",
        "builder",
        "linter",
        "test",
        "ci",
        "hosting",
        "cloud",
        "db",
        "orm",
        "queue",
        "storage",
        "ai",
        "analytics",
        "monitoring",
        "auth",
        "payment",
        "notification",
        "cms",
        "saas",
        "iac",
        "security",
        "automation",
        "ssg",
        "package_manager",
        "validation",
        "app",
        "network",
        "unknown",
    }
)

# Dependency ecosystems, one per manifest family.
ECOSYSTEMS: Tuple[str, ...] = ("npm", "python", "docker", "golang", "ruby", "rust", "php")


@dataclass(frozen=True)
class LiteralValue:
    """Plain string: substring match in file content, equality for package names."""

    value: str

    def found_in(self, text: str) -> bool:
        return self.value in text

    def matches_name(self, name: str) -> bool:
        return name == self.value


@dataclass(frozen=True)
class RegexValue:
    """Compiled regular expression searched anywhere in the target."""

    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, source: str) -> "RegexValue":
        return cls(re.compile(source))

    def found_in(self, text: str) -> bool:
        return self.pattern.search(text) is not None

    def matches_name(self, name: str) -> bool:
        return self.pattern.search(name) is not None


MatchValue = Union[LiteralValue, RegexValue]


@dataclass(frozen=True)
class ContentPattern:
    """Patterns searched inside one target file."""

    file: str
    patterns: Tuple[MatchValue, ...]


@dataclass(frozen=True)
class RuleDependency:
    """A package or image name declared in one ecosystem's manifests."""

    ecosystem: str
    name: MatchValue


@dataclass(frozen=True)
class RuleMatch:
    """File-system strategies of a rule."""

    files: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()
    content: Tuple[ContentPattern, ...] = ()

    def is_empty(self) -> bool:
        return not (self.files or self.extensions or self.content)


@dataclass(frozen=True)
class Rule:
    """A detectable technology and the evidence that reveals it."""

    id: str
    name: str
    category: str
    match: Optional[RuleMatch] = None
    dependencies: Tuple[RuleDependency, ...] = ()
    dotenv: Tuple[str, ...] = ()

    def is_vacuous(self) -> bool:
        """Return True when no strategy is declared, so the rule can never fire."""
        has_match = self.match is not None and not self.match.is_empty()
        return not (has_match or self.dependencies or self.dotenv)


def literal(value: str) -> LiteralValue:
    return LiteralValue(value)


def regex(source: str) -> RegexValue:
    return RegexValue.compile(source)


__all__ = [
    "CATEGORIES",
    "ECOSYSTEMS",
    "ContentPattern",
    "LiteralValue",
    "MatchValue",
    "RegexValue",
    "Rule",
    "RuleDependency",
    "RuleMatch",
    "literal",
    "regex",
]
