"""Loading and validation of YAML rule catalogs."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence, Set, Tuple

import yaml

from .types import (
    CATEGORIES,
    ECOSYSTEMS,
    ContentPattern,
    LiteralValue,
    MatchValue,
    RegexValue,
    Rule,
    RuleDependency,
    RuleMatch,
)

_BUILTIN_CATALOG = "builtin.yml"


class RuleConfigError(RuntimeError):
    """Raised when a rule catalog contains an invalid record."""


@lru_cache(maxsize=1)
def load_builtin_rules() -> Tuple[Rule, ...]:
    """Return the catalog shipped with stackscan."""
    text = resources.files(__package__).joinpath(_BUILTIN_CATALOG).read_text(encoding="utf-8")
    return tuple(parse_rules(text, source=_BUILTIN_CATALOG))


def load_rules(path: Path) -> List[Rule]:
    """Load a catalog file from disk."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise RuleConfigError(f"Cannot read rule catalog {path}: {exc}") from exc
    return parse_rules(text, source=str(path))


def parse_rules(text: str, *, source: str = "<string>") -> List[Rule]:
    """Parse a YAML catalog into rules, rejecting invalid or duplicate records."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuleConfigError(f"Failed to parse {source}: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise RuleConfigError(f"{source} must contain a list of rules")

    rules: List[Rule] = []
    seen: Set[str] = set()
    for position, record in enumerate(data):
        rule = rule_from_dict(record, where=f"{source}[{position}]")
        if rule.id in seen:
            raise RuleConfigError(f"{source}: duplicate rule id '{rule.id}'")
        seen.add(rule.id)
        rules.append(rule)
    return rules


def rule_from_dict(record: Any, *, where: str = "rule") -> Rule:
    """Build a single :class:`Rule` from its mapping form."""
    if not isinstance(record, Mapping):
        raise RuleConfigError(f"{where}: rule must be a mapping")

    rule_id = _required_str(record, "id", where)
    where = f"rule '{rule_id}'"
    name = _required_str(record, "name", where)
    category = _required_str(record, "category", where)
    if category not in CATEGORIES:
        raise RuleConfigError(f"{where}: unknown category '{category}'")

    match = _parse_match(record.get("match"), where)
    dependencies = _parse_dependencies(record.get("dependencies"), where)
    dotenv = tuple(_str_list(record.get("dotenv"), f"{where}: dotenv"))

    rule = Rule(
        id=rule_id,
        name=name,
        category=category,
        match=match,
        dependencies=dependencies,
        dotenv=dotenv,
    )
    if rule.is_vacuous():
        raise RuleConfigError(f"{where}: declares no detection strategy")
    return rule


def build_catalog(
    *,
    extra: Iterable[Path] = (),
    disabled: Iterable[str] = (),
    base: Sequence[Rule] | None = None,
) -> List[Rule]:
    """Combine the built-in catalog with extra files, dropping disabled ids."""
    rules: List[Rule] = list(load_builtin_rules() if base is None else base)
    seen = {rule.id for rule in rules}
    for path in extra:
        for rule in load_rules(path):
            if rule.id in seen:
                raise RuleConfigError(f"{path}: rule id '{rule.id}' is already defined")
            seen.add(rule.id)
            rules.append(rule)

    skipped = set(disabled)
    return [rule for rule in rules if rule.id not in skipped]


# ----------------------------------------------------------------------
# Field parsers


def _parse_match(value: Any, where: str) -> RuleMatch | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise RuleConfigError(f"{where}: 'match' must be a mapping")

    content: List[ContentPattern] = []
    raw_content = value.get("content") or []
    if not isinstance(raw_content, list):
        raise RuleConfigError(f"{where}: 'match.content' must be a list")
    for entry in raw_content:
        if not isinstance(entry, Mapping):
            raise RuleConfigError(f"{where}: content entries must be mappings")
        target = _required_str(entry, "file", where)
        patterns = tuple(
            _match_value(item, where) for item in _as_list(entry.get("patterns"))
        )
        if not patterns:
            raise RuleConfigError(f"{where}: content entry for '{target}' has no patterns")
        content.append(ContentPattern(file=target, patterns=patterns))

    return RuleMatch(
        files=tuple(_str_list(value.get("files"), f"{where}: match.files")),
        extensions=tuple(_str_list(value.get("extensions"), f"{where}: match.extensions")),
        content=tuple(content),
    )


def _parse_dependencies(value: Any, where: str) -> Tuple[RuleDependency, ...]:
    if value is None:
        return ()

    pairs: List[Tuple[str, Any]] = []
    if isinstance(value, Mapping):
        for ecosystem, names in value.items():
            pairs.extend((ecosystem, name) for name in _as_list(names))
    elif isinstance(value, list):
        # Explicit pair form: [{ecosystem: npm, name: react}, ...]
        for item in value:
            if not isinstance(item, Mapping) or "ecosystem" not in item or "name" not in item:
                raise RuleConfigError(f"{where}: dependency entries need 'ecosystem' and 'name'")
            pairs.append((item["ecosystem"], item["name"]))
    else:
        raise RuleConfigError(f"{where}: 'dependencies' must be a mapping or a list")

    dependencies: List[RuleDependency] = []
    for ecosystem, name in pairs:
        if ecosystem not in ECOSYSTEMS:
            raise RuleConfigError(f"{where}: unknown dependency ecosystem '{ecosystem}'")
        dependencies.append(RuleDependency(ecosystem=ecosystem, name=_match_value(name, where)))
    return tuple(dependencies)


def _match_value(value: Any, where: str) -> MatchValue:
    if isinstance(value, str):
        return LiteralValue(value)
    if isinstance(value, Mapping) and set(value) == {"regex"} and isinstance(value["regex"], str):
        try:
            return RegexValue.compile(value["regex"])
        except re.error as exc:
            raise RuleConfigError(f"{where}: invalid regex {value['regex']!r}: {exc}") from exc
    raise RuleConfigError(f"{where}: expected a string or {{regex: ...}}, got {value!r}")


def _required_str(record: Mapping[str, Any], key: str, where: str) -> str:
    value = record.get(key)
    if not isinstance(value, str) or not value.strip():
        raise RuleConfigError(f"{where}: missing or empty '{key}'")
    return value


def _str_list(value: Any, where: str) -> List[str]:
    items = _as_list(value)
    for item in items:
        if not isinstance(item, str):
            raise RuleConfigError(f"{where}: expected strings, got {item!r}")
    return items


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


__all__ = [
    "RuleConfigError",
    "build_catalog",
    "load_builtin_rules",
    "load_rules",
    "parse_rules",
    "rule_from_dict",
]
