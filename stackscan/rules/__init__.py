"""Rule model and catalogs."""

from .loader import (
    RuleConfigError,
    build_catalog,
    load_builtin_rules,
    load_rules,
    parse_rules,
    rule_from_dict,
)
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
    literal,
    regex,
)

__all__ = [
    "CATEGORIES",
    "ECOSYSTEMS",
    "ContentPattern",
    "LiteralValue",
    "MatchValue",
    "RegexValue",
    "Rule",
    "RuleConfigError",
    "RuleDependency",
    "RuleMatch",
    "build_catalog",
    "literal",
    "load_builtin_rules",
    "load_rules",
    "parse_rules",
    "regex",
    "rule_from_dict",
]
