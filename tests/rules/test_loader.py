"""Tests for YAML rule catalog parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from stackscan.rules import (
    LiteralValue,
    RegexValue,
    RuleConfigError,
    build_catalog,
    parse_rules,
    rule_from_dict,
)


def test_parse_full_record() -> None:
    rules = parse_rules(
        """
- id: spring
  name: Spring
  category: framework
  match:
    files: [pom.xml]
    extensions: .java
    content:
      - file: build.gradle
        patterns: [spring-boot, {regex: "org\\\\.springframework"}]
  dependencies:
    golang: [{regex: "^github\\\\.com/spring"}]
  dotenv: [SPRING_]
"""
    )

    assert len(rules) == 1
    rule = rules[0]
    assert rule.match is not None
    assert rule.match.files == ("pom.xml",)
    assert rule.match.extensions == (".java",)
    first, second = rule.match.content[0].patterns
    assert isinstance(first, LiteralValue)
    assert isinstance(second, RegexValue)
    assert second.found_in("id 'org.springframework.boot'")
    assert rule.dependencies[0].ecosystem == "golang"
    assert rule.dotenv == ("SPRING_",)


def test_dependency_pair_form() -> None:
    rule = rule_from_dict(
        {
            "id": "prisma",
            "name": "Prisma",
            "category": "orm",
            "dependencies": [{"ecosystem": "npm", "name": "prisma"}],
        }
    )

    assert rule.dependencies[0].name == LiteralValue("prisma")


@pytest.mark.parametrize(
    "record, message",
    [
        ({"name": "X", "category": "tool", "dotenv": ["X_"]}, "missing or empty 'id'"),
        ({"id": "x", "name": "X", "category": "gadget", "dotenv": ["X_"]}, "unknown category"),
        ({"id": "x", "name": "X", "category": "tool"}, "no detection strategy"),
        ({"id": "x", "name": "X", "category": "tool", "match": {}}, "no detection strategy"),
        (
            {"id": "x", "name": "X", "category": "tool", "dependencies": {"cobol": ["x"]}},
            "unknown dependency ecosystem",
        ),
        (
            {"id": "x", "name": "X", "category": "tool", "dependencies": {"npm": [{"regex": "("}]}},
            "invalid regex",
        ),
        (
            {
                "id": "x",
                "name": "X",
                "category": "tool",
                "match": {"content": [{"file": "a.txt", "patterns": []}]},
            },
            "has no patterns",
        ),
        ("just a string", "must be a mapping"),
    ],
)
def test_invalid_records_are_rejected(record: object, message: str) -> None:
    with pytest.raises(RuleConfigError, match=message):
        rule_from_dict(record)


def test_duplicate_ids_in_one_catalog() -> None:
    text = """
- {id: a, name: A, category: tool, dotenv: [A_]}
- {id: a, name: A2, category: tool, dotenv: [B_]}
"""

    with pytest.raises(RuleConfigError, match="duplicate rule id 'a'"):
        parse_rules(text)


def test_catalog_must_be_a_list() -> None:
    with pytest.raises(RuleConfigError):
        parse_rules("id: a\n")
    assert parse_rules("") == []


def test_build_catalog_appends_extras_and_drops_disabled(tmp_path: Path) -> None:
    base = parse_rules(
        """
- {id: a, name: A, category: tool, dotenv: [A_]}
- {id: b, name: B, category: tool, dotenv: [B_]}
"""
    )
    extra = tmp_path / "extra.yml"
    extra.write_text("- {id: c, name: C, category: saas, dotenv: [C_]}\n", encoding="utf-8")

    catalog = build_catalog(extra=[extra], disabled=["a"], base=base)

    assert [rule.id for rule in catalog] == ["b", "c"]


def test_build_catalog_rejects_clashing_ids(tmp_path: Path) -> None:
    base = parse_rules("- {id: a, name: A, category: tool, dotenv: [A_]}\n")
    extra = tmp_path / "extra.yml"
    extra.write_text("- {id: a, name: Other, category: tool, dotenv: [Z_]}\n", encoding="utf-8")

    with pytest.raises(RuleConfigError, match="already defined"):
        build_catalog(extra=[extra], base=base)


def test_build_catalog_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RuleConfigError, match="Cannot read rule catalog"):
        build_catalog(extra=[tmp_path / "nope.yml"], base=[])
