"""Detection engine: index the tree, extract manifests, evaluate rules."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from ..logging import get_logger
from ..models import MatchResult
from ..providers.base import Provider
from ..providers.fs import FSProvider
from ..rules.loader import load_builtin_rules
from ..rules.types import Rule
from .evaluator import RuleEvaluator
from .index import ContentCache, RepositoryIndex, build_index
from .manifests import build_dependency_table, collect_env_var_names

_logger = get_logger("analyser")


def analyse(provider: Provider, rules: Sequence[Rule] | None = None) -> List[MatchResult]:
    """Run every rule against ``provider`` and return matches in catalog order."""
    catalog = load_builtin_rules() if rules is None else rules

    index = build_index(provider)
    cache = ContentCache(provider)
    dependencies = build_dependency_table(cache)
    env_var_names = collect_env_var_names(cache)
    _logger.debug(
        "Dependency table: %s; %d env var(s)",
        ", ".join(f"{key}={len(values)}" for key, values in dependencies.items()),
        len(env_var_names),
    )

    evaluator = RuleEvaluator(
        provider=provider,
        index=index,
        cache=cache,
        dependencies=dependencies,
        env_var_names=env_var_names,
    )
    matches = evaluator.collect(catalog)
    _logger.debug("%d of %d rule(s) matched", len(matches), len(catalog))
    return matches


def analyse_path(path: str | Path, rules: Sequence[Rule] | None = None) -> List[MatchResult]:
    """Analyse a local directory."""
    return analyse(FSProvider(path), rules)


__all__ = [
    "ContentCache",
    "RepositoryIndex",
    "RuleEvaluator",
    "analyse",
    "analyse_path",
    "build_index",
]
