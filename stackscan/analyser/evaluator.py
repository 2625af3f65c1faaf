"""Rule evaluation against one scan's shared state."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

from ..logging import get_logger
from ..models import MatchResult
from ..providers.base import Provider
from ..rules.types import ContentPattern, Rule, RuleDependency, RuleMatch
from .index import ContentCache, RepositoryIndex

_logger = get_logger("analyser.evaluator")


class RuleEvaluator:
    """Applies the five detection strategies of a rule in a fixed order.

    Strategies run as marker files, extensions, content patterns,
    dependencies, then dotenv prefixes; the first satisfied strategy ends the
    rule. The evaluator only reads its inputs, so rules can be evaluated in
    any order with the same outcome.
    """

    def __init__(
        self,
        *,
        provider: Provider,
        index: RepositoryIndex,
        cache: ContentCache,
        dependencies: Mapping[str, Sequence[str]],
        env_var_names: Sequence[str],
    ) -> None:
        self.provider = provider
        self.index = index
        self.cache = cache
        self.dependencies = dependencies
        self.env_var_names = env_var_names

    def evaluate(self, rule: Rule) -> bool:
        """Return True when any strategy of ``rule`` is satisfied."""
        match = rule.match
        if match is not None:
            if self._match_files(match) or self._match_extensions(match):
                return True
            if self._match_content(match.content):
                return True
        if self._match_dependencies(rule.dependencies):
            return True
        return self._match_dotenv(rule.dotenv)

    def evaluate_safely(self, rule: Rule) -> bool:
        """Evaluate ``rule``, treating any failure as a non-match."""
        try:
            return self.evaluate(rule)
        except Exception as exc:
            _logger.warning('Rule "%s" threw: %s', rule.id, exc)
            return False

    def collect(self, rules: Iterable[Rule]) -> List[MatchResult]:
        """Return matches for ``rules`` in catalog order."""
        return [
            MatchResult(name=rule.name, category=rule.category)
            for rule in rules
            if self.evaluate_safely(rule)
        ]

    # ------------------------------------------------------------------
    # Strategies

    def _match_files(self, match: RuleMatch) -> bool:
        for marker in match.files:
            if self.index.has_path(marker):
                return True
            # Dotfiles and deeper paths are missing from listings.
            if self.provider.exists(marker):
                return True
        return False

    def _match_extensions(self, match: RuleMatch) -> bool:
        return any(extension in self.index.extensions for extension in match.extensions)

    def _match_content(self, content_patterns: Sequence[ContentPattern]) -> bool:
        for target in content_patterns:
            text = self.cache.read(target.file)
            if text is None:
                continue
            if any(pattern.found_in(text) for pattern in target.patterns):
                return True
        return False

    def _match_dependencies(self, dependencies: Sequence[RuleDependency]) -> bool:
        for dependency in dependencies:
            declared = self.dependencies.get(dependency.ecosystem)
            if not declared:
                continue
            if any(dependency.name.matches_name(name) for name in declared):
                return True
        return False

    def _match_dotenv(self, prefixes: Sequence[str]) -> bool:
        if not prefixes or not self.env_var_names:
            return False
        return any(
            name.startswith(prefix) for prefix in prefixes for name in self.env_var_names
        )


__all__ = ["RuleEvaluator"]
