"""
Ordered pattern evaluation with negation support

Patterns are applied in list order and the last matching pattern decides,
the same way later lines of an ignore file override earlier ones.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pathspec

from ..paths import normalize_path
from ..utils import get_logger
from .pattern_validator import compile_pattern

logger = get_logger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Result of evaluating a path against an ordered pattern list"""
    ignored: bool
    matched_patterns: List[str] = field(default_factory=list)


class PatternMatcher:
    """
    Evaluates paths against ordered pattern lists, caching compiled patterns
    """

    def __init__(self):
        self._compiled_cache: Dict[str, Optional[pathspec.PathSpec]] = {}

    def evaluate(self, path: str, patterns: Sequence[str]) -> MatchResult:
        """
        Evaluate a path against patterns in order

        Args:
            path: Workspace-relative path
            patterns: Ordered patterns; '!' negates

        Returns:
            MatchResult whose ``ignored`` is set by the last matching pattern
        """
        normalized_path = normalize_path(path)
        ignored = False
        matched: List[str] = []

        for raw_pattern in patterns:
            trimmed = raw_pattern.strip()
            if not trimmed:
                continue

            is_negated = trimmed.startswith('!')
            body = normalize_path(trimmed[1:] if is_negated else trimmed)
            if not body:
                continue

            spec = self._compile(body)
            if spec is not None and spec.match_file(normalized_path):
                ignored = not is_negated
                matched.append(trimmed)

        return MatchResult(ignored=ignored, matched_patterns=matched)

    def _compile(self, body: str) -> Optional[pathspec.PathSpec]:
        if body in self._compiled_cache:
            return self._compiled_cache[body]
        try:
            spec = compile_pattern(body)
        except Exception as e:
            logger.warning(f"Skipping invalid pattern '{body}': {e}")
            spec = None
        self._compiled_cache[body] = spec
        return spec

    def clear_cache(self):
        """Clear the compiled pattern cache"""
        self._compiled_cache.clear()


_default_matcher = PatternMatcher()


def evaluate_patterns(path: str, patterns: Sequence[str]) -> MatchResult:
    """Evaluate a path against patterns with the shared matcher"""
    return _default_matcher.evaluate(path, patterns)


def match_file_against_patterns(path: str, patterns: Sequence[str]) -> bool:
    return evaluate_patterns(path, patterns).ignored
