"""
Pattern handling shared by the state and AI ignore resolvers

- Ordered gitignore-style evaluation with negation
- Pattern syntax validation
- Line-oriented ignore file loading
- Two-tier expiring cache with cascading invalidation
"""

from .pattern_matcher import PatternMatcher, MatchResult, evaluate_patterns, match_file_against_patterns
from .pattern_validator import validate_ai_ignore_pattern
from .file_loader import IgnoreFileInfo, load_ignore_file, parse_ignore_lines
from .cache import (
    AiIgnoreCache,
    TTLCache,
    FILE_LEVEL,
    WORKSPACE_LEVEL,
    file_cache_key,
    workspace_cache_key,
)

__all__ = [
    'PatternMatcher',
    'MatchResult',
    'evaluate_patterns',
    'match_file_against_patterns',
    'validate_ai_ignore_pattern',
    'IgnoreFileInfo',
    'load_ignore_file',
    'parse_ignore_lines',
    'AiIgnoreCache',
    'TTLCache',
    'FILE_LEVEL',
    'WORKSPACE_LEVEL',
    'file_cache_key',
    'workspace_cache_key',
]
