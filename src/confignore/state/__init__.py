"""
General tool-exclusion state resolution across config files, ignore files
and workspace settings
"""

from .resolver import StateResolver
from .sources import SourceCheck, default_source_checks, sort_by_precedence
from .config_targets import (
    TargetPaths,
    detect_config_targets,
    add_to_tsconfig_exclude,
    remove_from_tsconfig_exclude,
    tsconfig_excludes,
    add_to_eslint_ignore,
    remove_from_eslint_ignore,
    eslint_excludes,
    add_to_prettier_excluded,
    remove_from_prettier_excluded,
    prettier_excludes,
)

__all__ = [
    'StateResolver',
    'SourceCheck',
    'default_source_checks',
    'sort_by_precedence',
    'TargetPaths',
    'detect_config_targets',
    'add_to_tsconfig_exclude',
    'remove_from_tsconfig_exclude',
    'tsconfig_excludes',
    'add_to_eslint_ignore',
    'remove_from_eslint_ignore',
    'eslint_excludes',
    'add_to_prettier_excluded',
    'remove_from_prettier_excluded',
    'prettier_excludes',
]
