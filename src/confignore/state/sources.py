"""
Exclusion predicates for each Source

A predicate answers "does this source exclude this workspace-relative path?"
Missing, unreadable or malformed files never exclude anything.
"""

from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, List, NamedTuple, Optional, Sequence

from ..constants import (
    DOCKERIGNORE,
    ESLINT_CONFIG_FILES,
    ESLINTIGNORE,
    FILES_EXCLUDE_SETTING,
    GITIGNORE,
    NPMIGNORE,
    PRETTIER_CONFIG_FILES,
    PRETTIERIGNORE,
    SEARCH_EXCLUDE_SETTING,
    STYLELINTIGNORE,
    TSCONFIG_FILES,
    VSCODEIGNORE,
)
from ..fs import file_exists, read_json_file
from ..ignore.file_loader import load_ignore_file
from ..ignore.pattern_matcher import evaluate_patterns
from ..ai.workspace_settings import read_workspace_settings
from ..models import Source, source_rank
from ..paths import WorkspaceFolder
from ..utils import get_logger

logger = get_logger(__name__)

Predicate = Callable[[WorkspaceFolder, str], Awaitable[bool]]


class SourceCheck(NamedTuple):
    """A source paired with the predicate that decides whether it excludes a path"""
    source: Source
    predicate: Predicate


def sort_by_precedence(checks: Iterable[SourceCheck]) -> List[SourceCheck]:
    return sorted(checks, key=lambda check: source_rank(check.source))


async def first_existing(root: Path, names: Sequence[str]) -> Optional[Path]:
    for name in names:
        candidate = root / name
        if await file_exists(candidate):
            return candidate
    return None


async def _read_config(root: Path, names: Sequence[str]) -> Optional[Any]:
    path = await first_existing(root, names)
    if path is None:
        return None
    try:
        return await read_json_file(path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Cannot read {path}: {e}")
        return None


def string_entries(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, str)]


def tsconfig_patterns(config: Any) -> List[str]:
    return string_entries(config.get('exclude')) if isinstance(config, dict) else []


def eslint_patterns(config: Any) -> List[str]:
    return string_entries(config.get('ignorePatterns')) if isinstance(config, dict) else []


def prettier_patterns(config: Any) -> List[str]:
    if not isinstance(config, dict) or not isinstance(config.get('overrides'), list):
        return []
    patterns: List[str] = []
    for override in config['overrides']:
        if isinstance(override, dict):
            patterns.extend(string_entries(override.get('excludedFiles')))
    return patterns


# Globs over a directory's contents, as written for directories by the tsconfig writer
CONTENTS_SUFFIXES = ('/**/*', '/**')


def directory_patterns(patterns: Sequence[str]) -> List[str]:
    """Rewrite contents globs (``dist/**/*``) to cover the directory itself (``dist/``)"""
    rewritten = []
    for pattern in patterns:
        for suffix in CONTENTS_SUFFIXES:
            body = pattern[:-len(suffix)]
            if pattern.endswith(suffix) and body.lstrip('!'):
                pattern = body + '/'
                break
        rewritten.append(pattern)
    return rewritten


def excludes(rel_path: str, patterns: Sequence[str]) -> bool:
    """Whether patterns exclude rel_path; a trailing '/' marks a directory"""
    if rel_path.endswith('/'):
        patterns = directory_patterns(patterns)
    return evaluate_patterns(rel_path, patterns).ignored


def config_predicate(names: Sequence[str],
                     extract: Callable[[Any], List[str]]) -> Predicate:
    """Predicate over an exclusion array inside a JSON tool config"""
    async def predicate(workspace: WorkspaceFolder, rel_path: str) -> bool:
        config = await _read_config(workspace.root, names)
        if config is None:
            return False
        return excludes(rel_path, extract(config))
    return predicate


def ignore_file_predicate(filename: str) -> Predicate:
    """Predicate over a line-oriented ignore file at the workspace root"""
    async def predicate(workspace: WorkspaceFolder, rel_path: str) -> bool:
        path = workspace.root / filename
        if not await file_exists(path):
            return False
        info = await load_ignore_file(path)
        return excludes(rel_path, info.patterns)
    return predicate


def settings_exclude_predicate(key: str) -> Predicate:
    """Predicate over a {glob: bool} map in the workspace settings"""
    async def predicate(workspace: WorkspaceFolder, rel_path: str) -> bool:
        settings = await read_workspace_settings(workspace.root)
        if settings is None:
            return False
        mapping = settings.get(key)
        if not isinstance(mapping, dict):
            return False
        patterns = [glob for glob, enabled in mapping.items() if enabled is True]
        return excludes(rel_path, patterns)
    return predicate


def default_source_checks() -> List[SourceCheck]:
    """Every built-in source, in precedence order"""
    checks = [
        SourceCheck(Source.CONFIG_TSCONFIG, config_predicate(TSCONFIG_FILES, tsconfig_patterns)),
        SourceCheck(Source.CONFIG_ESLINT, config_predicate(ESLINT_CONFIG_FILES, eslint_patterns)),
        SourceCheck(Source.CONFIG_PRETTIER, config_predicate(PRETTIER_CONFIG_FILES, prettier_patterns)),
        SourceCheck(Source.IGNORE_FILE_GIT, ignore_file_predicate(GITIGNORE)),
        SourceCheck(Source.IGNORE_FILE_DOCKER, ignore_file_predicate(DOCKERIGNORE)),
        SourceCheck(Source.IGNORE_FILE_ESLINT, ignore_file_predicate(ESLINTIGNORE)),
        SourceCheck(Source.IGNORE_FILE_PRETTIER, ignore_file_predicate(PRETTIERIGNORE)),
        SourceCheck(Source.IGNORE_FILE_NPM, ignore_file_predicate(NPMIGNORE)),
        SourceCheck(Source.IGNORE_FILE_STYLELINT, ignore_file_predicate(STYLELINTIGNORE)),
        SourceCheck(Source.IGNORE_FILE_VSCODE, ignore_file_predicate(VSCODEIGNORE)),
        SourceCheck(Source.WORKSPACE_FILES_EXCLUDE, settings_exclude_predicate(FILES_EXCLUDE_SETTING)),
        SourceCheck(Source.WORKSPACE_SEARCH_EXCLUDE, settings_exclude_predicate(SEARCH_EXCLUDE_SETTING)),
    ]
    return sort_by_precedence(checks)
