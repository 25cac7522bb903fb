"""
Readers and writers for config-based inclusion/exclusion

Supports tsconfig.json ``exclude``, .eslintrc.json ``ignorePatterns`` and
Prettier ``overrides[].excludedFiles``.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..constants import ESLINT_CONFIG_FILES, PRETTIER_CONFIG_FILES, TSCONFIG_FILES
from ..errors import ConfigTargetError
from ..fs import file_exists, read_json_file, write_json_file
from ..paths import WorkspaceFolder, Workspaces, get_workspace_relative_path, normalize_path
from ..utils import get_logger
from .sources import eslint_patterns, first_existing, prettier_patterns, tsconfig_patterns

logger = get_logger(__name__)

PathArg = Union[str, Path]


@dataclass(frozen=True)
class TargetPaths:
    """Tool config files present in a workspace"""
    workspace: WorkspaceFolder
    tsconfig: Optional[Path] = None
    eslint_config: Optional[Path] = None
    prettier_config: Optional[Path] = None


async def detect_config_targets(path: PathArg, workspaces: Workspaces) -> Optional[TargetPaths]:
    workspace = workspaces.get_workspace_folder(path)
    if workspace is None:
        return None
    return TargetPaths(
        workspace=workspace,
        tsconfig=await first_existing(workspace.root, TSCONFIG_FILES),
        eslint_config=await first_existing(workspace.root, ESLINT_CONFIG_FILES),
        prettier_config=await first_existing(workspace.root, PRETTIER_CONFIG_FILES),
    )


async def _load_object(file_path: Path) -> Dict[str, Any]:
    try:
        config = await read_json_file(file_path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise ConfigTargetError(f"Cannot read {file_path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigTargetError(f"{file_path} does not contain a JSON object")
    return config


def _relative_items(file_path: Path, items: Sequence[PathArg],
                    workspaces: Workspaces, expand_dirs: bool = False) -> Optional[List[str]]:
    """Normalized workspace-relative patterns for items, or None outside any workspace"""
    workspace = workspaces.get_workspace_folder(file_path)
    if workspace is None:
        return None
    rels = []
    for item in items:
        rel = get_workspace_relative_path(item, workspace)
        if not rel:
            continue
        if expand_dirs and Path(item).is_dir():
            rel = rel + '/**/*'
        rels.append(normalize_path(rel))
    return rels


def _add_unique(existing: List[Any], additions: List[str]) -> List[Any]:
    seen = {normalize_path(x) for x in existing if isinstance(x, str)}
    result = list(existing)
    for item in additions:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _without(existing: List[Any], removals: List[str]) -> List[Any]:
    remove = set(removals)
    return [x for x in existing if not isinstance(x, str) or normalize_path(x) not in remove]


# -----------------------------
# TSCONFIG
# -----------------------------

async def add_to_tsconfig_exclude(file_path: PathArg, items: Sequence[PathArg],
                                  workspaces: Workspaces) -> bool:
    file_path = Path(file_path)
    rels = _relative_items(file_path, items, workspaces, expand_dirs=True)
    if rels is None:
        return False
    config = await _load_object(file_path)
    current = config.get('exclude') if isinstance(config.get('exclude'), list) else []
    config['exclude'] = _add_unique(current, rels)
    write_json_file(file_path, config)
    logger.info(f"Added {len(rels)} entries to {file_path} exclude")
    return True


async def remove_from_tsconfig_exclude(file_path: PathArg, items: Sequence[PathArg],
                                       workspaces: Workspaces) -> bool:
    file_path = Path(file_path)
    config = await _load_object(file_path)
    if not isinstance(config.get('exclude'), list):
        return False
    rels = _relative_items(file_path, items, workspaces, expand_dirs=True)
    if rels is None:
        return False
    config['exclude'] = _without(config['exclude'], rels)
    write_json_file(file_path, config)
    return True


async def tsconfig_excludes(file_path: PathArg, rel_path: str) -> bool:
    return await _lists(file_path, rel_path, tsconfig_patterns)


# -----------------------------
# ESLINT (.eslintrc.json)
# -----------------------------

async def add_to_eslint_ignore(file_path: PathArg, items: Sequence[PathArg],
                               workspaces: Workspaces) -> bool:
    file_path = Path(file_path)
    rels = _relative_items(file_path, items, workspaces)
    if rels is None:
        return False
    config = await _load_object(file_path)
    current = config.get('ignorePatterns') if isinstance(config.get('ignorePatterns'), list) else []
    config['ignorePatterns'] = _add_unique(current, rels)
    write_json_file(file_path, config)
    logger.info(f"Added {len(rels)} entries to {file_path} ignorePatterns")
    return True


async def remove_from_eslint_ignore(file_path: PathArg, items: Sequence[PathArg],
                                    workspaces: Workspaces) -> bool:
    file_path = Path(file_path)
    config = await _load_object(file_path)
    if not isinstance(config.get('ignorePatterns'), list):
        return False
    rels = _relative_items(file_path, items, workspaces)
    if rels is None:
        return False
    config['ignorePatterns'] = _without(config['ignorePatterns'], rels)
    write_json_file(file_path, config)
    return True


async def eslint_excludes(file_path: PathArg, rel_path: str) -> bool:
    return await _lists(file_path, rel_path, eslint_patterns)


# -----------------------------
# PRETTIER (.prettierrc[.json])
# -----------------------------

async def add_to_prettier_excluded(file_path: PathArg, items: Sequence[PathArg],
                                   workspaces: Workspaces) -> bool:
    file_path = Path(file_path)
    rels = _relative_items(file_path, items, workspaces)
    if rels is None:
        return False
    config = await _load_object(file_path)
    overrides = config.get('overrides') if isinstance(config.get('overrides'), list) else []
    # Catch-all override: the first one without a "files" key
    catch_all = next((o for o in overrides if isinstance(o, dict) and not o.get('files')), None)
    if catch_all is None:
        catch_all = {}
        overrides.append(catch_all)
    current = catch_all.get('excludedFiles') if isinstance(catch_all.get('excludedFiles'), list) else []
    catch_all['excludedFiles'] = _add_unique(current, rels)
    config['overrides'] = overrides
    write_json_file(file_path, config)
    logger.info(f"Added {len(rels)} entries to {file_path} excludedFiles")
    return True


async def remove_from_prettier_excluded(file_path: PathArg, items: Sequence[PathArg],
                                        workspaces: Workspaces) -> bool:
    file_path = Path(file_path)
    config = await _load_object(file_path)
    if not isinstance(config.get('overrides'), list):
        return False
    rels = _relative_items(file_path, items, workspaces)
    if rels is None:
        return False
    for override in config['overrides']:
        if isinstance(override, dict) and isinstance(override.get('excludedFiles'), list):
            override['excludedFiles'] = _without(override['excludedFiles'], rels)
    write_json_file(file_path, config)
    return True


async def prettier_excludes(file_path: PathArg, rel_path: str) -> bool:
    return await _lists(file_path, rel_path, prettier_patterns)


async def _lists(file_path: PathArg, rel_path: str, extract) -> bool:
    """Whether a config's exclusion array lists rel_path verbatim (after normalization)"""
    if not await file_exists(file_path):
        return False
    try:
        config = await read_json_file(file_path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Cannot read {file_path}: {e}")
        return False
    wanted = normalize_path(rel_path)
    return any(normalize_path(p) == wanted for p in extract(config))
