"""
Workspace settings reader for AI ignore patterns
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import AI_IGNORE_SETTING, WORKSPACE_SETTINGS_PATH
from ..fs import file_exists, read_json_file
from ..utils import get_logger

logger = get_logger(__name__)


def settings_path(workspace_root: Path) -> Path:
    return Path(workspace_root) / WORKSPACE_SETTINGS_PATH


async def read_workspace_settings(workspace_root: Path) -> Optional[Dict[str, Any]]:
    """
    Read the workspace settings file

    Returns:
        Parsed settings object, or None when missing, unreadable or not an object
    """
    path = settings_path(workspace_root)
    if not await file_exists(path):
        return None
    try:
        parsed = await read_json_file(path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Failed to read workspace settings {path}: {e}")
        return None
    if not isinstance(parsed, dict):
        logger.warning(f"Workspace settings {path} is not a JSON object")
        return None
    return parsed


async def get_ai_ignore_patterns_from_settings(workspace_root: Path) -> List[str]:
    """
    Raw AI ignore patterns from the workspace settings

    Non-string entries are skipped. Validation happens during aggregation.
    """
    settings = await read_workspace_settings(workspace_root)
    if settings is None:
        return []

    raw = settings.get(AI_IGNORE_SETTING)
    if not isinstance(raw, list):
        return []

    patterns = []
    for entry in raw:
        if not isinstance(entry, str):
            logger.warning(f"AI ignore pattern is not a string: {entry!r}")
            continue
        patterns.append(entry)
    return patterns
