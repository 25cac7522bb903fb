"""
Schema validation for confignore workspace settings
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from ..constants import AI_IGNORE_SETTING, ALLOWED_SETTINGS_KEYS, SETTINGS_NAMESPACE
from ..errors import Errors
from ..fs import file_exists, read_json_file
from ..utils import get_logger
from .workspace_settings import settings_path

logger = get_logger(__name__)


@dataclass(frozen=True)
class SchemaValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: Optional[List[str]] = None


def validate_settings_object(parsed: Any) -> SchemaValidationResult:
    """
    Check a parsed settings object against the confignore schema

    Args:
        parsed: Decoded settings.json content

    Returns:
        SchemaValidationResult listing unknown keys and malformed AI ignore entries
    """
    if not isinstance(parsed, dict):
        return SchemaValidationResult(
            valid=False,
            errors=[Errors.parse_settings('settings.json', 'Expected an object')],
        )

    errors: List[str] = []
    warnings: List[str] = []

    for key in parsed:
        if key.startswith(SETTINGS_NAMESPACE) and key not in ALLOWED_SETTINGS_KEYS:
            errors.append(Errors.unknown_setting(key))

    if AI_IGNORE_SETTING in parsed:
        value = parsed[AI_IGNORE_SETTING]
        if not isinstance(value, list):
            errors.append(Errors.missing_array)
        else:
            for entry in value:
                if not isinstance(entry, str):
                    errors.append(Errors.invalid_pattern(str(entry), 'Pattern must be a string'))
                elif not entry.strip():
                    errors.append(Errors.invalid_pattern('<empty>', 'Pattern must not be empty'))
    else:
        warnings.append(Errors.no_config)

    return SchemaValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings or None,
    )


async def validate_settings_schema(workspace_root: Path) -> SchemaValidationResult:
    """Validate the workspace settings file; a missing file is valid"""
    path = settings_path(workspace_root)
    if not await file_exists(path):
        return SchemaValidationResult(valid=True)

    try:
        parsed = await read_json_file(path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Failed to validate settings schema for {path}: {e}")
        return SchemaValidationResult(valid=False, errors=[Errors.parse_settings(str(path), str(e))])

    return validate_settings_object(parsed)
