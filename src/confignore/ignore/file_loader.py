"""
Loader for line-oriented ignore files (.gitignore, .aiexclude, ...)
"""

from pathlib import Path
from typing import Dict, List
from dataclasses import dataclass, field

from ..constants import MAX_PATTERNS_PER_FILE
from ..fs import read_text
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass
class IgnoreFileInfo:
    """Patterns and read problems for one ignore file"""
    path: Path
    patterns: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """Check if file was read without errors"""
        return len(self.errors) == 0


def parse_ignore_lines(content: str) -> IgnoreFileInfo:
    """
    Split ignore file content into patterns

    Blank lines and '#' comments are skipped; each pattern is trimmed.
    """
    info = IgnoreFileInfo(
        path=Path(),
        stats={
            'total_lines': 0,
            'empty_lines': 0,
            'comment_lines': 0,
            'pattern_lines': 0,
        }
    )
    lines = content.splitlines()
    info.stats['total_lines'] = len(lines)

    for line in lines:
        stripped = line.strip()
        if not stripped:
            info.stats['empty_lines'] += 1
            continue
        if stripped.startswith('#'):
            info.stats['comment_lines'] += 1
            continue
        info.stats['pattern_lines'] += 1
        info.patterns.append(stripped)

    if len(info.patterns) > MAX_PATTERNS_PER_FILE:
        info.errors.append(
            f"Too many patterns: {len(info.patterns)} (max: {MAX_PATTERNS_PER_FILE})"
        )
        info.patterns = info.patterns[:MAX_PATTERNS_PER_FILE]

    return info


async def load_ignore_file(file_path: Path) -> IgnoreFileInfo:
    """
    Load an ignore file; read failures are recorded, never raised

    Args:
        file_path: Path to the ignore file

    Returns:
        IgnoreFileInfo with patterns and any read errors
    """
    try:
        content = await read_text(file_path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Cannot read ignore file {file_path}: {e}")
        return IgnoreFileInfo(path=file_path, errors=[f"Error reading file: {e}"])

    info = parse_ignore_lines(content)
    info.path = file_path
    logger.trace(f"Loaded {len(info.patterns)} patterns from {file_path}")
    return info
