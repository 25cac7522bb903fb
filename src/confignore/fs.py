"""
Filesystem helpers for configuration files.

Reads run in the default executor so the event loop only suspends at I/O.
JSON configuration files may carry // and /* */ comments (JSONC).
"""

import asyncio
import json
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from .constants import MAX_CONFIG_FILE_SIZE

PathLike = Union[str, Path]

# Strings are matched first so comment markers inside them survive
_JSONC_TOKENS = re.compile(
    r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/',
    re.DOTALL,
)
_TRAILING_COMMA = re.compile(r',(\s*[}\]])')


def strip_json_comments(text: str) -> str:
    """Remove // and /* */ comments and trailing commas from JSONC text"""
    def _keep_strings(match: re.Match) -> str:
        token = match.group(0)
        return token if token.startswith('"') else ''

    without_comments = _JSONC_TOKENS.sub(_keep_strings, text)
    return _TRAILING_COMMA.sub(r'\1', without_comments)


def parse_jsonc(text: str) -> Any:
    """Parse JSON that may contain comments"""
    return json.loads(strip_json_comments(text))


def _read_text_sync(path: Path) -> str:
    size = path.stat().st_size
    if size > MAX_CONFIG_FILE_SIZE:
        raise ValueError(f"File too large: {size} bytes (max: {MAX_CONFIG_FILE_SIZE})")
    return path.read_text(encoding='utf-8')


async def read_text(path: PathLike) -> str:
    """Read a UTF-8 file without blocking the event loop"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _read_text_sync, Path(path))


async def file_exists(path: PathLike) -> bool:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, os.path.isfile, str(path))


async def is_directory(path: PathLike) -> bool:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, os.path.isdir, str(path))


async def stat_mtime(path: PathLike) -> Optional[datetime]:
    """Modification time of a file, or None when it cannot be stat'ed"""
    loop = asyncio.get_running_loop()
    try:
        st = await loop.run_in_executor(None, os.stat, str(path))
    except OSError:
        return None
    return datetime.fromtimestamp(st.st_mtime)


async def read_json_file(path: PathLike) -> Any:
    """Read and parse a JSON/JSONC file"""
    return parse_jsonc(await read_text(path))


def write_json_file(path: PathLike, data: Any) -> None:
    """Write JSON with 2-space indentation and a trailing newline"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + '.tmp')
    tmp_path.write_text(json.dumps(data, indent=2) + '\n', encoding='utf-8')
    os.replace(tmp_path, path)
