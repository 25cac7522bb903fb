"""
Detection of third-party agent configuration files as AI ignore sources.

Each provider knows one file format and turns it into an AiIgnoreSource.
Adding an agent means adding a provider; the detector itself does not change.
"""

import asyncio
import re
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from ..constants import CLAUDE_SETTINGS_PATH, GEMINI_EXCLUDE_PATH
from ..fs import file_exists, parse_jsonc, read_text, stat_mtime
from ..ignore.file_loader import load_ignore_file
from ..models import (
    AgentConfigDetectionResult,
    AgentConfigError,
    AgentConfigFile,
    AiIgnoreSource,
    AiSource,
)
from ..utils import get_logger

logger = get_logger(__name__)

_READ_RULE = re.compile(r'^Read\((.*)\)$')


class AgentConfigProvider(ABC):
    """Reads one agent's configuration file into an AiIgnoreSource"""

    source: AiSource = AiSource.CUSTOM
    agent_name: str = 'custom'
    format: str = 'gitignore-style'
    relative_path: str = ''

    def config_path(self, workspace_root: Path) -> Path:
        return Path(workspace_root) / self.relative_path

    @abstractmethod
    async def detect(self, workspace_root: Path) -> Optional[AiIgnoreSource]:
        """Return the source, or None when the file does not exist"""


class ClaudeSettingsProvider(AgentConfigProvider):
    """`Read(<expr>)` deny rules from .claude/settings.json"""

    source = AiSource.AGENT_CONFIG_CLAUDE
    agent_name = 'claude'
    format = 'json'
    relative_path = CLAUDE_SETTINGS_PATH

    async def detect(self, workspace_root: Path) -> Optional[AiIgnoreSource]:
        path = self.config_path(workspace_root)
        if not await file_exists(path):
            return None

        patterns: List[str] = []
        errors: List[str] = []
        try:
            parsed = parse_jsonc(await read_text(path))
            patterns.extend(self.extract_patterns(parsed))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning(f"Failed to parse Claude settings {path}: {e}")
            errors.append(str(e) or 'Failed to parse Claude settings')

        return AiIgnoreSource(
            source=self.source,
            patterns=patterns,
            file_path=path,
            errors=errors or None,
        )

    @staticmethod
    def extract_patterns(parsed) -> List[str]:
        """Patterns from permissions.deny entries shaped exactly like Read(<expr>)"""
        permissions = parsed.get('permissions') if isinstance(parsed, dict) else None
        deny = permissions.get('deny') if isinstance(permissions, dict) else None
        if not isinstance(deny, list):
            return []

        patterns = []
        for entry in deny:
            if not isinstance(entry, str):
                continue
            match = _READ_RULE.match(entry)
            if not match:
                continue
            expr = match.group(1)
            if expr.startswith('./'):
                expr = expr[2:]
            patterns.append(expr)
        return patterns


class GeminiExcludeProvider(AgentConfigProvider):
    """One pattern per line from .aiexclude"""

    source = AiSource.AGENT_CONFIG_GEMINI
    agent_name = 'gemini'
    format = 'gitignore-style'
    relative_path = GEMINI_EXCLUDE_PATH

    async def detect(self, workspace_root: Path) -> Optional[AiIgnoreSource]:
        path = self.config_path(workspace_root)
        if not await file_exists(path):
            return None

        info = await load_ignore_file(path)
        return AiIgnoreSource(
            source=self.source,
            patterns=list(info.patterns),
            file_path=path,
            errors=list(info.errors) or None,
        )


def default_providers() -> List[AgentConfigProvider]:
    return [ClaudeSettingsProvider(), GeminiExcludeProvider()]


class AgentConfigDetector:
    """
    Runs every provider for a workspace and summarizes what was found
    """

    def __init__(self, providers: Optional[Sequence[AgentConfigProvider]] = None):
        self.providers: List[AgentConfigProvider] = list(providers) if providers is not None else default_providers()

    async def detect_claude(self, workspace_root: Path) -> Optional[AiIgnoreSource]:
        return await ClaudeSettingsProvider().detect(workspace_root)

    async def detect_gemini(self, workspace_root: Path) -> Optional[AiIgnoreSource]:
        return await GeminiExcludeProvider().detect(workspace_root)

    async def detect_all(self, workspace_root: Path) -> List[AiIgnoreSource]:
        """
        Detect all agent sources concurrently

        Returns:
            Detected sources in provider order; providers without a file are skipped
        """
        results = await asyncio.gather(
            *(provider.detect(workspace_root) for provider in self.providers)
        )
        # gather keeps submission order, so provider order is preserved
        return [source for source in results if source is not None]

    async def detect_with_summary(self, workspace_root: Path) -> AgentConfigDetectionResult:
        detected = await self.detect_all(workspace_root)
        mtimes = await asyncio.gather(*(stat_mtime(s.file_path) for s in detected if s.file_path))
        mtime_iter = iter(mtimes)

        configs: List[AgentConfigFile] = []
        parse_errors: List[AgentConfigError] = []
        for source in detected:
            provider = self._provider_for(source.source)
            mtime = next(mtime_iter) if source.file_path else None
            config_path = str(source.file_path) if source.file_path else ''
            configs.append(AgentConfigFile(
                agent_name=provider.agent_name if provider else 'custom',
                config_path=config_path,
                patterns=list(source.patterns),
                format=provider.format if provider else 'gitignore-style',
                parse_status='partial' if source.errors else 'success',
                last_modified=mtime or datetime.now(),
            ))
            for message in source.errors or []:
                parse_errors.append(AgentConfigError(config_path=config_path, message=message))

        return AgentConfigDetectionResult(
            workspace_root=Path(workspace_root),
            detected_configs=configs,
            total_patterns=sum(len(s.patterns) for s in detected),
            parse_errors=parse_errors,
        )

    def _provider_for(self, source: AiSource) -> Optional[AgentConfigProvider]:
        for provider in self.providers:
            if provider.source == source:
                return provider
        return None
