"""
Aggregates AI ignore patterns from workspace settings and agent configs.
"""

import asyncio
import dataclasses
from datetime import datetime
from typing import List, Optional

from ..models import AiIgnoreConfig, AiIgnoreSource, AiSource
from ..ignore.pattern_validator import validate_ai_ignore_pattern
from ..paths import WorkspaceFolder, normalize_path
from ..utils import get_logger
from .agent_config_detector import AgentConfigDetector
from .workspace_settings import get_ai_ignore_patterns_from_settings, settings_path

logger = get_logger(__name__)


def _split_valid(patterns: List[str], errors: List[str]) -> List[str]:
    """Keep valid patterns, appending '<pattern>: <error>' for the rest"""
    valid = []
    for pattern in patterns:
        validation = validate_ai_ignore_pattern(pattern)
        if validation.valid:
            valid.append(validation.pattern)
        else:
            errors.extend(f"{validation.pattern}: {e}" for e in validation.errors or [])
    return valid


def dedupe_patterns(sources: List[AiIgnoreSource]) -> List[str]:
    """Merge source patterns in order; the first occurrence of a normalized pattern wins"""
    deduped: List[str] = []
    seen = set()
    for src in sources:
        for pattern in src.patterns:
            key = normalize_path(pattern)
            if key in seen:
                continue
            seen.add(key)
            deduped.append(pattern)
    return deduped


class ConfigAggregator:
    """
    Builds an AiIgnoreConfig for one workspace
    """

    def __init__(self, detector: Optional[AgentConfigDetector] = None):
        self.detector = detector or AgentConfigDetector()

    async def aggregate(self, workspace: WorkspaceFolder) -> AiIgnoreConfig:
        """
        Collect, validate and merge every AI ignore source of a workspace

        Args:
            workspace: Workspace folder to aggregate

        Returns:
            A fresh AiIgnoreConfig; invalid patterns are reported, not raised
        """
        settings_patterns, agent_sources = await asyncio.gather(
            get_ai_ignore_patterns_from_settings(workspace.root),
            self.detector.detect_all(workspace.root),
        )

        validation_errors: List[str] = []
        sources: List[AiIgnoreSource] = []

        workspace_patterns = _split_valid(settings_patterns, validation_errors)
        if workspace_patterns:
            sources.append(AiIgnoreSource(
                source=AiSource.WORKSPACE_SETTINGS_AI_IGNORE,
                patterns=workspace_patterns,
                file_path=settings_path(workspace.root),
            ))

        for agent_source in agent_sources:
            valid = _split_valid(agent_source.patterns, validation_errors)
            # Sources with read errors stay visible even without valid patterns
            if valid or agent_source.errors:
                sources.append(dataclasses.replace(agent_source, patterns=valid))

        patterns = dedupe_patterns(sources)
        logger.debug(
            f"Aggregated {len(patterns)} AI ignore patterns from {len(sources)} sources "
            f"for {workspace.root} ({len(validation_errors)} invalid)"
        )

        return AiIgnoreConfig(
            workspace_uri=workspace.uri,
            patterns=patterns,
            sources=sources,
            last_updated=datetime.now(),
            is_valid=not validation_errors,
            validation_errors=validation_errors or None,
        )


async def aggregate_config(workspace: WorkspaceFolder,
                           detector: Optional[AgentConfigDetector] = None) -> AiIgnoreConfig:
    return await ConfigAggregator(detector).aggregate(workspace)
