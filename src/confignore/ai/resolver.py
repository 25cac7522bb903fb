"""
AI ignore resolver: loads configuration, caches results, and evaluates files against patterns.
"""

import dataclasses
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from ..errors import Errors
from ..ignore.cache import AiIgnoreCache, file_cache_key, workspace_cache_key
from ..ignore.pattern_matcher import PatternMatcher
from ..models import AiIgnoreConfig, AiIgnoreSource, AiIgnoreStatus
from ..paths import WorkspaceFolder, Workspaces, get_workspace_relative_path
from ..utils import get_logger, log_with_context
from .agent_config_detector import AgentConfigDetector
from .config_aggregator import ConfigAggregator
from .schema import SchemaValidationResult, validate_settings_schema

logger = get_logger(__name__)
notification_logger = get_logger('confignore.notifications')

Notifier = Callable[[str], None]


def log_notifier(message: str) -> None:
    """Default notifier: surface the message as a warning log record"""
    notification_logger.warning(message)


def summarize_errors(errors: Sequence[str]) -> Optional[str]:
    """The single user-facing message for a set of configuration errors"""
    if not errors:
        return None
    if len(errors) == 1:
        return errors[0]
    return f"{Errors.partial_load(len(errors))}. First: {errors[0]}"


class AiIgnoreResolver:
    """
    Resolves whether files are excluded from AI-agent context, and why
    """

    def __init__(self,
                 workspaces: Workspaces,
                 cache: Optional[AiIgnoreCache] = None,
                 notifier: Optional[Notifier] = None,
                 detector: Optional[AgentConfigDetector] = None):
        """
        Args:
            workspaces: Workspace folders used to locate a file's owner
            cache: Cache shared with the config watcher (a private one if omitted)
            notifier: Receives at most one message per configuration rebuild
            detector: Agent config detector used during aggregation
        """
        self.workspaces = workspaces
        self.cache = cache if cache is not None else AiIgnoreCache()
        self.notifier = notifier or log_notifier
        self._aggregator = ConfigAggregator(detector)
        self._matcher = PatternMatcher()

    @staticmethod
    def workspace_key(workspace: WorkspaceFolder) -> str:
        return workspace_cache_key(workspace.uri)

    async def parse_ai_ignore_config(self, workspace: WorkspaceFolder) -> AiIgnoreConfig:
        """
        Aggregated AI ignore configuration for a workspace, cache first

        Args:
            workspace: Workspace folder

        Returns:
            The cached config, a freshly built one, or an empty invalid config
            when aggregation fails unexpectedly
        """
        cache_key = self.workspace_key(workspace)
        cached = self.cache.get_workspace(cache_key)
        if cached is not None:
            return cached

        generation = self.cache.generation

        schema_result: Optional[SchemaValidationResult] = None
        try:
            schema_result = await validate_settings_schema(workspace.root)
        except Exception as e:
            logger.warning(f"Failed to validate AI ignore settings schema for {workspace.root}: {e}")

        try:
            aggregated = await self._aggregator.aggregate(workspace)
        except Exception as e:
            logger.warning(f"Failed to parse AI ignore config for {workspace.root}: {e}", exc_info=True)
            return AiIgnoreConfig(
                workspace_uri=workspace.uri,
                patterns=[],
                sources=[],
                last_updated=datetime.now(),
                is_valid=False,
                validation_errors=[str(e) or 'Unknown error parsing AI ignore config'],
            )

        errors = self._collect_errors(aggregated, schema_result)
        if errors:
            aggregated = dataclasses.replace(
                aggregated,
                is_valid=False,
                validation_errors=errors,
                last_updated=datetime.now(),
            )
            self._notify_errors(errors)

        self.cache.set_workspace(cache_key, aggregated, generation=generation)
        return aggregated

    async def get_status(self, path: Union[str, Path]) -> AiIgnoreStatus:
        """
        AI ignore status of one file

        Args:
            path: File or folder path

        Returns:
            AiIgnoreStatus; files outside every workspace are never ignored
        """
        path = Path(path)
        workspace = self.workspaces.get_workspace_folder(path)
        if workspace is None:
            return AiIgnoreStatus(path=path, is_ignored=False, evaluated_at=datetime.now())

        relative_path = get_workspace_relative_path(path, workspace)
        if not relative_path:
            return AiIgnoreStatus(path=path, is_ignored=False, evaluated_at=datetime.now())

        file_key = file_cache_key(workspace.uri, relative_path)
        cached = self.cache.get_file(file_key)
        if cached is not None:
            return cached

        generation = self.cache.generation
        config = await self.parse_ai_ignore_config(workspace)
        evaluation = self._matcher.evaluate(relative_path, config.patterns)
        matched_source = None
        if evaluation.ignored:
            matched_source = self._find_source_for_match(config.sources, evaluation.matched_patterns)

        status = AiIgnoreStatus(
            path=path,
            is_ignored=evaluation.ignored,
            evaluated_at=datetime.now(),
            matched_patterns=list(evaluation.matched_patterns) or None,
            source=matched_source,
            cache_key=file_key,
        )
        log_with_context(
            logger, logging.DEBUG, f"AI ignore check for {relative_path}: {status.is_ignored}",
            matched_patterns=evaluation.matched_patterns,
            source=matched_source.source.value if matched_source else None,
        )

        self.cache.set_file(file_key, status, generation=generation)
        return status

    async def is_ignored_for_ai(self, path: Union[str, Path]) -> bool:
        status = await self.get_status(path)
        return status.is_ignored

    @staticmethod
    def _find_source_for_match(sources: List[AiIgnoreSource],
                               matched_patterns: List[str]) -> Optional[AiIgnoreSource]:
        # First source, in aggregation order, that literally lists any matched pattern
        matched = set(matched_patterns)
        for source in sources:
            if matched.intersection(source.patterns):
                return source
        return None

    @staticmethod
    def _collect_errors(config: AiIgnoreConfig,
                        schema_result: Optional[SchemaValidationResult]) -> List[str]:
        merged: List[str] = []

        def add(message: str):
            if message not in merged:
                merged.append(message)

        if schema_result is not None and not schema_result.valid:
            for error in schema_result.errors:
                add(error)
        for error in config.validation_errors or []:
            add(error)
        for source in config.sources:
            file = str(source.file_path) if source.file_path else source.source.value
            for error in source.errors or []:
                add(Errors.agent_config_read(file, error))
        return merged

    def _notify_errors(self, errors: List[str]):
        message = summarize_errors(errors)
        if message is None:
            return
        log_with_context(logger, logging.WARNING, 'AI ignore configuration errors', errors=errors)
        try:
            self.notifier(message)
        except Exception as e:
            logger.error(f"AI ignore notifier failed: {e}")
