"""
AI-agent ignore resolution

Aggregates patterns from workspace settings and agent configuration files,
caches the result per workspace and answers per-file queries.
"""

from .agent_config_detector import (
    AgentConfigDetector,
    AgentConfigProvider,
    ClaudeSettingsProvider,
    GeminiExcludeProvider,
)
from .config_aggregator import ConfigAggregator, aggregate_config, dedupe_patterns
from .resolver import AiIgnoreResolver, log_notifier, summarize_errors
from .schema import SchemaValidationResult, validate_settings_object, validate_settings_schema
from .workspace_settings import get_ai_ignore_patterns_from_settings

__all__ = [
    'AgentConfigDetector',
    'AgentConfigProvider',
    'ClaudeSettingsProvider',
    'GeminiExcludeProvider',
    'ConfigAggregator',
    'aggregate_config',
    'dedupe_patterns',
    'AiIgnoreResolver',
    'log_notifier',
    'summarize_errors',
    'SchemaValidationResult',
    'validate_settings_object',
    'validate_settings_schema',
    'get_ai_ignore_patterns_from_settings',
]
