"""
confignore - exclusion state resolution for workspace tooling

Answers two questions for any path in a workspace:
- Which tool configs, ignore files or workspace settings exclude it?
- Is it hidden from AI agents (workspace setting, .claude/settings.json, .aiexclude)?
"""

__version__ = "0.1.0"

from .config import ResolverConfig
from .errors import ConfignoreError, ConfigTargetError, Errors
from .models import (
    AgentConfigDetectionResult,
    AgentConfigError,
    AgentConfigFile,
    AiIgnoreConfig,
    AiIgnoreSource,
    AiIgnoreStatus,
    AiSource,
    EffectiveState,
    PatternValidation,
    Source,
    SourceKind,
    source_rank,
)
from .paths import WorkspaceFolder, Workspaces, get_workspace_relative_path, normalize_path
from .ignore import AiIgnoreCache, PatternMatcher, validate_ai_ignore_pattern
from .ai import AgentConfigDetector, AiIgnoreResolver, ConfigAggregator
from .state import StateResolver
from .config_watcher import ConfigWatcher

__all__ = [
    '__version__',
    'ResolverConfig',
    'ConfignoreError',
    'ConfigTargetError',
    'Errors',
    'AgentConfigDetectionResult',
    'AgentConfigError',
    'AgentConfigFile',
    'AiIgnoreConfig',
    'AiIgnoreSource',
    'AiIgnoreStatus',
    'AiSource',
    'EffectiveState',
    'PatternValidation',
    'Source',
    'SourceKind',
    'source_rank',
    'WorkspaceFolder',
    'Workspaces',
    'get_workspace_relative_path',
    'normalize_path',
    'AiIgnoreCache',
    'PatternMatcher',
    'validate_ai_ignore_pattern',
    'AgentConfigDetector',
    'AiIgnoreResolver',
    'ConfigAggregator',
    'StateResolver',
    'ConfigWatcher',
]
