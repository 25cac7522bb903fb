"""
Core types shared by the state and AI ignore resolvers
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional
from dataclasses import dataclass, field


class SourceKind(str, Enum):
    """Broad provider families, strongest first"""
    CONFIG = "config"
    IGNORE_FILE = "ignore-file"
    WORKSPACE_SETTINGS = "workspace-settings"


class Source(str, Enum):
    """Mechanisms that can exclude a path from a tool's processing"""
    CONFIG_TSCONFIG = "config-tsconfig"
    CONFIG_ESLINT = "config-eslint"
    CONFIG_PRETTIER = "config-prettier"
    IGNORE_FILE_GIT = "ignore-file-git"
    IGNORE_FILE_DOCKER = "ignore-file-docker"
    IGNORE_FILE_ESLINT = "ignore-file-eslint"
    IGNORE_FILE_PRETTIER = "ignore-file-prettier"
    IGNORE_FILE_NPM = "ignore-file-npm"
    IGNORE_FILE_STYLELINT = "ignore-file-stylelint"
    IGNORE_FILE_VSCODE = "ignore-file-vscode"
    WORKSPACE_FILES_EXCLUDE = "workspace-files-exclude"
    WORKSPACE_SEARCH_EXCLUDE = "workspace-search-exclude"

    @property
    def kind(self) -> SourceKind:
        return _SOURCE_KINDS[self]

    @property
    def rank(self) -> int:
        return source_rank(self)


_SOURCE_KINDS: Dict[Source, SourceKind] = {
    Source.CONFIG_TSCONFIG: SourceKind.CONFIG,
    Source.CONFIG_ESLINT: SourceKind.CONFIG,
    Source.CONFIG_PRETTIER: SourceKind.CONFIG,
    Source.IGNORE_FILE_GIT: SourceKind.IGNORE_FILE,
    Source.IGNORE_FILE_DOCKER: SourceKind.IGNORE_FILE,
    Source.IGNORE_FILE_ESLINT: SourceKind.IGNORE_FILE,
    Source.IGNORE_FILE_PRETTIER: SourceKind.IGNORE_FILE,
    Source.IGNORE_FILE_NPM: SourceKind.IGNORE_FILE,
    Source.IGNORE_FILE_STYLELINT: SourceKind.IGNORE_FILE,
    Source.IGNORE_FILE_VSCODE: SourceKind.IGNORE_FILE,
    Source.WORKSPACE_FILES_EXCLUDE: SourceKind.WORKSPACE_SETTINGS,
    Source.WORKSPACE_SEARCH_EXCLUDE: SourceKind.WORKSPACE_SETTINGS,
}

# Lower rank wins. Config > ignore file > workspace settings, config sub-ordered by tool.
_SOURCE_RANKS: Dict[Source, int] = {
    Source.CONFIG_TSCONFIG: 0,
    Source.CONFIG_ESLINT: 1,
    Source.CONFIG_PRETTIER: 2,
    Source.IGNORE_FILE_GIT: 10,
    Source.IGNORE_FILE_DOCKER: 11,
    Source.IGNORE_FILE_ESLINT: 12,
    Source.IGNORE_FILE_PRETTIER: 13,
    Source.IGNORE_FILE_NPM: 14,
    Source.IGNORE_FILE_STYLELINT: 15,
    Source.IGNORE_FILE_VSCODE: 16,
    Source.WORKSPACE_FILES_EXCLUDE: 20,
    Source.WORKSPACE_SEARCH_EXCLUDE: 21,
}


def source_rank(source: Source) -> int:
    """Precedence rank of a source; lower outranks higher"""
    return _SOURCE_RANKS[source]


class AiSource(str, Enum):
    """Providers of AI-agent ignore patterns"""
    WORKSPACE_SETTINGS_AI_IGNORE = "workspace-settings-ai-ignore"
    AGENT_CONFIG_CLAUDE = "agent-config-claude"
    AGENT_CONFIG_GEMINI = "agent-config-gemini"
    CUSTOM = "custom"


@dataclass(frozen=True)
class EffectiveState:
    """Exclusion state of a path (or aggregate of a selection)"""
    path: Optional[Path]
    excluded: bool = False
    mixed: bool = False
    source: Optional[Source] = None
    sources_applied: List[Source] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            'path': str(self.path) if self.path is not None else None,
            'excluded': self.excluded,
            'mixed': self.mixed,
            'source': self.source.value if self.source else None,
            'sources_applied': [s.value for s in self.sources_applied],
        }


@dataclass(frozen=True)
class PatternValidation:
    """Result of validating one candidate pattern"""
    valid: bool
    pattern: str
    errors: Optional[List[str]] = None


@dataclass(frozen=True)
class AiIgnoreSource:
    """Provenance of a set of AI ignore patterns"""
    source: AiSource
    patterns: List[str] = field(default_factory=list)
    file_path: Optional[Path] = None
    errors: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            'source': self.source.value,
            'patterns': list(self.patterns),
            'file_path': str(self.file_path) if self.file_path else None,
            'errors': list(self.errors) if self.errors else None,
        }


@dataclass(frozen=True)
class AiIgnoreConfig:
    """Aggregated, deduplicated AI ignore patterns for one workspace"""
    workspace_uri: str
    patterns: List[str]
    sources: List[AiIgnoreSource]
    last_updated: datetime
    is_valid: bool
    validation_errors: Optional[List[str]] = None


@dataclass(frozen=True)
class AiIgnoreStatus:
    """AI ignore decision for one file"""
    path: Path
    is_ignored: bool
    evaluated_at: datetime
    matched_patterns: Optional[List[str]] = None
    source: Optional[AiIgnoreSource] = None
    cache_key: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            'path': str(self.path),
            'is_ignored': self.is_ignored,
            'matched_patterns': self.matched_patterns,
            'source': self.source.to_dict() if self.source else None,
            'evaluated_at': self.evaluated_at.isoformat(),
            'cache_key': self.cache_key,
        }


@dataclass(frozen=True)
class AgentConfigFile:
    """A detected agent configuration file"""
    agent_name: str  # 'claude' | 'gemini' | 'custom'
    config_path: str
    patterns: List[str]
    format: str  # 'json' | 'gitignore-style'
    parse_status: str  # 'success' | 'partial'
    last_modified: datetime


@dataclass(frozen=True)
class AgentConfigError:
    """A parse problem found while reading an agent configuration file"""
    config_path: str
    message: str
    error_type: str = "parse"


@dataclass(frozen=True)
class AgentConfigDetectionResult:
    """Summary of every agent configuration found in a workspace"""
    workspace_root: Path
    detected_configs: List[AgentConfigFile]
    total_patterns: int
    parse_errors: List[AgentConfigError]

    def to_dict(self) -> Dict[str, object]:
        return {
            'workspace_root': str(self.workspace_root),
            'detected_configs': [
                {
                    'agent_name': c.agent_name,
                    'config_path': c.config_path,
                    'patterns': list(c.patterns),
                    'format': c.format,
                    'parse_status': c.parse_status,
                    'last_modified': c.last_modified.isoformat(),
                }
                for c in self.detected_configs
            ],
            'total_patterns': self.total_patterns,
            'parse_errors': [
                {'config_path': e.config_path, 'error_type': e.error_type, 'message': e.message}
                for e in self.parse_errors
            ],
        }
