"""Tests for AI ignore pattern aggregation"""

import json
from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from confignore.ai import ConfigAggregator, aggregate_config, dedupe_patterns
from confignore.models import AiIgnoreSource, AiSource
from confignore.paths import WorkspaceFolder


def write_settings(root: Path, settings: dict):
    path = root / ".vscode" / "settings.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings))
    return path


class TestConfigAggregator:

    @pytest.fixture
    def workspace(self, tmp_path):
        return WorkspaceFolder.from_path(tmp_path)

    @pytest.mark.asyncio
    async def test_empty_workspace(self, workspace):
        config = await aggregate_config(workspace)
        assert config.workspace_uri == workspace.uri
        assert config.patterns == []
        assert config.sources == []
        assert config.is_valid
        assert config.validation_errors is None

    @pytest.mark.asyncio
    async def test_merges_in_source_order(self, workspace):
        write_settings(workspace.root, {"confignore.aiIgnore": ["*.env", "secrets/**"]})
        claude = workspace.root / ".claude" / "settings.json"
        claude.parent.mkdir()
        claude.write_text(json.dumps({"permissions": {"deny": [
            "Read(./secrets/**)", "Read(./private/**)"]}}))
        (workspace.root / ".aiexclude").write_text("*.pem\n*.env\n")

        config = await ConfigAggregator().aggregate(workspace)

        assert [s.source for s in config.sources] == [
            AiSource.WORKSPACE_SETTINGS_AI_IGNORE,
            AiSource.AGENT_CONFIG_CLAUDE,
            AiSource.AGENT_CONFIG_GEMINI,
        ]
        assert config.patterns == ["*.env", "secrets/**", "private/**", "*.pem"]
        assert config.is_valid

    @pytest.mark.asyncio
    async def test_invalid_patterns_reported(self, workspace):
        write_settings(workspace.root, {"confignore.aiIgnore": ["*.env", "!", "  "]})

        config = await aggregate_config(workspace)
        assert config.patterns == ["*.env"]
        assert not config.is_valid
        assert config.validation_errors == [
            "!: Negation pattern must include a rule",
            ": Pattern is empty",
        ]

    @pytest.mark.asyncio
    async def test_engine_rejection_from_agent_file(self, workspace):
        (workspace.root / ".aiexclude").write_text("*.pem\nsrc\\\n[abc\n")

        config = await aggregate_config(workspace)
        # An unclosed bracket is a literal character, not a syntax error
        assert config.patterns == ["*.pem", "[abc"]
        assert not config.is_valid
        assert config.validation_errors == ["src\\: Invalid git pattern: 'src\\\\'"]
        assert [s.source for s in config.sources] == [AiSource.AGENT_CONFIG_GEMINI]

    @pytest.mark.asyncio
    async def test_engine_rejection_from_settings(self, workspace):
        write_settings(workspace.root, {"confignore.aiIgnore": ["*.env", "!build\\"]})

        config = await aggregate_config(workspace)
        assert config.patterns == ["*.env"]
        assert len(config.validation_errors) == 1
        assert config.validation_errors[0].startswith("!build\\: Invalid git pattern")

    @pytest.mark.asyncio
    async def test_workspace_source_omitted_without_valid_patterns(self, workspace):
        write_settings(workspace.root, {"confignore.aiIgnore": ["!"]})

        config = await aggregate_config(workspace)
        assert config.sources == []
        assert not config.is_valid

    @pytest.mark.asyncio
    async def test_source_with_read_error_stays_visible(self, workspace):
        (workspace.root / ".aiexclude").write_bytes(b"\xff\xfe\xfa")

        config = await aggregate_config(workspace)
        assert len(config.sources) == 1
        source = config.sources[0]
        assert source.source == AiSource.AGENT_CONFIG_GEMINI
        assert source.patterns == []
        assert source.errors

    @pytest.mark.asyncio
    async def test_agent_source_without_patterns_dropped(self, workspace):
        (workspace.root / ".aiexclude").write_text("# nothing yet\n")

        config = await aggregate_config(workspace)
        assert config.sources == []

    @pytest.mark.asyncio
    async def test_non_string_settings_entries_skipped(self, workspace):
        write_settings(workspace.root, {"confignore.aiIgnore": ["*.env", 3, None]})

        config = await aggregate_config(workspace)
        assert config.patterns == ["*.env"]


class TestDedupePatterns:

    def test_first_occurrence_wins(self):
        sources = [
            AiIgnoreSource(source=AiSource.WORKSPACE_SETTINGS_AI_IGNORE, patterns=["./a/**", "b"]),
            AiIgnoreSource(source=AiSource.AGENT_CONFIG_GEMINI, patterns=["a/**", "c", "b"]),
        ]
        assert dedupe_patterns(sources) == ["./a/**", "b", "c"]

    def test_empty(self):
        assert dedupe_patterns([]) == []
