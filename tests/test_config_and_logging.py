"""Tests for runtime configuration, logging setup and error templates"""

import json
import logging
from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from confignore.config import ResolverConfig
from confignore.constants import DEFAULT_DEBOUNCE_SECONDS, DEFAULT_FILE_TTL, DEFAULT_WORKSPACE_TTL
from confignore.errors import ConfigTargetError, ConfignoreError, Errors
from confignore.utils import TRACE_LEVEL, configure_logging, get_logger, log_with_context
from confignore.utils.logging_setup import JsonFormatter


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestResolverConfig:

    def test_defaults(self):
        config = ResolverConfig()
        assert config.file_ttl == DEFAULT_FILE_TTL
        assert config.workspace_ttl == DEFAULT_WORKSPACE_TTL
        assert config.debounce_seconds == DEFAULT_DEBOUNCE_SECONDS

    def test_validation(self):
        with pytest.raises(ValueError):
            ResolverConfig(file_ttl=0)
        with pytest.raises(ValueError):
            ResolverConfig(workspace_ttl=-1)
        with pytest.raises(ValueError):
            ResolverConfig(debounce_seconds=-0.1)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CONFIGNORE_FILE_CACHE_TTL", "5")
        monkeypatch.setenv("CONFIGNORE_WORKSPACE_CACHE_TTL", "12.5")
        monkeypatch.setenv("CONFIGNORE_WATCH_DEBOUNCE", "0")

        config = ResolverConfig.from_env()
        assert config.file_ttl == 5.0
        assert config.workspace_ttl == 12.5
        assert config.debounce_seconds == 0.0

    def test_arguments_override_env(self, monkeypatch):
        monkeypatch.setenv("CONFIGNORE_FILE_CACHE_TTL", "5")
        assert ResolverConfig.from_env(file_ttl=9).file_ttl == 9

    def test_non_numeric_env_ignored(self, monkeypatch):
        monkeypatch.setenv("CONFIGNORE_FILE_CACHE_TTL", "soon")
        assert ResolverConfig.from_env().file_ttl == DEFAULT_FILE_TTL

    def test_summary(self):
        summary = ResolverConfig(file_ttl=1, workspace_ttl=2, debounce_seconds=3).get_config_summary()
        assert summary == {'file_ttl': 1, 'workspace_ttl': 2, 'debounce_seconds': 3}


class TestLogging:

    def test_stderr_mode(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("LOG_TO_STDERR", "1")
        monkeypatch.delenv("CONFIGNORE_LOG_JSON", raising=False)

        configure_logging(log_level="DEBUG")
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0], logging.StreamHandler)
        assert logging.getLogger("watchdog").level == logging.WARNING

    def test_trace_level(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("LOG_TO_STDERR", "1")
        configure_logging(log_level="TRACE")
        assert restore_root_logger.level == TRACE_LEVEL
        assert hasattr(get_logger("confignore.test"), "trace")

    def test_file_mode(self, monkeypatch, tmp_path, restore_root_logger):
        if Path("/.dockerenv").exists():
            pytest.skip("container environments always log to stderr")
        monkeypatch.delenv("LOG_TO_STDERR", raising=False)
        monkeypatch.delenv("CONFIGNORE_LOG_JSON", raising=False)
        monkeypatch.delenv("DOCKER_CONTAINER", raising=False)
        log_file = tmp_path / "confignore.log"

        configure_logging(log_level="INFO", log_file=str(log_file))
        get_logger("confignore.test").info("written to file")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert "written to file" in log_file.read_text()

    def test_json_formatter_includes_context(self):
        logger = get_logger("confignore.test")
        record = logger.makeRecord(
            "confignore.test", logging.INFO, __file__, 1, "checked %s", ("a.env",), None,
            extra={"context": {"matched_patterns": ["*.env"]}},
        )
        data = json.loads(JsonFormatter().format(record))
        assert data["message"] == "checked a.env"
        assert data["level"] == "INFO"
        assert data["component"] == "confignore.test"
        assert data["matched_patterns"] == ["*.env"]

    def test_log_with_context(self, caplog):
        logger = get_logger("confignore.test")
        with caplog.at_level(logging.INFO, logger="confignore.test"):
            log_with_context(logger, logging.INFO, "status", source="agent-config-gemini")
        assert caplog.records[-1].context == {"source": "agent-config-gemini"}


class TestErrors:

    def test_hierarchy(self):
        assert issubclass(ConfigTargetError, ConfignoreError)

    def test_templates(self):
        assert Errors.invalid_pattern("src\\", "bad escape") == "Invalid AI ignore pattern: src\\ - bad escape"
        assert Errors.agent_config_read(".aiexclude", "denied") == (
            "Failed to read agent config: .aiexclude - denied"
        )
        assert Errors.partial_load(3) == "AI ignore config partially loaded: 3 patterns invalid"
        assert Errors.unknown_setting("confignore.x") == "Unknown Confignore setting: confignore.x"
