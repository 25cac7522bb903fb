"""
Error types and user-facing message templates
"""


class ConfignoreError(Exception):
    """Base class for confignore errors"""
    pass


class ConfigTargetError(ConfignoreError):
    """Raised when a tool configuration file cannot be read or rewritten."""
    pass


class Errors:
    """Message templates for AI ignore flows"""

    no_config = "No AI ignore configuration detected"
    missing_array = "confignore.aiIgnore must be an array of strings"

    @staticmethod
    def invalid_pattern(pattern: str, reason: str) -> str:
        return f"Invalid AI ignore pattern: {pattern} - {reason}"

    @staticmethod
    def agent_config_read(file: str, error: str) -> str:
        return f"Failed to read agent config: {file} - {error}"

    @staticmethod
    def partial_load(count: int) -> str:
        return f"AI ignore config partially loaded: {count} patterns invalid"

    @staticmethod
    def parse_settings(file: str, error: str) -> str:
        return f"Failed to parse settings: {file} - {error}"

    @staticmethod
    def unknown_setting(key: str) -> str:
        return f"Unknown Confignore setting: {key}"
