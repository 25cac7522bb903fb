"""
Central configuration for exclusion sources and AI ignore processing
"""

# Workspace settings file (JSON, may contain comments)
WORKSPACE_SETTINGS_PATH = ".vscode/settings.json"

# AI ignore setting inside the workspace settings file
AI_IGNORE_SETTING = "confignore.aiIgnore"

# Settings under the confignore namespace that the schema accepts
ALLOWED_SETTINGS_KEYS = frozenset([
    "confignore.aiIgnore",
    "confignore.defaultIgnoreFile",
    "confignore.confirmMixedState",
    "confignore.checkDuplicates",
])
SETTINGS_NAMESPACE = "confignore."

# Agent configuration files
CLAUDE_SETTINGS_PATH = ".claude/settings.json"
GEMINI_EXCLUDE_PATH = ".aiexclude"

# Paths whose changes invalidate the AI ignore configuration of a workspace
WATCHED_CONFIG_PATHS = (
    WORKSPACE_SETTINGS_PATH,
    CLAUDE_SETTINGS_PATH,
    GEMINI_EXCLUDE_PATH,
)

# Tool configuration files, in lookup order
TSCONFIG_FILES = ("tsconfig.json",)
ESLINT_CONFIG_FILES = (".eslintrc.json",)
PRETTIER_CONFIG_FILES = (".prettierrc", ".prettierrc.json")

# Line-oriented ignore files
GITIGNORE = ".gitignore"
DOCKERIGNORE = ".dockerignore"
ESLINTIGNORE = ".eslintignore"
PRETTIERIGNORE = ".prettierignore"
NPMIGNORE = ".npmignore"
STYLELINTIGNORE = ".stylelintignore"
VSCODEIGNORE = ".vscodeignore"

# Workspace settings keys holding {glob: bool} exclusion maps
FILES_EXCLUDE_SETTING = "files.exclude"
SEARCH_EXCLUDE_SETTING = "search.exclude"

# Cache lifetimes (seconds)
DEFAULT_FILE_TTL = 30.0
DEFAULT_WORKSPACE_TTL = 60.0

# Filesystem watcher
DEFAULT_DEBOUNCE_SECONDS = 0.5

# Limits for security and performance
MAX_CONFIG_FILE_SIZE = 1024 * 1024  # 1MB
MAX_PATTERNS_PER_FILE = 10000
