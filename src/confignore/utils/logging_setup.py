"""
Logging configuration for confignore.

Provides environment-aware logging that:
- Never writes to stdout, which carries CLI output
- Outputs JSON in containers or when CONFIGNORE_LOG_JSON is set
- Provides human-readable output for local use
- Supports log rotation for file-based logging
- Includes custom TRACE level for detailed debugging
"""

import sys
import logging
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Any

# Define TRACE level (lower number = more detailed)
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")


def trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


logging.Logger.trace = trace


def add_trace_to_logger():
    """Ensure trace method is available on all logger instances"""
    if not hasattr(logging.Logger, 'trace'):
        logging.Logger.trace = trace


class JsonFormatter(logging.Formatter):
    """JSON formatter for container and log-shipping environments"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'component': record.name,
            'message': record.getMessage(),
            'pid': os.getpid(),
        }

        # Context fields attached through log_with_context()
        if hasattr(record, 'context'):
            log_data.update(record.context)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes', 'on')


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    enable_rotation: bool = True,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
    quiet_libraries: bool = True,
) -> None:
    """
    Configure logging based on environment.

    Args:
        log_level: Override log level (defaults to CONFIGNORE_LOG_LEVEL, LOG_LEVEL or INFO)
        log_file: Path to log file (only used when not logging to stderr only)
        enable_rotation: Enable log rotation for file handler
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
        quiet_libraries: Suppress verbose third-party library logs
    """
    add_trace_to_logger()
    level_str = (
        log_level
        or os.environ.get('CONFIGNORE_LOG_LEVEL')
        or os.environ.get('LOG_LEVEL', 'INFO')
    )

    if level_str.upper() == 'TRACE':
        level = TRACE_LEVEL
    else:
        level = getattr(logging, level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers = []

    in_container = (
        os.path.exists('/.dockerenv') or
        _env_flag('DOCKER_CONTAINER')
    )
    json_output = in_container or _env_flag('CONFIGNORE_LOG_JSON')

    if json_output or _env_flag('LOG_TO_STDERR'):
        handler = logging.StreamHandler(sys.stderr)
        if json_output:
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
    else:
        if log_file:
            log_path = Path(log_file)
        else:
            log_dir = Path.home() / '.confignore' / 'logs'
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_dir / 'confignore.log'

        if enable_rotation:
            handler = RotatingFileHandler(
                str(log_path),
                maxBytes=max_bytes,
                backupCount=backup_count
            )
        else:
            handler = logging.FileHandler(str(log_path))

        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))

        # Console handler for immediate feedback
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(
            '%(levelname)s: %(message)s'
        ))
        console_handler.setLevel(max(level, logging.WARNING))
        root_logger.addHandler(console_handler)

    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    if quiet_libraries:
        # watchdog's inotify backend is chatty at DEBUG
        for lib in ('watchdog', 'asyncio'):
            logging.getLogger(lib).setLevel(logging.WARNING)

    logger = logging.getLogger('confignore')
    logger.debug(f"Logging configured - Level: {level_str.upper()}, JSON: {json_output}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    add_trace_to_logger()
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (e.g., logging.INFO)
        message: Log message
        **context: Additional fields to include in structured logs
    """
    extra = {'context': context} if context else {}
    logger.log(level, message, extra=extra)
