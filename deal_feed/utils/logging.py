"""
Structured logging utilities for the Deal Feed system.

Components log through a ComponentLogger, which encodes every message as a
JSON object carrying the component name and any extra fields. All loggers
live under the ``deal_feed`` hierarchy; the console handler is always
installed, rotating log files only when a log directory is configured.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

ROOT_LOGGER_NAME = "deal_feed"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# file name, max bytes, backups, minimum level (None follows the configured level)
LOG_FILES: Tuple[Tuple[str, int, int, Optional[int]], ...] = (
    ("deal_feed.log", 10 * 1024 * 1024, 5, None),
    ("errors.log", 5 * 1024 * 1024, 3, logging.ERROR),
)


class LogLevel(Enum):
    """Log levels accepted in configuration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ComponentLogger:
    """
    Structured logger for one component.

    Messages are emitted as JSON with a timestamp, the component name,
    the logger's fixed context and any per-call extra fields.
    """

    def __init__(self, component_name: str, extra_context: Optional[Dict[str, Any]] = None):
        """
        Args:
            component_name: Dotted component name, e.g. 'feed.server'
            extra_context: Fields added to every message from this logger
        """
        self.component_name = component_name
        self.extra_context = extra_context or {}
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component_name}")

    def _format_message(self, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Build the structured payload for one message."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "component": self.component_name,
            "message": message,
        }
        log_data.update(self.extra_context)
        log_data.update(extra or {})
        return log_data

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]], exc_info: bool = False):
        if not self.logger.isEnabledFor(level):
            return

        log_data = self._format_message(message, extra)
        if exc_info:
            log_data["exception"] = True
        # Non-JSON values are logged as their str()
        self.logger.log(level, json.dumps(log_data, default=str, ensure_ascii=False), exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        self._log(logging.ERROR, message, extra, exc_info)


class LoggingManager:
    """
    Configures the ``deal_feed`` logger hierarchy and hands out
    component loggers.
    """

    def __init__(self, log_dir: Optional[str] = None, log_level: str = "INFO"):
        """
        Args:
            log_dir: Directory for rotating log files; None logs to the console only
            log_level: Level name for the console and main log file
        """
        self.log_dir = Path(log_dir) if log_dir else None
        self.log_level = logging.getLevelName(log_level.upper())
        self.component_loggers: Dict[Tuple[str, str], ComponentLogger] = {}

        self._configure_root()

    def _configure_root(self):
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        formatter = logging.Formatter(LOG_FORMAT)

        console = logging.StreamHandler(sys.stdout)
        console.setLevel(self.log_level)
        console.setFormatter(formatter)
        root_logger.addHandler(console)

        if self.log_dir is None:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        for file_name, max_bytes, backups, min_level in LOG_FILES:
            handler = logging.handlers.RotatingFileHandler(
                self.log_dir / file_name,
                maxBytes=max_bytes,
                backupCount=backups,
                encoding="utf-8",
            )
            handler.setLevel(min_level if min_level is not None else self.log_level)
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

    def get_component_logger(self, component_name: str, extra_context: Optional[Dict[str, Any]] = None) -> ComponentLogger:
        """Return a cached ComponentLogger for the name and context."""
        cache_key = (component_name, json.dumps(extra_context or {}, sort_keys=True, default=str))

        if cache_key not in self.component_loggers:
            self.component_loggers[cache_key] = ComponentLogger(component_name, extra_context)

        return self.component_loggers[cache_key]

    def set_log_level(self, level: str):
        """Change the level of the hierarchy; the error log stays at ERROR."""
        self.log_level = logging.getLevelName(level.upper())

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(self.log_level)

        for handler in root_logger.handlers:
            if Path(getattr(handler, "baseFilename", "")).name == "errors.log":
                continue
            handler.setLevel(self.log_level)


_logging_manager: Optional[LoggingManager] = None


def setup_logging(log_dir: Optional[str] = None, log_level: str = "INFO") -> LoggingManager:
    """
    Configure logging for the process.

    Args:
        log_dir: Directory for log files, or None for console only
        log_level: Default log level

    Returns:
        The active LoggingManager
    """
    global _logging_manager
    _logging_manager = LoggingManager(log_dir, log_level)
    return _logging_manager


def get_logger(component_name: str, extra_context: Optional[Dict[str, Any]] = None) -> ComponentLogger:
    """Component logger from the active manager, configuring defaults on first use."""
    if _logging_manager is None:
        setup_logging()

    return _logging_manager.get_component_logger(component_name, extra_context)
