"""
Backend settings accessor for MESSAI.
Reads runtime settings from MESSAI_* environment variables.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .config import DEFAULT_DB_DIR, DEFAULT_DB_FILENAME

ENV_PREFIX = "MESSAI_"


class LogLevel(str, Enum):
    """Log level options."""
    NONE = "none"
    ERROR = "error"
    INFO = "info"
    DEBUG = "debug"


class BackendSettings:
    """Access runtime settings from the environment."""

    @staticmethod
    def get_setting(key: str, default: Any = None) -> Any:
        """Get a setting value from the environment.

        Args:
            key: Setting key, without the MESSAI_ prefix
            default: Default value if the variable is unset or empty

        Returns:
            Setting value or default
        """
        value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if value is None or value == "":
            return default
        return value

    @staticmethod
    def set_setting(key: str, value: Any) -> None:
        """Set a setting for the current process."""
        os.environ[f"{ENV_PREFIX}{key.upper()}"] = str(value)

    @staticmethod
    def get_db_path() -> str:
        """Get the SQLite database path."""
        configured = BackendSettings.get_setting("db_path")
        if configured:
            return str(Path(configured).expanduser())
        return str(Path.cwd() / DEFAULT_DB_DIR / DEFAULT_DB_FILENAME)

    @staticmethod
    def get_log_level() -> LogLevel:
        """Get the configured log level, falling back to INFO."""
        raw = BackendSettings.get_setting("log_level", LogLevel.INFO.value)
        try:
            return LogLevel(str(raw).lower())
        except ValueError:
            return LogLevel.INFO

    @staticmethod
    def set_log_level(level: LogLevel) -> None:
        """Persist the log level for the current process."""
        BackendSettings.set_setting("log_level", level.value)

    @staticmethod
    def get_delay_seconds(default: Optional[float] = None) -> float:
        """Get the pause between papers in batch runs."""
        raw = BackendSettings.get_setting("delay_seconds")
        if raw is None:
            return default if default is not None else 0.0
        try:
            return max(0.0, float(raw))
        except (TypeError, ValueError):
            return default if default is not None else 0.0
