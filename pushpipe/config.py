"""Runtime configuration for pushpipe.

Settings are read from environment variables (a local .env file is loaded
first via python-dotenv).

Environment Variables:
    PUSHPIPE_LOG_LEVEL: Level for the "pushpipe" logger (default: WARNING)
    PUSHPIPE_EXTENSIONS_FILE: YAML file of extensions loaded by
        load_extensions() when no path is given (default: unset)
    PUSHPIPE_WARN_UNHANDLED_ERRORS: Log chain failures that no error
        listener receives (default: true)
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = "WARNING"


def get_bool(env_var: str, default: bool) -> bool:
    """Get boolean flag from environment or return default."""
    value = os.getenv(env_var)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class StreamConfig:
    """
    Settings shared by every stream.

    Read from the environment at construction time, so changes made after
    import (tests, late .env loading) are picked up by a new instance.
    """

    def __init__(self):
        self.log_level = os.getenv("PUSHPIPE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        self.extensions_file: Optional[str] = os.getenv("PUSHPIPE_EXTENSIONS_FILE") or None
        self.warn_unhandled_errors = get_bool("PUSHPIPE_WARN_UNHANDLED_ERRORS", True)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"StreamConfig("
            f"log_level={self.log_level}, "
            f"extensions_file={self.extensions_file!r}, "
            f"warn_unhandled_errors={self.warn_unhandled_errors})"
        )


_config: Optional[StreamConfig] = None


def get_config() -> StreamConfig:
    """Get the process-wide configuration, creating it on first use."""
    global _config
    if _config is None:
        _config = StreamConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Set the level of the "pushpipe" logger.

    Args:
        level: Level name, defaults to PUSHPIPE_LOG_LEVEL

    Returns:
        The package logger
    """
    level_name = (level or get_config().log_level).upper()
    package_logger = logging.getLogger("pushpipe")

    if level_name not in logging.getLevelNamesMapping():
        logger.warning(f"Invalid log level {level_name}, using default {DEFAULT_LOG_LEVEL}")
        level_name = DEFAULT_LOG_LEVEL

    package_logger.setLevel(level_name)
    return package_logger
