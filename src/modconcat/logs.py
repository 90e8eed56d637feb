# src/modconcat/logs.py

import logging
from typing import cast

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV, PROGRAM_PACKAGE
from .utils_logs import CLILogger


class AppLogger(CLILogger):
    """App-specific logger class."""

    log_level_env_vars = (f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}", DEFAULT_ENV_LOG_LEVEL)
    default_log_level = DEFAULT_LOG_LEVEL


# --- Logger initialization ---------------------------------------------------

# Must happen before any loggers are created.
AppLogger.extend_logging_module()

_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))


# --- Convenience utils -------------------------------------------------------


def get_app_logger() -> AppLogger:
    """Return the configured app logger."""
    return _APP_LOGGER
