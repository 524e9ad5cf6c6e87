# COMPONENT: CENTRALIZED LOGGING CONFIGURATION
# REQUIREMENTS SATISFIED: environment-controlled verbosity for services, routers and middleware

"""
src/utils/logging.py

Configures the loggers used across the media service. Behavior is
controlled entirely through environment variables.

Environment Variables:
    LOG_LEVEL:
        0 → Silent (no logs emitted)
        1 → INFO level logging
        2 → DEBUG level logging

    LOG_FILE:
        Optional path to a log file. If provided and valid, logs are written
        to this file. Otherwise, logs fall back to standard error (stderr).

Design Decisions:
    - Application loggers are isolated from the root logger so uvicorn and
      Lambda handlers do not print every line twice.
    - Existing handlers are cleared on setup, so calling setup_logger again
      (tests, reloads) does not stack handlers.
"""
import logging
import os
import sys

LOGGER_NAMES = ("media_lifecycle", "uploads_router", "team_router", "http")


def _level_from_env() -> int:
    try:
        # LOG_LEVEL=0 is silent, 1 is INFO, 2 is DEBUG
        log_level_env = int(os.environ.get("LOG_LEVEL", "0"))
    except ValueError:
        log_level_env = 0
    return log_level_env


def setup_logger(name: str = "media_lifecycle") -> logging.Logger:
    """
    Configures and returns a logger based on LOG_FILE and LOG_LEVEL
    environment variables.
    """
    log_file = os.environ.get("LOG_FILE")
    log_level_env = _level_from_env()

    logger = logging.getLogger(name)
    logger.propagate = False

    if log_level_env == 1:
        logger.setLevel(logging.INFO)
    elif log_level_env >= 2:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.CRITICAL + 1)

    if logger.hasHandlers():
        logger.handlers.clear()

    handler = None
    if log_file and log_level_env > 0:
        try:
            handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError:
            handler = logging.StreamHandler(sys.stderr)
    elif log_level_env > 0:
        handler = logging.StreamHandler(sys.stderr)

    if handler:
        formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging() -> None:
    for name in LOGGER_NAMES:
        setup_logger(name)
