"""
Bedtime Stories - Logging System
Console logging, plus rotating app and error log files unless LOG_TO_FILE is off.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union
from logging.handlers import RotatingFileHandler

from bedtime_stories.core.config import settings

# Log format
DETAILED_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s'
SIMPLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# =========================
# MAIN APPLICATION LOGGER
# =========================

def _rotating_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logger(
    log_dir: Optional[Union[str, Path]] = None,
    to_file: Optional[bool] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the "bedtime_stories" logger. Arguments default to settings.

    Always logs to stdout; with file logging on, everything also goes to
    <log_dir>/app.log and errors to <log_dir>/error.log.
    """
    to_file = settings.LOG_TO_FILE if to_file is None else to_file
    console_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    logger = logging.getLogger("bedtime_stories")
    logger.setLevel(logging.DEBUG)

    # Reconfiguring replaces the previous handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(console_handler)

    if to_file:
        logs_dir = Path(log_dir or settings.LOG_DIR).resolve()
        logs_dir.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_rotating_handler(logs_dir / "app.log", logging.DEBUG))
        logger.addHandler(_rotating_handler(logs_dir / "error.log", logging.ERROR))

    return logger


# Initialize main logger
logger = setup_logger()


def get_logger(name: str) -> logging.Logger:
    """
    Returns a child logger (e.g. bedtime_stories.writer).
    Inherits handlers from parent logger.
    """
    return logging.getLogger(f"bedtime_stories.{name}")


# =========================
# CONVENIENCE FUNCTIONS
# =========================

def log_api_request(method: str, path: str, status_code: int, duration_ms: float):
    """Log API request metrics."""
    api_logger = get_logger("api")
    api_logger.info(f"{method} {path} | {status_code} | {duration_ms:.2f}ms")


def log_agent_action(agent_name: str, action: str, details: str = "", success: bool = True):
    """Log agent actions (writer, painter)."""
    agent_logger = get_logger(f"agent.{agent_name}")
    status = "✓" if success else "✗"
    if success:
        agent_logger.info(f"[{status}] {action} | {details}")
    else:
        agent_logger.warning(f"[{status}] {action} | {details}")


def log_error(message: str, error: Exception = None, context: dict = None):
    """Log error with optional exception and context."""
    error_logger = get_logger("error")
    context_str = ""
    if context:
        context_str = " | " + " | ".join(f"{k}={v}" for k, v in context.items())
    if error:
        error_logger.error(f"{message}: {str(error)}{context_str}", exc_info=error)
    else:
        error_logger.error(f"{message}{context_str}")
