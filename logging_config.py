"""
Logging configuration for the workforce planner.

Solver modules log through logging.getLogger(__name__); this module attaches
handlers to those loggers once per process.
"""

import logging
from pathlib import Path
from typing import Optional, Union

PLANNER_LOGGERS = ("workforce",)

# Standard log format with module name and line number
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LOGGING_CONFIGURED = False


def setup_logging(level: Union[int, str] = "INFO",
                  log_file: Optional[Path] = None) -> None:
    """
    Configure console (and optionally file) logging for the planner loggers.

    Args:
        level: Log level name or number applied to every planner logger
        log_file: If given, messages are also appended to this file
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)

    for name in PLANNER_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    _LOGGING_CONFIGURED = True


def reset_logging() -> None:
    """Remove planner handlers so setup_logging can run again."""
    global _LOGGING_CONFIGURED

    for name in PLANNER_LOGGERS:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    _LOGGING_CONFIGURED = False
