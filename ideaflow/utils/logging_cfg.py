from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from ideaflow.utils.env_cfg import load_path_env

CONSOLE_FORMAT = "<red>{level}</red> | {name} | {message}"
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {line:<4} | {name} | {message}"
)


def setup_logging(
    rotation: str = "5 MB",
    retention: int = 3,
    console_level: str = "ERROR",
) -> Path:
    """
    Set up logging for the application.

    The terminal is also the chat surface, and every recoverable failure is
    already reported there by the session. Only unexpected errors reach stderr;
    the full DEBUG trail goes to the rotating log file.

    Args:
        rotation (str, optional): The log file rotation policy. Defaults to "5 MB".
        retention (int, optional): The number of log files to retain. Defaults to 3.
        console_level (str, optional): Minimum level shown on stderr. Defaults to "ERROR".

    Returns:
        Path: The path to the log file.
    """
    log_path = load_path_env().logs

    logger.remove()

    logger.add(
        sink=sys.stderr,
        level=console_level,
        backtrace=False,
        diagnose=False,
        format=CONSOLE_FORMAT,
    )

    logger.add(
        sink=log_path,
        rotation=rotation,
        retention=retention,
        encoding="utf-8",
        level="DEBUG",
        backtrace=True,
        diagnose=False,
        enqueue=True,
        format=FILE_FORMAT,
    )

    return log_path
