"""Centralized logging configuration for trellolink.

Logs go to the console (the Actions run log) and, when a log directory is
given, to a rotating file as well.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Default configuration
DEFAULT_LOG_FILE = "trellolink.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Set up logging for a run.

    Args:
        log_dir: Directory for log files. No file is written when unset.
                 Can be provided with TRELLOLINK_LOG_DIR environment variable.
        log_file: Log file name. Defaults to 'trellolink.log'.
        max_bytes: Maximum size per log file before rotation. Defaults to 10MB.
        backup_count: Number of backup files to keep. Defaults to 5.
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO.
               Can be overridden with TRELLOLINK_LOG_LEVEL environment variable.
        console: Whether to log to console. Defaults to True.

    Returns:
        The root trellolink logger.
    """
    if log_dir is None:
        log_dir = os.environ.get("TRELLOLINK_LOG_DIR") or None

    if level is None:
        level = os.environ.get("TRELLOLINK_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("trellolink")
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path: Path | None = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / log_file
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.debug("trellolink logging initialized (level=%s, file=%s)", level, log_path)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Args:
        name: Component name (e.g., 'tracker', 'sync').
              Will be prefixed with 'trellolink.'.

    Returns:
        Logger instance for the component.
    """
    if not name.startswith("trellolink."):
        name = f"trellolink.{name}"
    return logging.getLogger(name)


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Truncate long output (e.g. response bodies) for logging.

    Args:
        output: The output string to truncate.
        max_length: Maximum length before truncation.

    Returns:
        Truncated string with indicator if truncated.
    """
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"\n... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Remove credentials from log output.

    Trello credentials travel as ``key`` and ``token`` query parameters, so
    every logged URL goes through here first.

    Args:
        text: Text that may contain sensitive data.

    Returns:
        Sanitized text safe for logging.
    """
    patterns = [
        (r"ghp_[a-zA-Z0-9]{36}", "[GITHUB_TOKEN]"),  # GitHub PAT
        (r"ghs_[a-zA-Z0-9]{36}", "[GITHUB_TOKEN]"),  # Actions installation token
        (r"github_pat_[a-zA-Z0-9_]{82}", "[GITHUB_TOKEN]"),  # Fine-grained PAT
        (r"Bearer [a-zA-Z0-9._-]+", "Bearer [REDACTED]"),
        (r"([?&])key=[^&\s]+", r"\1key=[REDACTED]"),
        (r"([?&])token=[^&\s]+", r"\1token=[REDACTED]"),
    ]

    result = text
    for pat, replacement in patterns:
        result = re.sub(pat, replacement, result)

    return result
