"""Logging configuration for trello-github.

Logs go to the console, where the GitHub Actions runner collects them.
"""

from __future__ import annotations

import logging
import re

ROOT_LOGGER_NAME = 'trello_github'

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

SENSITIVE_PATTERNS = [
    (re.compile(r'ghp_[a-zA-Z0-9]{36}'), '[GITHUB_TOKEN]'),
    (re.compile(r'ghs_[a-zA-Z0-9]{36}'), '[GITHUB_TOKEN]'),
    (re.compile(r'github_pat_[a-zA-Z0-9_]{82}'), '[GITHUB_TOKEN]'),
    (re.compile(r'Bearer [a-zA-Z0-9._-]+'), 'Bearer [REDACTED]'),
    (re.compile(r'key=[a-zA-Z0-9._-]+'), 'key=[REDACTED]'),
    (re.compile(r'token=[a-zA-Z0-9._-]+'), 'token=[REDACTED]'),
]


def setup_logging(verbose: bool = False, stream=None) -> logging.Logger:
    """Set up console logging for the trello_github logger tree.

    Args:
        verbose: Log at DEBUG level instead of INFO.
        stream: Optional stream for the handler. Defaults to stderr.

    Returns:
        The root trello_github logger.
    """
    level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    logger.debug('Logging initialized (level=%s)', logging.getLevelName(level))
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Args:
        name: Component name (e.g., 'trello', 'orchestrator').
              Will be prefixed with 'trello_github.'.

    Returns:
        Logger instance for the component.
    """
    if not name.startswith(f'{ROOT_LOGGER_NAME}.'):
        name = f'{ROOT_LOGGER_NAME}.{name}'
    return logging.getLogger(name)


def sanitize_for_log(text: str) -> str:
    """Remove credentials from text before it is logged.

    Args:
        text: Text that may contain sensitive data.

    Returns:
        Sanitized text safe for logging.
    """
    result = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result
