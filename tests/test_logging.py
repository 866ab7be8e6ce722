"""Tests for logging setup."""

import io
import logging

from trello_github.utils.logging import get_logger, sanitize_for_log, setup_logging


def test_setup_logging_levels() -> None:
    """Test verbose selects DEBUG and the default is INFO."""
    assert setup_logging(verbose=True).level == logging.DEBUG
    logger = setup_logging()
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_setup_logging_writes_to_stream() -> None:
    """Test component loggers write through the configured handler."""
    stream = io.StringIO()
    setup_logging(stream=stream)

    get_logger('orchestrator').info('hello')

    output = stream.getvalue()
    assert 'trello_github.orchestrator' in output
    assert 'hello' in output


def test_get_logger_prefix() -> None:
    """Test component names are prefixed once."""
    assert get_logger('trello').name == 'trello_github.trello'
    assert get_logger('trello_github.github').name == 'trello_github.github'


def test_sanitize_for_log() -> None:
    """Test credentials are redacted."""
    text = 'GET /1/boards?key=abc123&token=secret.value Authorization: Bearer abc.def-ghi'
    sanitized = sanitize_for_log(text)

    assert 'abc123' not in sanitized
    assert 'secret.value' not in sanitized
    assert 'key=[REDACTED]' in sanitized
    assert 'token=[REDACTED]' in sanitized
    assert 'Bearer [REDACTED]' in sanitized
    assert sanitize_for_log('ghp_' + 'a' * 36) == '[GITHUB_TOKEN]'
