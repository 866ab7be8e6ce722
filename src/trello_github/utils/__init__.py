"""Utility functions for trello-github."""

from trello_github.utils.config import (
    ACTION_CREATE_CARD,
    ACTION_MOVE_CARD,
    SUPPORTED_ACTIONS,
    Settings,
    load_config,
    load_settings,
    validate_config,
)
from trello_github.utils.ids import is_valid_id
from trello_github.utils.logging import get_logger, sanitize_for_log, setup_logging

__all__ = [
    'ACTION_CREATE_CARD',
    'ACTION_MOVE_CARD',
    'SUPPORTED_ACTIONS',
    'Settings',
    'get_logger',
    'is_valid_id',
    'load_config',
    'load_settings',
    'sanitize_for_log',
    'setup_logging',
    'validate_config',
]
