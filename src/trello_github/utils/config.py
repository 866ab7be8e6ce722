"""Configuration utilities for trello-github."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from trello_github.exceptions import ConfigError
from trello_github.utils.ids import is_valid_id

CONFIG_FILE_NAME = 'trello-github.yaml'

ACTION_CREATE_CARD = 'issue_opened_create_card'
ACTION_MOVE_CARD = 'pull_request_event_move_card'
SUPPORTED_ACTIONS = (ACTION_CREATE_CARD, ACTION_MOVE_CARD)

DEFAULT_MAX_WORKERS = 4

TRUE_VALUES = {'1', 'true', 'yes', 'on'}

# Config file key -> environment variables, first one set wins.
ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    'board_id': ('TRELLO_BOARD_ID',),
    'list_id': ('TRELLO_LIST_ID',),
    'source_list_id': ('TRELLO_SOURCE_LIST_ID',),
    'target_list_id': ('TRELLO_TARGET_LIST_ID',),
    'sync_members': ('TRELLO_SYNC_BOARD_MEMBERS',),
    'verbose': ('TRELLO_ACTION_VERBOSE', 'INPUT_VERBOSE'),
    'action': ('TRELLO_ACTION', 'INPUT_ACTION'),
    'max_workers': ('TRELLO_MAX_WORKERS',),
}

ID_KEYS = ('board_id', 'list_id', 'source_list_id', 'target_list_id')


@dataclass(frozen=True)
class Settings:
    """Run configuration, built once at process start."""

    action: str
    board_id: str
    api_key: str
    api_token: str
    github_token: str
    list_id: str = ''
    source_list_id: str = ''
    target_list_id: str = ''
    sync_members: bool = False
    verbose: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS


def find_config_path(start: Path | None = None) -> Path | None:
    """Locate trello-github.yaml in the current directory or its parents.

    Args:
        start: Directory to start from. Defaults to the current directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    current_dir = start or Path.cwd()
    candidate = current_dir / CONFIG_FILE_NAME
    if candidate.exists():
        return candidate
    # Try parent directories up to 3 levels
    for parent in current_dir.parents[:3]:
        candidate = parent / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate
    return None


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load and parse the YAML configuration file.

    Args:
        config_path: Optional path to config file. Defaults to trello-github.yaml
            found by find_config_path().

    Returns:
        Configuration dictionary, empty if no file exists.

    Raises:
        ConfigError: If config file is invalid or cannot be read.
    """
    if config_path is None:
        config_path = find_config_path()
        if config_path is None:
            return {}

    if not config_path.exists():
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading config file: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return config


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate configuration structure.

    Args:
        config: Configuration dictionary to validate.

    Returns:
        List of validation error messages. Empty list if valid.
    """
    errors: list[str] = []

    if not isinstance(config, dict):
        errors.append("Config must be a dictionary")
        return errors

    for key in ID_KEYS:
        value = config.get(key)
        if value in (None, ''):
            continue
        if not isinstance(value, str):
            errors.append(f"'{key}' must be a string")
        elif not is_valid_id(value):
            errors.append(f"'{key}' is not a valid Trello id: {value}")

    for key in ('sync_members', 'verbose'):
        if key in config and not isinstance(config[key], bool):
            errors.append(f"'{key}' must be a boolean")

    if 'max_workers' in config:
        max_workers = config['max_workers']
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            errors.append("'max_workers' must be a positive integer")

    if config.get('action') not in (None, '') and config['action'] not in SUPPORTED_ACTIONS:
        errors.append(f"'action' must be one of {', '.join(SUPPORTED_ACTIONS)}")

    return errors


def parse_bool(value: Any) -> bool:
    """Interpret a config or environment value as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


def _env(environ: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def load_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: dict[str, Any] | None = None,
    require_action: bool = True,
) -> Settings:
    """Build run settings from the config file, environment and overrides.

    Precedence, lowest first: config file, environment, explicit overrides
    (CLI options).

    Args:
        config_path: Optional path to the YAML config file.
        environ: Environment mapping. Defaults to os.environ.
        overrides: Values that take precedence over everything else.
        require_action: Require a supported action and a GitHub token.
            Board inspection commands only need Trello credentials.

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If the configuration is incomplete or invalid.
    """
    if environ is None:
        environ = os.environ

    config = load_config(config_path)
    errors = validate_config(config)
    if errors:
        raise ConfigError("Invalid configuration: " + '; '.join(errors))

    values: dict[str, Any] = dict(config)
    for key, names in ENV_OVERRIDES.items():
        value = _env(environ, *names)
        if value is not None:
            values[key] = value
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    action = (values.get('action') or '').strip()
    if require_action:
        if not action:
            raise ConfigError("Action is not set.")
        if action not in SUPPORTED_ACTIONS:
            raise ConfigError(f"Action is not supported: {action}")

    api_key = _env(environ, 'TRELLO_API_KEY')
    api_token = _env(environ, 'TRELLO_API_TOKEN', 'TRELLO_TOKEN')
    if not api_key or not api_token:
        raise ConfigError("Trello API key and/or token is missing.")

    github_token = _env(environ, 'GITHUB_TOKEN') or ''
    if require_action and not github_token:
        raise ConfigError("GITHUB_TOKEN is missing.")

    board_id = (values.get('board_id') or '').strip()
    if not is_valid_id(board_id):
        raise ConfigError("TRELLO_BOARD_ID is missing or does not match the Trello id pattern.")

    try:
        max_workers = int(values.get('max_workers', DEFAULT_MAX_WORKERS))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"max_workers must be an integer: {e}") from e
    if max_workers < 1:
        raise ConfigError("max_workers must be a positive integer")

    return Settings(
        action=action,
        board_id=board_id,
        api_key=api_key,
        api_token=api_token,
        github_token=github_token,
        list_id=(values.get('list_id') or '').strip(),
        source_list_id=(values.get('source_list_id') or '').strip(),
        target_list_id=(values.get('target_list_id') or '').strip(),
        sync_members=parse_bool(values.get('sync_members')),
        verbose=parse_bool(values.get('verbose')),
        max_workers=max_workers,
    )
