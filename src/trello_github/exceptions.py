"""Exceptions raised by trello-github."""


class TrelloGithubError(Exception):
    """Fatal error that fails the whole run."""


class ConfigError(TrelloGithubError):
    """Configuration error."""


class EventError(TrelloGithubError):
    """GitHub event payload is missing, unreadable or incomplete."""
