"""Trello and GitHub services."""

from trello_github.services.comments import already_linked
from trello_github.services.correlator import MatchedCard, find_cards_to_move
from trello_github.services.github_client import GithubClient
from trello_github.services.lists import list_exists
from trello_github.services.orchestrator import (
    ActionOrchestrator,
    CardOutcome,
    CreatedCard,
    MoveSummary,
)
from trello_github.services.results import ApiError, ApiResult
from trello_github.services.trello_client import CardRequest, TrelloClient

__all__ = [
    'ActionOrchestrator',
    'ApiError',
    'ApiResult',
    'CardOutcome',
    'CardRequest',
    'CreatedCard',
    'GithubClient',
    'MatchedCard',
    'MoveSummary',
    'TrelloClient',
    'already_linked',
    'find_cards_to_move',
    'list_exists',
]
