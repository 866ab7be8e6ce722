"""trello-github - Sync GitHub issue and pull request events to a Trello board."""

__version__ = '0.1.0'

from trello_github.cli import cli
from trello_github.services import ActionOrchestrator

__all__ = ['ActionOrchestrator', 'cli']
