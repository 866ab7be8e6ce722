"""Command line interface for trello-github."""

from trello_github.cli.commands import cli

__all__ = ['cli']
