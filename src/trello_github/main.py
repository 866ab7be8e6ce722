#!/usr/bin/env python3
"""Main entry point for the trello-github CLI."""

from trello_github.cli.commands import cli

if __name__ == '__main__':
    cli()
