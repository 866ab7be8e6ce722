"""CLI command definitions for trello-github."""

from pathlib import Path

import click
from dotenv import load_dotenv

from trello_github.exceptions import ConfigError, TrelloGithubError
from trello_github.models import load_event
from trello_github.services.github_client import GithubClient
from trello_github.services.lists import list_exists
from trello_github.services.orchestrator import ActionOrchestrator, CreatedCard, MoveSummary
from trello_github.services.trello_client import TrelloClient
from trello_github.utils.config import SUPPORTED_ACTIONS, load_settings
from trello_github.utils.logging import setup_logging

# Load environment variables
load_dotenv()


@click.group()
def cli() -> None:
    """trello-github - Sync GitHub issues and pull requests to a Trello board."""
    pass


@cli.command()
@click.option('--action', type=click.Choice(SUPPORTED_ACTIONS), help='Workflow to run (overrides INPUT_ACTION)')
@click.option('--event-path', envvar='GITHUB_EVENT_PATH', type=click.Path(path_type=Path),
              help='Webhook payload file (defaults to GITHUB_EVENT_PATH)')
@click.option('--event-name', envvar='GITHUB_EVENT_NAME', default='', help='Webhook event name')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to trello-github.yaml')
@click.option('--verbose', is_flag=True, help='Log debug output')
def run(
    action: str | None,
    event_path: Path | None,
    event_name: str,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Run a workflow for the current GitHub event.

    Args:
        action: Optional action overriding the configured one.
        event_path: Path to the webhook payload JSON.
        event_name: Name of the webhook event.
        config_path: Optional config file path.
        verbose: If True, log debug output.
    """
    setup_logging(verbose)
    try:
        settings = load_settings(
            config_path,
            overrides={'action': action, 'verbose': verbose or None},
        )
        if settings.verbose and not verbose:
            setup_logging(True)

        if not event_path:
            raise ConfigError("GITHUB_EVENT_PATH is not set.")
        event = load_event(event_path, event_name)

        orchestrator = ActionOrchestrator(
            settings,
            event,
            TrelloClient(settings),
            GithubClient(settings.github_token),
        )
        result = orchestrator.run()
    except TrelloGithubError as e:
        raise click.ClickException(str(e))

    if isinstance(result, CreatedCard):
        click.echo(f"Created card: {result.name} {result.url}")
        if result.commented:
            click.echo("Linked the card from the issue.")
    elif isinstance(result, MoveSummary):
        _echo_summary(result)


def _echo_summary(summary: MoveSummary) -> None:
    if summary.is_empty:
        click.echo("No cards matched the pull request.")
        return
    click.echo(f"Moved: {len(summary.moved)}")
    click.echo(f"Failed: {len(summary.failed)}")
    for outcome in summary.failed:
        click.echo(f"  {outcome.name}: {outcome.error}")


@cli.command()
@click.argument('list_id', required=False)
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to trello-github.yaml')
def lists(list_id: str | None, config_path: Path | None) -> None:
    """Show the open lists of the configured board.

    With LIST_ID, check that it is one of them and fail otherwise.
    """
    try:
        settings = load_settings(config_path, require_action=False)
    except ConfigError as e:
        raise click.ClickException(str(e))

    trello = TrelloClient(settings)
    if list_id:
        if not list_exists(trello, list_id):
            raise click.ClickException(
                f"List {list_id} is not an open list on board {settings.board_id}"
            )
        click.echo(f"List {list_id} is an open list on board {settings.board_id}")
        return

    try:
        board_lists = trello.get_board_lists().unwrap() or []
    except TrelloGithubError as e:
        raise click.ClickException(f"Error listing lists: {e}")

    click.echo(f"\nOpen lists on board {settings.board_id} ({len(board_lists)}):\n")
    for board_list in board_lists:
        click.echo(f"  {board_list['id']:26} {board_list.get('name', '')}")
    click.echo()
