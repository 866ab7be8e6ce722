"""Detection of Trello backlinks already posted on GitHub."""

from trello_github.models import IssueLocator
from trello_github.services.github_client import GithubClient
from trello_github.utils.logging import get_logger

logger = get_logger('comments')


def already_linked(github: GithubClient, short_url: str, locator: IssueLocator) -> bool:
    """Check whether a Trello short link already appears in a discussion.

    When the comments cannot be fetched the link is reported as present,
    so callers skip posting rather than risk a duplicate.

    Args:
        github: GitHub client.
        short_url: Trello card short URL to look for.
        locator: Issue or pull request to search.

    Returns:
        True if any comment body contains short_url, or if the lookup failed.
    """
    result = github.list_comments(locator)
    if not result.ok:
        logger.warning(
            "Could not read comments of %s (%s); not posting a link to %s",
            locator, result.error, short_url,
        )
        return True
    return any(short_url in (comment.get('body') or '') for comment in result.data or [])


def card_link_comment(card_name: str, short_url: str) -> str:
    """Markdown comment linking to a Trello card."""
    return f"Trello card: [{card_name}]({short_url})"
