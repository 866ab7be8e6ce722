"""Correlation of pull requests with Trello cards.

A card is linked to GitHub only through text: its name carries the
originating issue number as ``[#N]``. A pull request moves every card that
shares an issue-reference token with the PR body, provided the card also
has an attachment pointing into the same repository. The attachment check
keeps cards of other repositories that happen to mention the same issue
number out of the move set.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from trello_github.exceptions import TrelloGithubError
from trello_github.models import extract_issue_references
from trello_github.services.trello_client import TrelloClient
from trello_github.utils.config import DEFAULT_MAX_WORKERS
from trello_github.utils.logging import get_logger

logger = get_logger('correlator')


@dataclass(frozen=True)
class MatchedCard:
    """A card selected for moving, with the attachments it was matched on."""

    card: dict[str, Any]
    attachments: list[dict[str, Any]] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.card['id']

    @property
    def name(self) -> str:
        return self.card.get('name') or ''


def card_references(card: dict[str, Any]) -> list[str]:
    """Issue-reference tokens in a card's name and description."""
    return extract_issue_references(f"{card.get('name') or ''} {card.get('desc') or ''}")


def matches_issue_references(card: dict[str, Any], references: list[str]) -> bool:
    """Check whether a card shares at least one issue reference.

    Args:
        card: Trello card dictionary.
        references: Tokens such as '#12' extracted from the PR body.

    Returns:
        True if the card's name or description contains one of the tokens.
    """
    if not references:
        return False
    return not set(card_references(card)).isdisjoint(references)


def has_repository_link(attachments: list[dict[str, Any]], repo_url: str) -> bool:
    """Check whether any attachment URL points into the repository.

    Args:
        attachments: Trello attachment dictionaries.
        repo_url: Repository HTML URL, matched as a prefix.

    Returns:
        True if an attachment URL starts with repo_url.
    """
    if not repo_url:
        return False
    return any((attachment.get('url') or '').startswith(repo_url) for attachment in attachments)


def has_attachment_url(attachments: list[dict[str, Any]], url: str) -> bool:
    """Check whether a card already carries an attachment for this URL."""
    wanted = url.rstrip('/')
    return any((attachment.get('url') or '').rstrip('/') == wanted for attachment in attachments)


def select_by_references(cards: list[dict[str, Any]], references: list[str]) -> list[dict[str, Any]]:
    """Cards sharing at least one issue reference with the PR body."""
    selected = [card for card in cards if matches_issue_references(card, references)]
    for card in selected:
        logger.debug(
            "Card %s %r references %s", card.get('id'), card.get('name'), card_references(card)
        )
    return selected


def find_cards_to_move(
    trello: TrelloClient,
    pr_body: str | None,
    repo_url: str,
    list_id: str | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[MatchedCard]:
    """Find the cards a pull request should move.

    Args:
        trello: Trello client bound to the configured board.
        pr_body: Pull request description.
        repo_url: HTML URL of the repository the PR belongs to.
        list_id: Optional list to search. The whole board is searched when
            empty.
        max_workers: Concurrent attachment lookups.

    Returns:
        Matched cards with their attachments. Empty when the body references
        no issue or no card matches.

    Raises:
        TrelloGithubError: If the cards cannot be fetched.
    """
    references = extract_issue_references(pr_body)
    if not references:
        logger.info("Pull request body references no issues")
        return []
    logger.debug("Pull request references %s", references)

    result = trello.get_cards(list_id)
    if not result.ok:
        where = f"list {list_id}" if list_id else f"board {trello.board_id}"
        raise TrelloGithubError(f"Could not fetch cards of {where}: {result.error}")

    candidates = select_by_references(result.data or [], references)
    if not candidates:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        attachment_results = list(
            executor.map(lambda card: trello.get_card_attachments(card['id']), candidates)
        )

    matched: list[MatchedCard] = []
    for card, attachments in zip(candidates, attachment_results):
        if not attachments.ok:
            logger.warning(
                "Skipping card %r: attachments could not be fetched (%s)",
                card.get('name'), attachments.error,
            )
            continue
        if not has_repository_link(attachments.data or [], repo_url):
            logger.info("Skipping card %r: no attachment links to %s", card.get('name'), repo_url)
            continue
        matched.append(MatchedCard(card=card, attachments=list(attachments.data or [])))

    logger.info("%d card(s) match the pull request", len(matched))
    return matched
