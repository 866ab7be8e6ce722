"""Dispatch of a GitHub event to the matching Trello workflow."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from trello_github.exceptions import ConfigError, EventError, TrelloGithubError
from trello_github.models import GithubEvent, Issue, PullRequest
from trello_github.services.comments import already_linked, card_link_comment
from trello_github.services.correlator import MatchedCard, find_cards_to_move, has_attachment_url
from trello_github.services.github_client import GithubClient
from trello_github.services.lists import list_exists
from trello_github.services.trello_client import CardRequest, TrelloClient
from trello_github.utils.config import ACTION_CREATE_CARD, ACTION_MOVE_CARD, Settings
from trello_github.utils.logging import get_logger

logger = get_logger('orchestrator')


@dataclass(frozen=True)
class CreatedCard:
    """Outcome of the issue-opened workflow."""

    card: dict[str, Any]
    commented: bool = False

    @property
    def name(self) -> str:
        return self.card.get('name') or ''

    @property
    def url(self) -> str:
        return self.card.get('shortUrl') or self.card.get('url') or ''


@dataclass
class CardOutcome:
    """What happened to one matched card in the pull request workflow."""

    card_id: str
    name: str
    moved: bool = False
    attached: bool = False
    commented: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class MoveSummary:
    """Outcome of the pull request workflow."""

    outcomes: list[CardOutcome] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.outcomes

    @property
    def moved(self) -> list[CardOutcome]:
        return [outcome for outcome in self.outcomes if outcome.moved]

    @property
    def failed(self) -> list[CardOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


def matching_ids(items: list[dict[str, Any]], key: str, wanted: list[str]) -> list[str]:
    """Ids of the board items whose key value is one of the wanted names.

    Args:
        items: Board labels or members.
        key: Field compared by exact equality ('name' or 'username').
        wanted: Names taken from GitHub.

    Returns:
        Matching ids in board order.
    """
    return [item['id'] for item in items if item.get(key) in wanted]


class ActionOrchestrator:
    """Runs one of the two workflows for a single webhook delivery."""

    def __init__(
        self,
        settings: Settings,
        event: GithubEvent,
        trello: TrelloClient,
        github: GithubClient,
    ) -> None:
        self.settings = settings
        self.event = event
        self.trello = trello
        self.github = github

    def run(self) -> CreatedCard | MoveSummary:
        """Run the workflow selected by the configured action.

        Returns:
            CreatedCard or MoveSummary, depending on the action.

        Raises:
            ConfigError: If the action is not supported or configuration is
                invalid.
            TrelloGithubError: If a fatal step fails.
        """
        action = self.settings.action
        logger.info("Running action %s for event %s", action, self.event.name or 'unknown')
        if action == ACTION_CREATE_CARD:
            return self.create_card_from_issue()
        if action == ACTION_MOVE_CARD:
            return self.move_cards_for_pull_request()
        raise ConfigError(f"Action is not supported: {action}")

    # -- issue opened ---------------------------------------------------------

    def create_card_from_issue(self) -> CreatedCard:
        """Create a card for the opened issue and link it from the issue.

        Any failure is fatal. A card that was already created is left in
        place.
        """
        issue = self._require_issue()
        list_id = self.settings.list_id
        if not list_exists(self.trello, list_id):
            raise ConfigError("TRELLO_LIST_ID is not valid.")

        with ThreadPoolExecutor(max_workers=2) as executor:
            labels_future = executor.submit(self.trello.get_board_labels)
            members_future = executor.submit(self.trello.get_board_members)
            labels_result = labels_future.result()
            members_result = members_future.result()

        if not labels_result.ok:
            raise TrelloGithubError(f"Could not fetch board labels: {labels_result.error}")
        if not members_result.ok:
            raise TrelloGithubError(f"Could not fetch board members: {members_result.error}")

        request = CardRequest(
            number=issue.number,
            title=issue.title,
            description=issue.body,
            source_url=issue.html_url,
            member_ids=matching_ids(members_result.data or [], 'username', issue.assignees),
            label_ids=matching_ids(labels_result.data or [], 'name', issue.labels),
        )
        logger.info("Creating new card in list %s from issue %r", list_id, request.name)

        created = self.trello.create_card(list_id, request)
        if not created.ok:
            raise TrelloGithubError(f"Could not create card {request.name!r}: {created.error}")
        result = CreatedCard(card=created.data or {})
        logger.info("Card created: %r %s", result.name, result.url)

        if not result.url:
            logger.warning("Created card has no URL; not commenting on the issue")
            return result

        locator = self.event.locator(issue.number)
        if already_linked(self.github, result.url, locator):
            logger.info("Issue %s already links to %s", locator, result.url)
            return result

        comment = self.github.add_comment(locator, card_link_comment(result.name, result.url))
        if not comment.ok:
            raise TrelloGithubError(
                f"Card {result.url} created but commenting on {locator} failed: {comment.error}"
            )
        return CreatedCard(card=result.card, commented=True)

    # -- pull request -------------------------------------------------------

    def move_cards_for_pull_request(self) -> MoveSummary:
        """Move the cards referenced by the pull request to the target list.

        Per-card failures are recorded in the summary and logged, never
        raised.
        """
        pull_request = self._require_pull_request()
        source_list_id = self.settings.source_list_id
        target_list_id = self.settings.target_list_id

        if not target_list_id or not list_exists(self.trello, target_list_id):
            raise ConfigError("TRELLO_TARGET_LIST_ID is invalid.")
        if source_list_id and not list_exists(self.trello, source_list_id):
            raise ConfigError("TRELLO_SOURCE_LIST_ID is invalid.")

        reviewer_ids = self._reviewer_member_ids(pull_request) if self.settings.sync_members else []

        matched = find_cards_to_move(
            self.trello,
            pull_request.body,
            self.event.repository.html_url,
            list_id=source_list_id or None,
            max_workers=self.settings.max_workers,
        )
        if not matched:
            logger.warning(
                "No cards matched pull request #%s; nothing was moved", pull_request.number
            )
            return MoveSummary()

        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            futures = [
                (card, executor.submit(self.process_card, card, pull_request, reviewer_ids))
                for card in matched
            ]
            outcomes = [self._collect(card, future) for card, future in futures]

        summary = MoveSummary(outcomes)
        logger.info(
            "Moved %d of %d card(s); %d failed",
            len(summary.moved), len(outcomes), len(summary.failed),
        )
        return summary

    def process_card(
        self,
        matched: MatchedCard,
        pull_request: PullRequest,
        reviewer_ids: list[str],
    ) -> CardOutcome:
        """Move one card, attach the PR and link the card from the PR.

        Each step runs only if the previous one succeeded.
        """
        outcome = CardOutcome(card_id=matched.id, name=matched.name)

        member_ids = None
        if self.settings.sync_members:
            member_ids = list(matched.card.get('idMembers') or [])
            member_ids += [member_id for member_id in reviewer_ids if member_id not in member_ids]

        updated = self.trello.update_card(
            matched.id, list_id=self.settings.target_list_id, member_ids=member_ids
        )
        if not updated.ok:
            return self._fail(outcome, f"moving failed: {updated.error}")
        outcome.moved = True
        logger.info("Moved card %r to list %s", matched.name, self.settings.target_list_id)

        pr_url = pull_request.html_url
        if pr_url and not has_attachment_url(matched.attachments, pr_url):
            attached = self.trello.add_attachment(matched.id, pr_url)
            if not attached.ok:
                return self._fail(outcome, f"attaching {pr_url} failed: {attached.error}")
            outcome.attached = True
            logger.info("Attached %s to card %r", pr_url, matched.name)

        card = updated.data or {}
        short_url = card.get('shortUrl') or matched.card.get('shortUrl') or ''
        if not short_url:
            return outcome

        locator = self.event.locator(pull_request.number)
        if already_linked(self.github, short_url, locator):
            return outcome
        comment = self.github.add_comment(locator, card_link_comment(matched.name, short_url))
        if not comment.ok:
            return self._fail(outcome, f"commenting on {locator} failed: {comment.error}")
        outcome.commented = True
        return outcome

    def _collect(self, matched: MatchedCard, future: Any) -> CardOutcome:
        try:
            return future.result()
        except Exception as e:
            logger.exception("Unexpected error processing card %r", matched.name)
            return CardOutcome(card_id=matched.id, name=matched.name, error=str(e))

    @staticmethod
    def _fail(outcome: CardOutcome, message: str) -> CardOutcome:
        outcome.error = message
        logger.error("Card %r: %s", outcome.name, message)
        return outcome

    def _reviewer_member_ids(self, pull_request: PullRequest) -> list[str]:
        members = self.trello.get_board_members()
        if not members.ok:
            logger.warning("Could not fetch board members, not syncing reviewers: %s", members.error)
            return []
        member_ids = matching_ids(members.data or [], 'username', pull_request.requested_reviewers)
        if member_ids:
            logger.info("Adding %d reviewer(s) as card members", len(member_ids))
        return member_ids

    def _require_issue(self) -> Issue:
        if self.event.issue is None:
            raise EventError("Event payload has no issue.")
        return self.event.issue

    def _require_pull_request(self) -> PullRequest:
        if self.event.pull_request is None:
            raise EventError("Event payload has no pull_request.")
        return self.event.pull_request
