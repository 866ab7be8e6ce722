"""Trello REST API client."""

from dataclasses import dataclass, field
from typing import Any

import requests

from trello_github.services.results import ApiError, ApiResult
from trello_github.utils.config import Settings
from trello_github.utils.logging import get_logger, sanitize_for_log

TRELLO_BASE_URL = 'https://api.trello.com/1'
REQUEST_TIMEOUT = 30

logger = get_logger('trello')


@dataclass(frozen=True)
class CardRequest:
    """Fields of a card created from a GitHub issue."""

    number: int
    title: str
    description: str = ''
    source_url: str = ''
    member_ids: list[str] = field(default_factory=list)
    label_ids: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return f"[#{self.number}] {self.title}"


class TrelloClient:
    """Client for the Trello endpoints used by the actions.

    Every operation returns an ApiResult; HTTP and transport errors are
    reported through it and never raised.
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        """Initialize the client.

        Args:
            settings: Run settings carrying the board id and credentials.
            session: Optional requests session to use.
        """
        self.board_id = settings.board_id
        self.api_key = settings.api_key
        self.token = settings.api_token
        self.base_url = TRELLO_BASE_URL
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})
        # Successful board-scoped reads, keyed by endpoint.
        self._cache: dict[str, ApiResult[Any]] = {}

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> ApiResult[Any]:
        """Make API request to Trello.

        Args:
            method: HTTP method (GET, POST, etc.).
            endpoint: API endpoint path.
            params: Optional query parameters.
            data: Optional form fields.

        Returns:
            ApiResult with the decoded JSON response or the error.
        """
        url = f"{self.base_url}/{endpoint}"
        auth_params: dict[str, Any] = {
            'key': self.api_key,
            'token': self.token,
        }
        if params:
            auth_params.update(params)

        logger.debug("%s %s %s", method, endpoint, sanitize_for_log(str(params or '')))
        try:
            response = self.session.request(
                method, url, params=auth_params, data=data, timeout=REQUEST_TIMEOUT
            )
        except requests.RequestException as e:
            error = ApiError(f"{method} {endpoint} failed", reason=sanitize_for_log(str(e)))
            logger.warning("Trello request failed: %s", error)
            return ApiResult.failure(error)

        if not response.ok:
            error = ApiError(
                f"{method} {endpoint} failed",
                status=response.status_code,
                reason=response.reason or '',
            )
            logger.warning("Trello request %s %s returned %s", method, endpoint, error)
            return ApiResult.failure(error)

        try:
            payload = response.json()
        except ValueError as e:
            error = ApiError(f"{method} {endpoint} returned invalid JSON", reason=str(e))
            logger.warning("%s", error)
            return ApiResult.failure(error)
        return ApiResult.success(payload)

    def _cached_get(self, endpoint: str, params: dict[str, Any] | None = None) -> ApiResult[Any]:
        key = endpoint if not params else f"{endpoint}?{sorted(params.items())}"
        if key in self._cache:
            return self._cache[key]
        result = self._request('GET', endpoint, params)
        if result.ok:
            self._cache[key] = result
        return result

    def get_board_labels(self) -> ApiResult[list[dict[str, Any]]]:
        """Get the labels of the configured board.

        Returns:
            ApiResult with a list of label dictionaries.
        """
        return self._cached_get(f'boards/{self.board_id}/labels')

    def get_board_members(self) -> ApiResult[list[dict[str, Any]]]:
        """Get the members of the configured board.

        Returns:
            ApiResult with a list of member dictionaries.
        """
        return self._cached_get(f'boards/{self.board_id}/members')

    def get_board_lists(self) -> ApiResult[list[dict[str, Any]]]:
        """Get the open lists of the configured board.

        Returns:
            ApiResult with a list of list dictionaries. Closed lists are
            filtered out by Trello.
        """
        return self._cached_get(f'boards/{self.board_id}/lists', {'filter': 'open'})

    def get_cards(self, list_id: str | None = None) -> ApiResult[list[dict[str, Any]]]:
        """Get cards of a list, or of the whole board when no list is given.

        Args:
            list_id: Optional list id.

        Returns:
            ApiResult with a list of card dictionaries.
        """
        if list_id:
            return self._request('GET', f'lists/{list_id}/cards')
        return self._request('GET', f'boards/{self.board_id}/cards')

    def create_card(self, list_id: str, card: CardRequest) -> ApiResult[dict[str, Any]]:
        """Create a card at the bottom of a list.

        Args:
            list_id: Target list id.
            card: Card fields.

        Returns:
            ApiResult with the created card dictionary.
        """
        data = {
            'name': card.name,
            'desc': card.description,
            'pos': 'bottom',
            'idList': list_id,
            'urlSource': card.source_url,
            'idMembers': ','.join(card.member_ids),
            'idLabels': ','.join(card.label_ids),
        }
        return self._request('POST', 'cards', data=data)

    def update_card(
        self,
        card_id: str,
        list_id: str | None = None,
        member_ids: list[str] | None = None,
    ) -> ApiResult[dict[str, Any]]:
        """Update a card's list and/or members.

        Args:
            card_id: The ID of the card.
            list_id: Optional new list id.
            member_ids: Optional complete list of member ids.

        Returns:
            ApiResult with the updated card dictionary.
        """
        data: dict[str, Any] = {}
        if list_id:
            data['idList'] = list_id
        if member_ids is not None:
            data['idMembers'] = ','.join(member_ids)
        return self._request('PUT', f'cards/{card_id}', data=data)

    def get_card_attachments(self, card_id: str) -> ApiResult[list[dict[str, Any]]]:
        """Get attachments for a card.

        Args:
            card_id: The ID of the card.

        Returns:
            ApiResult with a list of attachment dictionaries.
        """
        return self._request('GET', f'cards/{card_id}/attachments')

    def add_attachment(self, card_id: str, url: str) -> ApiResult[dict[str, Any]]:
        """Attach a URL to a card.

        Args:
            card_id: The ID of the card.
            url: URL to attach.

        Returns:
            ApiResult with the created attachment dictionary.
        """
        return self._request('POST', f'cards/{card_id}/attachments', data={'url': url})
