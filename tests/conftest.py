"""Shared pytest fixtures."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from trello_github.models import GithubEvent
from trello_github.services.github_client import GithubClient
from trello_github.services.results import ApiError, ApiResult
from trello_github.services.trello_client import TrelloClient
from trello_github.utils.config import ACTION_CREATE_CARD, Settings

BOARD_ID = '5f1b2c3d4e5f6a7b8c9d0e1f'
LIST_ID = '60a1b2c3d4e5f60718293a4b'
SOURCE_LIST_ID = '60a1b2c3d4e5f60718293a4c'
TARGET_LIST_ID = '60a1b2c3d4e5f60718293a4d'
REPO_URL = 'https://github.com/acme/widgets'


def make_settings(**overrides: Any) -> Settings:
    """Build Settings with valid defaults."""
    values: dict[str, Any] = {
        'action': ACTION_CREATE_CARD,
        'board_id': BOARD_ID,
        'api_key': 'test_key',
        'api_token': 'test_token',
        'github_token': 'test_github_token',
        'list_id': LIST_ID,
        'source_list_id': SOURCE_LIST_ID,
        'target_list_id': TARGET_LIST_ID,
    }
    values.update(overrides)
    return Settings(**values)


def make_response(
    payload: Any = None,
    status_code: int = 200,
    reason: str = 'OK',
    links: dict[str, Any] | None = None,
) -> MagicMock:
    """Build a fake requests.Response."""
    response = MagicMock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = payload
    response.links = links or {}
    return response


def ok(data: Any) -> ApiResult[Any]:
    return ApiResult.success(data)


def failed(status: int = 500, reason: str = 'Internal Server Error') -> ApiResult[Any]:
    return ApiResult.failure(ApiError('request failed', status=status, reason=reason))


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def trello() -> MagicMock:
    """Trello client double with an open target, source and creation list."""
    client = MagicMock(spec=TrelloClient)
    client.board_id = BOARD_ID
    client.get_board_lists.return_value = ok([
        {'id': LIST_ID, 'name': 'Backlog', 'closed': False},
        {'id': SOURCE_LIST_ID, 'name': 'In progress', 'closed': False},
        {'id': TARGET_LIST_ID, 'name': 'Review', 'closed': False},
    ])
    return client


@pytest.fixture
def github() -> MagicMock:
    client = MagicMock(spec=GithubClient)
    client.list_comments.return_value = ok([])
    client.add_comment.return_value = ok({'id': 1})
    return client


@pytest.fixture
def issue_payload() -> dict[str, Any]:
    return {
        'action': 'opened',
        'issue': {
            'number': 42,
            'title': 'Bug',
            'body': 'Something is broken',
            'html_url': f'{REPO_URL}/issues/42',
            'assignees': [{'login': 'alice'}],
            'labels': [{'name': 'bug'}],
        },
        'repository': {
            'name': 'widgets',
            'html_url': REPO_URL,
            'owner': {'login': 'acme', 'name': None},
        },
    }


@pytest.fixture
def pull_request_payload() -> dict[str, Any]:
    return {
        'action': 'opened',
        'pull_request': {
            'number': 7,
            'title': 'Fix the bug',
            'body': 'fixes #12 and #7',
            'html_url': f'{REPO_URL}/pull/7',
            'assignees': [],
            'labels': [],
            'requested_reviewers': [{'login': 'bob'}],
        },
        'repository': {
            'name': 'widgets',
            'html_url': REPO_URL,
            'owner': {'login': 'acme'},
        },
    }


@pytest.fixture
def issue_event(issue_payload: dict[str, Any]) -> GithubEvent:
    return GithubEvent.from_payload(issue_payload, 'issues')


@pytest.fixture
def pull_request_event(pull_request_payload: dict[str, Any]) -> GithubEvent:
    return GithubEvent.from_payload(pull_request_payload, 'pull_request')
