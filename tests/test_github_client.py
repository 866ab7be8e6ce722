"""Tests for the GitHub REST client."""

from unittest.mock import MagicMock

import pytest
import requests

from conftest import make_response
from trello_github.models import IssueLocator
from trello_github.services.github_client import GithubClient

LOCATOR = IssueLocator('acme', 'widgets', 7)
COMMENTS_URL = 'https://api.github.com/repos/acme/widgets/issues/7/comments'


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def client(session: MagicMock) -> GithubClient:
    return GithubClient('gh_token', session=session)


def test_github_client_auth_headers(client: GithubClient, session: MagicMock) -> None:
    """Test the session is authenticated with a bearer token."""
    assert session.headers['Authorization'] == 'Bearer gh_token'
    assert session.headers['Accept'] == 'application/vnd.github+json'


def test_add_comment(client: GithubClient, session: MagicMock) -> None:
    """Test posting a comment."""
    session.request.return_value = make_response({'id': 1, 'body': 'hello'}, status_code=201)

    result = client.add_comment(LOCATOR, 'hello')

    assert result.ok
    assert result.data == {'id': 1, 'body': 'hello'}
    call_args = session.request.call_args
    assert call_args[0] == ('POST', COMMENTS_URL)
    assert call_args[1]['json'] == {'body': 'hello'}


def test_add_comment_failure(client: GithubClient, session: MagicMock) -> None:
    """Test a rejected comment is reported as a failed result."""
    session.request.return_value = make_response(status_code=403, reason='Forbidden')

    result = client.add_comment(LOCATOR, 'hello')

    assert not result.ok
    assert str(result.error) == '403 Forbidden'


def test_add_comment_transport_error(client: GithubClient, session: MagicMock) -> None:
    """Test network failures are reported, not raised."""
    session.request.side_effect = requests.Timeout('timed out')

    result = client.add_comment(LOCATOR, 'hello')

    assert not result.ok
    assert result.error is not None
    assert result.error.is_transport_error


def test_list_comments_single_page(client: GithubClient, session: MagicMock) -> None:
    """Test listing comments of a thread."""
    session.request.return_value = make_response([{'body': 'a'}, {'body': 'b'}])

    result = client.list_comments(LOCATOR)

    assert result.data == [{'body': 'a'}, {'body': 'b'}]
    call_args = session.request.call_args
    assert call_args[0] == ('GET', COMMENTS_URL)
    assert call_args[1]['params'] == {'per_page': 100}


def test_list_comments_empty(client: GithubClient, session: MagicMock) -> None:
    """Test a thread without comments is a successful empty list."""
    session.request.return_value = make_response([])

    result = client.list_comments(LOCATOR)

    assert result.ok
    assert result.data == []


def test_list_comments_follows_pagination(client: GithubClient, session: MagicMock) -> None:
    """Test the Link header is followed until the last page."""
    next_url = f'{COMMENTS_URL}?per_page=100&page=2'
    session.request.side_effect = [
        make_response([{'body': 'a'}], links={'next': {'url': next_url}}),
        make_response([{'body': 'b'}]),
    ]

    result = client.list_comments(LOCATOR)

    assert result.data == [{'body': 'a'}, {'body': 'b'}]
    second_call = session.request.call_args_list[1]
    assert second_call[0] == ('GET', next_url)
    assert second_call[1]['params'] is None


def test_list_comments_failure(client: GithubClient, session: MagicMock) -> None:
    """Test a failing page fails the whole listing."""
    session.request.side_effect = [
        make_response([{'body': 'a'}], links={'next': {'url': f'{COMMENTS_URL}?page=2'}}),
        make_response(status_code=502, reason='Bad Gateway'),
    ]

    result = client.list_comments(LOCATOR)

    assert not result.ok
    assert result.error is not None
    assert result.error.status == 502
