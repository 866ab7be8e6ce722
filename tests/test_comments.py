"""Tests for backlink comment deduplication."""

from unittest.mock import MagicMock

from conftest import failed, ok
from trello_github.models import IssueLocator
from trello_github.services.comments import already_linked, card_link_comment

LOCATOR = IssueLocator('acme', 'widgets', 7)
SHORT_URL = 'https://trello.com/c/AbCd1234'


def test_already_linked_found(github: MagicMock) -> None:
    """Test a comment containing the short link counts as linked."""
    github.list_comments.return_value = ok([
        {'body': 'LGTM'},
        {'body': f'Trello card: [[#12] Bug]({SHORT_URL})'},
    ])

    assert already_linked(github, SHORT_URL, LOCATOR) is True
    github.list_comments.assert_called_once_with(LOCATOR)


def test_already_linked_not_found(github: MagicMock) -> None:
    """Test comments without the short link do not count."""
    github.list_comments.return_value = ok([
        {'body': 'LGTM'},
        {'body': 'Trello card: https://trello.com/c/Other999'},
        {'body': None},
    ])

    assert already_linked(github, SHORT_URL, LOCATOR) is False


def test_already_linked_no_comments(github: MagicMock) -> None:
    """Test an empty thread is not linked."""
    github.list_comments.return_value = ok([])

    assert already_linked(github, SHORT_URL, LOCATOR) is False


def test_already_linked_fetch_failure(github: MagicMock) -> None:
    """Test a failed lookup reports linked so no comment is posted."""
    github.list_comments.return_value = failed(502, 'Bad Gateway')

    assert already_linked(github, SHORT_URL, LOCATOR) is True


def test_card_link_comment() -> None:
    """Test the markdown backlink format."""
    assert card_link_comment('[#12] Bug', SHORT_URL) == f'Trello card: [[#12] Bug]({SHORT_URL})'
