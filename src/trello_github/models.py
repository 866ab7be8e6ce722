"""Snapshots of the GitHub webhook payload handled by a run."""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from trello_github.exceptions import EventError

ISSUE_REFERENCE_PATTERN = re.compile(r'#[1-9][0-9]*')


def extract_issue_references(text: str | None) -> list[str]:
    """Extract issue-reference tokens such as '#12' from free text.

    Args:
        text: Text to scan, can be None.

    Returns:
        Tokens in order of appearance, duplicates included.
    """
    if not text:
        return []
    return ISSUE_REFERENCE_PATTERN.findall(text)


@dataclass(frozen=True)
class Repository:
    """Repository the event was delivered for."""

    owner: str
    name: str
    html_url: str

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> 'Repository':
        owner = data.get('owner') or {}
        return cls(
            owner=owner.get('login') or owner.get('name') or '',
            name=data.get('name') or '',
            html_url=data.get('html_url') or '',
        )


@dataclass(frozen=True)
class IssueLocator:
    """Identifies an issue or pull request discussion thread."""

    owner: str
    repo: str
    number: int

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.number}"


@dataclass(frozen=True)
class Issue:
    """An opened GitHub issue."""

    number: int
    title: str
    body: str
    html_url: str
    assignees: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)

    @property
    def card_name(self) -> str:
        """Trello card name embedding the issue number."""
        return f"[#{self.number}] {self.title}"

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> 'Issue':
        return cls(
            number=int(data['number']),
            title=data.get('title') or '',
            body=data.get('body') or '',
            html_url=data.get('html_url') or '',
            assignees=_logins(data.get('assignees')),
            labels=[label['name'] for label in data.get('labels') or [] if label.get('name')],
        )


@dataclass(frozen=True)
class PullRequest:
    """A pull request snapshot from a pull_request event."""

    number: int
    title: str
    body: str
    html_url: str
    assignees: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    requested_reviewers: list[str] = field(default_factory=list)

    @property
    def issue_references(self) -> list[str]:
        return extract_issue_references(self.body)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> 'PullRequest':
        return cls(
            number=int(data['number']),
            title=data.get('title') or '',
            body=data.get('body') or '',
            html_url=data.get('html_url') or '',
            assignees=_logins(data.get('assignees')),
            labels=[label['name'] for label in data.get('labels') or [] if label.get('name')],
            requested_reviewers=_logins(data.get('requested_reviewers')),
        )


@dataclass(frozen=True)
class GithubEvent:
    """The webhook delivery a run was started for."""

    name: str
    repository: Repository
    issue: Issue | None = None
    pull_request: PullRequest | None = None

    def locator(self, number: int) -> IssueLocator:
        return IssueLocator(self.repository.owner, self.repository.name, number)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], name: str = '') -> 'GithubEvent':
        """Build an event from a decoded webhook payload.

        Args:
            payload: Decoded webhook JSON.
            name: Event name (GITHUB_EVENT_NAME).

        Returns:
            Parsed GithubEvent.

        Raises:
            EventError: If the payload lacks a repository or has malformed
                issue/pull request data.
        """
        if not isinstance(payload, dict) or not isinstance(payload.get('repository'), dict):
            raise EventError("Event payload has no repository.")
        try:
            issue_data = payload.get('issue')
            pr_data = payload.get('pull_request')
            return cls(
                name=name,
                repository=Repository.from_payload(payload['repository']),
                issue=Issue.from_payload(issue_data) if issue_data else None,
                pull_request=PullRequest.from_payload(pr_data) if pr_data else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise EventError(f"Malformed event payload: {e}") from e


def load_event(event_path: Path, name: str = '') -> GithubEvent:
    """Read the webhook payload file written by the Actions runner.

    Args:
        event_path: Path to the JSON payload (GITHUB_EVENT_PATH).
        name: Event name (GITHUB_EVENT_NAME).

    Returns:
        Parsed GithubEvent.

    Raises:
        EventError: If the file cannot be read or decoded.
    """
    try:
        with open(event_path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except OSError as e:
        raise EventError(f"Error reading event file: {e}") from e
    except json.JSONDecodeError as e:
        raise EventError(f"Invalid JSON in event file: {e}") from e
    return GithubEvent.from_payload(payload, name)


def _logins(users: list[dict[str, Any]] | None) -> list[str]:
    return [user['login'] for user in users or [] if user.get('login')]
