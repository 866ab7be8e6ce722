"""GitHub REST API client for issue and pull request comments."""

from typing import Any

import requests

from trello_github.models import IssueLocator
from trello_github.services.results import ApiError, ApiResult
from trello_github.utils.logging import get_logger, sanitize_for_log

GITHUB_API_URL = 'https://api.github.com'
REQUEST_TIMEOUT = 30
PER_PAGE = 100

logger = get_logger('github')


class GithubClient:
    """Client for the issue comment endpoints.

    Pull requests share the issue comment endpoints, so one locator type
    serves both.
    """

    def __init__(
        self,
        token: str,
        session: requests.Session | None = None,
        base_url: str = GITHUB_API_URL,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
        })

    def _comments_url(self, locator: IssueLocator) -> str:
        return (
            f"{self.base_url}/repos/{locator.owner}/{locator.repo}"
            f"/issues/{locator.number}/comments"
        )

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response | ApiError:
        try:
            response = self.session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as e:
            return ApiError(f"{method} {url} failed", reason=sanitize_for_log(str(e)))
        if not response.ok:
            return ApiError(
                f"{method} {url} failed",
                status=response.status_code,
                reason=response.reason or '',
            )
        return response

    def add_comment(self, locator: IssueLocator, body: str) -> ApiResult[dict[str, Any]]:
        """Post a comment on an issue or pull request.

        Args:
            locator: Target issue or pull request.
            body: Markdown comment body.

        Returns:
            ApiResult with the created comment; result.ok tells whether the
            comment was posted.
        """
        logger.debug("Adding comment to %s", locator)
        response = self._send('POST', self._comments_url(locator), json={'body': body})
        if isinstance(response, ApiError):
            logger.warning("Could not comment on %s: %s", locator, response)
            return ApiResult.failure(response)
        try:
            return ApiResult.success(response.json())
        except ValueError:
            # The comment exists even if the echo could not be decoded.
            return ApiResult.success({'body': body})

    def list_comments(self, locator: IssueLocator) -> ApiResult[list[dict[str, Any]]]:
        """Get all comments of an issue or pull request, oldest first.

        Follows the Link header until the last page.

        Args:
            locator: Issue or pull request to read.

        Returns:
            ApiResult with the list of comment dictionaries.
        """
        comments: list[dict[str, Any]] = []
        url: str | None = self._comments_url(locator)
        params: dict[str, Any] | None = {'per_page': PER_PAGE}

        while url:
            response = self._send('GET', url, params=params)
            if isinstance(response, ApiError):
                logger.warning("Could not list comments of %s: %s", locator, response)
                return ApiResult.failure(response)
            try:
                page = response.json()
            except ValueError as e:
                error = ApiError(f"Invalid JSON listing comments of {locator}", reason=str(e))
                logger.warning("%s", error)
                return ApiResult.failure(error)
            comments.extend(page)
            # The next link already carries the query string.
            url = response.links.get('next', {}).get('url')
            params = None

        logger.debug("Found %d comment(s) on %s", len(comments), locator)
        return ApiResult.success(comments)

