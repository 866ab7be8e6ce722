"""Tagged results returned by the API clients."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from trello_github.exceptions import TrelloGithubError

T = TypeVar('T')


@dataclass(frozen=True)
class ApiError:
    """Upstream or transport failure of a single API call.

    status is None for transport failures (connection errors, timeouts,
    undecodable bodies).
    """

    message: str
    status: int | None = None
    reason: str = ''

    @property
    def is_transport_error(self) -> bool:
        return self.status is None

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.status} {self.reason}".strip()
        return f"{self.message}: {self.reason}" if self.reason else self.message


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """Either the decoded payload of a call or the error it produced."""

    data: T | None = None
    error: ApiError | None = None

    @classmethod
    def success(cls, data: T) -> 'ApiResult[T]':
        return cls(data=data)

    @classmethod
    def failure(cls, error: ApiError) -> 'ApiResult[T]':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the payload.

        Raises:
            TrelloGithubError: If the result is a failure.
        """
        if self.error is not None:
            raise TrelloGithubError(str(self.error))
        return self.data  # type: ignore[return-value]

