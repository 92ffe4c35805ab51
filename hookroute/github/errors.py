"""Errors raised by the changed-files lookup."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class LookupErrorKind(enum.StrEnum):
    """Closed set of lookup failure kinds the gateway must handle."""

    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    TRANSPORT = "transport"


@dc.dataclass(frozen=True, slots=True)
class RateLimitInfo:
    """Rate limit metadata reported by GitHub, kept as raw header values."""

    limit: str | None = None
    remaining: str | None = None
    reset: str | None = None
    retry_after: str | None = None

    @classmethod
    def from_headers(cls, headers: cabc.Mapping[str, str]) -> RateLimitInfo:
        """Read the ``x-ratelimit-*`` and ``retry-after`` headers."""
        return cls(
            limit=headers.get("x-ratelimit-limit"),
            remaining=headers.get("x-ratelimit-remaining"),
            reset=headers.get("x-ratelimit-reset"),
            retry_after=headers.get("retry-after"),
        )

    def as_headers(self) -> dict[str, str]:
        """Return the populated values keyed by their GitHub header names."""
        headers = {
            "x-ratelimit-limit": self.limit,
            "x-ratelimit-remaining": self.remaining,
            "x-ratelimit-reset": self.reset,
            "retry-after": self.retry_after,
        }
        return {name: value for name, value in headers.items() if value}


class ChangedFilesLookupError(RuntimeError):
    """Base class for failures of the changed-files lookup.

    Attributes
    ----------
    status_code
        HTTP status returned by GitHub, ``None`` for transport failures.
    request_method
        HTTP method of the failed request.
    request_url
        URL of the failed request.

    """

    kind: typ.ClassVar[LookupErrorKind]

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        request_method: str | None = None,
        request_url: str | None = None,
    ) -> None:
        """Initialise with a message and the failed request's details."""
        self.status_code = status_code
        self.request_method = request_method
        self.request_url = request_url
        super().__init__(message)


class CommitNotFoundError(ChangedFilesLookupError):
    """Raised when the commit or pull request reference does not resolve."""

    kind = LookupErrorKind.NOT_FOUND

    @classmethod
    def for_request(
        cls, status_code: int, method: str, url: str
    ) -> CommitNotFoundError:
        """Return an error for a 404/422 response."""
        return cls(
            f"GitHub reference not found (HTTP {status_code})",
            status_code=status_code,
            request_method=method,
            request_url=url,
        )


class RateLimitedError(ChangedFilesLookupError):
    """Raised when GitHub rejects the lookup because of rate limiting."""

    kind = LookupErrorKind.RATE_LIMITED

    def __init__(
        self,
        message: str,
        *,
        rate_limit: RateLimitInfo,
        status_code: int | None = None,
        request_method: str | None = None,
        request_url: str | None = None,
    ) -> None:
        """Initialise with the rate limit metadata from the response."""
        self.rate_limit = rate_limit
        super().__init__(
            message,
            status_code=status_code,
            request_method=request_method,
            request_url=request_url,
        )

    @classmethod
    def for_request(
        cls,
        status_code: int,
        method: str,
        url: str,
        *,
        rate_limit: RateLimitInfo,
    ) -> RateLimitedError:
        """Return an error for a rate-limited response."""
        return cls(
            f"GitHub API rate limit exceeded (HTTP {status_code})",
            rate_limit=rate_limit,
            status_code=status_code,
            request_method=method,
            request_url=url,
        )


class LookupTransportError(ChangedFilesLookupError):
    """Raised for any other lookup failure, including malformed responses."""

    kind = LookupErrorKind.TRANSPORT

    @classmethod
    def http_error(cls, status_code: int, method: str, url: str) -> LookupTransportError:
        """Return an error for an unexpected non-2xx response."""
        return cls(
            f"GitHub REST HTTP {status_code}",
            status_code=status_code,
            request_method=method,
            request_url=url,
        )

    @classmethod
    def unreachable(cls, method: str, url: str, reason: str) -> LookupTransportError:
        """Return an error for requests that never produced a response."""
        return cls(
            f"GitHub request failed: {reason}",
            request_method=method,
            request_url=url,
        )

    @classmethod
    def malformed(cls, field: str, method: str, url: str) -> LookupTransportError:
        """Return an error for a response missing an expected field."""
        return cls(
            f"GitHub REST response missing expected field: {field}",
            request_method=method,
            request_url=url,
        )


class GitHubConfigError(ValueError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def invalid_timeout(cls, raw: str) -> GitHubConfigError:
        """Return an error for a timeout that is not a positive number."""
        return cls(f"HOOKROUTE_GITHUB_TIMEOUT_S must be a positive number, got {raw!r}")
