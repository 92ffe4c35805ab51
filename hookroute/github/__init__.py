"""GitHub changed-files lookup used by the routing layer."""

from __future__ import annotations

from .client import ChangedFilesLookup, GitHubRestClient, GitHubRestConfig
from .errors import (
    ChangedFilesLookupError,
    CommitNotFoundError,
    GitHubConfigError,
    LookupErrorKind,
    LookupTransportError,
    RateLimitedError,
    RateLimitInfo,
)

__all__ = [
    "ChangedFilesLookup",
    "ChangedFilesLookupError",
    "CommitNotFoundError",
    "GitHubConfigError",
    "GitHubRestClient",
    "GitHubRestConfig",
    "LookupErrorKind",
    "LookupTransportError",
    "RateLimitInfo",
    "RateLimitedError",
]
