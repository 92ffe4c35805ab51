"""GitHub REST lookup of the files changed by a commit or pull request."""

from __future__ import annotations

import dataclasses
import os
import typing as typ
import urllib.parse

import httpx

from .errors import (
    CommitNotFoundError,
    GitHubConfigError,
    LookupTransportError,
    RateLimitedError,
    RateLimitInfo,
)


class ChangedFilesLookup(typ.Protocol):
    """Read-only capability used by resolvers that need changed paths."""

    async def commit_files(self, owner: str, repo: str, ref: str) -> list[str]:
        """Return the paths changed by commit ``ref``."""
        ...

    async def pull_request_files(
        self, owner: str, repo: str, number: int
    ) -> list[str]:
        """Return the paths changed by pull request ``number``."""
        ...


_DEFAULT_API_URL = "https://api.github.com"
_DEFAULT_TIMEOUT_S = 10.0


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRestConfig:
    """Configuration for the GitHub REST API client."""

    token: str | None = None
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "hookroute/0.1"

    @classmethod
    def from_env(cls) -> GitHubRestConfig:
        """Build configuration from ``HOOKROUTE_GITHUB_*`` variables.

        The token is optional; without one GitHub applies the anonymous rate
        limit, which is enough for low-traffic repositories.
        """
        token = os.environ.get("HOOKROUTE_GITHUB_TOKEN", "").strip() or None
        api_url = os.environ.get("HOOKROUTE_GITHUB_API_URL", "").strip()
        raw_timeout = os.environ.get("HOOKROUTE_GITHUB_TIMEOUT_S", "").strip()
        timeout_s = _DEFAULT_TIMEOUT_S
        if raw_timeout:
            try:
                timeout_s = float(raw_timeout)
            except ValueError as exc:
                raise GitHubConfigError.invalid_timeout(raw_timeout) from exc
            if timeout_s <= 0:
                raise GitHubConfigError.invalid_timeout(raw_timeout)
        return cls(
            token=token,
            api_url=api_url.rstrip("/") or _DEFAULT_API_URL,
            timeout_s=timeout_s,
        )


_HTTP_ERROR_STATUS_THRESHOLD = 400
_NOT_FOUND_STATUSES = frozenset({404, 422})
_TOO_MANY_REQUESTS = 429
_FORBIDDEN = 403
_PER_PAGE = 100
# GitHub stops listing changed files after 3000 entries.
_MAX_PAGES = 30


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == _TOO_MANY_REQUESTS:
        return True
    if response.status_code != _FORBIDDEN:
        return False
    return (
        response.headers.get("x-ratelimit-remaining") == "0"
        or "retry-after" in response.headers
    )


def _raise_for_status(response: httpx.Response) -> None:
    status = response.status_code
    if status < _HTTP_ERROR_STATUS_THRESHOLD:
        return
    method = response.request.method
    url = str(response.request.url)
    if status in _NOT_FOUND_STATUSES:
        raise CommitNotFoundError.for_request(status, method, url)
    if _is_rate_limited(response):
        raise RateLimitedError.for_request(
            status,
            method,
            url,
            rate_limit=RateLimitInfo.from_headers(response.headers),
        )
    raise LookupTransportError.http_error(status, method, url)


def _filenames(entries: object, *, field: str, method: str, url: str) -> list[str]:
    """Extract ``filename`` values from a list of GitHub file objects."""
    if not isinstance(entries, list):
        raise LookupTransportError.malformed(field, method, url)
    names: list[str] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise LookupTransportError.malformed(f"{field}[]", method, url)
        filename = entry.get("filename")
        if not isinstance(filename, str):
            raise LookupTransportError.malformed(f"{field}[].filename", method, url)
        names.append(filename)
    return names


def _quote(segment: str) -> str:
    return urllib.parse.quote(segment, safe="")


class GitHubRestClient:
    """GitHub REST implementation of :class:`ChangedFilesLookup`."""

    def __init__(
        self,
        config: GitHubRestConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        self._config = config
        self._owns_client = http_client is None
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": config.user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._headers = headers
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def commit_files(self, owner: str, repo: str, ref: str) -> list[str]:
        """Return the paths changed by commit ``ref``.

        Large commits spread their ``files`` list across pages linked from
        the ``Link`` header; every page is read.
        """
        url = (
            f"{self._config.api_url}/repos/{_quote(owner)}/{_quote(repo)}"
            f"/commits/{_quote(ref)}"
        )
        paths: list[str] = []
        async for response in self._pages(url):
            body = self._json(response)
            if not isinstance(body, dict):
                raise LookupTransportError.malformed(
                    "commit", response.request.method, str(response.request.url)
                )
            paths.extend(
                _filenames(
                    body.get("files", []),
                    field="files",
                    method=response.request.method,
                    url=str(response.request.url),
                )
            )
        return paths

    async def pull_request_files(
        self, owner: str, repo: str, number: int
    ) -> list[str]:
        """Return the paths changed by pull request ``number``."""
        url = (
            f"{self._config.api_url}/repos/{_quote(owner)}/{_quote(repo)}"
            f"/pulls/{number}/files"
        )
        paths: list[str] = []
        async for response in self._pages(url):
            paths.extend(
                _filenames(
                    self._json(response),
                    field="files",
                    method=response.request.method,
                    url=str(response.request.url),
                )
            )
        return paths

    async def _pages(self, url: str) -> typ.AsyncIterator[httpx.Response]:
        """Yield successful responses, following ``rel="next"`` links."""
        next_url: str | None = url
        params: dict[str, int] | None = {"per_page": _PER_PAGE}
        for _ in range(_MAX_PAGES):
            if next_url is None:
                return
            response = await self._get(next_url, params=params)
            yield response
            next_url = response.links.get("next", {}).get("url")
            # Link URLs already carry the pagination query.
            params = None

    async def _get(
        self, url: str, *, params: dict[str, int] | None
    ) -> httpx.Response:
        try:
            response = await self._client.get(
                url, params=params, headers=self._headers
            )
        except httpx.HTTPError as exc:
            raise LookupTransportError.unreachable(
                "GET", url, f"{type(exc).__name__}: {exc}"
            ) from exc
        _raise_for_status(response)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> object:
        try:
            return response.json()
        except ValueError as exc:
            raise LookupTransportError.malformed(
                "body", response.request.method, str(response.request.url)
            ) from exc
