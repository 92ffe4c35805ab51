"""Unit tests for the GitHub REST changed-files client."""

from __future__ import annotations

import typing as typ

import httpx
import pytest

from hookroute.github import (
    CommitNotFoundError,
    GitHubConfigError,
    GitHubRestClient,
    GitHubRestConfig,
    LookupErrorKind,
    LookupTransportError,
    RateLimitedError,
)

API = "https://api.example.test"

Handler = typ.Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler, *, token: str | None = "t0k3n") -> GitHubRestClient:
    return GitHubRestClient(
        GitHubRestConfig(token=token, api_url=API),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _files(*names: str) -> list[dict[str, str]]:
    return [{"filename": name, "status": "modified"} for name in names]


class TestCommitFiles:
    """Tests for GitHubRestClient.commit_files."""

    @pytest.mark.asyncio
    async def test_returns_filenames_and_sends_headers(self) -> None:
        """Commit files are read from ``files`` with auth headers attached."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"files": _files("packages/a/x.ts")})

        client = _client(handler)
        paths = await client.commit_files("acme", "mono", "abc123")

        assert paths == ["packages/a/x.ts"]
        request = seen[0]
        assert request.url.path == "/repos/acme/mono/commits/abc123"
        assert request.url.params["per_page"] == "100"
        assert request.headers["Authorization"] == "Bearer t0k3n"
        assert request.headers["Accept"] == "application/vnd.github+json"

    @pytest.mark.asyncio
    async def test_anonymous_requests_omit_authorization(self) -> None:
        """Without a token no Authorization header is sent."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"files": []})

        await _client(handler, token=None).commit_files("acme", "mono", "abc")

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_follows_next_links(self) -> None:
        """Paginated commits are read across every linked page."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json={"files": _files("b.ts")})
            next_url = f"{API}/repos/acme/mono/commits/abc?per_page=100&page=2"
            return httpx.Response(
                200,
                json={"files": _files("a.ts")},
                headers={"Link": f'<{next_url}>; rel="next"'},
            )

        paths = await _client(handler).commit_files("acme", "mono", "abc")

        assert paths == ["a.ts", "b.ts"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 422])
    async def test_missing_reference(self, status: int) -> None:
        """404 and 422 mean the reference does not exist."""
        client = _client(lambda _: httpx.Response(status, json={"message": "No"}))

        with pytest.raises(CommitNotFoundError) as excinfo:
            await client.commit_files("acme", "mono", "gone")

        assert excinfo.value.kind is LookupErrorKind.NOT_FOUND
        assert excinfo.value.status_code == status
        assert excinfo.value.request_method == "GET"
        assert excinfo.value.request_url is not None
        assert excinfo.value.request_url.startswith(f"{API}/repos/acme/mono/commits/gone")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "headers"),
        [
            (429, {"retry-after": "30"}),
            (403, {"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"}),
            (403, {"retry-after": "60"}),
        ],
        ids=["429", "403-exhausted", "403-secondary"],
    )
    async def test_rate_limited(self, status: int, headers: dict[str, str]) -> None:
        """429 and rate-limit flavoured 403 responses are rate limits."""
        client = _client(lambda _: httpx.Response(status, headers=headers))

        with pytest.raises(RateLimitedError) as excinfo:
            await client.commit_files("acme", "mono", "abc")

        assert excinfo.value.kind is LookupErrorKind.RATE_LIMITED
        assert excinfo.value.rate_limit.as_headers() == headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403, 500, 502])
    async def test_other_statuses_are_transport_errors(self, status: int) -> None:
        """Other non-2xx responses are transport failures."""
        client = _client(lambda _: httpx.Response(status))

        with pytest.raises(LookupTransportError) as excinfo:
            await client.commit_files("acme", "mono", "abc")

        assert excinfo.value.status_code == status

    @pytest.mark.asyncio
    async def test_connection_failure_is_transport_error(self) -> None:
        """Requests that never get a response are transport failures."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(LookupTransportError, match="ConnectError") as excinfo:
            await _client(handler).commit_files("acme", "mono", "abc")

        assert excinfo.value.status_code is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        [b"not json", b"[]", b'{"files": {"a": 1}}', b'{"files": [{"sha": "1"}]}'],
        ids=["not-json", "list-body", "files-object", "no-filename"],
    )
    async def test_malformed_bodies_are_transport_errors(self, content: bytes) -> None:
        """Bodies of an unexpected shape are reported, not ignored."""
        client = _client(lambda _: httpx.Response(200, content=content))

        with pytest.raises(LookupTransportError, match="missing expected field"):
            await client.commit_files("acme", "mono", "abc")


class TestPullRequestFiles:
    """Tests for GitHubRestClient.pull_request_files."""

    @pytest.mark.asyncio
    async def test_returns_filenames(self) -> None:
        """Pull request files are read from the list response."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_files("packages/b/y.ts", "README.md"))

        paths = await _client(handler).pull_request_files("acme", "mono", 42)

        assert paths == ["packages/b/y.ts", "README.md"]
        assert seen[0].url.path == "/repos/acme/mono/pulls/42/files"

    @pytest.mark.asyncio
    async def test_object_body_is_malformed(self) -> None:
        """A non-list body is a transport failure."""
        client = _client(lambda _: httpx.Response(200, json={"files": []}))

        with pytest.raises(LookupTransportError):
            await client.pull_request_files("acme", "mono", 1)


class TestConfig:
    """Tests for GitHubRestConfig.from_env."""

    def test_defaults(self) -> None:
        """Without variables the public API is used anonymously."""
        config = GitHubRestConfig.from_env()
        assert config.token is None
        assert config.api_url == "https://api.github.com"
        assert config.timeout_s == pytest.approx(10.0)

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Token, API URL and timeout come from the environment."""
        monkeypatch.setenv("HOOKROUTE_GITHUB_TOKEN", " abc ")
        monkeypatch.setenv("HOOKROUTE_GITHUB_API_URL", "https://ghe.example/api/v3/")
        monkeypatch.setenv("HOOKROUTE_GITHUB_TIMEOUT_S", "2.5")

        config = GitHubRestConfig.from_env()

        assert config.token == "abc"
        assert config.api_url == "https://ghe.example/api/v3"
        assert config.timeout_s == pytest.approx(2.5)

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        """Non-positive or non-numeric timeouts are rejected."""
        monkeypatch.setenv("HOOKROUTE_GITHUB_TIMEOUT_S", raw)

        with pytest.raises(GitHubConfigError, match="HOOKROUTE_GITHUB_TIMEOUT_S"):
            GitHubRestConfig.from_env()


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open() -> None:
    """Injected HTTP clients are owned by the caller."""
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda _: httpx.Response(200))
    )
    client = GitHubRestClient(GitHubRestConfig(), http_client=http_client)

    await client.aclose()

    assert not http_client.is_closed
    await http_client.aclose()
