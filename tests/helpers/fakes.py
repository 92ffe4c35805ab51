"""Test doubles and payload builders shared by unit and feature tests."""

from __future__ import annotations

import dataclasses
import typing as typ

from hookroute.gateway.forwarder import ForwardingError, ForwardResult
from hookroute.packages import PackageRegistry, PackageSpec

if typ.TYPE_CHECKING:
    import collections.abc as cabc


def small_registry() -> PackageRegistry:
    """Return a three-package registry with ``pkg-a`` as primary."""
    return PackageRegistry(
        [
            PackageSpec(name="pkg-a"),
            PackageSpec(name="pkg-b"),
            PackageSpec(name="pkg-c", channel="shared"),
        ],
        primary="pkg-a",
    )


@dataclasses.dataclass
class FakeLookup:
    """Changed-files lookup returning canned paths and counting calls."""

    commit_paths: list[str] = dataclasses.field(default_factory=list)
    pull_paths: list[str] = dataclasses.field(default_factory=list)
    error: Exception | None = None
    commit_calls: list[tuple[str, str, str]] = dataclasses.field(default_factory=list)
    pull_calls: list[tuple[str, str, int]] = dataclasses.field(default_factory=list)
    closed: bool = False

    @property
    def call_count(self) -> int:
        """Return the number of lookups made through this fake."""
        return len(self.commit_calls) + len(self.pull_calls)

    async def commit_files(self, owner: str, repo: str, ref: str) -> list[str]:
        self.commit_calls.append((owner, repo, ref))
        if self.error is not None:
            raise self.error
        return list(self.commit_paths)

    async def pull_request_files(
        self, owner: str, repo: str, number: int
    ) -> list[str]:
        self.pull_calls.append((owner, repo, number))
        if self.error is not None:
            raise self.error
        return list(self.pull_paths)

    async def aclose(self) -> None:
        self.closed = True


@dataclasses.dataclass
class FakeForwarder:
    """Forwarder recording deliveries instead of sending them."""

    status_code: int = 204
    content: bytes = b""
    content_type: str | None = None
    fail: bool = False
    deliveries: list[tuple[str, bytes, dict[str, str]]] = dataclasses.field(
        default_factory=list
    )
    closed: bool = False

    async def forward(
        self, url: str, body: bytes, headers: cabc.Mapping[str, str]
    ) -> ForwardResult:
        self.deliveries.append((url, body, dict(headers)))
        if self.fail:
            raise ForwardingError("forwarding failed: ConnectError", url=url)
        return ForwardResult(
            status_code=self.status_code,
            content=self.content,
            content_type=self.content_type,
        )

    async def aclose(self) -> None:
        self.closed = True


@dataclasses.dataclass
class FakeLogger:
    """Collects femtologging-style ``log`` calls for assertions."""

    calls: list[tuple[str, str, object | None]] = dataclasses.field(
        default_factory=list
    )

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        del stack_info
        self.calls.append((level, message, exc_info))
        return message

    def messages(self, level: str) -> list[str]:
        """Return messages logged at ``level``."""
        return [message for logged, message, _ in self.calls if logged == level]


def repository(owner: str = "acme", name: str = "monorepo") -> dict[str, typ.Any]:
    """Return a minimal ``repository`` object."""
    return {"name": name, "owner": {"login": owner}}


def commit_comment_payload(
    *, commit_id: str = "abc123", user_id: int = 1, login: str = "octocat"
) -> dict[str, typ.Any]:
    """Return a ``commit_comment`` payload."""
    return {
        "action": "created",
        "comment": {
            "commit_id": commit_id,
            "body": "Looks good",
            "user": {"id": user_id, "login": login},
        },
        "repository": repository(),
    }


def pull_request_payload(
    *,
    number: int = 7,
    labels: cabc.Iterable[str] = (),
    comment_path: str | None = None,
) -> dict[str, typ.Any]:
    """Return a ``pull_request`` family payload."""
    payload: dict[str, typ.Any] = {
        "action": "opened",
        "pull_request": {
            "number": number,
            "labels": [{"name": label} for label in labels],
        },
        "repository": repository(),
    }
    if comment_path is not None:
        payload["comment"] = {"path": comment_path, "body": "nit"}
    return payload


def issue_payload(*labels: str) -> dict[str, typ.Any]:
    """Return an ``issues`` payload carrying ``labels``."""
    return {
        "action": "opened",
        "issue": {"number": 3, "labels": [{"name": label} for label in labels]},
        "repository": repository(),
    }


def push_payload(*paths: str) -> dict[str, typ.Any]:
    """Return a ``push`` payload whose single commit modifies ``paths``."""
    commit = {"id": "abc123", "added": [], "removed": [], "modified": list(paths)}
    return {
        "ref": "refs/heads/main",
        "commits": [commit],
        "head_commit": commit,
        "repository": repository(),
    }


def release_payload(tag: str) -> dict[str, typ.Any]:
    """Return a ``release`` payload for ``tag``."""
    return {
        "action": "published",
        "release": {"tag_name": tag, "name": tag},
        "repository": repository(),
    }
