"""Typed routing file structures."""

from __future__ import annotations

import msgspec

from .registry import PackageRegistry, PackageSpec

CODECOV_BOT_ID = 22429695
VERCEL_BOT_ID = 35613825


class PackageEntry(msgspec.Struct, kw_only=True):
    """Package declaration in a routing file.

    Attributes
    ----------
    name : str
        Package identifier, unique within the file.
    path_prefix : str, optional
        Source path prefix; ``packages/<name>`` when omitted.
    tag_token : str, optional
        Release tag and label token; the package name when omitted.
    channel : str, optional
        Notification channel; the package name when omitted.

    """

    name: str
    path_prefix: str | None = None
    tag_token: str | None = None
    channel: str | None = None

    def to_spec(self) -> PackageSpec:
        """Return the registry spec for this entry."""
        return PackageSpec(
            name=self.name,
            path_prefix=self.path_prefix or "",
            tag_token=self.tag_token or "",
            channel=self.channel or "",
        )


class SuppressedAuthor(msgspec.Struct, kw_only=True, frozen=True):
    """Bot identity whose commit comments are discarded.

    Attributes
    ----------
    id : int, optional
        Numeric GitHub user id. Preferred over ``login`` when set.
    login : str, optional
        GitHub login, compared case-insensitively.
    enabled : bool
        Toggle to keep the entry configured without applying it.

    """

    id: int | None = None
    login: str | None = None
    enabled: bool = True


CODECOV_BOT = SuppressedAuthor(id=CODECOV_BOT_ID, login="codecov[bot]")
VERCEL_BOT = SuppressedAuthor(id=VERCEL_BOT_ID, login="vercel[bot]")


class RoutingFile(msgspec.Struct, kw_only=True):
    """Top-level routing file.

    Attributes
    ----------
    primary : str
        Package that bare semantic-version release tags belong to.
    packages : list[PackageEntry]
        Packages in scan order.
    suppress : list[SuppressedAuthor]
        Commit comment authors to discard. When absent, the Codecov and Vercel
        bots are suppressed.

    """

    primary: str
    packages: list[PackageEntry]
    suppress: list[SuppressedAuthor] = msgspec.field(
        default_factory=lambda: [CODECOV_BOT, VERCEL_BOT]
    )

    def to_registry(self) -> PackageRegistry:
        """Build the immutable registry described by this file."""
        return PackageRegistry(
            (entry.to_spec() for entry in self.packages), primary=self.primary
        )
