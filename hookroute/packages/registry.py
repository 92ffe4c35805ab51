"""Ordered registry of the monorepo's packages.

The registry is the fixed table the routing layer scans when it needs to
attribute an event to a package. Scan order is the registration order, so
tie-break behaviour is reproducible between runs.

Examples
--------
>>> registry = PackageRegistry(
...     [PackageSpec(name="pkg-a"), PackageSpec(name="pkg-b")], primary="pkg-a"
... )
>>> registry.list_packages()
('pkg-a', 'pkg-b')
>>> registry.path_prefix_for("pkg-b")
'packages/pkg-b'

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

PackageId = str
"""Name of a registered package, e.g. ``"builders"``."""

DEFAULT_PACKAGES_ROOT = "packages"

DEFAULT_PACKAGE_NAMES: tuple[str, ...] = (
    "api-extractor-utils",
    "brokers",
    "builders",
    "collection",
    "core",
    "create-discord-bot",
    "discord.js",
    "docs",
    "formatters",
    "next",
    "proxy",
    "rest",
    "scripts",
    "ui",
    "util",
    "voice",
    "ws",
)
DEFAULT_PRIMARY_PACKAGE = "discord.js"


class RegistryError(ValueError):
    """Raised when a package registry definition is inconsistent."""

    @classmethod
    def empty(cls) -> RegistryError:
        """Return an error for a registry without packages."""
        return cls("package registry must contain at least one package")

    @classmethod
    def empty_name(cls) -> RegistryError:
        """Return an error for a package without a name."""
        return cls("package name must be non-empty")

    @classmethod
    def duplicate(cls, field: str, value: str) -> RegistryError:
        """Return an error for a repeated package name or tag token."""
        return cls(f"duplicate package {field}: {value!r}")

    @classmethod
    def unknown_primary(cls, primary: str) -> RegistryError:
        """Return an error for a primary package that is not registered."""
        return cls(f"primary package {primary!r} is not registered")

    @classmethod
    def unknown_package(cls, package: str) -> RegistryError:
        """Return an error for lookups of unregistered packages."""
        return cls(f"package {package!r} is not registered")


@dc.dataclass(frozen=True, slots=True)
class PackageSpec:
    """One package of the monorepo.

    Attributes
    ----------
    name
        Package identifier.
    path_prefix
        Repository path prefix of the package sources. Defaults to
        ``packages/<name>``.
    tag_token
        Token used for the package in release tags
        (``<scope>/<token>@<version>``) and ``packages:<token>`` labels.
        Defaults to ``name``.
    channel
        Notification channel the package routes to. Several packages may
        share one channel. Defaults to ``name``.

    """

    name: PackageId
    path_prefix: str = ""
    tag_token: str = ""
    channel: str = ""

    def __post_init__(self) -> None:
        """Fill derived defaults for the optional fields."""
        if not self.name.strip():
            raise RegistryError.empty_name()
        if not self.path_prefix:
            object.__setattr__(
                self, "path_prefix", f"{DEFAULT_PACKAGES_ROOT}/{self.name}"
            )
        if not self.tag_token:
            object.__setattr__(self, "tag_token", self.name)
        if not self.channel:
            object.__setattr__(self, "channel", self.name)


@dc.dataclass(frozen=True, slots=True, init=False)
class PackageRegistry:
    """Immutable, ordered package table."""

    packages: tuple[PackageSpec, ...]
    primary: PackageId
    _by_name: dict[PackageId, PackageSpec] = dc.field(repr=False, compare=False)
    _by_token: dict[str, PackageSpec] = dc.field(repr=False, compare=False)

    def __init__(self, packages: cabc.Iterable[PackageSpec], *, primary: str) -> None:
        """Validate and index ``packages``."""
        ordered = tuple(packages)
        if not ordered:
            raise RegistryError.empty()

        by_name: dict[PackageId, PackageSpec] = {}
        by_token: dict[str, PackageSpec] = {}
        for spec in ordered:
            if spec.name in by_name:
                raise RegistryError.duplicate("name", spec.name)
            if spec.tag_token in by_token:
                raise RegistryError.duplicate("tag token", spec.tag_token)
            by_name[spec.name] = spec
            by_token[spec.tag_token] = spec

        if primary not in by_name:
            raise RegistryError.unknown_primary(primary)

        object.__setattr__(self, "packages", ordered)
        object.__setattr__(self, "primary", primary)
        object.__setattr__(self, "_by_name", by_name)
        object.__setattr__(self, "_by_token", by_token)

    def list_packages(self) -> tuple[PackageId, ...]:
        """Return package identifiers in scan order."""
        return tuple(spec.name for spec in self.packages)

    def spec_for(self, package: PackageId) -> PackageSpec:
        """Return the PackageSpec registered for ``package``."""
        try:
            return self._by_name[package]
        except KeyError:
            raise RegistryError.unknown_package(package) from None

    def path_prefix_for(self, package: PackageId) -> str:
        """Return the repository path prefix for ``package``."""
        return self.spec_for(package).path_prefix

    def tag_token_for(self, package: PackageId) -> str:
        """Return the release tag token for ``package``."""
        return self.spec_for(package).tag_token

    def channel_for(self, package: PackageId) -> str:
        """Return the notification channel for ``package``."""
        return self.spec_for(package).channel

    def package_for_token(self, token: str) -> PackageId | None:
        """Resolve an exact tag token to a package, or ``None`` when unknown."""
        spec = self._by_token.get(token)
        return spec.name if spec is not None else None

    def channels(self) -> tuple[str, ...]:
        """Return the distinct channels in registration order."""
        return tuple(dict.fromkeys(spec.channel for spec in self.packages))


def default_registry() -> PackageRegistry:
    """Return the built-in registry for the discord.js monorepo layout."""
    return PackageRegistry(
        (PackageSpec(name=name) for name in DEFAULT_PACKAGE_NAMES),
        primary=DEFAULT_PRIMARY_PACKAGE,
    )


__all__ = [
    "DEFAULT_PACKAGE_NAMES",
    "DEFAULT_PRIMARY_PACKAGE",
    "PackageId",
    "PackageRegistry",
    "PackageSpec",
    "RegistryError",
    "default_registry",
]
