"""Unit tests for the package registry."""

from __future__ import annotations

import pytest

from hookroute.packages import (
    DEFAULT_PACKAGE_NAMES,
    DEFAULT_PRIMARY_PACKAGE,
    PackageRegistry,
    PackageSpec,
    RegistryError,
    default_registry,
)


class TestPackageSpec:
    """Tests for PackageSpec defaults."""

    def test_defaults_derive_from_name(self) -> None:
        """Omitted fields fall back to the package name."""
        spec = PackageSpec(name="builders")
        assert spec.path_prefix == "packages/builders"
        assert spec.tag_token == "builders"
        assert spec.channel == "builders"

    def test_explicit_fields_are_kept(self) -> None:
        """Explicit fields override the derived defaults."""
        spec = PackageSpec(
            name="site", path_prefix="apps/site", tag_token="web", channel="docs"
        )
        assert (spec.path_prefix, spec.tag_token, spec.channel) == (
            "apps/site",
            "web",
            "docs",
        )

    def test_blank_name_rejected(self) -> None:
        """A whitespace-only name is rejected."""
        with pytest.raises(RegistryError, match="non-empty"):
            PackageSpec(name="  ")


class TestPackageRegistry:
    """Tests for registry validation and lookups."""

    def test_list_packages_preserves_order(self) -> None:
        """Scan order follows registration order."""
        registry = PackageRegistry(
            [PackageSpec(name="b"), PackageSpec(name="a")], primary="a"
        )
        assert registry.list_packages() == ("b", "a")

    def test_empty_registry_rejected(self) -> None:
        """At least one package is required."""
        with pytest.raises(RegistryError, match="at least one"):
            PackageRegistry([], primary="a")

    def test_duplicate_name_rejected(self) -> None:
        """Package names must be unique."""
        with pytest.raises(RegistryError, match="duplicate package name"):
            PackageRegistry([PackageSpec(name="a"), PackageSpec(name="a")], primary="a")

    def test_duplicate_tag_token_rejected(self) -> None:
        """Tag tokens must be unique so release tags resolve unambiguously."""
        with pytest.raises(RegistryError, match="duplicate package tag token"):
            PackageRegistry(
                [PackageSpec(name="a", tag_token="x"), PackageSpec(name="b", tag_token="x")],
                primary="a",
            )

    def test_unknown_primary_rejected(self) -> None:
        """The primary package must be registered."""
        with pytest.raises(RegistryError, match="primary package 'z'"):
            PackageRegistry([PackageSpec(name="a")], primary="z")

    def test_unknown_package_lookup_raises(self) -> None:
        """Lookups for unregistered packages raise RegistryError."""
        registry = PackageRegistry([PackageSpec(name="a")], primary="a")
        with pytest.raises(RegistryError, match="'nope' is not registered"):
            registry.path_prefix_for("nope")

    def test_package_for_token_is_exact(self) -> None:
        """Token lookup matches exactly and returns None otherwise."""
        registry = PackageRegistry(
            [PackageSpec(name="core"), PackageSpec(name="core-extra")], primary="core"
        )
        assert registry.package_for_token("core") == "core"
        assert registry.package_for_token("cor") is None
        assert registry.package_for_token("CORE") is None

    def test_channels_are_distinct_in_order(self) -> None:
        """Shared channels are listed once, in first-seen order."""
        registry = PackageRegistry(
            [
                PackageSpec(name="a", channel="one"),
                PackageSpec(name="b", channel="two"),
                PackageSpec(name="c", channel="one"),
            ],
            primary="a",
        )
        assert registry.channels() == ("one", "two")
        assert registry.channel_for("c") == "one"


def test_default_registry_matches_monorepo_layout() -> None:
    """The built-in registry lists the monorepo packages with its primary."""
    registry = default_registry()
    assert registry.list_packages() == DEFAULT_PACKAGE_NAMES
    assert registry.primary == DEFAULT_PRIMARY_PACKAGE
    assert registry.path_prefix_for("discord.js") == "packages/discord.js"
