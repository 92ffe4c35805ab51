"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os
import typing as typ

import pytest

from hookroute.routing import Dispatcher
from tests.helpers.fakes import FakeForwarder, FakeLookup, small_registry

if typ.TYPE_CHECKING:
    from hookroute.packages import PackageRegistry

_HOOKROUTE_ENV_PREFIXES = ("HOOKROUTE_",)


@pytest.fixture(autouse=True)
def clean_hookroute_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ambient ``HOOKROUTE_*`` variables so tests see a blank config."""
    for name in list(os.environ):
        if name.startswith(_HOOKROUTE_ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def registry() -> PackageRegistry:
    """Return the three-package test registry."""
    return small_registry()


@pytest.fixture
def lookup() -> FakeLookup:
    """Return a lookup fake with no canned paths."""
    return FakeLookup()


@pytest.fixture
def forwarder() -> FakeForwarder:
    """Return a forwarder fake answering 204."""
    return FakeForwarder()


@pytest.fixture
def dispatcher(registry: PackageRegistry, lookup: FakeLookup) -> Dispatcher:
    """Return a dispatcher over the test registry and lookup fake."""
    return Dispatcher(registry, lookup)
