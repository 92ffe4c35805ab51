"""Package registry and routing file support.

The registry is the ordered table of monorepo packages that routing scans.
It is either built in (:func:`default_registry`) or read from a YAML routing
file::

    >>> from hookroute.packages import load_routing_file
    >>> registry = load_routing_file("routing.yaml").to_registry()

"""

from __future__ import annotations

from .loader import RoutingConfigError, load_routing_file
from .models import (
    CODECOV_BOT,
    VERCEL_BOT,
    PackageEntry,
    RoutingFile,
    SuppressedAuthor,
)
from .registry import (
    DEFAULT_PACKAGE_NAMES,
    DEFAULT_PRIMARY_PACKAGE,
    PackageId,
    PackageRegistry,
    PackageSpec,
    RegistryError,
    default_registry,
)

__all__ = [
    "CODECOV_BOT",
    "DEFAULT_PACKAGE_NAMES",
    "DEFAULT_PRIMARY_PACKAGE",
    "VERCEL_BOT",
    "PackageEntry",
    "PackageId",
    "PackageRegistry",
    "PackageSpec",
    "RegistryError",
    "RoutingConfigError",
    "RoutingFile",
    "SuppressedAuthor",
    "default_registry",
    "load_routing_file",
]
