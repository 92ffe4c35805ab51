"""Single-package disambiguation shared by every resolver.

Resolvers reduce an event to candidate strings (changed paths, labels) and a
``matches`` predicate over package identifiers. The registry is scanned in
order: exactly one matching package routes to that package, while zero or
several matches route to the monorepo channel. Scanning stops at the second
match, so predicates that are expensive to evaluate are called at most until
ambiguity is known.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .models import Target

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from hookroute.packages.registry import PackageId, PackageRegistry

PackagePredicate = typ.Callable[["PackageId"], bool]


@dc.dataclass(frozen=True, slots=True)
class PackageScan:
    """Outcome of a registry scan.

    ``package`` is set only when exactly one package matched. ``ambiguous``
    is set when a second match cut the scan short.
    """

    package: PackageId | None = None
    ambiguous: bool = False

    @property
    def matched_none(self) -> bool:
        """Return True when no package matched."""
        return self.package is None and not self.ambiguous

    def to_target(self) -> Target:
        """Collapse the scan into a routing target."""
        if self.package is None:
            return Target.monorepo()
        return Target.for_package(self.package)


def scan_packages(
    packages: cabc.Iterable[PackageId], matches: PackagePredicate
) -> PackageScan:
    """Scan ``packages`` in order and report whether exactly one matches."""
    candidate: PackageId | None = None
    for package in packages:
        if not matches(package):
            continue
        if candidate is not None:
            return PackageScan(ambiguous=True)
        candidate = package
    return PackageScan(package=candidate)


def resolve_single_package(
    packages: cabc.Iterable[PackageId], matches: PackagePredicate
) -> Target:
    """Return the only matching package's target, otherwise the monorepo."""
    return scan_packages(packages, matches).to_target()


def path_is_under(path: str, prefix: str) -> bool:
    """Return True when ``path`` is ``prefix`` itself or lies below it."""
    directory = prefix.rstrip("/")
    return path == directory or path.startswith(f"{directory}/")


def paths_under(
    registry: PackageRegistry, paths: cabc.Iterable[str]
) -> PackagePredicate:
    """Build a predicate matching packages whose directory holds any of ``paths``."""
    candidates = tuple(paths)

    def _matches(package: PackageId) -> bool:
        prefix = registry.path_prefix_for(package)
        return any(path_is_under(path, prefix) for path in candidates)

    return _matches


LABEL_PREFIX = "packages:"


def labels_naming(
    registry: PackageRegistry, labels: cabc.Iterable[str]
) -> PackagePredicate:
    """Build a predicate matching packages named by a ``packages:<token>`` label.

    Label comparison ignores case and surrounding whitespace.
    """
    normalised = frozenset(label.strip().lower() for label in labels)

    def _matches(package: PackageId) -> bool:
        token = registry.tag_token_for(package).lower()
        return f"{LABEL_PREFIX}{token}" in normalised

    return _matches
