"""Event classification for monorepo webhook routing.

Quick example::

    from hookroute.packages import default_registry
    from hookroute.routing import Dispatcher
    dispatcher = Dispatcher(default_registry(), lookup)
    target = await dispatcher.classify("release", payload)

"""

from __future__ import annotations

from .disambiguation import (
    PackageScan,
    labels_naming,
    path_is_under,
    paths_under,
    resolve_single_package,
    scan_packages,
)
from .dispatcher import Dispatcher, resolver_for
from .models import EventCategory, MalformedEventError, Target, TargetKind
from .resolvers import (
    ResolverContext,
    release_tag_token,
    resolve_commit_comment,
    resolve_issue,
    resolve_pull_request,
    resolve_push,
    resolve_release,
)
from .suppression import CompiledSuppression, compile_suppression

__all__ = [
    "CompiledSuppression",
    "Dispatcher",
    "EventCategory",
    "MalformedEventError",
    "PackageScan",
    "ResolverContext",
    "Target",
    "TargetKind",
    "compile_suppression",
    "labels_naming",
    "path_is_under",
    "paths_under",
    "release_tag_token",
    "resolve_commit_comment",
    "resolve_issue",
    "resolve_pull_request",
    "resolve_push",
    "resolve_release",
    "resolve_single_package",
    "resolver_for",
    "scan_packages",
]
