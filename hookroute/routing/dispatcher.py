"""Dispatch webhook events to the resolver for their category."""

from __future__ import annotations

import typing as typ

from hookroute.logging import get_logger, log_info
from hookroute.packages.models import CODECOV_BOT, VERCEL_BOT

from .models import EventCategory, Target
from .resolvers import (
    Payload,
    ResolverContext,
    resolve_commit_comment,
    resolve_issue,
    resolve_pull_request,
    resolve_push,
    resolve_release,
)
from .suppression import CompiledSuppression, compile_suppression

if typ.TYPE_CHECKING:
    from hookroute.github.client import ChangedFilesLookup
    from hookroute.packages.registry import PackageRegistry

logger = get_logger(__name__)

Resolver = typ.Callable[[ResolverContext, Payload], typ.Awaitable[Target]]


def _immediate(
    resolve: typ.Callable[[ResolverContext, Payload], Target],
) -> Resolver:
    """Adapt a synchronous resolver to the dispatcher's async signature."""

    async def _resolve(context: ResolverContext, payload: Payload) -> Target:
        return resolve(context, payload)

    _resolve.__name__ = resolve.__name__
    return _resolve


_RESOLVERS: typ.Final[typ.Mapping[EventCategory, Resolver]] = {
    EventCategory.COMMIT_COMMENT: resolve_commit_comment,
    EventCategory.ISSUES: _immediate(resolve_issue),
    EventCategory.ISSUE_COMMENT: _immediate(resolve_issue),
    EventCategory.PULL_REQUEST: resolve_pull_request,
    EventCategory.PULL_REQUEST_REVIEW: resolve_pull_request,
    EventCategory.PULL_REQUEST_REVIEW_COMMENT: resolve_pull_request,
    EventCategory.PULL_REQUEST_REVIEW_THREAD: resolve_pull_request,
    EventCategory.PUSH: _immediate(resolve_push),
    EventCategory.RELEASE: _immediate(resolve_release),
}

_UNHANDLED = set(EventCategory) - _RESOLVERS.keys()
if _UNHANDLED:  # pragma: no cover - guards edits to EventCategory
    msg = f"no resolver registered for: {sorted(_UNHANDLED)}"
    raise RuntimeError(msg)


def resolver_for(category: EventCategory) -> Resolver:
    """Return the resolver registered for ``category``."""
    return _RESOLVERS[category]


class Dispatcher:
    """Classify webhook events into routing targets.

    The dispatcher holds no per-event state, so one instance serves
    concurrent requests. Errors raised by the changed-files lookup propagate
    unchanged; translating them is the gateway's job.
    """

    def __init__(
        self,
        registry: PackageRegistry,
        lookup: ChangedFilesLookup,
        *,
        suppression: CompiledSuppression | None = None,
    ) -> None:
        """Bind the registry, lookup and suppression rules."""
        if suppression is None:
            suppression = compile_suppression([CODECOV_BOT, VERCEL_BOT])
        self._context = ResolverContext(
            registry=registry, lookup=lookup, suppression=suppression
        )

    @property
    def registry(self) -> PackageRegistry:
        """Return the registry used for classification."""
        return self._context.registry

    async def classify(self, event_name: str | None, payload: Payload) -> Target:
        """Return the routing target for one webhook event.

        Event kinds outside :class:`EventCategory` route to the monorepo
        without running any resolver.
        """
        category = EventCategory.parse(event_name)
        if category is None:
            log_info(logger, "Unchecked event %r routed to monorepo", event_name)
            return Target.monorepo()

        target = await resolver_for(category)(self._context, payload)
        log_info(logger, "Classified %s event as %s", category, target)
        return target
