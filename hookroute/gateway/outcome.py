"""Translate classification outcomes into gateway actions.

This is the one place that decides what every routing target and every
lookup failure means over HTTP. Both are matched exhaustively, so adding a
:class:`~hookroute.routing.TargetKind` or
:class:`~hookroute.github.LookupErrorKind` member fails type checking here
until it is handled.

==============================  ===========================================
Outcome                         Action
==============================  ===========================================
package target                  forward to the package channel
monorepo target                 forward to the monorepo channel
suppressed target               204, nothing forwarded
``CommitNotFoundError``         forward to the monorepo channel
``RateLimitedError``            429 with rate limit headers
``LookupTransportError``        500 with request diagnostics
any other exception             500 with the exception type and message
==============================  ===========================================
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from http import HTTPStatus

from hookroute.config import MONOREPO_CHANNEL
from hookroute.github.errors import (
    ChangedFilesLookupError,
    LookupErrorKind,
    RateLimitedError,
)
from hookroute.logging import get_logger, log_error, log_warning
from hookroute.routing.models import Target, TargetKind

if typ.TYPE_CHECKING:
    from hookroute.packages.registry import PackageRegistry

logger = get_logger(__name__)

DIAGNOSTIC_HEADER_PREFIX = "x-hookroute-"


@dc.dataclass(frozen=True, slots=True)
class Forward:
    """Forward the delivery to the endpoint configured for ``channel``."""

    channel: str


@dc.dataclass(frozen=True, slots=True)
class Respond:
    """Answer the delivery directly without forwarding it."""

    status: HTTPStatus
    reason: str
    headers: dict[str, str] = dc.field(default_factory=dict)

    @property
    def status_line(self) -> str:
        """Return the Falcon status string including the custom reason."""
        return f"{self.status.value} {self.reason}"


GatewayAction = Forward | Respond


def _header_value(value: str) -> str:
    """Collapse ``value`` onto one ASCII line so it is safe as a header value.

    Non-ASCII characters are written as backslash escapes.
    """
    collapsed = " ".join(value.split())
    return collapsed.encode("ascii", "backslashreplace").decode("ascii")


SKIPPED = Respond(HTTPStatus.NO_CONTENT, "Event received, skipped forwarding")


def translate_target(target: Target, registry: PackageRegistry) -> GatewayAction:
    """Map a routing target to a gateway action."""
    match target.kind:
        case TargetKind.PACKAGE:
            package = typ.cast("str", target.package)
            return Forward(registry.channel_for(package))
        case TargetKind.MONOREPO:
            return Forward(MONOREPO_CHANNEL)
        case TargetKind.SUPPRESSED:
            return SKIPPED
        case _:  # pragma: no cover - exhaustive
            typ.assert_never(target.kind)


def _lookup_headers(error: ChangedFilesLookupError) -> dict[str, str]:
    headers = {
        f"{DIAGNOSTIC_HEADER_PREFIX}github-message": _header_value(str(error)),
    }
    if error.status_code is not None:
        headers[f"{DIAGNOSTIC_HEADER_PREFIX}github-status"] = str(error.status_code)
    if error.request_url is not None:
        headers[f"{DIAGNOSTIC_HEADER_PREFIX}request-url"] = error.request_url
    if error.request_method is not None:
        headers[f"{DIAGNOSTIC_HEADER_PREFIX}request-method"] = error.request_method
    return headers


def translate_lookup_error(error: ChangedFilesLookupError) -> GatewayAction:
    """Map a changed-files lookup failure to a gateway action."""
    match error.kind:
        case LookupErrorKind.NOT_FOUND:
            log_warning(
                logger,
                "GitHub reference not found, routing to monorepo: %s",
                error.request_url,
            )
            return Forward(MONOREPO_CHANNEL)
        case LookupErrorKind.RATE_LIMITED:
            headers = _lookup_headers(error)
            if isinstance(error, RateLimitedError):
                headers.update(error.rate_limit.as_headers())
            log_warning(
                logger,
                "GitHub rate limit hit for %s (reset=%s)",
                error.request_url,
                headers.get("x-ratelimit-reset"),
            )
            return Respond(
                HTTPStatus.TOO_MANY_REQUESTS,
                "An error occurred in an upstream fetch request",
                headers,
            )
        case LookupErrorKind.TRANSPORT:
            log_error(logger, "GitHub lookup failed: %s", error, exc_info=error)
            return Respond(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                "An error occurred in an upstream fetch request",
                _lookup_headers(error),
            )
        case _:  # pragma: no cover - exhaustive
            typ.assert_never(error.kind)


def translate_unexpected(error: Exception) -> GatewayAction:
    """Map an unanticipated classification failure to a 500."""
    log_error(logger, "Unexpected error while classifying event", exc_info=error)
    return Respond(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "An unexpected error occurred while processing the event",
        {
            f"{DIAGNOSTIC_HEADER_PREFIX}error": type(error).__name__,
            f"{DIAGNOSTIC_HEADER_PREFIX}error-message": _header_value(str(error)),
        },
    )


def translate_outcome(
    outcome: Target | Exception, registry: PackageRegistry
) -> GatewayAction:
    """Map a classification result, or the error it raised, to an action."""
    if isinstance(outcome, Target):
        return translate_target(outcome, registry)
    if isinstance(outcome, ChangedFilesLookupError):
        return translate_lookup_error(outcome)
    return translate_unexpected(outcome)
