"""Client errors and Falcon error handlers for the webhook gateway.

Usage
-----
Register error handlers on the Falcon app::

    from hookroute.gateway.errors import (
        InvalidWebhookError,
        handle_invalid_webhook,
        handle_malformed_event,
    )

    app.add_error_handler(InvalidWebhookError, handle_invalid_webhook)
    app.add_error_handler(MalformedEventError, handle_malformed_event)

"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookroute.routing.models import MalformedEventError

__all__ = [
    "InvalidWebhookError",
    "handle_invalid_webhook",
    "handle_malformed_event",
]


class InvalidWebhookError(Exception):
    """Raised for requests that are not usable GitHub webhook deliveries.

    Attributes
    ----------
    reason
        Human-readable description used as the response status reason.

    """

    def __init__(self, reason: str) -> None:
        """Initialize with the rejection reason."""
        self.reason = reason
        super().__init__(reason)

    @classmethod
    def not_github(cls) -> InvalidWebhookError:
        """Return an error for requests without GitHub delivery headers."""
        return cls("Not a github event")

    @classmethod
    def invalid_json(cls) -> InvalidWebhookError:
        """Return an error for bodies that are not a JSON object."""
        return cls("Webhook body is not a JSON object")


async def handle_invalid_webhook(
    _req: Request,
    resp: Response,
    ex: InvalidWebhookError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidWebhookError`` to an HTTP 400 carrying the reason."""
    resp.status = f"400 {ex.reason}"
    resp.media = {"title": "Invalid webhook", "description": ex.reason}


async def handle_malformed_event(
    _req: Request,
    resp: Response,
    ex: MalformedEventError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``MalformedEventError`` to an HTTP 400 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The payload validation error naming the missing field.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_400
    resp.media = {
        "title": "Malformed event",
        "description": str(ex),
        "field": ex.field,
    }
