"""Application factory for the hookroute Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when routing dependencies are
available, the ``POST /webhook`` endpoint.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full gateway::

    from hookroute.gateway.app import AppDependencies, create_app

    deps = AppDependencies(
        dispatcher=dispatcher,
        forwarder=forwarder,
        endpoints=endpoints,
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from hookroute.gateway.errors import (
    InvalidWebhookError,
    handle_invalid_webhook,
    handle_malformed_event,
)
from hookroute.gateway.health.resources import HealthResource, ReadyResource
from hookroute.routing.models import MalformedEventError

if typ.TYPE_CHECKING:
    from hookroute.config import EndpointConfig
    from hookroute.gateway.forwarder import WebhookForwarder
    from hookroute.gateway.middleware import Closeable
    from hookroute.routing.dispatcher import Dispatcher

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    dispatcher
        Classifies webhook deliveries.
    forwarder
        Re-delivers webhooks to notification endpoints.
    endpoints
        Endpoint URL per channel.
    closeables
        Outbound clients closed when the server shuts down.

    """

    dispatcher: Dispatcher
    forwarder: WebhookForwarder
    endpoints: EndpointConfig
    closeables: tuple[Closeable, ...] = ()


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional routing dependencies. When ``None``, only ``/health`` and
        ``/ready`` are registered.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = []
    if dependencies is not None and dependencies.closeables:
        from hookroute.gateway.middleware import HTTPClientLifespan

        middleware.append(HTTPClientLifespan(dependencies.closeables))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

    if dependencies is not None:
        from hookroute.gateway.resources import (
            WebhookResource,
            WebhookResourceDependencies,
        )

        app.add_route(
            "/webhook",
            WebhookResource(
                WebhookResourceDependencies(
                    dispatcher=dependencies.dispatcher,
                    forwarder=dependencies.forwarder,
                    endpoints=dependencies.endpoints,
                )
            ),
        )

    app.add_error_handler(InvalidWebhookError, handle_invalid_webhook)
    app.add_error_handler(MalformedEventError, handle_malformed_event)

    return app
