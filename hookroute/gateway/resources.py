"""Webhook resource: classify a GitHub delivery and forward it.

Usage
-----
Register the resource on the Falcon app::

    app.add_route("/webhook", WebhookResource(dependencies))

"""

from __future__ import annotations

import dataclasses as dc
import json
import typing as typ
from http import HTTPStatus

from hookroute.logging import get_logger, log_error, log_info
from hookroute.routing.models import EventCategory, MalformedEventError

from .errors import InvalidWebhookError
from .forwarder import ForwardingError
from .outcome import (
    Forward,
    GatewayAction,
    Respond,
    translate_outcome,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookroute.config import EndpointConfig
    from hookroute.routing.dispatcher import Dispatcher

    from .forwarder import WebhookForwarder

__all__ = ["WebhookResource", "WebhookResourceDependencies"]

logger = get_logger(__name__)

GITHUB_USER_AGENT_PREFIX = "GitHub-Hookshot"

MISSING_ENDPOINT = Respond(
    HTTPStatus.INTERNAL_SERVER_ERROR,
    "Cannot process request due to missing server side keys",
)
FORWARDING_FAILED = Respond(HTTPStatus.BAD_GATEWAY, "Forwarding failed")


@dc.dataclass(frozen=True, slots=True)
class WebhookResourceDependencies:
    """Collaborators of :class:`WebhookResource`.

    Attributes
    ----------
    dispatcher
        Classifies deliveries into routing targets.
    forwarder
        Re-delivers the webhook to the chosen endpoint.
    endpoints
        Endpoint URL per channel.

    """

    dispatcher: Dispatcher
    forwarder: WebhookForwarder
    endpoints: EndpointConfig


def _parse_payload(body: bytes) -> dict[str, typ.Any]:
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidWebhookError.invalid_json() from exc
    if not isinstance(payload, dict):
        raise InvalidWebhookError.invalid_json()
    return payload


def _respond(action: Respond, resp: Response) -> None:
    """Answer the delivery directly, repeating the reason as JSON except on 204."""
    resp.status = action.status_line
    resp.set_headers(action.headers)
    if action.status is not HTTPStatus.NO_CONTENT:
        resp.media = {"title": action.reason}


class WebhookResource:
    """Handle ``POST /webhook`` deliveries from GitHub."""

    def __init__(self, dependencies: WebhookResourceDependencies) -> None:
        """Store the resource collaborators."""
        self._deps = dependencies

    async def on_post(self, req: Request, resp: Response) -> None:
        """Classify the delivery and forward, acknowledge or reject it.

        Raises
        ------
        InvalidWebhookError
            When the request lacks GitHub delivery headers or a JSON body.
        MalformedEventError
            When a checked event lacks a field its resolver needs.

        """
        event_name = req.get_header("X-GitHub-Event")
        user_agent = req.get_header("User-Agent") or ""
        if not event_name or not user_agent.startswith(GITHUB_USER_AGENT_PREFIX):
            raise InvalidWebhookError.not_github()

        body = await req.stream.read()
        action = await self._classify(event_name, body)
        await self._apply(action, req, resp, body)

    async def _classify(self, event_name: str, body: bytes) -> GatewayAction:
        dispatcher = self._deps.dispatcher
        if EventCategory.parse(event_name) is None:
            return translate_outcome(
                await dispatcher.classify(event_name, {}), dispatcher.registry
            )

        payload = _parse_payload(body)
        try:
            target = await dispatcher.classify(event_name, payload)
        except MalformedEventError:
            raise
        except Exception as exc:  # noqa: BLE001 - every failure maps to a response
            return translate_outcome(exc, dispatcher.registry)
        return translate_outcome(target, dispatcher.registry)

    async def _apply(
        self, action: GatewayAction, req: Request, resp: Response, body: bytes
    ) -> None:
        if isinstance(action, Forward):
            url = self._deps.endpoints.url_for(action.channel)
            if url is None:
                log_error(logger, "No endpoint configured for %s", action.channel)
                action = MISSING_ENDPOINT
            else:
                await self._forward(url, action.channel, req, resp, body)
                return

        _respond(action, resp)

    async def _forward(
        self,
        url: str,
        channel: str,
        req: Request,
        resp: Response,
        body: bytes,
    ) -> None:
        try:
            result = await self._deps.forwarder.forward(url, body, req.headers)
        except ForwardingError as exc:
            log_error(logger, "Forwarding to %s failed", channel, exc_info=exc)
            _respond(FORWARDING_FAILED, resp)
            return

        log_info(logger, "Delivery routed to %s", channel)
        resp.status = result.status_code
        resp.data = result.content
        if result.content_type:
            resp.content_type = result.content_type
