"""Hookroute runtime entrypoint for container deployments.

This module provides the ASGI application factory used by Granian. It
loads :class:`hookroute.config.GatewayConfig` from the environment, wires
the GitHub lookup client, dispatcher and forwarder, and delegates to
:func:`hookroute.gateway.app.create_app` for application construction.

Configuration is driven by environment variables:

- ``HOOKROUTE_HOST``: Bind address (default ``0.0.0.0``)
- ``HOOKROUTE_PORT``: Listen port (default ``8080``)
- ``HOOKROUTE_LOG_LEVEL``: Log level (default ``INFO``)
- routing, endpoint and GitHub settings documented in
  :mod:`hookroute.config`

Run the service directly with ``python -m hookroute.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from hookroute.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

    from hookroute.config import GatewayConfig

__all__ = ["build_dependencies", "create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid HOOKROUTE_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def build_dependencies(config: GatewayConfig):  # noqa: ANN201 - lazy import of return type
    """Wire the lookup client, dispatcher and forwarder for ``config``.

    Returns
    -------
    hookroute.gateway.app.AppDependencies
        Dependencies for a gateway serving ``POST /webhook``.

    """
    from hookroute.gateway.app import AppDependencies
    from hookroute.gateway.forwarder import WebhookForwarder
    from hookroute.github.client import GitHubRestClient
    from hookroute.routing import Dispatcher, compile_suppression

    lookup = GitHubRestClient(config.github)
    forwarder = WebhookForwarder(timeout_s=config.github.timeout_s)
    dispatcher = Dispatcher(
        config.registry,
        lookup,
        suppression=compile_suppression(config.suppressed_authors),
    )
    return AppDependencies(
        dispatcher=dispatcher,
        forwarder=forwarder,
        endpoints=config.endpoints,
        closeables=(lookup, forwarder),
    )


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Builds the full gateway from :meth:`GatewayConfig.from_env`. A routing
    file or boolean toggle that fails to parse stops the process rather
    than starting with a partial configuration.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    Raises
    ------
    SystemExit
        If the gateway configuration is invalid.

    """
    from hookroute.config import GatewayConfig
    from hookroute.gateway.app import create_app as _create_gateway_app

    try:
        config = GatewayConfig.from_env()
    except ValueError as exc:
        log_error(logger, "Invalid hookroute configuration: %s", exc)
        raise SystemExit(1) from exc

    if config.endpoints.monorepo is None:
        log_warning(
            logger,
            "HOOKROUTE_WEBHOOK_MONOREPO is unset; unrouted events will fail",
        )
    log_info(
        logger,
        "Routing %d packages (primary=%s)",
        len(config.registry.list_packages()),
        config.registry.primary,
    )
    return _create_gateway_app(build_dependencies(config))


def main() -> None:
    """Start the hookroute server using Granian.

    Reads ``HOOKROUTE_HOST``, ``HOOKROUTE_PORT``, and ``HOOKROUTE_LOG_LEVEL``
    from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("HOOKROUTE_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port_str = os.environ.get("HOOKROUTE_PORT", "8080")
    port = _parse_port(port_str)
    log_level_str = os.environ.get("HOOKROUTE_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid HOOKROUTE_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting hookroute on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "hookroute.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
