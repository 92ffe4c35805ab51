"""Lifespan middleware closing the gateway's outbound HTTP clients.

Both the GitHub lookup and the forwarder keep a pooled
``httpx.AsyncClient`` for the life of the process. Falcon calls
``process_shutdown`` once when the ASGI server stops, which is where the
pools are closed.

Usage
-----
Register the middleware when creating the Falcon app::

    app = falcon.asgi.App(middleware=[HTTPClientLifespan([lookup, forwarder])])

"""

from __future__ import annotations

import typing as typ

from hookroute.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

__all__ = ["Closeable", "HTTPClientLifespan"]

logger = get_logger(__name__)


class Closeable(typ.Protocol):
    """Anything owning resources released by ``aclose``."""

    async def aclose(self) -> None: ...


class HTTPClientLifespan:
    """Falcon middleware closing outbound clients at shutdown.

    Parameters
    ----------
    clients
        Objects whose ``aclose`` coroutine is awaited on shutdown, in order.

    """

    def __init__(self, clients: cabc.Iterable[Closeable]) -> None:
        """Store the clients to close."""
        self._clients = tuple(clients)

    async def process_startup(self, _scope: object, _event: object) -> None:
        """Log the number of managed clients."""
        log_info(logger, "Gateway started with %d outbound clients", len(self._clients))

    async def process_shutdown(self, _scope: object, _event: object) -> None:
        """Close every managed client."""
        for client in self._clients:
            await client.aclose()
        log_info(logger, "Gateway outbound clients closed")
