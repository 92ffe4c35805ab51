"""Re-deliver GitHub webhooks to notification endpoints.

The forwarder replays the original body with the GitHub delivery headers, so
endpoints that understand GitHub payloads (such as Discord's ``/github``
webhook suffix) receive the event exactly as GitHub sent it.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import httpx

from hookroute.logging import get_logger, log_info

logger = get_logger(__name__)

FORWARDED_HEADERS: tuple[str, ...] = (
    "Content-Type",
    "User-Agent",
    "X-GitHub-Delivery",
    "X-GitHub-Event",
    "X-GitHub-Hook-ID",
    "X-GitHub-Hook-Installation-Target-ID",
    "X-GitHub-Hook-Installation-Target-Type",
    "X-Hub-Signature",
    "X-Hub-Signature-256",
)


class ForwardingError(RuntimeError):
    """Raised when the notification endpoint could not be reached."""

    def __init__(self, message: str, *, url: str) -> None:
        """Record the endpoint that failed."""
        self.url = url
        super().__init__(message)

    @classmethod
    def unreachable(cls, url: str, exc: httpx.HTTPError) -> ForwardingError:
        """Return an error for a request that produced no response."""
        return cls(f"forwarding failed: {type(exc).__name__}: {exc}", url=url)


@dc.dataclass(frozen=True, slots=True)
class ForwardResult:
    """Upstream response relayed back to GitHub."""

    status_code: int
    content: bytes
    content_type: str | None = None


class WebhookForwarder:
    """Forward webhook deliveries with an :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_s: float = 10.0,
    ) -> None:
        """Initialise the forwarder, creating a client when none is given."""
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_s)

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def forward(
        self,
        url: str,
        body: bytes,
        headers: typ.Mapping[str, str],
    ) -> ForwardResult:
        """POST ``body`` to ``url`` with the GitHub delivery headers.

        ``headers`` is looked up case-insensitively; only the names in
        :data:`FORWARDED_HEADERS` are passed on.
        """
        incoming = httpx.Headers(dict(headers))
        outgoing = {
            name: incoming[name] for name in FORWARDED_HEADERS if name in incoming
        }
        try:
            response = await self._client.post(url, content=body, headers=outgoing)
        except httpx.HTTPError as exc:
            raise ForwardingError.unreachable(url, exc) from exc

        log_info(
            logger,
            "Forwarded %s delivery %s (status=%d)",
            outgoing.get("X-GitHub-Event"),
            outgoing.get("X-GitHub-Delivery"),
            response.status_code,
        )
        return ForwardResult(
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )
