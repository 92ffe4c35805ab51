"""Gateway configuration loaded from environment variables.

Usage
-----
Load everything the runtime needs:

>>> config = GatewayConfig.from_env()
>>> config.endpoints.url_for("builders")  # doctest: +SKIP
'https://discord.com/api/webhooks/.../github'

Environment variables
---------------------
- ``HOOKROUTE_ROUTING_CONFIG``: optional YAML routing file replacing the
  built-in package registry and suppression list.
- ``HOOKROUTE_DISCARD_CODECOV_COMMENTS`` / ``HOOKROUTE_DISCARD_VERCEL_COMMENTS``:
  toggles for the built-in bot suppression (default on). Ignored when a
  routing file is configured, since the file lists its own authors.
- ``HOOKROUTE_WEBHOOK_MONOREPO``: catch-all notification endpoint.
- ``HOOKROUTE_WEBHOOK_<CHANNEL>``: endpoint for one channel, with the channel
  name upper-cased and non-alphanumerics replaced by ``_``.
- ``HOOKROUTE_GITHUB_*``: see :class:`hookroute.github.GitHubRestConfig`.

"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import os
import re
from pathlib import Path

from hookroute.github.client import GitHubRestConfig
from hookroute.packages import (
    CODECOV_BOT,
    VERCEL_BOT,
    PackageRegistry,
    SuppressedAuthor,
    default_registry,
    load_routing_file,
)

MONOREPO_CHANNEL = "monorepo"
_ENDPOINT_ENV_PREFIX = "HOOKROUTE_WEBHOOK_"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def parse_bool(env_var: str, *, default: bool) -> bool:
    """Read a boolean env var, falling back to ``default`` when unset."""
    raw = os.environ.get(env_var, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    msg = f"{env_var} must be a boolean (true/false), got: {raw!r}"
    raise ValueError(msg)


def endpoint_env_var(channel: str) -> str:
    """Return the env var holding the endpoint URL for ``channel``.

    >>> endpoint_env_var("discord.js")
    'HOOKROUTE_WEBHOOK_DISCORD_JS'

    """
    return _ENDPOINT_ENV_PREFIX + re.sub(r"[^A-Za-z0-9]", "_", channel).upper()


@dc.dataclass(frozen=True, slots=True)
class EndpointConfig:
    """Notification endpoint URLs keyed by channel.

    Attributes
    ----------
    monorepo
        Catch-all endpoint; also the fallback for channels without a URL.
    channels
        Endpoint URL per package channel.

    """

    monorepo: str | None = None
    channels: cabc.Mapping[str, str] = dc.field(default_factory=dict)

    def url_for(self, channel: str | None) -> str | None:
        """Return the endpoint for ``channel``, falling back to the monorepo."""
        if channel is not None and channel != MONOREPO_CHANNEL:
            url = self.channels.get(channel)
            if url:
                return url
        return self.monorepo

    @classmethod
    def from_env(cls, channels: cabc.Iterable[str]) -> EndpointConfig:
        """Read the endpoint for the monorepo and each of ``channels``."""
        monorepo = os.environ.get(endpoint_env_var(MONOREPO_CHANNEL), "").strip()
        urls: dict[str, str] = {}
        for channel in channels:
            url = os.environ.get(endpoint_env_var(channel), "").strip()
            if url:
                urls[channel] = url
        return cls(monorepo=monorepo or None, channels=urls)


@dc.dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Everything the gateway needs to classify and forward events."""

    registry: PackageRegistry
    suppressed_authors: tuple[SuppressedAuthor, ...]
    endpoints: EndpointConfig
    github: GitHubRestConfig

    @classmethod
    def from_env(cls) -> GatewayConfig:
        """Create configuration from environment variables.

        Raises
        ------
        hookroute.packages.RoutingConfigError
            If ``HOOKROUTE_ROUTING_CONFIG`` names an invalid routing file.
        ValueError
            If a boolean toggle holds an unrecognised value.

        """
        raw_path = os.environ.get("HOOKROUTE_ROUTING_CONFIG", "").strip()
        if raw_path:
            routing = load_routing_file(Path(raw_path))
            registry = routing.to_registry()
            authors = tuple(routing.suppress)
        else:
            registry = default_registry()
            authors = _default_suppressed_authors()

        return cls(
            registry=registry,
            suppressed_authors=authors,
            endpoints=EndpointConfig.from_env(registry.channels()),
            github=GitHubRestConfig.from_env(),
        )


def _default_suppressed_authors() -> tuple[SuppressedAuthor, ...]:
    codecov = parse_bool("HOOKROUTE_DISCARD_CODECOV_COMMENTS", default=True)
    vercel = parse_bool("HOOKROUTE_DISCARD_VERCEL_COMMENTS", default=True)
    return (
        SuppressedAuthor(id=CODECOV_BOT.id, login=CODECOV_BOT.login, enabled=codecov),
        SuppressedAuthor(id=VERCEL_BOT.id, login=VERCEL_BOT.login, enabled=vercel),
    )
