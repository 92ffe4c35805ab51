"""Author-based suppression of bot noise.

Some bots (coverage reporters, preview deployers) comment on every commit.
Those comments are discarded before any GitHub lookup is made, so a noisy
bot never costs rate limit budget.
"""

from __future__ import annotations

import dataclasses
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from hookroute.packages.models import SuppressedAuthor


def _normalise_login(value: str) -> str:
    return value.strip().lower()


@dataclasses.dataclass(frozen=True, slots=True)
class CompiledSuppression:
    """Suppression rules ready for per-event evaluation."""

    user_ids: frozenset[int] = frozenset()
    logins: frozenset[str] = frozenset()

    def should_suppress(self, user: typ.Mapping[str, typ.Any] | None) -> bool:
        """Return True when ``user`` (a GitHub user object) is suppressed."""
        if not user:
            return False
        user_id = user.get("id")
        # bool is an int subclass; GitHub never sends booleans here.
        if isinstance(user_id, int) and not isinstance(user_id, bool):
            if user_id in self.user_ids:
                return True
        login = user.get("login")
        return isinstance(login, str) and _normalise_login(login) in self.logins


def compile_suppression(
    authors: cabc.Iterable[SuppressedAuthor],
) -> CompiledSuppression:
    """Compile configured authors into a single predicate.

    Disabled entries are skipped. An entry with a numeric id is matched on the
    id only, since logins can be renamed; entries without one fall back to a
    case-insensitive login match.
    """
    user_ids: set[int] = set()
    logins: set[str] = set()
    for author in authors:
        if not author.enabled:
            continue
        if author.id is not None:
            user_ids.add(author.id)
        elif author.login and author.login.strip():
            logins.add(_normalise_login(author.login))
    return CompiledSuppression(user_ids=frozenset(user_ids), logins=frozenset(logins))
