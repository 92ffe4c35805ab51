"""Unit tests for author suppression."""

from __future__ import annotations

import pytest

from hookroute.packages import CODECOV_BOT, VERCEL_BOT, SuppressedAuthor
from hookroute.packages.models import CODECOV_BOT_ID, VERCEL_BOT_ID
from hookroute.routing import compile_suppression


@pytest.mark.parametrize("bot_id", [CODECOV_BOT_ID, VERCEL_BOT_ID])
def test_known_bots_are_suppressed_by_id(bot_id: int) -> None:
    """The default bots are matched on their numeric ids."""
    rules = compile_suppression([CODECOV_BOT, VERCEL_BOT])
    assert rules.should_suppress({"id": bot_id, "login": "renamed[bot]"})


def test_id_entries_ignore_login() -> None:
    """An entry with an id does not match other users sharing the login."""
    rules = compile_suppression([CODECOV_BOT])
    assert not rules.should_suppress({"id": 1, "login": "codecov[bot]"})


def test_login_only_entries_match_case_insensitively() -> None:
    """Entries without an id match the login, ignoring case."""
    rules = compile_suppression([SuppressedAuthor(login="Preview-Bot")])
    assert rules.should_suppress({"id": 5, "login": "preview-bot"})


def test_disabled_entries_are_skipped() -> None:
    """Disabled entries never suppress."""
    rules = compile_suppression(
        [SuppressedAuthor(id=CODECOV_BOT_ID, login="codecov[bot]", enabled=False)]
    )
    assert not rules.should_suppress({"id": CODECOV_BOT_ID})


@pytest.mark.parametrize(
    "user",
    [None, {}, {"id": True}, {"id": str(CODECOV_BOT_ID)}, {"login": 3}],
    ids=["none", "empty", "bool-id", "string-id", "int-login"],
)
def test_unusable_user_objects_are_not_suppressed(user: dict | None) -> None:
    """Missing or mistyped user fields never match."""
    rules = compile_suppression([CODECOV_BOT])
    assert not rules.should_suppress(user)
