from __future__ import annotations

from wallabag_notes.datamodels import TokenState
from wallabag_notes.tokens import TokenStore


def test_no_token_is_not_usable(settings, saved, clock):
    store = TokenStore(settings, saved, clock=clock)
    assert store.state is None
    assert not store.is_usable()


def test_token_expiring_in_two_minutes_is_usable(settings, saved, clock):
    settings.access_token = "abc"
    settings.token_expiry = clock.now + 120
    assert TokenStore(settings, saved, clock=clock).is_usable()


def test_token_inside_safety_margin_is_not_usable(settings, saved, clock):
    settings.access_token = "abc"
    store = TokenStore(settings, saved, clock=clock)

    settings.token_expiry = clock.now + 60
    assert not store.is_usable()
    settings.token_expiry = clock.now + 30
    assert not store.is_usable()
    settings.token_expiry = clock.now - 10
    assert not store.is_usable()


def test_replace_writes_all_fields_and_saves_once(settings, saved, clock):
    store = TokenStore(settings, saved, clock=clock)
    store.replace(TokenState("new-access", "new-refresh", clock.now + 3600))

    assert len(saved.snapshots) == 1
    snapshot = saved.snapshots[0]
    assert snapshot["access_token"] == "new-access"
    assert snapshot["refresh_token"] == "new-refresh"
    assert snapshot["token_expiry"] == clock.now + 3600
    assert store.state == TokenState("new-access", "new-refresh", clock.now + 3600)


def test_clear_forgets_tokens(settings, saved, clock):
    settings.access_token = "abc"
    settings.refresh_token = "def"
    settings.token_expiry = clock.now + 3600
    store = TokenStore(settings, saved, clock=clock)

    store.clear()

    assert store.state is None
    assert settings.refresh_token == ""
    assert saved.snapshots[-1]["token_expiry"] == 0.0
