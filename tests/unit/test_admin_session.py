"""Unit coverage for the admin session store."""

from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from appgallery.backend.app.state import (
    ADMIN_STORAGE_KEY,
    AdminCredentials,
    AdminSessionRegistry,
    AdminSessionStore,
    InMemoryStateStorage,
)

SECRET = "s3cret-value"
CREDENTIALS = AdminCredentials(generate_password_hash(SECRET, method="pbkdf2:sha256:1000"))


@pytest.fixture()
def sessions() -> AdminSessionRegistry:
    return AdminSessionRegistry()


def _store(
    sessions: AdminSessionRegistry, storage: InMemoryStateStorage | None = None
) -> AdminSessionStore:
    return AdminSessionStore(storage or InMemoryStateStorage(), CREDENTIALS, sessions)


def test_new_session_is_not_authenticated(sessions: AdminSessionRegistry) -> None:
    assert _store(sessions).is_authenticated is False


@pytest.mark.parametrize("password", ["", "S3CRET-VALUE", f"{SECRET} ", "gongmyung2024!"])
def test_wrong_password_returns_false_and_leaves_state(
    sessions: AdminSessionRegistry, password: str
) -> None:
    storage = InMemoryStateStorage()
    store = _store(sessions, storage)

    assert store.login(password) is False
    assert store.is_authenticated is False
    assert storage.load(ADMIN_STORAGE_KEY) is None
    assert len(sessions) == 0


def test_wrong_password_does_not_revoke_existing_session(
    sessions: AdminSessionRegistry,
) -> None:
    store = _store(sessions)
    assert store.login(SECRET) is True

    assert store.login("nope") is False
    assert store.is_authenticated is True


def test_login_persists_across_store_instances(sessions: AdminSessionRegistry) -> None:
    storage = InMemoryStateStorage()
    assert _store(sessions, storage).login(SECRET) is True

    stored = storage.load(ADMIN_STORAGE_KEY)
    assert _store(sessions, storage).is_authenticated is True
    assert stored is not None
    assert stored["version"] == 0
    assert stored["state"]["isAuthenticated"] is True
    assert sessions.is_active(stored["state"]["sessionId"])


def test_logout_is_idempotent(sessions: AdminSessionRegistry) -> None:
    storage = InMemoryStateStorage()
    store = _store(sessions, storage)
    store.login(SECRET)

    store.logout()
    once = storage.load(ADMIN_STORAGE_KEY)
    store.logout()

    assert store.is_authenticated is False
    assert once == {"state": {"isAuthenticated": False}, "version": 0}
    assert storage.load(ADMIN_STORAGE_KEY) == once
    assert _store(sessions, storage).is_authenticated is False


def test_logout_invalidates_copies_of_earlier_state(sessions: AdminSessionRegistry) -> None:
    storage = InMemoryStateStorage()
    store = _store(sessions, storage)
    store.login(SECRET)
    copied = InMemoryStateStorage({ADMIN_STORAGE_KEY: storage.load(ADMIN_STORAGE_KEY)})

    store.logout()

    assert _store(sessions, copied).is_authenticated is False


def test_relogin_replaces_the_previous_session_id(sessions: AdminSessionRegistry) -> None:
    storage = InMemoryStateStorage()
    store = _store(sessions, storage)
    store.login(SECRET)
    first = storage.load(ADMIN_STORAGE_KEY)

    store.login(SECRET)

    assert len(sessions) == 1
    assert _store(sessions, InMemoryStateStorage({ADMIN_STORAGE_KEY: first})).is_authenticated is False
    assert store.is_authenticated is True


def test_flag_without_registered_session_is_not_trusted(
    sessions: AdminSessionRegistry,
) -> None:
    forged = InMemoryStateStorage(
        {ADMIN_STORAGE_KEY: {"state": {"isAuthenticated": True}, "version": 0}}
    )

    assert _store(sessions, forged).is_authenticated is False


def test_registry_revoke_reports_unknown_ids(sessions: AdminSessionRegistry) -> None:
    session_id = sessions.issue()

    assert sessions.revoke(session_id) is True
    assert sessions.revoke(session_id) is False
    assert sessions.revoke(None) is False
    assert sessions.is_active("") is False


def test_unconfigured_credentials_reject_every_password(
    sessions: AdminSessionRegistry,
) -> None:
    store = AdminSessionStore(InMemoryStateStorage(), AdminCredentials(None), sessions)

    assert store.login("") is False
    assert store.login(SECRET) is False
