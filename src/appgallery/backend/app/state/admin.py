"""Admin session state and server-side credential verification."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable

from werkzeug.security import check_password_hash

from .storage import StateStorage, read_envelope, write_envelope

ADMIN_STORAGE_KEY = "admin-storage"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminCredentials:
    """Single shared admin secret, held only as a password hash."""

    password_hash: str | None

    @property
    def configured(self) -> bool:
        return bool(self.password_hash)

    def verify(self, password: str) -> bool:
        if not self.password_hash or not isinstance(password, str):
            return False
        return check_password_hash(self.password_hash, password)


class AdminSessionRegistry:
    """Thread-safe server-side record of live admin logins.

    Client state only carries an opaque session id; a login counts as long as
    its id is registered here, so revoking the id on logout invalidates every
    copy of the client state issued for it.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sessions: dict[str, datetime] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def issue(self) -> str:
        session_id = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[session_id] = self._clock()
        return session_id

    def is_active(self, session_id: Any) -> bool:
        if not isinstance(session_id, str) or not session_id:
            return False
        with self._lock:
            return session_id in self._sessions

    def revoke(self, session_id: Any) -> bool:
        if not isinstance(session_id, str):
            return False
        with self._lock:
            return self._sessions.pop(session_id, None) is not None


class AdminSessionStore:
    """Client-scoped ``isAuthenticated`` flag with explicit persistence.

    State is loaded from ``storage`` when the store is built and written back
    on every mutation. The flag never expires; only :meth:`logout` clears it.
    A persisted flag whose session id is unknown to ``sessions`` reads as
    unauthenticated.
    """

    def __init__(
        self,
        storage: StateStorage,
        credentials: AdminCredentials,
        sessions: AdminSessionRegistry,
    ) -> None:
        self._storage = storage
        self._credentials = credentials
        self._sessions = sessions
        state = read_envelope(storage, ADMIN_STORAGE_KEY)
        self._session_id = state.get("sessionId")
        self._is_authenticated = bool(state.get("isAuthenticated", False))

    @property
    def is_authenticated(self) -> bool:
        return self._is_authenticated and self._sessions.is_active(self._session_id)

    def login(self, password: str) -> bool:
        """Authenticate with the shared secret; a mismatch leaves state untouched."""

        if not self._credentials.verify(password):
            logger.info("Rejected admin login attempt")
            return False

        self._sessions.revoke(self._session_id)
        self._session_id = self._sessions.issue()
        self._set(True)
        logger.info("Admin session authenticated")
        return True

    def logout(self) -> None:
        if self._sessions.revoke(self._session_id):
            logger.info("Admin session revoked")
        self._session_id = None
        self._set(False)

    def snapshot(self) -> dict[str, bool]:
        return {"isAuthenticated": self.is_authenticated}

    def _set(self, value: bool) -> None:
        self._is_authenticated = value
        state: dict[str, Any] = {"isAuthenticated": value}
        if value:
            state["sessionId"] = self._session_id
        write_envelope(self._storage, ADMIN_STORAGE_KEY, state)


__all__ = [
    "ADMIN_STORAGE_KEY",
    "AdminCredentials",
    "AdminSessionRegistry",
    "AdminSessionStore",
]
