"""Backends that persist client-scoped state between requests."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Mapping, Protocol

from flask import session


class StateStorage(Protocol):
    """Defines the operations state containers need from a persistence layer."""

    def load(self, key: str) -> Mapping[str, Any] | None:
        ...

    def save(self, key: str, value: Mapping[str, Any]) -> None:
        ...


class InMemoryStateStorage:
    """Dictionary-backed storage used by tests and command line tooling."""

    def __init__(self, initial: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._values: dict[str, dict[str, Any]] = {
            key: deepcopy(dict(value)) for key, value in (initial or {}).items()
        }

    def load(self, key: str) -> Mapping[str, Any] | None:
        value = self._values.get(key)
        return deepcopy(value) if value is not None else None

    def save(self, key: str, value: Mapping[str, Any]) -> None:
        self._values[key] = deepcopy(dict(value))


class SessionStateStorage:
    """Persist state in Flask's signed session cookie.

    The session is marked permanent so values survive browser restarts; the
    application sets ``PERMANENT_SESSION_LIFETIME`` far enough out that the
    cookie does not lapse in practice.
    """

    def load(self, key: str) -> Mapping[str, Any] | None:
        value = session.get(key)
        return value if isinstance(value, Mapping) else None

    def save(self, key: str, value: Mapping[str, Any]) -> None:
        session.permanent = True
        session[key] = dict(value)


def read_envelope(storage: StateStorage, key: str) -> Mapping[str, Any]:
    """Return the ``state`` mapping of a persisted ``{"state", "version"}`` envelope."""

    stored = storage.load(key)
    if not stored:
        return {}
    state = stored.get("state")
    return state if isinstance(state, Mapping) else {}


def write_envelope(
    storage: StateStorage, key: str, state: Mapping[str, Any], *, version: int = 0
) -> None:
    storage.save(key, {"state": dict(state), "version": version})


__all__ = [
    "InMemoryStateStorage",
    "SessionStateStorage",
    "StateStorage",
    "read_envelope",
    "write_envelope",
]
