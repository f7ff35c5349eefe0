"""Client-scoped state containers and the storage backends they persist to."""

from .admin import (
    ADMIN_STORAGE_KEY,
    AdminCredentials,
    AdminSessionRegistry,
    AdminSessionStore,
)
from .language import LANGUAGE_STORAGE_KEY, LanguagePreferenceStore, next_language
from .storage import InMemoryStateStorage, SessionStateStorage, StateStorage

__all__ = [
    "ADMIN_STORAGE_KEY",
    "AdminCredentials",
    "AdminSessionRegistry",
    "AdminSessionStore",
    "InMemoryStateStorage",
    "LANGUAGE_STORAGE_KEY",
    "LanguagePreferenceStore",
    "SessionStateStorage",
    "StateStorage",
    "next_language",
]
