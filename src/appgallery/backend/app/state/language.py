"""Persisted language preference and the toggle cycling rule."""

from __future__ import annotations

from typing import Sequence

from appgallery.backend.app.localization import (
    base_locale,
    is_supported_language,
    language_codes,
    language_name,
)

from .storage import StateStorage, read_envelope, write_envelope

LANGUAGE_STORAGE_KEY = "language-storage"


def next_language(current: str | None, codes: Sequence[str]) -> str:
    """Return the code following ``current`` in ``codes``, wrapping at the end.

    A ``current`` value missing from ``codes`` counts as index ``-1`` so the
    cycle restarts at the first registered language.
    """

    if not codes:
        raise ValueError("At least one language must be registered")

    try:
        index = list(codes).index(current)
    except ValueError:
        index = -1
    return codes[(index + 1) % len(codes)]


class LanguagePreferenceStore:
    """Client-scoped language selection backed by a :class:`StateStorage`."""

    def __init__(self, storage: StateStorage, *, default: str | None = None) -> None:
        self._storage = storage
        stored = read_envelope(storage, LANGUAGE_STORAGE_KEY).get("language")
        self._language = stored if isinstance(stored, str) and stored else (default or base_locale())

    @property
    def language(self) -> str:
        return self._language

    def set_language(self, code: str) -> None:
        if not is_supported_language(code):
            raise ValueError(f"Unsupported language: {code}")
        self._language = code
        write_envelope(self._storage, LANGUAGE_STORAGE_KEY, {"language": code})

    def toggle(self) -> str:
        """Advance to the next registered language and persist it."""

        self.set_language(next_language(self._language, language_codes()))
        return self._language

    def toggle_label(self) -> str:
        """Display name of the current language, shown on the toggle control."""

        return language_name(self._language)


__all__ = ["LANGUAGE_STORAGE_KEY", "LanguagePreferenceStore", "next_language"]
