"""Translation catalogue helpers backed by shared JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from importlib import resources
from types import MappingProxyType
from typing import Any, Mapping

_BASE_LOCALE = "ko"
_TRANSLATIONS_PACKAGE = "appgallery.translations"

# Registry order drives the language toggle cycle.
LANGUAGE_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "ko": "한국어",
        "en": "English",
        "ja": "日本語",
    }
)


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings."""

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str) -> str:
        return self._messages.get(key) or self._fallback.get(key, key)


@dataclass(frozen=True)
class Catalogue:
    """Representation of a locale catalogue backed by the shared resources."""

    locale: str
    backend: Mapping[str, str]
    frontend: Mapping[str, Any]


def base_locale() -> str:
    return _BASE_LOCALE


def language_codes() -> tuple[str, ...]:
    """Return the supported language codes in registry order."""

    return tuple(LANGUAGE_NAMES)


def language_name(code: str) -> str:
    """Return the display name for ``code``, or the code itself when unknown."""

    return LANGUAGE_NAMES.get(code, code)


def is_supported_language(code: str | None) -> bool:
    return code in LANGUAGE_NAMES


@cache
def _available_locales() -> tuple[str, ...]:
    """Return the registered locales that ship a translation payload."""

    root = resources.files(_TRANSLATIONS_PACKAGE)
    published = {entry.name[: -len(".json")] for entry in root.iterdir() if entry.name.endswith(".json")}
    locales = tuple(code for code in LANGUAGE_NAMES if code in published)
    return locales or (_BASE_LOCALE,)


@cache
def _read_catalogue_payload(locale: str) -> dict[str, Any]:
    """Load the raw translation payload for the requested locale."""

    resource = resources.files(_TRANSLATIONS_PACKAGE).joinpath(f"{locale}.json")
    if not resource.is_file():
        return {"backend": {}, "frontend": {}}

    with resource.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    backend = payload.get("backend") or {}
    frontend = payload.get("frontend") or {}
    if not isinstance(backend, dict):
        backend = {}
    if not isinstance(frontend, dict):
        frontend = {}

    return {"backend": backend, "frontend": frontend}


@cache
def _load_catalogue(locale: str) -> Catalogue:
    payload = _read_catalogue_payload(locale)
    backend = {key: str(value) for key, value in payload["backend"].items()}
    return Catalogue(locale=locale, backend=backend, frontend=payload["frontend"])


def normalise_locale(locale: str | None) -> str:
    """Normalise requested locale to a supported catalogue key."""

    if not locale:
        return _BASE_LOCALE

    normalized = locale.strip().lower().split("-")[0]
    return normalized if normalized in _available_locales() else _BASE_LOCALE


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator instance for the requested locale."""

    normalized = normalise_locale(locale)
    catalogue = _load_catalogue(normalized)
    fallback = _load_catalogue(_BASE_LOCALE)
    fallback_messages = fallback.backend if normalized != _BASE_LOCALE else catalogue.backend

    return Translator(
        locale=catalogue.locale,
        _messages=catalogue.backend,
        _fallback=fallback_messages,
    )


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Expose combined backend/frontend translations for API consumers."""

    normalized = normalise_locale(locale)
    catalogue = _load_catalogue(normalized)
    fallback = _load_catalogue(_BASE_LOCALE)

    return {
        "locale": normalized,
        "available_locales": list(_available_locales()),
        "languages": [
            {"code": code, "name": language_name(code)} for code in language_codes()
        ],
        "backend": dict(catalogue.backend),
        "frontend": catalogue.frontend,
        "fallback": {
            "locale": _BASE_LOCALE,
            "backend": dict(fallback.backend),
            "frontend": fallback.frontend,
        },
    }


__all__ = [
    "Catalogue",
    "LANGUAGE_NAMES",
    "Translator",
    "base_locale",
    "get_translator",
    "is_supported_language",
    "language_codes",
    "language_name",
    "load_translations",
    "normalise_locale",
]
