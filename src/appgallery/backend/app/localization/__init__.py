"""Shared translation helpers bridging backend services and static catalogues."""

from .catalog import (
    LANGUAGE_NAMES,
    Translator,
    base_locale,
    get_translator,
    is_supported_language,
    language_codes,
    language_name,
    load_translations,
    normalise_locale,
)

__all__ = [
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
