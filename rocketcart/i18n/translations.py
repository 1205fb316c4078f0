"""Internationalization System"""

import json
import os
from pathlib import Path
from typing import Any

from rocketcart.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_LANGUAGES = {
    "pt": "Português",
    "en": "English",
}

# Storefront language
DEFAULT_LANGUAGE = "pt"

_translations: dict[str, dict[str, Any]] = {}


def _get_locales_path() -> Path:
    """Get path to locales directory"""
    return Path(__file__).parent.parent / "locales"


def _load_translations(lang: str) -> dict[str, Any]:
    """Load translations for a language"""
    if lang in _translations:
        return _translations[lang]

    file_path = _get_locales_path() / f"{lang}.json"

    if not file_path.exists():
        if lang != DEFAULT_LANGUAGE:
            return _load_translations(DEFAULT_LANGUAGE)
        return {}

    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        logger.exception(f"Failed to load locale file {file_path}")
        return {}

    if not isinstance(data, dict):
        return {}
    _translations[lang] = data
    return data


def _lookup(translations: dict[str, Any], key: str) -> Any:
    # Nested keys with dot notation (e.g., "cart.out_of_stock")
    current: Any = translations
    try:
        for k in key.split("."):
            current = current[k]
    except (KeyError, TypeError):
        return None
    return current


def detect_language(language_code: str | None) -> str:
    """
    Normalize a language code to a supported one.

    "pt-BR" -> "pt", unknown or empty -> DEFAULT_LANGUAGE.
    """
    if not language_code:
        return DEFAULT_LANGUAGE
    lang = language_code.split("-")[0].lower()
    return lang if lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def get_text(key: str, lang: str | None = None, default: str | None = None, **kwargs) -> str:
    """
    Get translated text by key.

    Args:
        key: Translation key (e.g., "cart.add_failed")
        lang: Language code; falls back to CART_LANGUAGE, then DEFAULT_LANGUAGE
        default: Value returned if key not found (instead of the key)
        **kwargs: Variables to format into the string

    Returns:
        Translated string or key/default if not found
    """
    lang = detect_language(lang or os.environ.get("CART_LANGUAGE"))

    text = _lookup(_load_translations(lang), key)

    # Fallback to the storefront language if key not found
    if text is None and lang != DEFAULT_LANGUAGE:
        text = _lookup(_load_translations(DEFAULT_LANGUAGE), key)

    if not isinstance(text, str):
        return default if default is not None else key

    if kwargs:
        try:
            return text.format(**kwargs)
        except (KeyError, ValueError, AttributeError):
            return text

    return text


def reload_translations() -> None:
    """Clear translation cache"""
    _translations.clear()
