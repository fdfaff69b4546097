"""
Internationalization (i18n) for seller-facing messages and log lines.

Translation files live under resources/i18n/:
1. Shared, language-agnostic files in the root (logs.json)
2. Locale-specific files in resources/i18n/{locale}/*.json

English is always loaded as the fallback layer.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

__all__ = ["I18n", "available_locales", "get_language", "init_i18n", "t"]

logger = logging.getLogger("storecoll.i18n")

FALLBACK_LOCALE = "en"


def _deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Recursively merges ``update`` on top of ``base`` into a new dict."""
    result = base.copy()
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_json_directory(directory: Path) -> dict[str, Any]:
    """Loads and deep-merges every ``*.json`` file of a directory.

    Broken files are logged and skipped so one bad locale file does not take
    the whole message catalog down.
    """
    merged: dict[str, Any] = {}
    if not directory.is_dir():
        return merged
    for file_path in sorted(directory.glob("*.json")):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                merged = _deep_merge(merged, json.load(f))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Error loading i18n file %s: %s", file_path.name, e)
    return merged


class I18n:
    """Message catalog for one locale, layered over the English fallback.

    Attributes:
        locale: Active locale code (e.g. 'en', 'de').
        translations: Fully merged message tree for the active locale.
    """

    def __init__(self, locale: str = FALLBACK_LOCALE, i18n_root: Path | None = None) -> None:
        """Loads the message catalog.

        Args:
            locale: Locale directory name under resources/i18n/.
            i18n_root: Override for the i18n directory (tests).
        """
        if i18n_root is None:
            from storecollections.utils.paths import get_resources_dir

            i18n_root = get_resources_dir() / "i18n"

        self.locale = locale
        self.i18n_root = i18n_root

        fallback = _deep_merge(_load_json_directory(i18n_root), _load_json_directory(i18n_root / FALLBACK_LOCALE))
        if locale != FALLBACK_LOCALE:
            if not (i18n_root / locale).is_dir():
                logger.warning("Unknown locale '%s', falling back to '%s'", locale, FALLBACK_LOCALE)
            self.translations = _deep_merge(fallback, _load_json_directory(i18n_root / locale))
        else:
            self.translations = fallback

    def t(self, key: str, **kwargs: Any) -> str:
        """Looks up a message by dot-notation key and formats it.

        Args:
            key: Dot-separated key path (e.g. 'conditions.tag.contains').
            **kwargs: Values for ``str.format`` placeholders.

        Returns:
            The formatted message, or '[key]' if the key is missing.
        """
        value: Any = self.translations
        for part in key.split("."):
            if not isinstance(value, dict):
                return f"[{key}]"
            value = value.get(part)

        if not isinstance(value, str):
            return f"[{key}]"

        if kwargs:
            try:
                return value.format(**kwargs)
            except (ValueError, KeyError, IndexError):
                return value
        return value


_i18n_instance: I18n | None = None


def init_i18n(locale: str = FALLBACK_LOCALE) -> I18n:
    """Initialize the global i18n instance.

    Args:
        locale: The locale code to use.

    Returns:
        The initialized I18n instance.
    """
    global _i18n_instance
    _i18n_instance = I18n(locale)
    return _i18n_instance


def get_language() -> str:
    """Return the locale code of the global i18n instance."""
    if _i18n_instance is None:
        init_i18n()
    return _i18n_instance.locale


def available_locales() -> list[str]:
    """Lists the locale directories shipped in the resources."""
    from storecollections.utils.paths import get_resources_dir

    root = get_resources_dir() / "i18n"
    return sorted(p.name for p in root.iterdir() if p.is_dir())


def t(key: str, **kwargs: Any) -> str:
    """Retrieve a translated string using the global i18n instance.

    Args:
        key: Dot-separated key path.
        **kwargs: Format arguments for string interpolation.

    Returns:
        Translated string, or '[key]' if not found.
    """
    if _i18n_instance is None:
        init_i18n()
    return _i18n_instance.t(key, **kwargs)
