"""Locale-dependent date formatting for the three site languages (es, en, de).

Usage:
    from services.dates import format_date_by_locale, resolve_locale

Notes:
- Formatting is delegated to Babel (CLDR data), so month and weekday names
  follow the conventions of each language.
- Unknown locales fall back to the configured DEFAULT_LOCALE ("es").
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from babel.dates import format_date
from flask import current_app, has_request_context, request

DEFAULT_LOCALE = "es"
SUPPORTED_LOCALES = ("es", "en", "de")

DateLike = Union[date, datetime, str]


def _supported() -> tuple:
    try:
        return tuple(current_app.config.get("SUPPORTED_LOCALES") or SUPPORTED_LOCALES)
    except RuntimeError:
        return SUPPORTED_LOCALES


def _default() -> str:
    try:
        return current_app.config.get("DEFAULT_LOCALE") or DEFAULT_LOCALE
    except RuntimeError:
        return DEFAULT_LOCALE


def normalize_locale(locale: Optional[str]) -> str:
    """Map "de-DE", "EN" or unknown values onto a supported locale."""
    if locale:
        short = locale.replace("_", "-").split("-")[0].lower()
        if short in _supported():
            return short
    return _default()


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # ISO-Strings, auch mit "Z"-Suffix aus dem Frontend
    text = str(value).strip().replace("Z", "+00:00")
    return datetime.fromisoformat(text).date()


def format_date_by_locale(value: DateLike, locale: Optional[str] = None) -> str:
    """Date with weekday, e.g. "viernes, 1 de diciembre de 2023"."""
    return format_date(_to_date(value), format="full", locale=normalize_locale(locale))


def format_date_short_by_locale(value: DateLike, locale: Optional[str] = None) -> str:
    """Date without weekday, e.g. "1 de diciembre de 2023"."""
    return format_date(_to_date(value), format="long", locale=normalize_locale(locale))


def resolve_locale() -> str:
    """Locale of the current request: ``?locale=`` first, then Accept-Language."""
    if not has_request_context():
        return _default()
    explicit = request.args.get("locale")
    if explicit:
        return normalize_locale(explicit)
    best = request.accept_languages.best_match(list(_supported()))
    return best or _default()


__all__ = [
    "DEFAULT_LOCALE",
    "SUPPORTED_LOCALES",
    "normalize_locale",
    "format_date_by_locale",
    "format_date_short_by_locale",
    "resolve_locale",
]
