"""
Locale definitions, path resolution and locale-aware formatting.

The default locale never appears in a URL; every other locale is served under
a `/<code>` prefix that is stripped before routing.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Tuple

from babel.dates import format_date as babel_format_date

LOCALES = ("ca", "es", "en", "fr")
DEFAULT_LOCALE = "ca"
PREFIXED_LOCALES = tuple(code for code in LOCALES if code != DEFAULT_LOCALE)

LOCALE_LABELS = {
    "ca": ("CA", "\U0001F1E6\U0001F1E9"),
    "es": ("ES", "\U0001F1EA\U0001F1F8"),
    "en": ("EN", "\U0001F1EC\U0001F1E7"),
    "fr": ("FR", "\U0001F1EB\U0001F1F7"),
}

# Babel locale identifiers used for date formatting
BABEL_LOCALES = {
    "ca": "ca_ES",
    "es": "es_ES",
    "en": "en_US",
    "fr": "fr_FR",
}

# Paths that bypass locale handling entirely (static files, API, admin)
IGNORE_PREFIXES = ("/api", "/admin", "/img", "/static", "/favicon", "/data")


def is_locale(value: Optional[str]) -> bool:
    return bool(value) and value in LOCALES


def normalize_locale(value: Optional[str]) -> str:
    """Return value if it is a known locale code, otherwise the default locale."""
    if is_locale(value):
        return value
    return DEFAULT_LOCALE


def is_ignored_path(path: str) -> bool:
    return any(path.startswith(prefix) for prefix in IGNORE_PREFIXES)


def resolve_locale(path: str) -> Tuple[Optional[str], str]:
    """
    Resolve a request path to (locale, canonical_path).

    Ignored paths come back as (None, path). A `/<code>` prefix for a
    non-default locale is stripped; anything else belongs to the default locale.
    """
    if not path:
        path = "/"

    if is_ignored_path(path):
        return None, path

    for code in PREFIXED_LOCALES:
        prefix = f"/{code}"
        if path == prefix or path.startswith(prefix + "/"):
            return code, path[len(prefix):] or "/"

    return DEFAULT_LOCALE, path


def locale_path(path: str, locale: str) -> str:
    """
    Build the visible path for a canonical path in the given locale.

    Inverse of resolve_locale: resolve_locale(locale_path(p, loc)) == (loc, p).
    """
    if not path.startswith("/"):
        path = "/" + path
    if locale not in PREFIXED_LOCALES:
        return path
    if path == "/":
        return f"/{locale}"
    return f"/{locale}{path}"


def switch_locale_paths(canonical_path: str) -> list[dict]:
    """Links for the language switcher: one entry per locale, same page."""
    links = []
    for code in LOCALES:
        label, flag = LOCALE_LABELS[code]
        links.append({"code": code, "label": label, "flag": flag, "href": locale_path(canonical_path, code)})
    return links


def format_date(value, locale: str, style: str = "long") -> str:
    """
    Format a date for display.

    style="long" -> weekday, day, month and year ("dissabte, 15 de novembre de 2025")
    style="short" -> abbreviated month ("15 de nov. 2025")
    """
    if value is None:
        return ""
    if isinstance(value, str):
        value = parse_datetime(value)
        if value is None:
            return ""
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        return ""

    babel_locale = BABEL_LOCALES.get(locale, BABEL_LOCALES[DEFAULT_LOCALE])
    fmt = "medium" if style == "short" else "full"
    return babel_format_date(value, format=fmt, locale=babel_locale)


def parse_datetime(value) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (with optional trailing Z). None if unparseable."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None
