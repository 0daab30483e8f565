"""
Translation store: UI strings loaded from conand/content/<locale>.json.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from conand.utils.locales import DEFAULT_LOCALE, normalize_locale

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).resolve().parent.parent / "content"


def _get_nested(d: dict[str, Any], dotted_key: str) -> Any:
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


@lru_cache(maxsize=8)
def load_messages(locale: str) -> dict[str, Any]:
    path = CONTENT_DIR / f"{locale}.json"
    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw)
        return data if isinstance(data, dict) else {}
    except (OSError, ValueError) as e:
        logger.warning("Could not load messages for %s: %s", locale, e)
        return {}


def clear_cache() -> None:
    load_messages.cache_clear()


def t(key: str, locale: str = DEFAULT_LOCALE, default: str | None = None, **kwargs) -> str:
    """
    Translate a dotted key (e.g. "nav.home") for a locale.

    Missing keys fall back to the default locale, then to `default`, then to the key.
    kwargs are applied with str.format.
    """
    locale = normalize_locale(locale)
    value = _get_nested(load_messages(locale), key)
    if not isinstance(value, str) and locale != DEFAULT_LOCALE:
        value = _get_nested(load_messages(DEFAULT_LOCALE), key)
    if not isinstance(value, str):
        return default if default is not None else key
    if not kwargs:
        return value
    try:
        return value.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        # Bad placeholder in a translation: show the raw string rather than fail the page.
        return value
