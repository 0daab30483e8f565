"""
JSON document store for site content (events, speakers, sponsors, media, globals).

The store file looks like:

    {
      "media": [{"id": 1, "url": "/img/x.png", "alt": "..."}],
      "speakers": [...], "sponsors": [...], "events": [...],
      "globals": {"site-settings": {...}, "translations": {...}}
    }

Localized fields hold a {locale: value} map; reading in a locale that has no
value falls back to the default locale. Relationship fields hold ids and are
expanded into the referenced documents up to the requested depth.
"""

import copy
import json
import logging
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from conand.utils.locales import DEFAULT_LOCALE, LOCALES, parse_datetime

logger = logging.getLogger(__name__)

COLLECTIONS = ("media", "speakers", "sponsors", "events")
GLOBALS = ("site-settings", "translations")

# Dotted paths of localized fields. Lists are traversed transparently and "*"
# matches every key of a group.
LOCALIZED_FIELDS = {
    "media": (),
    "speakers": ("bio",),
    "sponsors": (),
    "events": (
        "description",
        "schedule.sessions.sessionTitle",
        "schedule.sessions.sessionDescription",
    ),
    "site-settings": (
        "general.siteDescription",
        "hero.heroPrimaryButtonText",
        "hero.heroSecondaryButtonText",
        "about.aboutText",
        "sponsorTiers.tiers.tierLabel",
    ),
    "translations": ("nav.*", "buttons.*", "home.*", "countdown.*", "event.*"),
}

# Dotted path -> related collection
RELATIONSHIPS = {
    "media": {},
    "speakers": {"photo": "media"},
    "sponsors": {"logo": "media"},
    "events": {
        "featuredImage": "media",
        "speakers": "speakers",
        "eventSponsors.sponsor": "sponsors",
        "schedule.sessions.sessionSpeaker": "speakers",
    },
    "site-settings": {
        "hero.heroImages.image": "media",
        "about.aboutImage1": "media",
        "about.aboutImage2": "media",
    },
    "translations": {},
}


class ContentUnavailableError(Exception):
    """The content file is missing, unreadable or not a content document."""


def localize_value(value: Any, locale: str) -> Any:
    """Pick the locale's entry from a {locale: value} map, falling back to the default locale."""
    if isinstance(value, dict) and value and set(value) <= set(LOCALES):
        chosen = value.get(locale)
        if chosen is None or chosen == "":
            chosen = value.get(DEFAULT_LOCALE)
        return chosen
    return value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sort_key(docs: List[Dict], key: str) -> Callable[[Dict], Any]:
    """Time order when every value is a timestamp, string order otherwise."""
    if docs and all(parse_datetime(d.get(key)) is not None for d in docs):
        return lambda d: _as_utc(parse_datetime(d.get(key)))
    return lambda d: str(d.get(key))


def map_path(node: Any, parts: List[str], fn) -> Any:
    """Return a copy of node with fn applied to every value reached by parts."""
    if isinstance(node, list):
        return [map_path(item, parts, fn) for item in node]
    if not isinstance(node, dict) or not parts:
        return node

    head, rest = parts[0], parts[1:]
    keys = list(node.keys()) if head == "*" else [head]
    out = dict(node)
    for key in keys:
        if key not in node:
            continue
        out[key] = map_path(node[key], rest, fn) if rest else fn(node[key])
    return out


class _Snapshot:
    """One parsed version of the content file, indexed by id."""

    def __init__(self, raw: Dict):
        self.collections: Dict[str, List[Dict]] = {}
        self.index: Dict[str, Dict[str, Dict]] = {}
        for name in COLLECTIONS:
            docs = [d for d in (raw.get(name) or []) if isinstance(d, dict)]
            self.collections[name] = docs
            self.index[name] = {str(d.get("id")): d for d in docs if d.get("id") is not None}

        globals_ = raw.get("globals") or {}
        self.globals: Dict[str, Dict] = {
            slug: globals_.get(slug) if isinstance(globals_.get(slug), dict) else {} for slug in GLOBALS
        }

    def get(self, collection: str, doc_id: Any) -> Optional[Dict]:
        return self.index.get(collection, {}).get(str(doc_id))


class ContentStore:
    """Read-only access to the content document file."""

    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._snapshot: Optional[_Snapshot] = None
        self._mtime: Optional[float] = None
        self.loaded_at: Optional[float] = None

    def _load(self) -> _Snapshot:
        """Return the cached snapshot, re-reading the file when it changed."""
        with self._lock:
            try:
                mtime = self.path.stat().st_mtime
            except OSError as e:
                raise ContentUnavailableError(f"Content file not found: {self.path}") from e

            if self._snapshot is not None and mtime == self._mtime:
                return self._snapshot

            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
            except (OSError, ValueError) as e:
                raise ContentUnavailableError(f"Content file unreadable: {self.path}: {e}") from e

            if not isinstance(raw, dict):
                raise ContentUnavailableError(f"Content file is not a document: {self.path}")

            self._snapshot = _Snapshot(raw)
            self._mtime = mtime
            self.loaded_at = time.time()
            logger.info("Loaded content from %s", self.path)
            return self._snapshot

    def reload(self):
        """Drop the cached snapshot; the next read goes to disk."""
        with self._lock:
            self._snapshot = None
            self._mtime = None

    def _prepare(self, snapshot: _Snapshot, collection: str, doc: Dict, locale: str, depth: int) -> Dict:
        doc = copy.deepcopy(doc)
        for field_path in LOCALIZED_FIELDS.get(collection, ()):
            doc = map_path(doc, field_path.split("."), lambda v: localize_value(v, locale))

        for field_path, target in RELATIONSHIPS.get(collection, {}).items():
            doc = map_path(
                doc,
                field_path.split("."),
                lambda v, target=target: self._expand(snapshot, target, v, locale, depth),
            )
        return doc

    def _expand(self, snapshot: _Snapshot, target: str, value: Any, locale: str, depth: int) -> Any:
        if depth <= 0 or value is None:
            return value
        if isinstance(value, list):
            return [self._expand(snapshot, target, item, locale, depth) for item in value]
        if isinstance(value, dict):
            # Already an inline document
            return value

        related = snapshot.get(target, value)
        if related is None:
            # Dangling reference: leave the bare id for the caller to degrade
            return value
        return self._prepare(snapshot, target, related, locale, depth - 1)

    @staticmethod
    def _matches(doc: Dict, where: Optional[Dict], locale: str) -> bool:
        if not where:
            return True
        for field, expected in where.items():
            if isinstance(expected, dict) and "equals" in expected:
                expected = expected["equals"]
            actual = localize_value(doc.get(field), locale)
            if actual != expected and str(actual) != str(expected):
                return False
        return True

    def find(
        self,
        collection: str,
        where: Optional[Dict] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
        locale: str = DEFAULT_LOCALE,
        depth: int = 0,
    ) -> List[Dict]:
        """
        Query a collection.

        - where: {field: value} or {field: {"equals": value}}, all must match
        - sort: field name, "-field" for descending
        - depth: how many levels of relationships to expand
        """
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")

        snapshot = self._load()
        docs = [d for d in snapshot.collections[collection] if self._matches(d, where, locale)]

        if sort:
            reverse = sort.startswith("-")
            key = sort.lstrip("-")
            present = [d for d in docs if d.get(key) is not None]
            missing = [d for d in docs if d.get(key) is None]
            present.sort(key=sort_key(present, key), reverse=reverse)
            docs = present + missing

        if limit is not None:
            docs = docs[:limit]

        return [self._prepare(snapshot, collection, d, locale, depth) for d in docs]

    def find_global(self, slug: str, locale: str = DEFAULT_LOCALE, depth: int = 0) -> Dict:
        if slug not in GLOBALS:
            raise ValueError(f"Unknown global: {slug}")
        snapshot = self._load()
        return self._prepare(snapshot, slug, snapshot.globals.get(slug) or {}, locale, depth)

    def status(self) -> Dict:
        """Availability and document counts, for the admin status endpoint."""
        try:
            snapshot = self._load()
        except ContentUnavailableError as e:
            return {"path": str(self.path), "available": False, "error": str(e), "counts": {}, "loaded_at": None}
        return {
            "path": str(self.path),
            "available": True,
            "error": None,
            "counts": {name: len(docs) for name, docs in snapshot.collections.items()},
            "loaded_at": self.loaded_at,
        }
