"""
Content repository: locale-aware queries over the content store, returning entities.

Relationships are expanded by the store and converted here exactly once:
references that could not be resolved are dropped (speakers, sponsors) or
become None (media), so nothing downstream sees a bare id.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask import current_app

from conand.models.content_store import ContentStore
from conand.models.entities import (
    STATUS_PAST,
    STATUS_UPCOMING,
    TIER_ORDER,
    ActionButtons,
    Event,
    EventSponsor,
    HeroButton,
    Media,
    NavEvent,
    Reference,
    Schedule,
    ScheduleDay,
    Session,
    SiteSettings,
    SocialLinks,
    Speaker,
    Sponsor,
    Track,
)
from conand.utils.locales import DEFAULT_LOCALE, parse_datetime

from .rich_text import parse_rich_text

logger = logging.getLogger(__name__)

EVENTS_LIMIT = 100
SPONSORS_LIMIT = 100
EVENT_DEPTH = 2
SPONSOR_DEPTH = 1
SETTINGS_DEPTH = 2


def as_reference_or_doc(value: Any):
    """Split a relationship value into a Reference (bare id), a dict (expanded) or None."""
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        return value
    if isinstance(value, (str, int)):
        return Reference(id=value)
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _index(value: Any) -> int:
    """Day/track index. Missing means the first; unparseable is -1, outside every range."""
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Unreadable schedule index %r", value)
        return -1


def to_media(value: Any) -> Optional[Media]:
    ref = as_reference_or_doc(value)
    if not isinstance(ref, dict):
        return None
    return Media(id=ref.get("id"), url=_text(ref.get("url")), alt=_text(ref.get("alt")))


def to_speaker(value: Any) -> Optional[Speaker]:
    ref = as_reference_or_doc(value)
    if not isinstance(ref, dict) or not ref.get("name"):
        return None
    return Speaker(
        id=ref.get("id"),
        name=_text(ref.get("name")),
        title=_text(ref.get("title")),
        photo=to_media(ref.get("photo")),
        bio=parse_rich_text(ref.get("bio")),
    )


def to_sponsor(value: Any) -> Optional[Sponsor]:
    ref = as_reference_or_doc(value)
    if not isinstance(ref, dict) or not ref.get("name"):
        return None
    tier = ref.get("tier")
    if tier not in TIER_ORDER:
        logger.warning("Sponsor %r has unknown tier %r; showing it as collaborator", ref.get("name"), tier)
        tier = "collaborator"
    return Sponsor(
        id=ref.get("id"),
        name=_text(ref.get("name")),
        tier=tier,
        logo=to_media(ref.get("logo")),
        url=_text(ref.get("url")),
        is_global=bool(ref.get("isGlobal")),
    )


def to_schedule(raw: Any) -> Schedule:
    if not isinstance(raw, dict):
        return Schedule()
    days = [
        ScheduleDay(date=parse_datetime(d.get("dayDate")))
        for d in (raw.get("days") or [])
        if isinstance(d, dict)
    ]
    tracks = [Track(name=_text(tr.get("trackName"))) for tr in (raw.get("tracks") or []) if isinstance(tr, dict)]
    sessions = [
        Session(
            title=_text(s.get("sessionTitle")),
            description=_text(s.get("sessionDescription")),
            speaker=to_speaker(s.get("sessionSpeaker")),
            day_index=_index(s.get("dayIndex")),
            track_index=_index(s.get("trackIndex")),
            start_time=_text(s.get("startTime")),
            end_time=_text(s.get("endTime")),
        )
        for s in (raw.get("sessions") or [])
        if isinstance(s, dict)
    ]
    return Schedule(days=days, tracks=tracks, sessions=sessions)


def to_event(doc: dict) -> Event:
    buttons = doc.get("actionButtons") or {}
    speakers = [sp for sp in (to_speaker(v) for v in (doc.get("speakers") or [])) if sp is not None]

    sponsors = []
    for item in doc.get("eventSponsors") or []:
        if not isinstance(item, dict):
            continue
        sponsor = to_sponsor(item.get("sponsor"))
        if sponsor is None:
            continue
        override = item.get("tierOverride")
        sponsors.append(EventSponsor(sponsor=sponsor, tier_override=override if override in TIER_ORDER else None))

    return Event(
        id=doc.get("id"),
        name=_text(doc.get("name")),
        slug=_text(doc.get("slug")),
        year=_text(doc.get("year")),
        date=parse_datetime(doc.get("date")),
        status=STATUS_PAST if doc.get("status") == STATUS_PAST else STATUS_UPCOMING,
        featured_image=to_media(doc.get("featuredImage")),
        description=parse_rich_text(doc.get("description")),
        action_buttons=ActionButtons(
            call_for_papers_enabled=bool(buttons.get("callForPapersEnabled")),
            call_for_papers_url=_text(buttons.get("callForPapersUrl")),
            tickets_enabled=bool(buttons.get("ticketsEnabled")),
            tickets_url=_text(buttons.get("ticketsUrl")),
        ),
        speakers=speakers,
        sponsors=sponsors,
        schedule=to_schedule(doc.get("schedule")),
    )


def _hero_button(text: Any, url: Any) -> Optional[HeroButton]:
    if text and url:
        return HeroButton(text=_text(text), url=_text(url))
    return None


def to_site_settings(doc: dict) -> SiteSettings:
    general = doc.get("general") or {}
    hero = doc.get("hero") or {}
    about = doc.get("about") or {}
    social = doc.get("social") or {}
    tiers = (doc.get("sponsorTiers") or {}).get("tiers") or []

    hero_images = []
    for item in hero.get("heroImages") or []:
        media = to_media(item.get("image")) if isinstance(item, dict) else None
        if media is not None:
            hero_images.append(media)

    tier_labels = {}
    for item in tiers:
        if isinstance(item, dict) and item.get("tierId") in TIER_ORDER and item.get("tierLabel"):
            tier_labels[item["tierId"]] = _text(item["tierLabel"])

    return SiteSettings(
        site_name=_text(general.get("siteName")) or "CONAND",
        site_description=_text(general.get("siteDescription")),
        contact_email=_text(general.get("contactEmail")),
        analytics_id=_text(general.get("googleAnalyticsId")),
        hero_images=hero_images,
        hero_primary_button=_hero_button(hero.get("heroPrimaryButtonText"), hero.get("heroPrimaryButtonUrl")),
        hero_secondary_button=_hero_button(hero.get("heroSecondaryButtonText"), hero.get("heroSecondaryButtonUrl")),
        about_text=parse_rich_text(about.get("aboutText")),
        about_image_1=to_media(about.get("aboutImage1")),
        about_image_2=to_media(about.get("aboutImage2")),
        social=SocialLinks(
            linkedin_url=_text(social.get("linkedinUrl")),
            twitter_url=_text(social.get("twitterUrl")),
            youtube_url=_text(social.get("youtubeUrl")),
            twitch_url=_text(social.get("twitchUrl")),
        ),
        tier_labels=tier_labels,
    )


class ContentRepository:
    """Locale-parameterized content queries. Store failures propagate to the caller."""

    def __init__(self, store: ContentStore):
        self.store = store

    def get_upcoming_events(self, locale: str = DEFAULT_LOCALE) -> list[Event]:
        docs = self.store.find(
            "events", where={"status": STATUS_UPCOMING}, sort="date", locale=locale, depth=EVENT_DEPTH
        )
        return [to_event(d) for d in docs]

    def get_past_events(self, locale: str = DEFAULT_LOCALE) -> list[Event]:
        docs = self.store.find(
            "events",
            where={"status": STATUS_PAST},
            sort="-date",
            limit=EVENTS_LIMIT,
            locale=locale,
            depth=EVENT_DEPTH,
        )
        return [to_event(d) for d in docs]

    def get_next_event(self, locale: str = DEFAULT_LOCALE) -> Optional[Event]:
        events = self.get_upcoming_events(locale)
        return events[0] if events else None

    def get_all_events(self, locale: str = DEFAULT_LOCALE) -> list[Event]:
        docs = self.store.find("events", sort="-date", limit=EVENTS_LIMIT, locale=locale, depth=EVENT_DEPTH)
        return [to_event(d) for d in docs]

    def get_navigation_events(self, locale: str = DEFAULT_LOCALE) -> list[NavEvent]:
        return [NavEvent(name=e.name, year=e.year, slug=e.slug) for e in self.get_all_events(locale)]

    def get_event_by_slug(self, year: str, slug: str, locale: str = DEFAULT_LOCALE) -> Optional[Event]:
        docs = self.store.find(
            "events", where={"slug": slug, "year": year}, locale=locale, depth=EVENT_DEPTH
        )
        return to_event(docs[0]) if docs else None

    def get_global_sponsors(self, locale: str = DEFAULT_LOCALE) -> list[Sponsor]:
        docs = self.store.find(
            "sponsors", where={"isGlobal": True}, limit=SPONSORS_LIMIT, locale=locale, depth=SPONSOR_DEPTH
        )
        return [sp for sp in (to_sponsor(d) for d in docs) if sp is not None]

    def get_site_settings(self, locale: str = DEFAULT_LOCALE) -> SiteSettings:
        return to_site_settings(self.store.find_global("site-settings", locale=locale, depth=SETTINGS_DEPTH))

    def get_translations(self, locale: str = DEFAULT_LOCALE) -> dict:
        return self.store.find_global("translations", locale=locale)


def get_content_store() -> ContentStore:
    """The app's content store, rebuilt if CONTENT_FILE changed."""
    path = current_app.config["CONTENT_FILE"]
    store = current_app.extensions.get("content_store")
    if store is None or str(store.path) != str(path):
        store = ContentStore(path)
        current_app.extensions["content_store"] = store
    return store


def get_repository() -> ContentRepository:
    return ContentRepository(get_content_store())
