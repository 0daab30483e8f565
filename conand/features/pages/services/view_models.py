"""
View models: shape repository entities into what the page templates render.

Everything here is a pure function of already-fetched data plus the locale.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from conand.models.entities import (
    TIER_ORDER,
    Event,
    EventSponsor,
    NavEvent,
    Schedule,
    Session,
    SiteSettings,
    Speaker,
    Sponsor,
)
from conand.utils.content import t
from conand.utils.locales import format_date, locale_path, switch_locale_paths

from .media import media_alt, media_url
from .rich_text import extract_plain_text, split_paragraphs

logger = logging.getLogger(__name__)

DEFAULT_HERO_IMAGES = (
    "/img/conand_2_img7_opt.png",
    "/img/conand_2_img8_opt.png",
    "/img/conand_1_img4_opt.png",
    "/img/conand_1_img5_opt.png",
    "/img/conand_1_img6_opt.png",
)
DEFAULT_ABOUT_IMAGE_1 = "/img/conand_0_img1_opt.jpg"
DEFAULT_ABOUT_IMAGE_2 = "/img/conand_0_img2_opt.jpg"
TAGLINE = "Andorra tech conference by the community, for the community."

# CSS width classes per tier, largest first
TIER_SIZES = {
    "platinum": "tier-xl",
    "gold": "tier-lg",
    "silver": "tier-md",
    "bronze": "tier-sm",
    "collaborator": "tier-xs",
}


# ---- sponsors ----


@dataclass
class TierGroup:
    tier: str
    label: str
    size: str
    sponsors: list[Sponsor]


def tier_labels(locale: str, settings: Optional[SiteSettings] = None) -> dict[str, str]:
    """Display labels per tier: site settings first, then translations."""
    labels = {tier: t(f"tier.{tier}", locale, default=tier) for tier in TIER_ORDER}
    if settings is not None:
        labels.update({k: v for k, v in settings.tier_labels.items() if v})
    return labels


def group_sponsors_by_tier(sponsors: Iterable[Sponsor], labels: Optional[dict[str, str]] = None) -> list[TierGroup]:
    """Partition sponsors into the fixed tier order, omitting empty tiers."""
    labels = labels or {}
    by_tier = defaultdict(list)
    for sponsor in sponsors:
        by_tier[sponsor.tier].append(sponsor)

    return [
        TierGroup(tier=tier, label=labels.get(tier, tier), size=TIER_SIZES[tier], sponsors=by_tier[tier])
        for tier in TIER_ORDER
        if by_tier.get(tier)
    ]


def apply_tier_overrides(event_sponsors: Iterable[EventSponsor]) -> list[Sponsor]:
    """Sponsors as shown on an event: per-event tier overrides applied to copies."""
    return [item.as_displayed() for item in event_sponsors]


# ---- schedule ----


@dataclass
class TrackGroup:
    name: str
    sessions: list[Session]


@dataclass
class ScheduleDayView:
    index: int
    label: str
    tracks: list[TrackGroup]


@dataclass
class ScheduleView:
    days: list[ScheduleDayView] = field(default_factory=list)
    tabbed: bool = False
    show_track_names: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.days


def group_sessions(sessions: Iterable[Session]) -> dict[tuple[int, int], list[Session]]:
    """Group sessions by (day_index, track_index), each group sorted by start time."""
    groups: dict[tuple[int, int], list[Session]] = defaultdict(list)
    for session in sessions:
        groups[(session.day_index, session.track_index)].append(session)
    # HH:MM is fixed width, so string order is time order
    return {key: sorted(items, key=lambda s: s.start_time) for key, items in groups.items()}


def build_schedule(schedule: Schedule, locale: str, day_label: str = "") -> ScheduleView:
    """
    Lay out an event schedule: one tab per day when there are several days,
    otherwise the single day's tracks inline.
    """
    if not schedule.sessions:
        return ScheduleView()

    groups = group_sessions(schedule.sessions)
    day_count = max(len(schedule.days), 1)
    track_count = len(schedule.tracks)

    for day_index, track_index in groups:
        if day_index >= day_count or track_index >= track_count or day_index < 0 or track_index < 0:
            logger.warning("Schedule session outside day/track range: day=%s track=%s", day_index, track_index)

    days = []
    for day_index in range(day_count):
        tracks = []
        for track_index, track in enumerate(schedule.tracks):
            items = groups.get((day_index, track_index))
            if items:
                tracks.append(TrackGroup(name=track.name, sessions=items))

        label = ""
        if day_index < len(schedule.days):
            label = f"{day_label} {day_index + 1} - {format_date(schedule.days[day_index].date, locale, 'short')}".strip()
        days.append(ScheduleDayView(index=day_index, label=label, tracks=tracks))

    return ScheduleView(days=days, tabbed=len(schedule.days) > 1, show_track_names=track_count > 1)


# ---- events ----


def select_next_event(events: Iterable[Event]) -> Optional[Event]:
    """The earliest-dated upcoming event, or None."""
    upcoming = [e for e in events if e.is_upcoming and e.date is not None]
    if not upcoming:
        return None
    return min(upcoming, key=lambda e: _aware(e.date))


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def countdown_parts(target: Optional[datetime], now: Optional[datetime] = None) -> Optional[dict]:
    """Days/hours/minutes/seconds until target, or None once it has passed."""
    if target is None:
        return None
    now = _aware(now or datetime.now(timezone.utc))
    remaining = int((_aware(target) - now).total_seconds())
    if remaining <= 0:
        return None
    return {
        "days": remaining // 86400,
        "hours": (remaining // 3600) % 24,
        "minutes": (remaining // 60) % 60,
        "seconds": remaining % 60,
    }


def _buttons(event: Event, locale: str) -> list[dict]:
    buttons = []
    if event.action_buttons.call_for_papers:
        buttons.append({"kind": "cfp", "text": t("buttons.callForPapers", locale), "url": event.action_buttons.call_for_papers})
    if event.action_buttons.tickets:
        buttons.append({"kind": "tickets", "text": t("buttons.tickets", locale), "url": event.action_buttons.tickets})
    return buttons


def build_event_card(event: Event, locale: str) -> dict:
    return {
        "name": event.name,
        "href": locale_path(event.path, locale),
        "date": format_date(event.date, locale, "short"),
        "description": extract_plain_text(event.description, " "),
        "image_url": media_url(event.featured_image),
        "image_alt": media_alt(event.featured_image) or event.name,
        "is_upcoming": event.is_upcoming,
        "buttons": _buttons(event, locale),
    }


def build_speaker_card(speaker: Speaker) -> dict:
    return {
        "name": speaker.name,
        "title": speaker.title,
        "photo_url": media_url(speaker.photo),
        "photo_alt": media_alt(speaker.photo) or speaker.name,
        "bio": extract_plain_text(speaker.bio, " "),
    }


# ---- pages ----


def build_layout(
    locale: str,
    canonical_path: str,
    settings: Optional[SiteSettings],
    nav_events: Iterable[NavEvent],
    global_sponsors: Iterable[Sponsor],
) -> dict:
    """Header, footer and language switcher shared by every page."""
    settings = settings or SiteSettings()
    social = [
        {"label": label, "url": url}
        for label, url in (
            ("LinkedIn", settings.social.linkedin_url),
            ("X / Twitter", settings.social.twitter_url),
            ("YouTube", settings.social.youtube_url),
            ("Twitch", settings.social.twitch_url),
        )
        if url
    ]
    return {
        "locale": locale,
        "site_name": settings.site_name,
        "site_description": settings.site_description or TAGLINE,
        "analytics_id": settings.analytics_id,
        "nav": {
            "home": locale_path("/", locale),
            "about": locale_path("/about", locale),
            "gallery": locale_path("/gallery", locale),
            "contact": locale_path("/about", locale) + "#contact",
        },
        "nav_events": [
            {"name": e.name, "href": locale_path(f"/ev/{e.year}/{e.slug}", locale)} for e in nav_events
        ],
        "languages": switch_locale_paths(canonical_path),
        "social": social,
        "global_sponsors": group_sponsors_by_tier(global_sponsors, tier_labels(locale, settings)),
        "tagline": TAGLINE,
    }


def build_home(
    locale: str,
    settings: Optional[SiteSettings],
    next_event: Optional[Event],
    upcoming: Iterable[Event],
    past: Iterable[Event],
    now: Optional[datetime] = None,
) -> dict:
    settings = settings or SiteSettings()

    if settings.hero_images:
        hero_images = [{"url": media_url(m), "alt": media_alt(m) or settings.site_name} for m in settings.hero_images]
    else:
        hero_images = [{"url": url, "alt": "CONAND"} for url in DEFAULT_HERO_IMAGES]

    hero = {
        "images": hero_images,
        "tagline": TAGLINE,
        "next_event": None,
        "primary_button": settings.hero_primary_button,
        "secondary_button": settings.hero_secondary_button,
    }
    if next_event is not None:
        hero["next_event"] = {
            "name": next_event.name,
            "date_iso": next_event.date.isoformat() if next_event.date else "",
            "countdown": countdown_parts(next_event.date, now),
            "buttons": _buttons(next_event, locale),
        }

    save_the_date = None
    if next_event is not None:
        save_the_date = {"date": format_date(next_event.date, locale), "event_name": next_event.name}

    return {
        "hero": hero,
        "save_the_date": save_the_date,
        "upcoming_events": [build_event_card(e, locale) for e in upcoming],
        "past_events": [build_event_card(e, locale) for e in past],
    }


def build_event_page(event: Event, locale: str, settings: Optional[SiteSettings] = None) -> dict:
    schedule = build_schedule(event.schedule, locale, t("event.day", locale))
    sponsors = group_sponsors_by_tier(apply_tier_overrides(event.sponsors), tier_labels(locale, settings))
    return {
        "name": event.name,
        "image_url": media_url(event.featured_image),
        "is_upcoming": event.is_upcoming,
        "date": format_date(event.date, locale),
        "description": extract_plain_text(event.description, " "),
        "buttons": _buttons(event, locale) if event.is_upcoming else [],
        "speakers": [build_speaker_card(s) for s in event.speakers],
        "schedule": schedule,
        "sponsors": sponsors,
        "back_href": locale_path("/", locale),
    }


def build_about(locale: str, settings: Optional[SiteSettings]) -> dict:
    settings = settings or SiteSettings()
    text = extract_plain_text(settings.about_text, "\n\n")
    paragraphs = split_paragraphs(text) if text else []
    if not paragraphs:
        paragraphs = [t(f"about.paragraphs.p{i}", locale, default="") for i in range(1, 5)]
        paragraphs = [p for p in paragraphs if p]

    return {
        "paragraphs_top": paragraphs[:2],
        "paragraphs_bottom": paragraphs[2:4],
        "image_1": media_url(settings.about_image_1) if settings.about_image_1 else DEFAULT_ABOUT_IMAGE_1,
        "image_2": media_url(settings.about_image_2) if settings.about_image_2 else DEFAULT_ABOUT_IMAGE_2,
        "tagline": TAGLINE,
    }
