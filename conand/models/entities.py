"""
Content entities as the site consumes them.

Documents come out of the content store as plain dicts; the repository turns
them into these dataclasses once, so relationships are either fully expanded
entities or a Reference that could not be resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Union

TIER_ORDER = ("platinum", "gold", "silver", "bronze", "collaborator")

STATUS_UPCOMING = "upcoming"
STATUS_PAST = "past"


@dataclass(frozen=True)
class Reference:
    """A relationship that arrived as a bare identifier."""

    id: Union[str, int]


@dataclass(frozen=True)
class TextNode:
    """Rich-text leaf carrying literal text."""

    text: str
    type: str = "text"


@dataclass(frozen=True)
class ElementNode:
    """Rich-text container (root, paragraph, heading, list, link...)."""

    type: str
    children: tuple = ()


# A rich-text field: a parsed tree, an already-plain string, or nothing
RichText = Union[ElementNode, str, None]


@dataclass
class Media:
    id: Union[str, int]
    url: str = ""
    alt: str = ""


@dataclass
class Speaker:
    id: Union[str, int]
    name: str
    title: str = ""
    photo: Optional[Media] = None
    bio: RichText = None


@dataclass
class Sponsor:
    id: Union[str, int]
    name: str
    tier: str
    logo: Optional[Media] = None
    url: str = ""
    is_global: bool = False


@dataclass
class EventSponsor:
    """A sponsor as listed on one event, optionally shown in a different tier."""

    sponsor: Sponsor
    tier_override: Optional[str] = None

    @property
    def display_tier(self) -> str:
        return self.tier_override or self.sponsor.tier

    def as_displayed(self) -> Sponsor:
        """Copy of the sponsor with the event tier applied; the original is untouched."""
        if not self.tier_override:
            return self.sponsor
        return replace(self.sponsor, tier=self.tier_override)


@dataclass
class ActionButtons:
    call_for_papers_enabled: bool = False
    call_for_papers_url: str = ""
    tickets_enabled: bool = False
    tickets_url: str = ""

    @property
    def call_for_papers(self) -> Optional[str]:
        """CFP link, only when enabled and set."""
        if self.call_for_papers_enabled and self.call_for_papers_url:
            return self.call_for_papers_url
        return None

    @property
    def tickets(self) -> Optional[str]:
        if self.tickets_enabled and self.tickets_url:
            return self.tickets_url
        return None


@dataclass
class ScheduleDay:
    date: Optional[datetime] = None


@dataclass
class Track:
    name: str = ""


@dataclass
class Session:
    title: str = ""
    description: str = ""
    speaker: Optional[Speaker] = None
    day_index: int = 0
    track_index: int = 0
    start_time: str = ""
    end_time: str = ""


@dataclass
class Schedule:
    days: list[ScheduleDay] = field(default_factory=list)
    tracks: list[Track] = field(default_factory=list)
    sessions: list[Session] = field(default_factory=list)


@dataclass
class Event:
    id: Union[str, int]
    name: str
    slug: str
    year: str
    date: Optional[datetime] = None
    status: str = STATUS_UPCOMING
    featured_image: Optional[Media] = None
    description: RichText = None
    action_buttons: ActionButtons = field(default_factory=ActionButtons)
    speakers: list[Speaker] = field(default_factory=list)
    sponsors: list[EventSponsor] = field(default_factory=list)
    schedule: Schedule = field(default_factory=Schedule)

    @property
    def is_upcoming(self) -> bool:
        return self.status == STATUS_UPCOMING

    @property
    def path(self) -> str:
        """Canonical (unprefixed) path of the event page."""
        return f"/ev/{self.year}/{self.slug}"


@dataclass
class NavEvent:
    name: str
    year: str
    slug: str


@dataclass
class HeroButton:
    text: str
    url: str


@dataclass
class SocialLinks:
    linkedin_url: str = ""
    twitter_url: str = ""
    youtube_url: str = ""
    twitch_url: str = ""


@dataclass
class SiteSettings:
    site_name: str = "CONAND"
    site_description: str = ""
    contact_email: str = ""
    analytics_id: str = ""
    hero_images: list[Media] = field(default_factory=list)
    hero_primary_button: Optional[HeroButton] = None
    hero_secondary_button: Optional[HeroButton] = None
    about_text: RichText = None
    about_image_1: Optional[Media] = None
    about_image_2: Optional[Media] = None
    social: SocialLinks = field(default_factory=SocialLinks)
    tier_labels: dict[str, str] = field(default_factory=dict)
