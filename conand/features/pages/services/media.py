"""
Media reference resolution for templates.
"""

from conand.models.entities import Media

PLACEHOLDER_URL = "/img/placeholder.svg"


def media_url(media) -> str:
    """URL of a media item, or the placeholder for missing/unexpanded/empty media."""
    if isinstance(media, Media) and media.url:
        return media.url
    if isinstance(media, dict) and isinstance(media.get("url"), str) and media["url"]:
        return media["url"]
    return PLACEHOLDER_URL


def media_alt(media) -> str:
    """Alt text of a media item, or "" when there is none."""
    if isinstance(media, Media):
        return media.alt or ""
    if isinstance(media, dict) and isinstance(media.get("alt"), str):
        return media["alt"]
    return ""
