"""
Public page routes: home, about, gallery and event detail.

Every handler reads the locale once and hands it to every repository read and
view-model builder. Reads for one page run concurrently; a read that fails
falls back to its default so the rest of the page still renders.
"""

import random
from pathlib import Path

from flask import abort, current_app, render_template, request

from conand.middleware.locale import get_request_locale
from conand.models.content_store import ContentUnavailableError

from .blueprint import bp
from .services.fetch import fetch_concurrently
from .services.repository import ContentRepository, get_repository
from .services.view_models import (
    build_about,
    build_event_page,
    build_home,
    build_layout,
    select_next_event,
)

GALLERY_DIR = "galeria"
GALLERY_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}


def _layout_plan(repo: ContentRepository, locale: str) -> dict:
    return {
        "settings": (lambda: repo.get_site_settings(locale), None),
        "nav_events": (lambda: repo.get_navigation_events(locale), []),
        "global_sponsors": (lambda: repo.get_global_sponsors(locale), []),
    }


def _layout(locale: str, data: dict) -> dict:
    return build_layout(locale, request.path, data["settings"], data["nav_events"], data["global_sponsors"])


@bp.route("/")
def home():
    locale = get_request_locale()
    repo = get_repository()
    data = fetch_concurrently(
        {
            **_layout_plan(repo, locale),
            "upcoming": (lambda: repo.get_upcoming_events(locale), []),
            "past": (lambda: repo.get_past_events(locale), []),
        }
    )

    page = build_home(
        locale,
        data["settings"],
        select_next_event(data["upcoming"]),
        data["upcoming"],
        data["past"],
    )
    return render_template("home.html", layout=_layout(locale, data), page=page, locale=locale)


@bp.route("/about")
def about():
    locale = get_request_locale()
    repo = get_repository()
    data = fetch_concurrently(_layout_plan(repo, locale))

    return render_template(
        "about.html",
        layout=_layout(locale, data),
        page=build_about(locale, data["settings"]),
        recaptcha_site_key=current_app.config.get("RECAPTCHA_SITE_KEY", ""),
        locale=locale,
    )


def list_gallery_images() -> list:
    """Gallery image URLs in a fresh random order."""
    gallery_path = Path(current_app.static_folder) / GALLERY_DIR
    if not gallery_path.is_dir():
        return []

    images = [
        f"{current_app.static_url_path}/{GALLERY_DIR}/{p.name}"
        for p in gallery_path.iterdir()
        if p.is_file() and p.suffix.lower() in GALLERY_EXTENSIONS
    ]
    random.shuffle(images)
    return images


@bp.route("/gallery")
def gallery():
    locale = get_request_locale()
    repo = get_repository()
    data = fetch_concurrently(_layout_plan(repo, locale))

    return render_template("gallery.html", layout=_layout(locale, data), images=list_gallery_images(), locale=locale)


@bp.route("/ev/<year>/<slug>")
def event(year, slug):
    locale = get_request_locale()
    repo = get_repository()

    try:
        found = repo.get_event_by_slug(year, slug, locale)
    except ContentUnavailableError as e:
        current_app.logger.warning(f"Event {year}/{slug} unavailable: {e}")
        found = None
    if found is None:
        abort(404)

    data = fetch_concurrently(_layout_plan(repo, locale))
    return render_template(
        "event.html",
        layout=_layout(locale, data),
        page=build_event_page(found, locale, data["settings"]),
        locale=locale,
    )
