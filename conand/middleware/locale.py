"""
WSGI middleware that resolves the request locale before Flask routes the request.

The locale prefix is stripped from PATH_INFO (an internal rewrite: the browser
keeps the URL it asked for) and the resolved locale travels to the page
handlers in the X-Locale request header.
"""

import logging

from flask import request

from conand.utils.locales import DEFAULT_LOCALE, normalize_locale, resolve_locale

logger = logging.getLogger(__name__)

LOCALE_HEADER = "X-Locale"
LOCALE_ENVIRON_KEY = "HTTP_X_LOCALE"


class LocaleMiddleware:
    """Rewrite `/<locale>/...` paths to their canonical form and tag the locale."""

    def __init__(self, wsgi_app):
        self.wsgi_app = wsgi_app

    def __call__(self, environ, start_response):
        path = environ.get("PATH_INFO") or "/"
        locale, canonical_path = resolve_locale(path)

        if locale is not None:
            if canonical_path != path:
                logger.debug("Locale rewrite %s -> %s (%s)", path, canonical_path, locale)
            environ["PATH_INFO"] = canonical_path
            environ[LOCALE_ENVIRON_KEY] = locale

        return self.wsgi_app(environ, start_response)


def get_request_locale() -> str:
    """Read the locale resolved by LocaleMiddleware for the current request."""
    try:
        return normalize_locale(request.headers.get(LOCALE_HEADER))
    except RuntimeError:
        # Outside a request context
        return DEFAULT_LOCALE
