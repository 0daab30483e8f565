"""
Tests for locale resolution, locale-aware paths and date formatting.
"""
import unittest
import sys
import os
from datetime import date, datetime, timezone

# Add parent directory to path to import conand modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from conand.utils.locales import (
    DEFAULT_LOCALE,
    LOCALES,
    format_date,
    is_ignored_path,
    locale_path,
    normalize_locale,
    parse_datetime,
    resolve_locale,
    switch_locale_paths,
)


class TestResolveLocale(unittest.TestCase):
    """Mapping request paths to (locale, canonical path)."""

    def test_unprefixed_path_is_default_locale(self):
        self.assertEqual(resolve_locale('/'), ('ca', '/'))
        self.assertEqual(resolve_locale('/about'), ('ca', '/about'))
        self.assertEqual(resolve_locale('/ev/2025/devfest'), ('ca', '/ev/2025/devfest'))

    def test_prefixed_path_is_stripped(self):
        self.assertEqual(resolve_locale('/es/about'), ('es', '/about'))
        self.assertEqual(resolve_locale('/fr/ev/2025/devfest'), ('fr', '/ev/2025/devfest'))

    def test_bare_prefix_maps_to_root(self):
        self.assertEqual(resolve_locale('/en'), ('en', '/'))
        self.assertEqual(resolve_locale('/es/'), ('es', '/'))

    def test_prefix_must_be_a_whole_segment(self):
        self.assertEqual(resolve_locale('/esports'), ('ca', '/esports'))
        self.assertEqual(resolve_locale('/english/page'), ('ca', '/english/page'))

    def test_unknown_locale_segment_falls_through(self):
        self.assertEqual(resolve_locale('/xx/about'), ('ca', '/xx/about'))
        self.assertEqual(resolve_locale('/de'), ('ca', '/de'))

    def test_default_code_is_not_a_prefix(self):
        self.assertEqual(resolve_locale('/ca'), ('ca', '/ca'))
        self.assertEqual(resolve_locale('/ca/about'), ('ca', '/ca/about'))

    def test_ignored_paths_are_untouched(self):
        for path in ('/api/contact', '/admin/login', '/img/logo.png', '/static/x.css', '/favicon.ico', '/data/x'):
            self.assertEqual(resolve_locale(path), (None, path), path)

    def test_ignore_prefixes_are_plain_string_prefixes(self):
        self.assertTrue(is_ignored_path('/apiary'))
        self.assertTrue(is_ignored_path('/images/a.png'))
        self.assertFalse(is_ignored_path('/about'))

    def test_empty_path_is_root(self):
        self.assertEqual(resolve_locale(''), ('ca', '/'))


class TestLocalePath(unittest.TestCase):
    """Building visible paths for a locale."""

    def test_default_locale_is_unprefixed(self):
        self.assertEqual(locale_path('/about', 'ca'), '/about')
        self.assertEqual(locale_path('/', 'ca'), '/')

    def test_other_locales_are_prefixed(self):
        self.assertEqual(locale_path('/about', 'es'), '/es/about')
        self.assertEqual(locale_path('/', 'fr'), '/fr')

    def test_missing_leading_slash(self):
        self.assertEqual(locale_path('about', 'en'), '/en/about')

    def test_round_trip(self):
        for path in ('/', '/about', '/gallery', '/ev/2025/devfest'):
            for locale in LOCALES:
                self.assertEqual(resolve_locale(locale_path(path, locale)), (locale, path))

    def test_switch_paths_keep_the_page(self):
        links = switch_locale_paths('/ev/2025/devfest')
        self.assertEqual([l['code'] for l in links], list(LOCALES))
        hrefs = {l['code']: l['href'] for l in links}
        self.assertEqual(hrefs['ca'], '/ev/2025/devfest')
        self.assertEqual(hrefs['es'], '/es/ev/2025/devfest')
        self.assertEqual(hrefs['en'], '/en/ev/2025/devfest')
        self.assertEqual(hrefs['fr'], '/fr/ev/2025/devfest')

    def test_normalize_locale(self):
        self.assertEqual(normalize_locale('es'), 'es')
        self.assertEqual(normalize_locale('de'), DEFAULT_LOCALE)
        self.assertEqual(normalize_locale(None), DEFAULT_LOCALE)


class TestDates(unittest.TestCase):
    """Locale-aware date formatting and timestamp parsing."""

    def setUp(self):
        self.when = datetime(2025, 11, 15, 9, 0, tzinfo=timezone.utc)

    def test_long_format_uses_month_names(self):
        self.assertIn('November', format_date(self.when, 'en'))
        self.assertIn('noviembre', format_date(self.when, 'es'))
        self.assertIn('novembre', format_date(self.when, 'fr'))
        self.assertIn('novembre', format_date(self.when, 'ca'))

    def test_long_format_includes_day_and_year(self):
        text = format_date(self.when, 'en')
        self.assertIn('15', text)
        self.assertIn('2025', text)
        self.assertIn('Saturday', text)

    def test_short_format_is_shorter(self):
        self.assertLess(len(format_date(self.when, 'en', 'short')), len(format_date(self.when, 'en')))
        self.assertIn('2025', format_date(self.when, 'en', 'short'))

    def test_accepts_strings_and_dates(self):
        self.assertEqual(format_date('2025-11-15T09:00:00.000Z', 'en'), format_date(self.when, 'en'))
        self.assertEqual(format_date(date(2025, 11, 15), 'en'), format_date(self.when, 'en'))

    def test_unknown_locale_uses_default(self):
        self.assertEqual(format_date(self.when, 'de'), format_date(self.when, 'ca'))

    def test_missing_or_invalid_values(self):
        self.assertEqual(format_date(None, 'en'), '')
        self.assertEqual(format_date('not a date', 'en'), '')

    def test_parse_datetime_with_zulu_suffix(self):
        parsed = parse_datetime('2025-11-15T09:00:00.000Z')
        self.assertEqual(parsed, self.when)
        self.assertIsNotNone(parsed.tzinfo)

    def test_parse_datetime_rejects_garbage(self):
        self.assertIsNone(parse_datetime(''))
        self.assertIsNone(parse_datetime('tomorrow'))
        self.assertIsNone(parse_datetime(42))


if __name__ == '__main__':
    unittest.main()
