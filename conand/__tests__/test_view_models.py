"""
Tests for page view models: sponsor tiers, schedules, next event and page blocks.
"""
import unittest
import sys
import os
from datetime import datetime, timedelta, timezone

# Add parent directory to path to import conand modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from conand.models.entities import (
    ActionButtons,
    Event,
    EventSponsor,
    HeroButton,
    Media,
    NavEvent,
    Schedule,
    ScheduleDay,
    Session,
    SiteSettings,
    Sponsor,
    Track,
)
from conand.features.pages.services.media import PLACEHOLDER_URL, media_alt, media_url
from conand.features.pages.services.view_models import (
    DEFAULT_ABOUT_IMAGE_1,
    DEFAULT_HERO_IMAGES,
    apply_tier_overrides,
    build_about,
    build_event_card,
    build_event_page,
    build_home,
    build_layout,
    build_schedule,
    countdown_parts,
    group_sessions,
    group_sponsors_by_tier,
    select_next_event,
    tier_labels,
)


def sponsor(name, tier):
    return Sponsor(id=name, name=name, tier=tier)


def event(slug, when=None, status='upcoming', **kwargs):
    return Event(id=slug, name=slug.title(), slug=slug, year='2026', date=when, status=status, **kwargs)


class TestSponsorTiers(unittest.TestCase):

    def test_groups_follow_tier_order(self):
        groups = group_sponsors_by_tier([
            sponsor('c', 'collaborator'), sponsor('g1', 'gold'), sponsor('p', 'platinum'), sponsor('g2', 'gold'),
        ])
        self.assertEqual([g.tier for g in groups], ['platinum', 'gold', 'collaborator'])
        self.assertEqual([s.name for s in groups[1].sponsors], ['g1', 'g2'])

    def test_every_sponsor_appears_once(self):
        sponsors = [sponsor(str(i), tier) for i, tier in enumerate(['gold', 'silver', 'bronze', 'gold', 'platinum'])]
        groups = group_sponsors_by_tier(sponsors)
        names = [s.name for g in groups for s in g.sponsors]
        self.assertEqual(sorted(names), sorted(s.name for s in sponsors))

    def test_empty_tiers_are_omitted(self):
        self.assertEqual(group_sponsors_by_tier([]), [])
        groups = group_sponsors_by_tier([sponsor('b', 'bronze')])
        self.assertEqual(len(groups), 1)

    def test_sizes_shrink_with_tier(self):
        groups = group_sponsors_by_tier([sponsor('p', 'platinum'), sponsor('c', 'collaborator')])
        self.assertEqual(groups[0].size, 'tier-xl')
        self.assertEqual(groups[1].size, 'tier-xs')

    def test_labels(self):
        labels = tier_labels('en')
        self.assertEqual(labels['gold'], 'Gold')
        labels = tier_labels('en', SiteSettings(tier_labels={'gold': 'Golden'}))
        self.assertEqual(labels['gold'], 'Golden')
        self.assertEqual(labels['silver'], 'Silver')
        groups = group_sponsors_by_tier([sponsor('g', 'gold')], labels)
        self.assertEqual(groups[0].label, 'Golden')

    def test_override_applies_to_a_copy(self):
        original = sponsor('s', 'silver')
        shown = apply_tier_overrides([EventSponsor(sponsor=original, tier_override='gold'),
                                      EventSponsor(sponsor=sponsor('b', 'bronze'))])
        self.assertEqual([s.tier for s in shown], ['gold', 'bronze'])
        self.assertEqual(original.tier, 'silver')


class TestSchedule(unittest.TestCase):

    def setUp(self):
        self.sessions = [
            Session(title='late', day_index=0, track_index=0, start_time='11:00'),
            Session(title='early', day_index=0, track_index=0, start_time='09:00'),
            Session(title='side', day_index=0, track_index=1, start_time='10:00'),
            Session(title='day2', day_index=1, track_index=0, start_time='09:30'),
        ]

    def test_group_sessions_sorted_by_start(self):
        groups = group_sessions(self.sessions)
        self.assertEqual([s.title for s in groups[(0, 0)]], ['early', 'late'])
        self.assertEqual(sum(len(v) for v in groups.values()), len(self.sessions))

    def test_single_day_is_not_tabbed(self):
        schedule = Schedule(
            days=[ScheduleDay(date=datetime(2026, 5, 1, tzinfo=timezone.utc))],
            tracks=[Track(name='Main')],
            sessions=[Session(title='only', start_time='09:00')],
        )
        view = build_schedule(schedule, 'en', 'Day')
        self.assertFalse(view.tabbed)
        self.assertFalse(view.show_track_names)
        self.assertEqual(len(view.days), 1)
        self.assertTrue(view.days[0].label.startswith('Day 1 - '))

    def test_multi_day_multi_track(self):
        schedule = Schedule(
            days=[ScheduleDay(date=datetime(2026, 5, 1)), ScheduleDay(date=datetime(2026, 5, 2))],
            tracks=[Track(name='A'), Track(name='B')],
            sessions=self.sessions,
        )
        view = build_schedule(schedule, 'en', 'Day')
        self.assertTrue(view.tabbed)
        self.assertTrue(view.show_track_names)
        self.assertEqual([t.name for t in view.days[0].tracks], ['A', 'B'])
        self.assertEqual([s.title for s in view.days[1].tracks[0].sessions], ['day2'])

    def test_no_sessions(self):
        view = build_schedule(Schedule(days=[ScheduleDay()], tracks=[Track(name='A')]), 'en')
        self.assertTrue(view.is_empty)

    def test_out_of_range_sessions_are_logged_and_hidden(self):
        schedule = Schedule(
            days=[ScheduleDay(date=datetime(2026, 5, 1))],
            tracks=[Track(name='A')],
            sessions=[Session(title='ok', start_time='09:00'),
                      Session(title='lost', day_index=3, track_index=0, start_time='10:00')],
        )
        with self.assertLogs('conand.features.pages.services.view_models', level='WARNING'):
            view = build_schedule(schedule, 'en', 'Day')
        shown = [s.title for d in view.days for t in d.tracks for s in t.sessions]
        self.assertEqual(shown, ['ok'])


class TestNextEvent(unittest.TestCase):

    def test_earliest_upcoming_wins(self):
        events = [
            event('later', datetime(2026, 9, 1, tzinfo=timezone.utc)),
            event('sooner', datetime(2026, 3, 1, tzinfo=timezone.utc)),
            event('gone', datetime(2020, 1, 1, tzinfo=timezone.utc), status='past'),
        ]
        self.assertEqual(select_next_event(events).slug, 'sooner')

    def test_naive_and_aware_dates_compare(self):
        events = [event('naive', datetime(2026, 3, 1)), event('aware', datetime(2026, 4, 1, tzinfo=timezone.utc))]
        self.assertEqual(select_next_event(events).slug, 'naive')

    def test_none_without_upcoming(self):
        self.assertIsNone(select_next_event([]))
        self.assertIsNone(select_next_event([event('old', datetime(2020, 1, 1), status='past')]))
        self.assertIsNone(select_next_event([event('undated')]))

    def test_countdown(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        target = now + timedelta(days=2, hours=3, minutes=4, seconds=5)
        self.assertEqual(countdown_parts(target, now), {'days': 2, 'hours': 3, 'minutes': 4, 'seconds': 5})
        self.assertIsNone(countdown_parts(now - timedelta(seconds=1), now))
        self.assertIsNone(countdown_parts(None, now))


class TestMedia(unittest.TestCase):

    def test_media_url(self):
        self.assertEqual(media_url(Media(id=1, url='/img/x.png')), '/img/x.png')
        self.assertEqual(media_url({'url': '/img/y.png'}), '/img/y.png')

    def test_placeholder(self):
        for value in (None, 5, 'abc', Media(id=1), {'url': ''}, {'url': None}):
            self.assertEqual(media_url(value), PLACEHOLDER_URL, value)

    def test_media_alt(self):
        self.assertEqual(media_alt(Media(id=1, alt='Logo')), 'Logo')
        self.assertEqual(media_alt({'alt': 'A'}), 'A')
        self.assertEqual(media_alt(None), '')


class TestPages(unittest.TestCase):

    def setUp(self):
        self.next_event = event(
            'devfest',
            datetime(2026, 11, 15, 9, tzinfo=timezone.utc),
            description='A day of talks',
            action_buttons=ActionButtons(tickets_enabled=True, tickets_url='https://t.test',
                                         call_for_papers_enabled=False, call_for_papers_url='https://cfp.test'),
        )

    def test_event_card(self):
        card = build_event_card(self.next_event, 'es')
        self.assertEqual(card['href'], '/es/ev/2026/devfest')
        self.assertEqual(card['image_url'], PLACEHOLDER_URL)
        self.assertEqual([b['kind'] for b in card['buttons']], ['tickets'])
        self.assertEqual(card['buttons'][0]['text'], 'Entradas')

    def test_home_defaults(self):
        page = build_home('en', None, None, [], [])
        self.assertEqual([i['url'] for i in page['hero']['images']], list(DEFAULT_HERO_IMAGES))
        self.assertIsNone(page['hero']['next_event'])
        self.assertIsNone(page['save_the_date'])

    def test_home_with_next_event(self):
        settings = SiteSettings(hero_images=[Media(id=1, url='/img/h.png')],
                                hero_primary_button=HeroButton(text='CFP', url='https://cfp.test'))
        now = datetime(2026, 11, 14, 9, tzinfo=timezone.utc)
        page = build_home('en', settings, self.next_event, [self.next_event], [], now=now)
        self.assertEqual(page['hero']['images'][0]['url'], '/img/h.png')
        self.assertEqual(page['hero']['next_event']['countdown']['days'], 1)
        self.assertEqual(page['hero']['primary_button'].text, 'CFP')
        self.assertIn('November', page['save_the_date']['date'])
        self.assertEqual(len(page['upcoming_events']), 1)

    def test_event_page(self):
        self.next_event.sponsors = [EventSponsor(sponsor=sponsor('s', 'silver'), tier_override='platinum')]
        page = build_event_page(self.next_event, 'en')
        self.assertEqual(page['description'], 'A day of talks')
        self.assertEqual(page['sponsors'][0].tier, 'platinum')
        self.assertEqual(page['sponsors'][0].label, 'Platinum')
        self.assertEqual(page['back_href'], '/en')
        self.assertTrue(page['schedule'].is_empty)

    def test_past_event_page_has_no_buttons(self):
        self.next_event.status = 'past'
        self.assertEqual(build_event_page(self.next_event, 'en')['buttons'], [])

    def test_about_fallbacks(self):
        page = build_about('en', None)
        self.assertEqual(len(page['paragraphs_top']), 2)
        self.assertEqual(len(page['paragraphs_bottom']), 2)
        self.assertEqual(page['image_1'], DEFAULT_ABOUT_IMAGE_1)

    def test_about_from_settings(self):
        settings = SiteSettings(about_text='First\n\nSecond\n\nThird', about_image_1=Media(id=1, url='/img/a.png'))
        page = build_about('en', settings)
        self.assertEqual(page['paragraphs_top'], ['First', 'Second'])
        self.assertEqual(page['paragraphs_bottom'], ['Third'])
        self.assertEqual(page['image_1'], '/img/a.png')

    def test_layout(self):
        settings = SiteSettings(site_name='CONAND')
        settings.social.twitter_url = 'https://x.test'
        layout = build_layout('fr', '/about', settings, [NavEvent(name='Dev', year='2026', slug='dev')],
                              [sponsor('g', 'gold')])
        self.assertEqual(layout['nav']['about'], '/fr/about')
        self.assertEqual(layout['nav_events'][0]['href'], '/fr/ev/2026/dev')
        self.assertEqual({l['code']: l['href'] for l in layout['languages']}['ca'], '/about')
        self.assertEqual(layout['social'], [{'label': 'X / Twitter', 'url': 'https://x.test'}])
        self.assertEqual(layout['global_sponsors'][0].label, 'Or')


if __name__ == '__main__':
    unittest.main()
