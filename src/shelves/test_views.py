"""Tests for the home page and shelf API."""

from unittest.mock import patch

from django.core.cache import cache
from django.test import Client, TestCase
from django.urls import reverse

from library.models import MadeForYou, PopularAlbum, RecentlyPlayed
from shelves.fallbacks import FALLBACK_SHELVES
from shelves.services.classifier import MADE_FOR_YOU, POPULAR_ALBUMS, RECENTLY_PLAYED
from shelves.services.pipeline import ShelfResult


class HomeViewTests(TestCase):
    """Tests for the landing page"""

    def setUp(self):
        self.client = Client()
        cache.clear()

    def tearDown(self):
        cache.clear()

    def test_home_renders_fallback_when_empty(self):
        response = self.client.get(reverse('home'))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'shelves/home.html')
        self.assertContains(response, 'Recently Played')
        self.assertContains(response, 'Made For You')
        self.assertContains(response, 'Popular Albums')
        self.assertContains(response, 'Happier Than Ever')
        for section in response.context['sections']:
            self.assertTrue(section['is_fallback'])
            self.assertEqual(len(section['items']), len(FALLBACK_SHELVES[section['key']]))

    def test_home_renders_database_rows(self):
        RecentlyPlayed.objects.create(user_id=1, song_id=1, song_name='Levitating', artist_name='Dua Lipa')
        response = self.client.get(reverse('home'))
        self.assertContains(response, 'Levitating')
        sections = {section['key']: section for section in response.context['sections']}
        self.assertFalse(sections[RECENTLY_PLAYED]['is_fallback'])
        self.assertTrue(sections[POPULAR_ALBUMS]['is_fallback'])
        self.assertEqual(response.context['poll_interval_ms'], 5000)


class ShelvesApiTests(TestCase):
    """Tests for GET /api/shelves/"""

    def setUp(self):
        self.client = Client()
        self.url = reverse('shelves:shelves-api')
        cache.clear()

    def tearDown(self):
        cache.clear()

    def test_returns_three_shelves(self):
        MadeForYou.objects.create(user_id=1, playlist_id=1, title='Daily Mix 1')
        PopularAlbum.objects.create(title='After Hours', artist='The Weeknd', popularity=90)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload[RECENTLY_PLAYED], [])
        self.assertEqual(payload[MADE_FOR_YOU][0]['title'], 'Daily Mix 1')
        self.assertEqual(payload[POPULAR_ALBUMS][0]['artist'], 'The Weeknd')
        self.assertEqual(payload['table_sources']['popular_albums'], POPULAR_ALBUMS)

    def test_refresh_param_rebuilds(self):
        self.client.get(self.url)
        PopularAlbum.objects.create(title='After Hours', artist='The Weeknd', popularity=90)

        cached = self.client.get(self.url).json()
        self.assertEqual(cached[POPULAR_ALBUMS], [])

        refreshed = self.client.get(self.url, {'refresh': '1'}).json()
        self.assertEqual(len(refreshed[POPULAR_ALBUMS]), 1)

    @patch('shelves.services.refresher.build_shelves', return_value=ShelfResult())
    def test_empty_result(self, _mock_build):
        response = self.client.get(self.url, {'refresh': 'true'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[MADE_FOR_YOU], [])

    def test_post_not_allowed(self):
        self.assertEqual(self.client.post(self.url).status_code, 405)
