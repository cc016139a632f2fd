"""Tests for the single-flight shelf refresher."""

from django.core.cache import cache
from django.test import SimpleTestCase

from shelves.services.normalizer import NormalizedTrackRecord
from shelves.services.pipeline import ShelfResult
from shelves.services.refresher import ShelfRefresher


def _result(title):
    record = NormalizedTrackRecord(id="1", title=title, artist="A", album="B", image="i.png", duration=200)
    return ShelfResult(recently_played=[record])


class ShelfRefresherTests(SimpleTestCase):

    def setUp(self):
        cache.clear()

    def tearDown(self):
        cache.clear()

    def test_refresh_caches_result(self):
        refresher = ShelfRefresher(lambda: _result("First"), cache_key="test:shelves")
        result = refresher.refresh()
        self.assertEqual(result.recently_played[0].title, "First")
        self.assertEqual(refresher.last().recently_played[0].title, "First")
        self.assertFalse(refresher.in_flight)

    def test_current_reuses_cached_result(self):
        calls = []

        def builder():
            calls.append(1)
            return _result(f"Run {len(calls)}")

        refresher = ShelfRefresher(builder, cache_key="test:shelves")
        refresher.current()
        refresher.current()
        self.assertEqual(len(calls), 1)
        refresher.refresh()
        self.assertEqual(len(calls), 2)

    def test_overlapping_refresh_is_skipped(self):
        nested = {}

        def builder():
            # a second poll arrives while this one is still running
            nested["result"] = refresher.refresh()
            nested["in_flight"] = refresher.in_flight
            return _result("Fresh")

        refresher = ShelfRefresher(builder, cache_key="test:shelves")
        cache.set("test:shelves", _result("Stale"))

        result = refresher.refresh()

        self.assertTrue(nested["in_flight"])
        self.assertEqual(nested["result"].recently_played[0].title, "Stale")
        self.assertEqual(result.recently_played[0].title, "Fresh")
        self.assertEqual(refresher.last().recently_played[0].title, "Fresh")

    def test_overlapping_refresh_without_history_is_empty(self):
        nested = {}

        def builder():
            nested["result"] = refresher.refresh()
            return _result("Fresh")

        refresher = ShelfRefresher(builder, cache_key="test:shelves")
        refresher.refresh()
        self.assertTrue(nested["result"].is_empty)

    def test_lock_released_after_failure(self):
        def builder():
            raise RuntimeError("boom")

        refresher = ShelfRefresher(builder, cache_key="test:shelves")
        with self.assertRaises(RuntimeError):
            refresher.refresh()
        self.assertFalse(refresher.in_flight)
