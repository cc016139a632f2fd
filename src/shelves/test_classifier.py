"""Tests for shelf classification and redistribution."""

from django.test import SimpleTestCase, override_settings

from shelves.services.classifier import (
    DEFAULT_RULES,
    MADE_FOR_YOU,
    POPULAR_ALBUMS,
    RECENTLY_PLAYED,
    SHELF_ORDER,
    TOP_UP_CAP,
    UNASSIGNED,
    classify,
    classify_by_content,
    classify_by_name,
    distribute,
    load_rules,
    score_content,
)
from shelves.services.normalizer import (
    UNKNOWN_ALBUM,
    UNKNOWN_ARTIST,
    UNKNOWN_TITLE,
    NormalizedTrackRecord,
)


def _record(title=UNKNOWN_TITLE, artist=UNKNOWN_ARTIST, album=UNKNOWN_ALBUM, record_id="1"):
    return NormalizedTrackRecord(
        id=record_id, title=title, artist=artist, album=album, image="x.png", duration=200
    )


def _records(count, prefix="r"):
    return [_record(title=f"Song {i}", artist="Artist", record_id=f"{prefix}{i}") for i in range(count)]


class ClassifyByNameTests(SimpleTestCase):

    def test_recently_played_names(self):
        for name in ("recently_played_songs", "listening_history", "Track_Log", "user_activity"):
            with self.subTest(name=name):
                self.assertEqual(classify_by_name(name), RECENTLY_PLAYED)

    def test_made_for_you_names(self):
        for name in ("made_for_you", "weekly_mix", "curated_playlists", "daily_picks"):
            with self.subTest(name=name):
                self.assertEqual(classify_by_name(name), MADE_FOR_YOU)

    def test_popular_album_names(self):
        for name in ("popular_albums", "trending_now", "charts", "new_releases"):
            with self.subTest(name=name):
                self.assertEqual(classify_by_name(name), POPULAR_ALBUMS)

    def test_recently_played_wins_ties(self):
        self.assertEqual(classify_by_name("top_tracks"), RECENTLY_PLAYED)
        self.assertEqual(classify_by_name("song_playlists"), RECENTLY_PLAYED)

    def test_popular_is_pinned(self):
        self.assertEqual(classify_by_name("popular_songs"), POPULAR_ALBUMS)
        self.assertEqual(classify_by_name("POPULAR_TRACKS_HISTORY"), POPULAR_ALBUMS)

    def test_no_match(self):
        self.assertIsNone(classify_by_name("mystery_music"))
        self.assertIsNone(classify_by_name(""))


class ContentScoringTests(SimpleTestCase):

    def test_playlist_phrasing_goes_to_made_for_you(self):
        rows = [_record(title="Deep Focus", artist="curated playlist for studying")] * 3
        self.assertEqual(score_content(rows)[MADE_FOR_YOU], 3)
        self.assertEqual(classify_by_content(rows), MADE_FOR_YOU)

    def test_plain_songs_go_to_recently_played(self):
        rows = [_record(title="Cruel Summer", artist="Taylor Swift")]
        self.assertEqual(classify_by_content(rows), RECENTLY_PLAYED)

    def test_album_ties_beat_songs(self):
        rows = [_record(title="Lover", artist="Taylor Swift", album="Lover")]
        counts = score_content(rows)
        self.assertEqual(counts[POPULAR_ALBUMS], counts[RECENTLY_PLAYED])
        self.assertEqual(classify_by_content(rows), POPULAR_ALBUMS)

    def test_made_for_you_wins_ties(self):
        rows = [
            _record(title="Chill Vibes", artist="Spotify"),
            _record(title="Cruel Summer", artist="Taylor Swift"),
        ]
        self.assertEqual(classify_by_content(rows), MADE_FOR_YOU)

    def test_placeholders_score_nothing(self):
        self.assertIsNone(classify_by_content([_record(), _record()]))
        self.assertIsNone(classify_by_content([]))


class ClassifyTests(SimpleTestCase):

    def test_name_short_circuits_content(self):
        rows = [_record(title="Discover Weekly", artist="Spotify")] * 4
        self.assertEqual(classify("popular_things", rows, DEFAULT_RULES), POPULAR_ALBUMS)

    def test_scenario_recently_played_songs(self):
        rows = [_record(title="Cruel Summer", artist="Taylor Swift")]
        self.assertEqual(classify("recently_played_songs", rows, DEFAULT_RULES), RECENTLY_PLAYED)

    def test_scenario_mystery_music(self):
        rows = [_record(title="Deep Focus", artist="curated playlist for studying")] * 2
        self.assertEqual(classify("mystery_music", rows, DEFAULT_RULES), MADE_FOR_YOU)

    def test_unassigned(self):
        self.assertEqual(classify("mystery_music", [_record()], DEFAULT_RULES), UNASSIGNED)

    def test_weights_change_the_winner(self):
        rules = load_rules([{"shelf": RECENTLY_PLAYED, "content_weight": 3}])
        rows = [
            _record(title="Chill Vibes", artist="Spotify"),
            _record(title="Cruel Summer", artist="Taylor Swift"),
        ]
        self.assertEqual(classify("mystery_music", rows, rules), RECENTLY_PLAYED)


class LoadRulesTests(SimpleTestCase):

    def test_defaults(self):
        self.assertEqual(load_rules([]), DEFAULT_RULES)

    @override_settings(SHELVES_RULES=[{"shelf": MADE_FOR_YOU, "name_keywords": ["vibes"]}])
    def test_settings_override_keeps_order(self):
        rules = load_rules()
        self.assertEqual([rule.shelf for rule in rules], list(SHELF_ORDER))
        self.assertEqual(classify_by_name("good_vibes", rules), MADE_FOR_YOU)
        self.assertIsNone(classify_by_name("weekly_stuff", rules))

    def test_unknown_shelf_ignored(self):
        rules = load_rules([{"shelf": "podcasts", "name_keywords": ["pod"]}])
        self.assertEqual(rules, DEFAULT_RULES)


class DistributeTests(SimpleTestCase):

    def test_no_pool_keeps_assignments(self):
        shelves = {RECENTLY_PLAYED: _records(2)}
        result = distribute(shelves, [])
        self.assertEqual(len(result[RECENTLY_PLAYED]), 2)
        self.assertEqual(result[MADE_FOR_YOU], [])
        self.assertEqual(result[POPULAR_ALBUMS], [])

    def test_empty_shelves_are_topped_up_first(self):
        shelves = {MADE_FOR_YOU: _records(2, "m")}
        pool = _records(9, "p")
        result = distribute(shelves, pool)
        self.assertEqual([r.id for r in result[RECENTLY_PLAYED][:3]], ["p0", "p1", "p2"])
        self.assertEqual([r.id for r in result[POPULAR_ALBUMS][:3]], ["p3", "p4", "p5"])
        self.assertEqual(sum(len(items) for items in result.values()), 11)

    def test_top_up_is_capped(self):
        pool = _records(30, "p")
        result = distribute({}, pool)
        ids = [r.id for r in result[RECENTLY_PLAYED]]
        self.assertEqual(ids[:TOP_UP_CAP], [f"p{i}" for i in range(TOP_UP_CAP)])
        self.assertEqual(sum(len(items) for items in result.values()), 30)
        for shelf in SHELF_ORDER:
            self.assertEqual(len(result[shelf]), 10)

    def test_nothing_is_dropped(self):
        for assigned, pooled in ((0, 1), (0, 2), (3, 7), (5, 0), (1, 20)):
            with self.subTest(assigned=assigned, pooled=pooled):
                shelves = {POPULAR_ALBUMS: _records(assigned, "a")}
                result = distribute(shelves, _records(pooled, "p"))
                self.assertEqual(sum(len(items) for items in result.values()), assigned + pooled)

    def test_input_is_not_mutated(self):
        shelves = {RECENTLY_PLAYED: _records(1)}
        distribute(shelves, _records(4, "p"))
        self.assertEqual(len(shelves[RECENTLY_PLAYED]), 1)
