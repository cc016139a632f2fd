"""Static cards shown on a shelf the database left empty.

Display only: these never enter ``ShelfResult``.
"""

from .services.classifier import MADE_FOR_YOU, POPULAR_ALBUMS, RECENTLY_PLAYED
from .services.normalizer import NormalizedTrackRecord

_IMG_PANDA_1 = "https://v3.fal.media/files/panda/kvQ0deOgoUWHP04ajVH3A_output.png"
_IMG_KANGAROO_1 = "https://v3.fal.media/files/kangaroo/HRayeBi01JIqfkCjjoenp_output.png"
_IMG_PANDA_2 = "https://v3.fal.media/files/panda/q7hWJCgH2Fy4cJdWqAzuk_output.png"
_IMG_ELEPHANT = "https://v3.fal.media/files/elephant/N5qDbXOpqAlIcK7kJ4BBp_output.png"
_IMG_RABBIT = "https://v3.fal.media/files/rabbit/tAQ6AzJJdlEZW-y4eNdxO_output.png"
_IMG_KANGAROO_2 = "https://v3.fal.media/files/kangaroo/0OgdfDAzLEbkda0m7uLJw_output.png"


def _card(card_id, title, artist, album, image, duration):
    return NormalizedTrackRecord(
        id=card_id, title=title, artist=artist, album=album, image=image, duration=duration
    )


FALLBACK_SHELVES = {
    RECENTLY_PLAYED: (
        _card("1", "Liked Songs", "320 songs", "Your Music", _IMG_PANDA_1, 180),
        _card("2", "Discover Weekly", "Spotify", "Weekly Mix", _IMG_KANGAROO_1, 210),
        _card("3", "Release Radar", "Spotify", "New Releases", _IMG_PANDA_2, 195),
        _card("4", "Daily Mix 1", "Spotify", "Daily Mix", _IMG_ELEPHANT, 225),
        _card("5", "Chill Hits", "Spotify", "Chill Collection", _IMG_RABBIT, 240),
        _card("6", "Top 50 - Global", "Spotify", "Global Charts", _IMG_KANGAROO_2, 205),
    ),
    MADE_FOR_YOU: (
        _card("7", "Discover Weekly", "Your weekly mixtape of fresh music",
              "Weekly Discovery", _IMG_KANGAROO_1, 210),
        _card("8", "Release Radar", "Catch all the latest music from artists you follow",
              "New Music Friday", _IMG_PANDA_2, 195),
        _card("9", "Daily Mix 1", "Billie Eilish, Lorde, Clairo and more",
              "Alternative Mix", _IMG_ELEPHANT, 225),
        _card("10", "On Repeat", "Songs you can't stop playing",
              "Your Favorites", _IMG_RABBIT, 240),
        _card("11", "Time Capsule",
              "We made you a personalized playlist with songs to take you back in time",
              "Nostalgia Mix", _IMG_KANGAROO_2, 205),
        _card("12", "Daily Mix 2", "Drake, Travis Scott, Post Malone and more",
              "Hip-Hop Mix", _IMG_PANDA_1, 220),
    ),
    POPULAR_ALBUMS: (
        _card("13", "Midnights", "Taylor Swift", "Midnights", _IMG_KANGAROO_1, 210),
        _card("14", "Harry's House", "Harry Styles", "Harry's House", _IMG_PANDA_2, 195),
        _card("15", "Astroworld", "Travis Scott", "Astroworld", _IMG_ELEPHANT, 225),
        _card("16", "After Hours", "The Weeknd", "After Hours", _IMG_RABBIT, 240),
        _card("17", "Scorpion", "Drake", "Scorpion", _IMG_KANGAROO_2, 205),
        _card("18", "Happier Than Ever", "Billie Eilish", "Happier Than Ever", _IMG_PANDA_1, 220),
    ),
}
