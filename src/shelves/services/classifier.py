"""Assign a table's normalized rows to one of the three home-page shelves.

Classification runs in three passes:

1. Table-name keywords. Pinned keywords are checked first across every
   shelf, then each shelf's regular keywords in shelf order; the first hit
   wins.
2. Content scoring when the name says nothing: playlist-style phrasing votes
   for Made For You, real album names for Popular Albums, plain
   title/artist pairs for Recently Played. Highest weighted count wins, ties
   go to ``CONTENT_TIE_ORDER``.
3. Rows that are still unassigned are pooled and handed out afterwards by
   ``distribute``.

Keyword sets and weights are plain data so they can be overridden from
settings (``SHELVES_RULES``) and exercised directly in tests.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from django.conf import settings

from .normalizer import UNKNOWN_ALBUM, UNKNOWN_ARTIST, UNKNOWN_TITLE, NormalizedTrackRecord

logger = logging.getLogger(__name__)

RECENTLY_PLAYED = "recently_played"
MADE_FOR_YOU = "made_for_you"
POPULAR_ALBUMS = "popular_albums"
UNASSIGNED = "unassigned"

SHELF_ORDER = (RECENTLY_PLAYED, MADE_FOR_YOU, POPULAR_ALBUMS)
SHELF_TITLES = {
    RECENTLY_PLAYED: "Recently Played",
    MADE_FOR_YOU: "Made For You",
    POPULAR_ALBUMS: "Popular Albums",
}

PLAYLIST_PHRASES = (
    "mix",
    "playlist",
    "weekly",
    "discover",
    "radar",
    "on repeat",
    "time capsule",
    "chill",
    "peaceful",
    "deep focus",
    "instrumental",
)

# Precedence among equal content scores.
CONTENT_TIE_ORDER = (MADE_FOR_YOU, POPULAR_ALBUMS, RECENTLY_PLAYED)

# Most items an empty shelf receives from the unassigned pool before the
# remainder is split evenly.
TOP_UP_CAP = 6


@dataclass(frozen=True)
class ShelfRule:
    """Keyword data for one shelf."""

    shelf: str
    name_keywords: Tuple[str, ...]
    pinned_keywords: Tuple[str, ...] = ()
    content_weight: float = 1.0

    def matches_name(self, table_name: str) -> bool:
        lowered = table_name.lower()
        return any(keyword in lowered for keyword in self.name_keywords)

    def pins_name(self, table_name: str) -> bool:
        lowered = table_name.lower()
        return any(keyword in lowered for keyword in self.pinned_keywords)


DEFAULT_RULES: Tuple[ShelfRule, ...] = (
    ShelfRule(
        shelf=RECENTLY_PLAYED,
        name_keywords=("recent", "played", "listened", "history", "activity", "song", "track"),
    ),
    ShelfRule(
        shelf=MADE_FOR_YOU,
        name_keywords=(
            "made",
            "for",
            "you",
            "personal",
            "recommend",
            "playlist",
            "mix",
            "weekly",
            "daily",
            "curated",
            "personalized",
        ),
    ),
    ShelfRule(
        shelf=POPULAR_ALBUMS,
        name_keywords=("popular", "album", "trending", "chart", "hit", "top", "new", "release"),
        pinned_keywords=("popular",),
    ),
)


def load_rules(overrides: Optional[Iterable[Mapping[str, object]]] = None) -> Tuple[ShelfRule, ...]:
    """Build the rule table from settings-style dicts, defaulting to ``DEFAULT_RULES``.

    Shelves missing from ``overrides`` keep their default rule; the result is
    always in ``SHELF_ORDER``.
    """
    if overrides is None:
        overrides = getattr(settings, "SHELVES_RULES", None)
    if not overrides:
        return DEFAULT_RULES

    by_shelf = {rule.shelf: rule for rule in DEFAULT_RULES}
    for entry in overrides:
        shelf = entry.get("shelf")
        if shelf not in by_shelf:
            logger.warning("Ignoring rule for unknown shelf %r", shelf)
            continue
        base = by_shelf[shelf]
        by_shelf[shelf] = ShelfRule(
            shelf=shelf,
            name_keywords=tuple(entry.get("name_keywords") or base.name_keywords),
            pinned_keywords=tuple(entry.get("pinned_keywords") or base.pinned_keywords),
            content_weight=float(entry.get("content_weight", base.content_weight)),
        )
    return tuple(by_shelf[shelf] for shelf in SHELF_ORDER)


def classify_by_name(table_name: str, rules: Sequence[ShelfRule] = DEFAULT_RULES) -> Optional[str]:
    """Return the shelf implied by ``table_name``, or None."""
    if not table_name:
        return None
    for rule in rules:
        if rule.pins_name(table_name):
            return rule.shelf
    for rule in rules:
        if rule.matches_name(table_name):
            return rule.shelf
    return None


def has_playlist_phrasing(record: NormalizedTrackRecord) -> bool:
    return any(_contains_phrase(text) for text in (record.title, record.artist, record.album))


def score_content(records: Iterable[NormalizedTrackRecord]) -> Dict[str, int]:
    """Count playlist-like, album-like and song-like rows."""
    counts = {shelf: 0 for shelf in SHELF_ORDER}
    for record in records:
        playlist_like = has_playlist_phrasing(record)
        if playlist_like:
            counts[MADE_FOR_YOU] += 1
        if record.album != UNKNOWN_ALBUM and not _contains_phrase(record.album):
            counts[POPULAR_ALBUMS] += 1
        if not playlist_like and record.title != UNKNOWN_TITLE and record.artist != UNKNOWN_ARTIST:
            counts[RECENTLY_PLAYED] += 1
    return counts


def _contains_phrase(text: str) -> bool:
    lowered = (text or "").lower()
    return any(phrase in lowered for phrase in PLAYLIST_PHRASES)


def classify_by_content(
    records: Sequence[NormalizedTrackRecord],
    rules: Sequence[ShelfRule] = DEFAULT_RULES,
) -> Optional[str]:
    """Pick the shelf whose content score is highest, or None if nothing scored."""
    counts = score_content(records)
    weights = {rule.shelf: rule.content_weight for rule in rules}
    weighted = {shelf: counts[shelf] * weights.get(shelf, 1.0) for shelf in SHELF_ORDER}

    best_shelf = None
    best_score = 0.0
    for shelf in CONTENT_TIE_ORDER:
        if weighted[shelf] > best_score:
            best_shelf = shelf
            best_score = weighted[shelf]
    return best_shelf


def classify(
    table_name: str,
    records: Sequence[NormalizedTrackRecord],
    rules: Optional[Sequence[ShelfRule]] = None,
) -> str:
    """Return the shelf for a whole table, or ``UNASSIGNED``."""
    rules = rules or load_rules()
    shelf = classify_by_name(table_name, rules)
    if shelf:
        logger.debug("Mapping table %s to %s by name", table_name, shelf)
        return shelf

    shelf = classify_by_content(records, rules)
    if shelf:
        logger.debug("Mapping table %s to %s by content", table_name, shelf)
        return shelf

    logger.debug("Could not determine section for table %s", table_name)
    return UNASSIGNED


def distribute(
    shelves: Mapping[str, List[NormalizedTrackRecord]],
    pool: Sequence[NormalizedTrackRecord],
    top_up_cap: int = TOP_UP_CAP,
) -> Dict[str, List[NormalizedTrackRecord]]:
    """Hand out unassigned records without dropping any.

    Empty shelves are topped up first (in shelf order, at most ``top_up_cap``
    items from a one-third cut); whatever is left is split into thirds.
    """
    result = {shelf: list(shelves.get(shelf, [])) for shelf in SHELF_ORDER}
    remaining = list(pool)
    if not remaining:
        return result

    cut = min(math.ceil(len(remaining) / 3), top_up_cap)
    for shelf in SHELF_ORDER:
        if not result[shelf] and remaining:
            result[shelf].extend(remaining[:cut])
            remaining = remaining[cut:]

    if remaining:
        chunk = math.ceil(len(remaining) / 3)
        for index, shelf in enumerate(SHELF_ORDER):
            result[shelf].extend(remaining[index * chunk:(index + 1) * chunk])

    return result
