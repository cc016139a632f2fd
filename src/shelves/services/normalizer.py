"""Map arbitrary table rows onto one canonical track record."""

from __future__ import annotations

import math
import random
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

from django.conf import settings

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"
PLACEHOLDER_IMAGE = "https://v3.fal.media/files/panda/kvQ0deOgoUWHP04ajVH3A_output.png"

TITLE_FIELDS = ("title", "song_name", "track_name", "name", "album", "album_name")
ARTIST_FIELDS = ("artist", "artist_name", "creator")
ALBUM_FIELDS = ("album", "album_name", "albumname")
IMAGE_FIELDS = ("image", "cover_image", "cover")

# Labels containing these look like technical values rather than names.
REJECTED_SUBSTRINGS = ("id", "unknown", "test")

# Placeholder durations are filler for the player bar, not real data.
PLACEHOLDER_DURATION_RANGE = (120, 420)


@dataclass(frozen=True)
class NormalizedTrackRecord:
    """Always-populated track shape consumed by the shelf templates."""

    id: str
    title: str
    artist: str
    album: str
    image: str
    duration: int

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


def prefer_real(value: Any) -> Optional[str]:
    """Return ``value`` if it reads like a human-facing label, else None."""
    if not isinstance(value, str):
        return None
    if len(value.strip()) <= 1:
        return None
    lowered = value.lower()
    if any(token in lowered for token in REJECTED_SUBSTRINGS):
        return None
    return value


def _lookup(row: Mapping[str, Any], field: str) -> Any:
    if field in row:
        return row[field]
    for key, value in row.items():
        if str(key).lower() == field:
            return value
    return None


def _first_real(row: Mapping[str, Any], fields: Sequence[str], fallback: str) -> str:
    for field in fields:
        candidate = prefer_real(_lookup(row, field))
        if candidate is not None:
            return candidate
    return fallback


def _first_present(row: Mapping[str, Any], fields: Sequence[str], fallback: str) -> str:
    for field in fields:
        value = _lookup(row, field)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return fallback


def _coerce_duration(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    seconds = int(round(number))
    if seconds <= 0:
        return None
    return seconds


class RowNormalizer:
    """Turn rows of any shape into ``NormalizedTrackRecord`` objects.

    ``rng`` supplies the placeholder duration and id tokens; pass a seeded
    ``random.Random`` for reproducible output.
    """

    def __init__(self, rng: Optional[random.Random] = None, placeholder_image: Optional[str] = None):
        self.rng = rng or random.Random()
        self.placeholder_image = placeholder_image or getattr(
            settings, "SHELVES_PLACEHOLDER_IMAGE", PLACEHOLDER_IMAGE
        )

    def normalize(self, row: Mapping[str, Any]) -> NormalizedTrackRecord:
        row = row or {}
        duration = _coerce_duration(_lookup(row, "duration"))
        if duration is None:
            duration = self.rng.randrange(*PLACEHOLDER_DURATION_RANGE)

        raw_id = _lookup(row, "id")
        if raw_id is None or str(raw_id).strip() == "":
            track_id = f"{self.rng.getrandbits(64):016x}"
        else:
            track_id = str(raw_id)

        return NormalizedTrackRecord(
            id=track_id,
            title=_first_real(row, TITLE_FIELDS, UNKNOWN_TITLE),
            artist=_first_real(row, ARTIST_FIELDS, UNKNOWN_ARTIST),
            album=_first_real(row, ALBUM_FIELDS, UNKNOWN_ALBUM),
            image=_first_present(row, IMAGE_FIELDS, self.placeholder_image),
            duration=duration,
        )


def normalize_row(row: Mapping[str, Any], rng: Optional[random.Random] = None) -> NormalizedTrackRecord:
    """Convenience wrapper around ``RowNormalizer.normalize``."""
    return RowNormalizer(rng=rng).normalize(row)
