"""Decide whether a table's rows look like music metadata."""

from __future__ import annotations

from typing import Iterable, Mapping, Union

MUSIC_COLUMN_KEYWORDS = (
    "name",
    "title",
    "artist",
    "song",
    "album",
    "track",
    "playlist",
    "music",
    "id",
    "image",
    "cover",
    "duration",
    "time",
)


def looks_like_music(
    sample: Union[Mapping[str, object], Iterable[str], None],
    keywords: Iterable[str] = MUSIC_COLUMN_KEYWORDS,
) -> bool:
    """Return True when any column name contains a music keyword.

    ``sample`` is one row (its keys are used) or a plain collection of column
    names. Deliberately permissive: a false positive only costs a few
    placeholder cards downstream.
    """
    if not sample:
        return False
    columns = sample.keys() if isinstance(sample, Mapping) else sample
    lowered_keywords = tuple(keyword.lower() for keyword in keywords)
    for column in columns:
        lowered = str(column).lower()
        if any(keyword in lowered for keyword in lowered_keywords):
            return True
    return False
