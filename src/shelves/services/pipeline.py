"""Discover tables, normalize their rows and sort them onto shelves."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Set

from django.utils import timezone

from .classifier import (
    MADE_FOR_YOU,
    POPULAR_ALBUMS,
    RECENTLY_PLAYED,
    SHELF_ORDER,
    UNASSIGNED,
    ShelfRule,
    classify,
    distribute,
    load_rules,
)
from .detector import looks_like_music
from .normalizer import NormalizedTrackRecord, RowNormalizer

logger = logging.getLogger(__name__)


@dataclass
class ShelfResult:
    """One fetch cycle's worth of shelves. Never persisted."""

    recently_played: List[NormalizedTrackRecord] = field(default_factory=list)
    made_for_you: List[NormalizedTrackRecord] = field(default_factory=list)
    popular_albums: List[NormalizedTrackRecord] = field(default_factory=list)
    table_sources: Dict[str, str] = field(default_factory=dict)
    generated_at: Optional[str] = None

    def shelf(self, name: str) -> List[NormalizedTrackRecord]:
        if name not in SHELF_ORDER:
            raise KeyError(name)
        return getattr(self, name)

    @property
    def total(self) -> int:
        return sum(len(self.shelf(name)) for name in SHELF_ORDER)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def as_dict(self) -> Dict[str, object]:
        return {
            RECENTLY_PLAYED: [record.as_dict() for record in self.recently_played],
            MADE_FOR_YOU: [record.as_dict() for record in self.made_for_you],
            POPULAR_ALBUMS: [record.as_dict() for record in self.popular_albums],
            "table_sources": dict(self.table_sources),
            "generated_at": self.generated_at,
        }


def unique_ids(table: str, records: Sequence[NormalizedTrackRecord], seen: Set[str]) -> List[NormalizedTrackRecord]:
    """Prefix ids with their table and suffix any that still collide in ``seen``."""
    unique: List[NormalizedTrackRecord] = []
    for record in records:
        base = f"{table}:{record.id}"
        candidate = base
        counter = 2
        while candidate in seen:
            candidate = f"{base}-{counter}"
            counter += 1
        seen.add(candidate)
        unique.append(replace(record, id=candidate))
    return unique


class ShelfPipeline:
    """Serial pipeline over any backend exposing ``list_tables`` and ``read_table``."""

    def __init__(
        self,
        backend,
        *,
        normalizer: Optional[RowNormalizer] = None,
        rules: Optional[Sequence[ShelfRule]] = None,
        row_limit: Optional[int] = None,
    ):
        self.backend = backend
        self.normalizer = normalizer or RowNormalizer()
        self.rules = tuple(rules) if rules else load_rules()
        self.row_limit = row_limit

    def run(self) -> ShelfResult:
        result = ShelfResult(generated_at=timezone.now().isoformat())
        tables = self.backend.list_tables()
        if not tables:
            logger.info("No tables discovered; shelves will be empty")
            return result

        assigned: Dict[str, List[NormalizedTrackRecord]] = {shelf: [] for shelf in SHELF_ORDER}
        pool: List[NormalizedTrackRecord] = []
        seen_ids: Set[str] = set()

        for table in tables:
            rows = self.backend.read_table(table, limit=self.row_limit)
            if not rows:
                continue
            if not looks_like_music(rows[0]):
                logger.debug("Skipping table %s: no music-like columns", table)
                continue

            records = unique_ids(table, [self.normalizer.normalize(row) for row in rows], seen_ids)
            shelf = classify(table, records, self.rules)
            result.table_sources[table] = shelf
            if shelf == UNASSIGNED:
                pool.extend(records)
            else:
                assigned[shelf].extend(records)
            logger.debug("Added %d items from table %s to %s", len(records), table, shelf)

        for shelf, records in distribute(assigned, pool).items():
            setattr(result, shelf, records)

        logger.info(
            "Shelves built: recently_played=%d made_for_you=%d popular_albums=%d",
            len(result.recently_played),
            len(result.made_for_you),
            len(result.popular_albums),
        )
        return result


def build_shelves(backend=None, **kwargs) -> ShelfResult:
    """Run one pipeline cycle against ``backend`` (the default database if omitted)."""
    if backend is None:
        from library.services.backend import get_default_backend

        backend = get_default_backend()
    return ShelfPipeline(backend, **kwargs).run()
