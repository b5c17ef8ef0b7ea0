"""
Running log of looked-up samples.

The log keeps the most recently touched sample first, holds at most one
entry per code and never grows past its capacity. Every change is
written through to a key-value store as a JSON list of records.
"""

import asyncio
import json
import logging
from typing import List, Optional, Sequence, Tuple

from .row import SampleRow
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

HISTORY_CAPACITY = 100
HISTORY_KEY = "sample_history"


def upsert_rows(
    rows: Sequence[SampleRow], row: SampleRow, capacity: int = HISTORY_CAPACITY
) -> List[SampleRow]:
    """
    Return a new list with row moved to the front.

    Any existing entry with the same code is dropped first, then the
    list is cut to capacity, evicting the oldest entries.
    """
    kept = [r for r in rows if r.code != row.code]
    return [row, *kept][:capacity]


def dump_snapshot(rows: Sequence[SampleRow]) -> str:
    return json.dumps([r.to_dict() for r in rows], ensure_ascii=False)


def parse_snapshot(raw: Optional[str], capacity: int = HISTORY_CAPACITY) -> List[SampleRow]:
    """
    Rebuild rows from a stored snapshot.

    Records without a usable code are dropped, as are repeats of a code
    already seen. Anything that isn't a JSON list yields an empty log.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Discarding unreadable sample history snapshot")
        return []
    if not isinstance(data, list):
        logger.warning("Discarding sample history snapshot of type %s", type(data).__name__)
        return []

    rows = []
    seen = set()
    for record in data:
        row = SampleRow.from_dict(record)
        if not row.is_valid or row.code in seen:
            continue
        seen.add(row.code)
        rows.append(row)
    if len(rows) < len(data):
        logger.info("Dropped %d malformed history records", len(data) - len(rows))
    return rows[:capacity]


class HistoryStore:
    """
    Sample log bound to one key of a KeyValueStore.

    Mutations and the writes they trigger go through a single lock, so
    writes reach the store in the order the mutations were made. Write
    failures are logged and otherwise ignored.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = HISTORY_KEY,
        capacity: int = HISTORY_CAPACITY,
    ):
        self.store = store
        self.key = key
        self.capacity = capacity
        self.loaded = False
        self._rows: List[SampleRow] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._rows)

    def snapshot(self) -> Tuple[SampleRow, ...]:
        """Current rows, most recent first."""
        return tuple(self._rows)

    async def load(self) -> Tuple[SampleRow, ...]:
        """Replace the in-memory log with the stored snapshot."""
        async with self._lock:
            await self._load()
        return self.snapshot()

    async def upsert(self, row: SampleRow) -> None:
        if not row.is_valid:
            raise ValueError(f"Cannot log a sample without a code: {row!r}")
        async with self._lock:
            await self._ensure_loaded()
            self._rows = upsert_rows(self._rows, row, self.capacity)
            await self._write()

    async def remove(self, code: str) -> bool:
        """Drop the entry for code. Returns False if it wasn't logged."""
        async with self._lock:
            await self._ensure_loaded()
            kept = [r for r in self._rows if r.code != code]
            if len(kept) == len(self._rows):
                return False
            self._rows = kept
            await self._write()
        return True

    async def clear(self) -> None:
        """Empty the log and delete the stored snapshot."""
        async with self._lock:
            self._rows = []
            self.loaded = True
            try:
                await self.store.delete(self.key)
            except Exception:
                logger.error("Failed to delete sample history", exc_info=True)

    async def persist(self) -> None:
        async with self._lock:
            await self._ensure_loaded()
            await self._write()

    async def _ensure_loaded(self) -> None:
        # A change made before the first load must not clobber stored rows
        if not self.loaded:
            await self._load()

    async def _load(self) -> None:
        try:
            raw = await self.store.get(self.key)
        except Exception:
            logger.warning("Could not read sample history", exc_info=True)
            raw = None
        self._rows = parse_snapshot(raw, self.capacity)
        self.loaded = True
        logger.debug("Loaded %d history rows", len(self._rows))

    async def _write(self) -> None:
        payload = dump_snapshot(self._rows)
        try:
            await self.store.set(self.key, payload)
        except Exception:
            logger.error("Failed to persist sample history", exc_info=True)
