"""Per-game total/used tallies for the stats display.

These counts are advisory. The phrase records decide what can be drawn; the
counters can drift from them when a request fails between the two writes.
"""

from __future__ import annotations

import logging
import threading
import weakref

from phrase_keys import counter_key

logger = logging.getLogger(__name__)

TOTAL_CELL = "total"
USED_CELL = "used"


class UsageCounter:
    def __init__(self, game_id: str, store, lock):
        self.game_id = game_id
        self.store = store
        self._lock = lock

    def _read(self, cell: str) -> int:
        raw_value = self.store.get(counter_key(self.game_id, cell))
        if raw_value is None:
            return 0
        try:
            return int(raw_value)
        except (TypeError, ValueError):
            logger.warning("Counter %s for game %s was not an integer", cell, self.game_id)
            return 0

    def _write(self, cell: str, value: int) -> None:
        self.store.put(counter_key(self.game_id, cell), str(int(value)))

    def _increment(self, cell: str) -> int:
        with self._lock:
            value = self._read(cell) + 1
            self._write(cell, value)
        return value

    @staticmethod
    def _snapshot(total: int, used: int) -> dict:
        return {"total": total, "used": used, "remaining": max(0, total - used)}

    def record_add(self) -> dict:
        return {"total": self._increment(TOTAL_CELL)}

    def record_use(self) -> dict:
        return {"used": self._increment(USED_CELL)}

    def stats(self) -> dict:
        with self._lock:
            return self._snapshot(self._read(TOTAL_CELL), self._read(USED_CELL))

    def reset(self) -> dict:
        with self._lock:
            total = self._read(TOTAL_CELL)
            self._write(USED_CELL, 0)
        logger.info("Usage counter reset for game %s (total=%s)", self.game_id, total)
        return self._snapshot(total, 0)


class GameLock:
    """Per-game mutex, held weakly by the lock table."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self._lock.release()
        return False


class UsageCounters:
    """Hands out counters that share one lock per game id.

    A game's lock lives only while some counter for that game is in use, so
    the table does not grow with every game ever touched.
    """

    def __init__(self, store):
        self.store = store
        self._locks: weakref.WeakValueDictionary[str, GameLock] = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _lock_for(self, game_id: str) -> GameLock:
        with self._locks_guard:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = GameLock()
                self._locks[game_id] = lock
            return lock

    def for_game(self, game_id: str) -> UsageCounter:
        return UsageCounter(game_id, self.store, self._lock_for(game_id))
