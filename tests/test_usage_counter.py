import gc
import threading

from kv_store import InMemoryKVStore
from usage_counter import UsageCounters


def test_counter_starts_at_zero():
    counters = UsageCounters(InMemoryKVStore("counters"))
    assert counters.for_game("AB3xZ").stats() == {"total": 0, "used": 0, "remaining": 0}


def test_record_add_and_use_update_stats():
    store = InMemoryKVStore("counters")
    counter = UsageCounters(store).for_game("AB3xZ")

    assert counter.record_add() == {"total": 1}
    assert counter.record_add() == {"total": 2}
    assert counter.record_use() == {"used": 1}
    assert counter.stats() == {"total": 2, "used": 1, "remaining": 1}
    assert store.get("AB3xZ:total") == "2"
    assert store.get("AB3xZ:used") == "1"


def test_reset_zeroes_used_and_keeps_total():
    counter = UsageCounters(InMemoryKVStore("counters")).for_game("AB3xZ")
    counter.record_add()
    counter.record_add()
    counter.record_use()

    assert counter.reset() == {"total": 2, "used": 0, "remaining": 2}
    assert counter.reset() == {"total": 2, "used": 0, "remaining": 2}
    assert counter.stats()["used"] == 0


def test_remaining_never_reported_negative():
    store = InMemoryKVStore("counters")
    store.put("AB3xZ:total", "1")
    store.put("AB3xZ:used", "3")
    assert UsageCounters(store).for_game("AB3xZ").stats()["remaining"] == 0


def test_corrupt_cell_reads_as_zero():
    store = InMemoryKVStore("counters")
    store.put("AB3xZ:total", "lots")
    counter = UsageCounters(store).for_game("AB3xZ")
    assert counter.record_add() == {"total": 1}


def test_games_are_counted_separately(sqlite_stores):
    counters = UsageCounters(sqlite_stores.counters)
    counters.for_game("AB3xZ").record_add()
    counters.for_game("CD4yW").record_use()

    assert counters.for_game("AB3xZ").stats() == {"total": 1, "used": 0, "remaining": 1}
    assert counters.for_game("CD4yW").stats()["used"] == 1


def test_same_game_shares_one_lock():
    counters = UsageCounters(InMemoryKVStore("counters"))
    first = counters.for_game("AB3xZ")
    second = counters.for_game("AB3xZ")

    assert first._lock is second._lock
    assert first._lock is not counters.for_game("CD4yW")._lock


def test_idle_game_locks_are_released():
    counters = UsageCounters(InMemoryKVStore("counters"))
    for idx in range(20):
        counters.for_game(f"G{idx:04d}").record_add()
    gc.collect()

    assert len(counters._locks) == 0
    assert counters.for_game("G0001").stats()["total"] == 1


def test_concurrent_increments_are_not_lost():
    counters = UsageCounters(InMemoryKVStore("counters"))

    def _worker():
        for _ in range(50):
            counters.for_game("AB3xZ").record_use()

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert counters.for_game("AB3xZ").stats()["used"] == 400
