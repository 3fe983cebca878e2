import json
import random

import pytest

from charades_errors import GameNotFoundError, StoreUnavailableError
from game_registry import GameRegistry
from kv_store import InMemoryKVStore


def test_create_stores_game_and_require_finds_it():
    store = InMemoryKVStore("games")
    registry = GameRegistry(store, rng=random.Random(11))

    game_id = registry.create()

    assert len(game_id) == 5
    assert registry.exists(game_id) is True
    assert registry.require(game_id) == game_id
    assert "created_at" in json.loads(store.get(game_id))
    assert registry.get(game_id)["id"] == game_id


def test_unknown_game_raises_not_found():
    registry = GameRegistry(InMemoryKVStore("games"))

    assert registry.exists("ZZZZZ") is False
    assert registry.exists("") is False
    with pytest.raises(GameNotFoundError) as excinfo:
        registry.require("ZZZZZ")
    assert excinfo.value.status_code == 404
    with pytest.raises(GameNotFoundError):
        registry.get("!!!")


def test_games_created_by_older_deployments_still_resolve():
    store = InMemoryKVStore("games")
    store.put("AB3xZ", "")
    registry = GameRegistry(store)

    assert registry.get("AB3xZ") == {"id": "AB3xZ", "data": {}}


def test_create_retries_on_taken_id():
    store = InMemoryKVStore("games")
    taken = GameRegistry(store, rng=random.Random(42)).create()

    registry = GameRegistry(store, rng=random.Random(42))
    fresh = registry.create()

    assert fresh != taken
    assert registry.exists(taken) and registry.exists(fresh)


def test_create_gives_up_when_every_attempt_collides(monkeypatch):
    store = InMemoryKVStore("games")
    store.put("AAAAA", "")
    monkeypatch.setattr("game_registry.new_game_id", lambda _rng=None: "AAAAA")

    with pytest.raises(StoreUnavailableError):
        GameRegistry(store).create()


def test_lookup_is_exact():
    store = InMemoryKVStore("games")
    store.put("AB3xZ", "")
    registry = GameRegistry(store)

    for alias in ("AB3xZextra", "AB-3xZ", " AB3xZ", "ab3xz"):
        assert registry.exists(alias) is False
        with pytest.raises(GameNotFoundError):
            registry.require(alias)
        with pytest.raises(GameNotFoundError):
            registry.get(alias)
