import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import create_app
from charades_config import CharadesConfig
from charades_service import CharadesService
from kv_store import (
    COUNTERS_NAMESPACE,
    GAMES_NAMESPACE,
    PHRASES_NAMESPACE,
    InMemoryKVStore,
    KVStores,
    SQLiteKVStore,
)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def memory_stores():
    return KVStores(
        games=InMemoryKVStore(GAMES_NAMESPACE),
        phrases=InMemoryKVStore(PHRASES_NAMESPACE),
        counters=InMemoryKVStore(COUNTERS_NAMESPACE),
    )


@pytest.fixture
def sqlite_stores(tmp_path):
    db_path = str(tmp_path / "charades-test.db")
    return KVStores(
        games=SQLiteKVStore(db_path, GAMES_NAMESPACE),
        phrases=SQLiteKVStore(db_path, PHRASES_NAMESPACE),
        counters=SQLiteKVStore(db_path, COUNTERS_NAMESPACE),
    )


@pytest.fixture
def service(sqlite_stores, rng):
    return CharadesService(stores=sqlite_stores, rng=rng)


@pytest.fixture
def app_config(tmp_path):
    return CharadesConfig(
        store_backend="sqlite",
        db_path=str(tmp_path / "charades-test.db"),
        cors_origin="https://charades.example.com",
        log_file="",
    )


@pytest.fixture
def app(app_config, service):
    flask_app = create_app(app_config, service=service)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
