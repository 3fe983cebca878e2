"""Flat key-value stores backing games, phrases and counters.

Every backend offers the same three calls: ``get``, ``put`` (unconditional
overwrite) and ``list_keys`` (prefix scan returning keys only). There is no
delete, no conditional write and no multi-key transaction.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests

from charades_errors import StoreUnavailableError

logger = logging.getLogger(__name__)

GAMES_NAMESPACE = "games"
PHRASES_NAMESPACE = "phrases"
COUNTERS_NAMESPACE = "counters"


class InMemoryKVStore:
    """Dict-backed store for tests and throwaway dev servers."""

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = str(value)

    def list_keys(self, prefix: str) -> list[str]:
        with self._lock:
            return sorted(k for k in self._values if k.startswith(prefix))


class SQLiteKVStore:
    def __init__(self, db_path: str, namespace: str):
        self.db_path = str(db_path)
        self.namespace = namespace
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv_entries (
                        namespace TEXT NOT NULL,
                        key TEXT NOT NULL,
                        value TEXT NOT NULL,
                        PRIMARY KEY (namespace, key)
                    )
                    """
                )
        except sqlite3.Error as exc:
            logger.error("KV schema setup failed for %s: %s", self.db_path, exc)
            raise StoreUnavailableError() from exc

    def get(self, key: str) -> Optional[str]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_entries WHERE namespace = ? AND key = ?",
                    (self.namespace, key),
                ).fetchone()
        except sqlite3.Error as exc:
            logger.error("KV get failed (%s/%s): %s", self.namespace, key, exc)
            raise StoreUnavailableError() from exc
        return row["value"] if row else None

    def put(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO kv_entries (namespace, key, value)
                    VALUES (?, ?, ?)
                    """,
                    (self.namespace, key, str(value)),
                )
        except sqlite3.Error as exc:
            logger.error("KV put failed (%s/%s): %s", self.namespace, key, exc)
            raise StoreUnavailableError() from exc

    def list_keys(self, prefix: str) -> list[str]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT key FROM kv_entries
                    WHERE namespace = ? AND substr(key, 1, ?) = ?
                    ORDER BY key ASC
                    """,
                    (self.namespace, len(prefix), prefix),
                ).fetchall()
        except sqlite3.Error as exc:
            logger.error("KV list failed (%s/%s*): %s", self.namespace, prefix, exc)
            raise StoreUnavailableError() from exc
        return [row["key"] for row in rows]


class CloudflareKVStore:
    """Workers KV namespace reached through the Cloudflare REST API."""

    API_BASE = "https://api.cloudflare.com/client/v4"
    LIST_PAGE_SIZE = 1000

    def __init__(
        self,
        *,
        account_id: str,
        namespace_id: str,
        api_token: str,
        timeout: float = 10,
    ):
        self.account_id = account_id
        self.namespace_id = namespace_id
        self.api_token = api_token
        self.timeout = timeout
        self.base_url = (
            f"{self.API_BASE}/accounts/{account_id}/storage/kv/namespaces/{namespace_id}"
        )

    def _headers(self, content_type: str | None = None) -> dict:
        headers = {"Authorization": f"Bearer {self.api_token}"}
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def _value_url(self, key: str) -> str:
        return f"{self.base_url}/values/{quote(key, safe='')}"

    def get(self, key: str) -> Optional[str]:
        url = self._value_url(key)
        try:
            response = requests.get(url, headers=self._headers(), timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Remote KV get failed for %s: %s", key, exc)
            raise StoreUnavailableError() from exc
        return response.text

    def put(self, key: str, value: str) -> None:
        url = self._value_url(key)
        try:
            response = requests.put(
                url,
                data=str(value).encode("utf-8"),
                headers=self._headers("text/plain; charset=utf-8"),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Remote KV put failed for %s: %s", key, exc)
            raise StoreUnavailableError() from exc

    def list_keys(self, prefix: str) -> list[str]:
        keys: list[str] = []
        cursor = ""
        while True:
            params = {"prefix": prefix, "limit": self.LIST_PAGE_SIZE}
            if cursor:
                params["cursor"] = cursor
            try:
                response = requests.get(
                    f"{self.base_url}/keys",
                    params=params,
                    headers=self._headers(),
                    timeout=self.timeout,
                )
                response.raise_for_status()
                payload = response.json()
            except (requests.RequestException, ValueError) as exc:
                logger.error("Remote KV list failed for prefix %s: %s", prefix, exc)
                raise StoreUnavailableError() from exc

            keys.extend(item["name"] for item in payload.get("result") or [])
            cursor = (payload.get("result_info") or {}).get("cursor") or ""
            if not cursor:
                return keys


@dataclass(frozen=True)
class KVStores:
    games: object
    phrases: object
    counters: object


def build_kv_stores(config) -> KVStores:
    backend = config.store_backend
    if backend == "memory":
        logger.info("KV stores: using in-memory backend")
        return KVStores(
            games=InMemoryKVStore(GAMES_NAMESPACE),
            phrases=InMemoryKVStore(PHRASES_NAMESPACE),
            counters=InMemoryKVStore(COUNTERS_NAMESPACE),
        )

    if backend == "cloudflare":
        logger.info("KV stores: using Cloudflare KV for account %s", config.cf_account_id)

        def _remote(namespace_id: str) -> CloudflareKVStore:
            return CloudflareKVStore(
                account_id=config.cf_account_id,
                namespace_id=namespace_id,
                api_token=config.cf_api_token,
                timeout=config.store_timeout_seconds,
            )

        return KVStores(
            games=_remote(config.cf_games_namespace_id),
            phrases=_remote(config.cf_phrases_namespace_id),
            counters=_remote(config.cf_counters_namespace_id),
        )

    logger.info("KV stores: using local SQLite database (%s)", config.db_path)
    return KVStores(
        games=SQLiteKVStore(config.db_path, GAMES_NAMESPACE),
        phrases=SQLiteKVStore(config.db_path, PHRASES_NAMESPACE),
        counters=SQLiteKVStore(config.db_path, COUNTERS_NAMESPACE),
    )
