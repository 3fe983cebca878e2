from __future__ import annotations

import logging
import random

from game_registry import GameRegistry
from kv_store import KVStores
from phrase_pool import DRAW_EMPTY, PhrasePool
from usage_counter import UsageCounters

logger = logging.getLogger(__name__)


class CharadesService:
    GAME_NAME = "Charades"
    EMPTY_MESSAGE = "Brainstorm and add some phrases to the game to get started!"
    EXHAUSTED_MESSAGE = "You've run out of phrases! Please add more"
    ADDED_MESSAGE = "Phrase added!"

    def __init__(self, *, stores: KVStores, rng: random.Random | None = None):
        self.registry = GameRegistry(stores.games, rng=rng)
        self.pool = PhrasePool(stores.phrases, rng=rng)
        self.counters = UsageCounters(stores.counters)

    # ------------------------
    # Public API helpers
    # ------------------------

    def create_game(self) -> dict:
        return {"id": self.registry.create()}

    def get_game(self, game_id: str) -> dict:
        return self.registry.get(game_id)

    def add_phrase(self, game_id: str, raw_text: str) -> dict:
        code = self.registry.require(game_id)
        record = self.pool.add(code, raw_text)
        counts = self.counters.for_game(code).record_add()
        return {
            "key": record.key,
            "message": self.ADDED_MESSAGE,
            "total": counts["total"],
        }

    def draw_phrase(self, game_id: str) -> dict:
        code = self.registry.require(game_id)
        result = self.pool.draw_random(code)
        if not result.is_drawn:
            message = self.EMPTY_MESSAGE if result.status == DRAW_EMPTY else self.EXHAUSTED_MESSAGE
            return {"status": result.status, "message": message}

        self.counters.for_game(code).record_use()
        return {
            "status": result.status,
            "key": result.record.key,
            "phrase": result.record.text,
            "message": result.record.text,
        }

    def stats(self, game_id: str) -> dict:
        code = self.registry.require(game_id)
        payload = self.counters.for_game(code).stats()
        payload["pool_size"] = self.pool.count(code)
        return payload

    def reset(self, game_id: str) -> dict:
        code = self.registry.require(game_id)
        payload = self.counters.for_game(code).reset()
        payload["reset_count"] = self.pool.reset_all(code)
        logger.info(
            "%s game %s reset: %s phrases drawable again",
            self.GAME_NAME,
            code,
            payload["reset_count"],
        )
        return payload
