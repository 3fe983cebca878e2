from __future__ import annotations

import json
import logging
import random
import time

from charades_errors import GameNotFoundError, StoreUnavailableError
from phrase_keys import is_valid_game_id, new_game_id

logger = logging.getLogger(__name__)


class GameRegistry:
    CREATE_GAME_ID_ATTEMPTS = 24

    def __init__(self, store, rng: random.Random | None = None):
        self.store = store
        self.rng = rng

    def create(self) -> str:
        for _ in range(self.CREATE_GAME_ID_ATTEMPTS):
            game_id = new_game_id(self.rng)
            if self.store.get(game_id) is None:
                break
        else:
            raise StoreUnavailableError("Unable to create a game right now.")

        self.store.put(game_id, json.dumps({"created_at": int(time.time())}))
        logger.info("Created game %s", game_id)
        return game_id

    def exists(self, game_id: str) -> bool:
        # Ids are matched exactly; no trimming or case folding.
        if not is_valid_game_id(game_id):
            return False
        return self.store.get(game_id) is not None

    def get(self, game_id: str) -> dict:
        code = self.require(game_id)
        raw_value = self.store.get(code)
        try:
            data = json.loads(raw_value) if raw_value else {}
        except json.JSONDecodeError:
            data = {}
        return {"id": code, "data": data}

    def require(self, game_id: str) -> str:
        if not self.exists(game_id):
            raise GameNotFoundError(game_id)
        return game_id
