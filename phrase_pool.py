from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from typing import Optional

from phrase_keys import normalize_phrase, phrase_key, phrase_prefix

logger = logging.getLogger(__name__)

DRAW_DRAWN = "drawn"
DRAW_EMPTY = "empty"
DRAW_EXHAUSTED = "exhausted"


@dataclass
class PhraseRecord:
    key: str
    text: str
    used: bool = False

    def to_json(self) -> str:
        return json.dumps({"used": bool(self.used), "text": self.text}, ensure_ascii=False)

    @classmethod
    def from_json(cls, key: str, raw_value: str) -> Optional["PhraseRecord"]:
        try:
            payload = json.loads(raw_value)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Skipping unreadable phrase record %s", key)
            return None
        if not isinstance(payload, dict):
            return None
        # Older records stored the text under "phrase".
        text = payload.get("text", payload.get("phrase", ""))
        return cls(key=key, text=str(text), used=bool(payload.get("used", False)))


@dataclass(frozen=True)
class DrawResult:
    status: str
    record: Optional[PhraseRecord] = None

    @classmethod
    def drawn(cls, record: PhraseRecord) -> "DrawResult":
        return cls(DRAW_DRAWN, record)

    @classmethod
    def empty(cls) -> "DrawResult":
        return cls(DRAW_EMPTY)

    @classmethod
    def exhausted(cls) -> "DrawResult":
        return cls(DRAW_EXHAUSTED)

    @property
    def is_drawn(self) -> bool:
        return self.status == DRAW_DRAWN


class PhrasePool:
    """Phrase records for every game, kept in one flat key-value store.

    The store lists keys without values, so a draw cannot filter out used
    phrases up front. ``draw_random`` samples candidates without replacement
    and rejects the ones that turn out to be used.

    There is no compare-and-swap on the store: two concurrent draws for the
    same game may both read a phrase as unused and both hand it out.
    """

    def __init__(self, store, rng: random.Random | None = None):
        self.store = store
        self.rng = rng or random.Random()

    def add(self, game_id: str, raw_text: str) -> PhraseRecord:
        text = normalize_phrase(raw_text)
        record = PhraseRecord(key=phrase_key(game_id, text), text=text, used=False)
        # Unconditional overwrite: resubmitting a phrase makes it drawable again.
        self.store.put(record.key, record.to_json())
        logger.info("Phrase stored for game %s: %s", game_id, record.key)
        return record

    def count(self, game_id: str) -> int:
        return len(self.store.list_keys(phrase_prefix(game_id)))

    def draw_random(self, game_id: str) -> DrawResult:
        candidates = list(self.store.list_keys(phrase_prefix(game_id)))
        if not candidates:
            return DrawResult.empty()

        reads = 0
        while candidates:
            index = self.rng.randrange(len(candidates))
            key = candidates.pop(index)
            reads += 1
            raw_value = self.store.get(key)
            if raw_value is None:
                # Listing was stale.
                continue
            record = PhraseRecord.from_json(key, raw_value)
            if record is None or record.used:
                continue

            record.used = True
            self.store.put(key, record.to_json())
            logger.info("Drew phrase %s for game %s after %s reads", key, game_id, reads)
            return DrawResult.drawn(record)

        logger.info("Game %s exhausted after %s reads", game_id, reads)
        return DrawResult.exhausted()

    def reset_all(self, game_id: str) -> int:
        touched = 0
        for key in self.store.list_keys(phrase_prefix(game_id)):
            raw_value = self.store.get(key)
            if raw_value is None:
                continue
            record = PhraseRecord.from_json(key, raw_value)
            if record is None:
                continue
            record.used = False
            self.store.put(key, record.to_json())
            touched += 1
        logger.info("Reset %s phrases for game %s", touched, game_id)
        return touched
