"""Game identifiers and content-hash keys for phrase records."""

from __future__ import annotations

import hashlib
import random
import re
from urllib.parse import unquote

from charades_errors import ValidationError

GAME_ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
GAME_ID_LENGTH = 5
GAME_ID_PATTERN = rf"[A-Za-z0-9]{{{GAME_ID_LENGTH}}}"
FORM_FIELD_PREFIX = "phrase="


def new_game_id(rng: random.Random | None = None) -> str:
    chooser = rng or random
    return "".join(chooser.choice(GAME_ID_ALPHABET) for _ in range(GAME_ID_LENGTH))


def is_valid_game_id(game_id) -> bool:
    return bool(game_id) and re.fullmatch(GAME_ID_PATTERN, str(game_id)) is not None


def normalize_phrase(raw_text: str) -> str:
    """Strip a legacy ``phrase=`` form prefix, then percent-decode.

    '+' is kept literally, matching how the browser client posts raw bodies.
    """
    text = str(raw_text or "")
    if text.startswith(FORM_FIELD_PREFIX):
        text = text[len(FORM_FIELD_PREFIX):]
    try:
        text = unquote(text, errors="strict")
    except UnicodeDecodeError as exc:
        raise ValidationError("Phrase is not valid percent-encoded UTF-8.") from exc
    if not text.strip():
        raise ValidationError("Phrase text is required.")
    return text


def phrase_digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def phrase_prefix(game_id: str) -> str:
    return f"{game_id}-"


def phrase_key(game_id: str, text: str) -> str:
    return f"{phrase_prefix(game_id)}{phrase_digest(text)}"


def counter_key(game_id: str, cell: str) -> str:
    return f"{game_id}:{cell}"
