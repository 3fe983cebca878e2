from __future__ import annotations


class CharadesError(Exception):
    def __init__(self, message: str, status_code: int = 400, code: str = "charades_error"):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class GameNotFoundError(CharadesError):
    def __init__(self, game_id: str):
        super().__init__("No such game exists", 404, "game_not_found")
        self.game_id = game_id


class ValidationError(CharadesError):
    def __init__(self, message: str):
        super().__init__(message, 400, "phrase_invalid")


class StoreUnavailableError(CharadesError):
    """Backing store read or write failed. Never retried by the core."""

    def __init__(self, message: str = "Phrase storage is temporarily unavailable."):
        super().__init__(message, 503, "store_unavailable")
