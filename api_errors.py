from __future__ import annotations

from typing import Any

from flask import current_app, jsonify

from charades_errors import CharadesError


def build_error_payload(
    *,
    code: str,
    message: str,
    details: Any = None,
) -> dict[str, Any]:
    payload = {
        "code": str(code).strip() or "unknown_error",
        "message": str(message).strip() or "Unknown error.",
        "details": details if details is not None else {},
    }
    # The browser client only reads "error".
    payload["error"] = payload["message"]
    return payload


def error_response(
    *,
    status: int,
    code: str,
    message: str,
    details: Any = None,
):
    return jsonify(build_error_payload(code=code, message=message, details=details)), int(
        status
    )


def charades_error_response(exc: CharadesError):
    status_code = int(getattr(exc, "status_code", 500))
    details = {}
    game_id = getattr(exc, "game_id", None)
    if game_id:
        details["game_id"] = game_id
    if status_code >= 500:
        current_app.logger.error("Charades API failure: %s", exc)
    return error_response(
        status=status_code,
        code=getattr(exc, "code", "charades_error"),
        message=str(exc),
        details=details,
    )
