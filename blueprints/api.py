from flask import Blueprint, Response, current_app, jsonify, request

from api_errors import charades_error_response
from charades_errors import CharadesError, ValidationError

# Older clients call the same routes without the /api prefix.
ROUTE_PREFIXES = (("/api", "api"), ("", "legacy"))


def _text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def _read_phrase_body() -> str:
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Phrase text is required.")
        return str(data.get("phrase") or data.get("text") or "")
    return request.get_data(as_text=True) or ""


def create_api_blueprint(*, service):
    bp = Blueprint("api", __name__)

    def _respond(fn):
        try:
            return jsonify(fn())
        except CharadesError as exc:
            return charades_error_response(exc)

    def _create_game():
        return _respond(service.create_game)

    def _get_game(game_id: str):
        return _respond(lambda: service.get_game(game_id))

    def _add_phrase(game_id: str):
        try:
            payload = service.add_phrase(game_id, _read_phrase_body())
        except CharadesError as exc:
            return charades_error_response(exc)
        return _text(payload["message"])

    def _draw_phrase(game_id: str):
        try:
            payload = service.draw_phrase(game_id)
        except CharadesError as exc:
            return charades_error_response(exc)
        current_app.logger.info("Draw for game %s: %s", game_id, payload["status"])
        return _text(payload["message"])

    def _stats(game_id: str):
        return _respond(lambda: service.stats(game_id))

    def _reset(game_id: str):
        return _respond(lambda: service.reset(game_id))

    for url_prefix, endpoint_prefix in ROUTE_PREFIXES:
        bp.add_url_rule(
            f"{url_prefix}/games",
            endpoint=f"{endpoint_prefix}_create_game",
            view_func=_create_game,
            methods=["POST"],
        )
        bp.add_url_rule(
            f"{url_prefix}/games/<game_id>",
            endpoint=f"{endpoint_prefix}_get_game",
            view_func=_get_game,
            methods=["GET"],
        )
        bp.add_url_rule(
            f"{url_prefix}/games/<game_id>/phrase",
            endpoint=f"{endpoint_prefix}_add_phrase",
            view_func=_add_phrase,
            methods=["POST"],
        )
        bp.add_url_rule(
            f"{url_prefix}/games/<game_id>/phrase",
            endpoint=f"{endpoint_prefix}_draw_phrase",
            view_func=_draw_phrase,
            methods=["GET"],
        )
        bp.add_url_rule(
            f"{url_prefix}/games/<game_id>/stats",
            endpoint=f"{endpoint_prefix}_stats",
            view_func=_stats,
            methods=["GET"],
        )
        bp.add_url_rule(
            f"{url_prefix}/games/<game_id>/reset",
            endpoint=f"{endpoint_prefix}_reset",
            view_func=_reset,
            methods=["POST"],
        )

    @bp.route("/api", endpoint="api_index")
    def api_index():
        return jsonify(status="ok", message=f"{service.GAME_NAME} API is running!")

    @bp.route("/health", endpoint="health")
    def health():
        return jsonify(status="ok")

    @bp.route("/", endpoint="root")
    def root():
        return _text(f"{service.GAME_NAME} API - Use /api for API endpoints")

    @bp.route("/api/<path:_path>", methods=["OPTIONS"], endpoint="api_options")
    def api_options(_path):
        return ("", 204)

    return bp
