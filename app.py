from __future__ import annotations

import logging
import os
import time as timelib

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from blueprints.api import create_api_blueprint
from charades_config import CharadesConfig, load_config_from_env
from charades_service import CharadesService
from kv_store import build_kv_stores

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
LOG_FILE_MAX_BYTES = 2 * 1024 * 1024

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)


# ─────────────────────────────────────────────
# Hard-capped file handler (no deletion)
# ─────────────────────────────────────────────


class MaxSizeFileHandler(logging.FileHandler):
    def __init__(self, filename, max_bytes, **kwargs):
        self.max_bytes = max_bytes
        super().__init__(filename, **kwargs)

    def emit(self, record):
        try:
            if os.path.exists(self.baseFilename):
                if os.path.getsize(self.baseFilename) >= self.max_bytes:
                    return
            super().emit(record)
        except Exception:
            self.handleError(record)


def configure_logging(app: Flask, log_file: str) -> None:
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    app.logger.handlers.clear()
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = False
    app.logger.addHandler(console_handler)

    if log_file:
        file_handler = MaxSizeFileHandler(log_file, max_bytes=LOG_FILE_MAX_BYTES)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        app.logger.addHandler(file_handler)

    # Silence Werkzeug access logs
    logging.getLogger("werkzeug").setLevel(logging.ERROR)


def create_app(config: CharadesConfig | None = None, service: CharadesService | None = None) -> Flask:
    config = config or load_config_from_env()
    config.validate_runtime_config()

    app = Flask(__name__)
    app.config["CHARADES"] = config
    configure_logging(app, config.log_file)

    if service is None:
        service = CharadesService(stores=build_kv_stores(config))
    app.extensions["charades_service"] = service

    @app.before_request
    def start_timer():
        g.start_time = timelib.time()

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = config.cors_origin
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        return response

    @app.after_request
    def log_request(response):
        duration = round(timelib.time() - g.get("start_time", timelib.time()), 3)
        app.logger.info(
            "%s %s (%s) -> %s [%ss]",
            request.method,
            request.path,
            request.endpoint,
            response.status_code,
            duration,
        )
        return response

    @app.errorhandler(404)
    def handle_not_found(_e):
        return jsonify(error="Route not found"), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify(error=e.name, description=e.description), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        app.logger.error(
            "Unhandled exception",
            exc_info=(type(e), e, e.__traceback__),
        )
        return (
            jsonify(
                error="Internal Server Error",
                description="The server encountered an internal error and was unable to complete your request.",
            ),
            500,
        )

    app.register_blueprint(create_api_blueprint(service=service))
    app.logger.info("Charades API initialised (store=%s)", config.store_backend)
    return app


if __name__ == "__main__":
    runtime_config = load_config_from_env()
    create_app(runtime_config).run(
        debug=not runtime_config.is_prod,
        host=runtime_config.host,
        port=runtime_config.port,
    )
