from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

STORE_BACKENDS = {"sqlite", "memory", "cloudflare"}


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "t", "yes", "y")


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class CharadesConfig:
    store_backend: str = "sqlite"
    db_path: str = "charades.db"
    cf_account_id: str = ""
    cf_api_token: str = ""
    cf_games_namespace_id: str = ""
    cf_phrases_namespace_id: str = ""
    cf_counters_namespace_id: str = ""
    store_timeout_seconds: float = 10.0
    cors_origin: str = "*"
    log_file: str = "charades.log"
    host: str = "127.0.0.1"
    port: int = 8787
    is_prod: bool = False

    def validate_runtime_config(self) -> list[str]:
        warnings: list[str] = []
        if self.store_backend not in STORE_BACKENDS:
            warnings.append(
                "CHARADES_STORE should be one of: sqlite, memory, cloudflare."
            )

        if self.store_backend == "cloudflare":
            if not (self.cf_account_id and self.cf_api_token):
                warnings.append(
                    "CF_ACCOUNT_ID and CF_API_TOKEN must both be set for the cloudflare store."
                )
            missing = [
                name
                for name, value in (
                    ("CF_GAMES_NAMESPACE_ID", self.cf_games_namespace_id),
                    ("CF_PHRASES_NAMESPACE_ID", self.cf_phrases_namespace_id),
                    ("CF_COUNTERS_NAMESPACE_ID", self.cf_counters_namespace_id),
                )
                if not value
            ]
            if missing:
                warnings.append(
                    f"Cloudflare store is missing namespace ids: {', '.join(missing)}."
                )

        if self.store_backend == "memory" and self.is_prod:
            warnings.append(
                "CHARADES_STORE=memory loses every game on restart; use sqlite or cloudflare in production."
            )

        if self.store_timeout_seconds <= 0:
            warnings.append("STORE_TIMEOUT_SECONDS should be greater than 0.")

        if warnings:
            for warning in warnings:
                logger.warning("Config warning: %s", warning)
        else:
            logger.info("Runtime configuration checks passed.")
        return warnings


def load_config_from_env() -> CharadesConfig:
    load_dotenv()
    return CharadesConfig(
        store_backend=os.getenv("CHARADES_STORE", "sqlite").strip().lower(),
        db_path=os.getenv("CHARADES_DB", "charades.db"),
        cf_account_id=os.getenv("CF_ACCOUNT_ID", "").strip(),
        cf_api_token=os.getenv("CF_API_TOKEN", "").strip(),
        cf_games_namespace_id=os.getenv("CF_GAMES_NAMESPACE_ID", "").strip(),
        cf_phrases_namespace_id=os.getenv("CF_PHRASES_NAMESPACE_ID", "").strip(),
        cf_counters_namespace_id=os.getenv("CF_COUNTERS_NAMESPACE_ID", "").strip(),
        store_timeout_seconds=_env_float("STORE_TIMEOUT_SECONDS", 10.0),
        cors_origin=os.getenv("CORS_ORIGIN", "*"),
        log_file=os.getenv("LOG_FILE", "charades.log").strip(),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_env_int("PORT", 8787),
        is_prod=_env_flag("IS_PROD"),
    )
