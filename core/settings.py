"""Configuration centralisée (backend core) avec validation minimale."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Les variables déjà définies dans l'environnement restent prioritaires sur le fichier .env.
load_dotenv(override=False)


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _optional_int_env(name: str) -> int | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} doit être un entier (reçu: {raw!r}).") from exc


@dataclass(frozen=True)
class AppSettings:
    app_env: str = "development"
    database_url: str = ""
    db_pool_size: int = 10
    db_pool_max_overflow: int = 20
    cors_allowed_origins: list[str] = None
    skip_schema_init: bool = False
    # Sélection explicite des enregistrements par défaut utilisés à la facturation.
    default_emetteur_id: int | None = None
    default_condition_reglement_id: int | None = None
    default_compte_bancaire_id: int | None = None

    @staticmethod
    def load() -> "AppSettings":
        cors_raw = os.getenv("CORS_ALLOWED_ORIGINS")
        cors = [entry.strip() for entry in cors_raw.split(",") if entry.strip()] if cors_raw else []
        return AppSettings(
            app_env=os.getenv("APP_ENV", os.getenv("ENV", "development")).lower(),
            database_url=os.getenv("DATABASE_URL", ""),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            db_pool_max_overflow=int(os.getenv("DB_POOL_MAX_OVERFLOW", "20")),
            cors_allowed_origins=cors,
            skip_schema_init=_bool_env("SKIP_SCHEMA_INIT"),
            default_emetteur_id=_optional_int_env("DEFAULT_EMETTEUR_ID"),
            default_condition_reglement_id=_optional_int_env("DEFAULT_CONDITION_REGLEMENT_ID"),
            default_compte_bancaire_id=_optional_int_env("DEFAULT_COMPTE_BANCAIRE_ID"),
        )

    @property
    def is_development(self) -> bool:
        return self.app_env in {"development", "dev"}
