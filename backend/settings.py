"""Configuration applicative backend (API FastAPI) basée sur core.settings.AppSettings."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from core.settings import AppSettings as CoreSettings


@dataclass(frozen=True)
class Settings(CoreSettings):
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    service_name: str = "Factures API"

    @staticmethod
    def load() -> "Settings":
        core = CoreSettings.load()
        return Settings(
            **{field.name: getattr(core, field.name) for field in fields(CoreSettings)},
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
