"""Shared pytest fixtures: in-memory SQLite engine wired into the services."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("SKIP_SCHEMA_INIT", "1")
os.environ.setdefault("APP_ENV", "test")

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.schema import ensure_schema  # noqa: E402
from tests.sample_data import seed_reference_data  # noqa: E402

# Modules that imported ``get_engine`` by name.
ENGINE_PATCH_TARGETS = (
    "core.data_repository.get_engine",
    "backend.services.catalog.get_engine",
    "backend.services.products.get_engine",
    "backend.services.invoices.get_engine",
)


@pytest.fixture
def engine(monkeypatch):
    """Fresh in-memory database, shared by every connection of the test."""

    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    ensure_schema(eng)
    for target in ENGINE_PATCH_TARGETS:
        monkeypatch.setattr(target, lambda: eng)
    yield eng
    eng.dispose()


@pytest.fixture
def seeded(engine):
    """Engine populated with the reference dataset of ``tests.sample_data``."""

    seed_reference_data(engine)
    return engine

