"""Shared pytest fixtures for the map polygon service test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.db.session import init_models, make_engine, make_session_factory
from app.main import create_app
from app.services.polygon_store import PolygonStore

# ---------------------------------------------------------------------------
# Settings / database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    """SQLite file private to one test."""
    return f"sqlite:///{tmp_path / 'polygons.db'}"


@pytest.fixture()
def settings(database_url: str) -> Settings:
    return Settings(database_url=database_url, _env_file=None)


@pytest.fixture()
def db(database_url: str) -> Iterator[Session]:
    engine = make_engine(database_url)
    init_models(engine)
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def store(db: Session) -> PolygonStore:
    return PolygonStore(db)


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def client(settings: Settings) -> Iterator[TestClient]:
    """Client with the lifespan running (engine open, tables created)."""
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture()
def square() -> list[dict[str, float]]:
    return [
        {"lat": 10.0, "lng": 20.0},
        {"lat": 10.0, "lng": 21.0},
        {"lat": 11.0, "lng": 21.0},
        {"lat": 11.0, "lng": 20.0},
    ]
