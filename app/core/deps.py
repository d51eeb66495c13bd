from __future__ import annotations
from typing import Annotated, Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.services.polygon_store import PolygonStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    """
    One session per request, drawn from the factory the lifespan put on app.state.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_store(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PolygonStore:
    return PolygonStore(db, max_list_limit=settings.list_limit)
