# app/db/session.py
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker
from app.db.base import Base  # <- use the single Base


def make_engine(database_url: str) -> Engine:
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_models(engine: Engine) -> None:
    # Import ALL model modules so metadata is populated before create_all
    from app.models import polygon, polygon_image  # noqa: F401
    Base.metadata.create_all(bind=engine)
