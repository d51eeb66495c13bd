from __future__ import annotations
import logging
import sys
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from pydantic import ValidationError as SettingsError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import Settings, configure_cors, get_settings
from app.core.exceptions import register_exception_handlers
from app.core.logger import setup_logging, log_api_request
from app.db.session import make_engine, make_session_factory, init_models

# Routers (import once, include once)
from app.api.v1.polygons import router as polygons_router

logger = logging.getLogger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    - Open the single engine/pool for the whole process
    - Check connectivity and create tables
    Any failure here aborts startup; there is no degraded mode.
    """
    settings: Settings = app.state.settings
    engine = make_engine(settings.database_url)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        init_models(engine)
    except SQLAlchemyError:
        logger.critical("database connection failed", exc_info=True)
        engine.dispose()
        raise
    logger.info("database connected")

    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    try:
        yield
    finally:
        engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    configure_cors(app, settings)
    register_exception_handlers(app)

    @app.get("/")
    def health():
        return {"ok": True}

    app.include_router(polygons_router)

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path != "/":
            log_api_request(logger, request.method, request.url.path,
                            response.status_code, (time.perf_counter() - start) * 1000)
        return response

    return app


def main() -> None:
    try:
        settings = get_settings()
    except SettingsError as e:
        setup_logging()
        logger.critical("invalid configuration (is DATABASE_URL set?): %s", e)
        sys.exit(1)

    app = create_app(settings)
    logger.info("Server listening on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
