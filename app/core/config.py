# app/core/config.py
from __future__ import annotations
import json
from typing import Annotated, List
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator
from starlette.middleware.cors import CORSMiddleware


class Settings(BaseSettings):
    # Pydantic Settings
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",          # ignore unknown env keys safely
        case_sensitive=False,
        populate_by_name=True,
    )

    # --- App ---
    app_name: str = Field("Map Polygons", alias="APP_NAME")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(4000, alias="PORT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # --- Database ---
    # No default: the service refuses to start without it
    database_url: str = Field(..., alias="DATABASE_URL")

    # --- Limits ---
    max_image_bytes: int = Field(5 * 1024 * 1024, alias="MAX_IMAGE_BYTES")
    max_json_bytes: int = Field(1024 * 1024, alias="MAX_JSON_BYTES")
    list_limit: int = Field(100, ge=1, le=100, alias="LIST_LIMIT")

    # --- CORS ---
    # Comma-separated in .env or leave default (everyone)
    cors_origins: Annotated[List[str], NoDecode] = Field(["*"], alias="CORS_ORIGINS")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_origins(cls, v):
        # Accept "a,b,c" or JSON array; pass lists through.
        if v is None:
            return []
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("database_url")
    @classmethod
    def _require_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("DATABASE_URL must not be empty")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


def get_settings() -> Settings:
    return Settings()


def configure_cors(app, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
