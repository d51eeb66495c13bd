from __future__ import annotations
from datetime import datetime, timezone
from typing import Annotated, List, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _as_utc(v: datetime) -> datetime:
    # SQLite hands back naive timestamps; they were written as UTC
    return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Coordinate(BaseModel):
    lat: float
    lng: float


class Bounds(BaseModel):
    northeast: Coordinate
    southwest: Coordinate


# --- Input pieces (already validated and normalized by the HTTP layer) ---
class ImageUpload(BaseModel):
    data: bytes
    content_type: str = "application/octet-stream"
    filename: str = ""
    size: int


class PolygonCreate(BaseModel):
    title: str
    description: str = ""
    coordinates: List[Coordinate]
    bounds: Optional[Bounds] = None
    image: Optional[ImageUpload] = None


# --- Stored forms ---
class PolygonCreated(BaseModel):
    """Response body of POST /polygons."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    description: str
    coordinates: List[Coordinate]
    bounds: Optional[Bounds] = None
    created_at: UtcDatetime = Field(alias="createdAt")


class StoredPolygon(PolygonCreated):
    updated_at: UtcDatetime = Field(alias="updatedAt")


class StoredImage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    data: bytes
    content_type: str
    filename: str
    size: int
