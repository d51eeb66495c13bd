from __future__ import annotations
from datetime import datetime
from typing import Optional, Any

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, DateTime, JSON, Index

from app.db.base import Base


class Polygon(Base):
    __tablename__ = "polygons"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # [{"lat": .., "lng": ..}, ...] in drawing order
    coordinates: Mapped[list[dict[str, float]]] = mapped_column(JSON, nullable=False)
    # {"northeast": {...}, "southwest": {...}} or NULL
    bounds: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # set by the store on every write; no server-side onupdate hooks
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # never loaded unless asked for explicitly
    image: Mapped[Optional["PolygonImage"]] = relationship(
        back_populates="polygon",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="noload",
    )

    __table_args__ = (
        Index("ix_polygons_created_at_id", "created_at", "id"),
    )
