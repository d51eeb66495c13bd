from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, ForeignKey, LargeBinary

from app.db.base import Base


class PolygonImage(Base):
    __tablename__ = "polygon_images"

    id: Mapped[int] = mapped_column(primary_key=True)
    polygon_id: Mapped[int] = mapped_column(
        ForeignKey("polygons.id", ondelete="CASCADE"), unique=True, index=True
    )

    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    content_type: Mapped[str] = mapped_column(String(255), default="application/octet-stream")
    filename: Mapped[str] = mapped_column(String(512), default="")
    size: Mapped[int] = mapped_column(Integer, nullable=False)

    polygon = relationship("Polygon", back_populates="image")
