from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreUnavailable
from app.models.polygon import Polygon
from app.models.polygon_image import PolygonImage
from app.schemas.polygon import PolygonCreate, StoredImage, StoredPolygon

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100
# polygons.id is a 32-bit INTEGER column
MAX_POLYGON_ID = 2**31 - 1


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _valid_id(polygon_id: int) -> bool:
    # anything outside the column range cannot exist; keep it away from the driver
    return -MAX_POLYGON_ID - 1 <= polygon_id <= MAX_POLYGON_ID


class PolygonStore:
    """
    Repository over Polygon rows. Reads never touch image bytes; only
    get_image_by_id loads them.
    """

    def __init__(self, db: Session, max_list_limit: int = MAX_LIST_LIMIT):
        self.db = db
        self.max_list_limit = min(max_list_limit, MAX_LIST_LIMIT)

    def _unavailable(self, exc: SQLAlchemyError) -> StoreUnavailable:
        # leave the session usable for whoever closes it
        self.db.rollback()
        logger.warning("store operation failed: %s", exc.__class__.__name__)
        return StoreUnavailable()

    def create(self, record: PolygonCreate) -> StoredPolygon:
        now = _now()
        row = Polygon(
            title=record.title,
            description=record.description,
            coordinates=[c.model_dump() for c in record.coordinates],
            bounds=record.bounds.model_dump() if record.bounds else None,
            created_at=now,
            updated_at=now,
        )
        if record.image is not None:
            row.image = PolygonImage(
                data=record.image.data,
                content_type=record.image.content_type,
                filename=record.image.filename,
                size=record.image.size,
            )

        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._unavailable(e) from e

        logger.info("polygon %s created (%d vertices, image=%s)",
                    row.id, len(record.coordinates), record.image is not None)
        return StoredPolygon.model_validate(row)

    def list_recent(self, limit: int = MAX_LIST_LIMIT) -> List[StoredPolygon]:
        limit = max(1, min(limit, self.max_list_limit))
        stmt = (
            select(Polygon)
            .order_by(Polygon.created_at.desc(), Polygon.id.desc())
            .limit(limit)
        )
        try:
            rows = self.db.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise self._unavailable(e) from e
        return [StoredPolygon.model_validate(r) for r in rows]

    def get_by_id(self, polygon_id: int) -> Optional[StoredPolygon]:
        if not _valid_id(polygon_id):
            return None
        try:
            row = self.db.get(Polygon, polygon_id)
        except SQLAlchemyError as e:
            raise self._unavailable(e) from e
        return StoredPolygon.model_validate(row) if row else None

    def get_image_by_id(self, polygon_id: int) -> Optional[StoredImage]:
        if not _valid_id(polygon_id):
            return None
        stmt = select(PolygonImage).where(PolygonImage.polygon_id == polygon_id)
        try:
            img = self.db.scalars(stmt).first()
        except SQLAlchemyError as e:
            raise self._unavailable(e) from e
        return StoredImage.model_validate(img) if img else None

    def exists(self, polygon_id: int) -> bool:
        if not _valid_id(polygon_id):
            return False
        stmt = select(Polygon.id).where(Polygon.id == polygon_id)
        try:
            return self.db.scalar(stmt) is not None
        except SQLAlchemyError as e:
            raise self._unavailable(e) from e
