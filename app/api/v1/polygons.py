from __future__ import annotations
import json
from typing import Annotated, Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from starlette.datastructures import UploadFile

from app.core.config import Settings
from app.core.deps import get_settings, get_store
from app.core.exceptions import NotFound, PayloadTooLarge, ValidationError
from app.schemas.polygon import ImageUpload, PolygonCreate, PolygonCreated, StoredPolygon
from app.services.bounds import compute_bounds
from app.services.coordinates import parse_coordinates_field
from app.services.polygon_store import MAX_LIST_LIMIT, PolygonStore
from app.utils.strings import norm_str, norm_text

router = APIRouter(prefix="/polygons", tags=["polygons"])

DEFAULT_IMAGE_TYPE = "application/octet-stream"


# --- Helpers ---

def _mb(n: int) -> str:
    return f"{n / (1024 * 1024):g} MB"


async def _read_submission(request: Request, settings: Settings) -> tuple[dict[str, Any], Optional[UploadFile]]:
    """
    Accept multipart/urlencoded forms (optional `image` file) or a JSON object.
    Returns the plain fields and the uploaded image, if any.
    """
    content_type = (request.headers.get("content-type") or "").lower()

    if content_type.startswith("application/json"):
        raw = await request.body()
        if len(raw) > settings.max_json_bytes:
            raise PayloadTooLarge(f"request body exceeds {_mb(settings.max_json_bytes)} limit")
        try:
            body = json.loads(raw) if raw else {}
        except ValueError:
            raise ValidationError("request body must be valid JSON")
        if not isinstance(body, dict):
            raise ValidationError("request body must be a JSON object")
        return body, None

    form = await request.form()
    fields = {k: v for k, v in form.items() if not isinstance(v, UploadFile)}
    image = form.get("image")
    if not isinstance(image, UploadFile):
        return fields, None
    # browsers send an empty, nameless part when no file was picked
    if not image.filename and not image.size:
        return fields, None
    return fields, image


async def _read_image(upload: UploadFile, max_bytes: int) -> ImageUpload:
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise PayloadTooLarge(f"image exceeds {_mb(max_bytes)} limit")
    return ImageUpload(
        data=data,
        content_type=upload.content_type or DEFAULT_IMAGE_TYPE,
        filename=upload.filename or "",
        size=len(data),
    )


# --- Endpoints ---

@router.post("", response_model=PolygonCreated, status_code=201)
async def create_polygon(
    request: Request,
    store: Annotated[PolygonStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    fields, upload = await _read_submission(request, settings)

    title = norm_str(fields.get("title"))
    if not title:
        raise ValidationError("title is required")

    coords = parse_coordinates_field(fields.get("coordinates"))
    image = await _read_image(upload, settings.max_image_bytes) if upload else None

    record = PolygonCreate(
        title=title,
        description=norm_text(fields.get("description")),
        coordinates=coords,
        bounds=compute_bounds(coords),
        image=image,
    )
    return await run_in_threadpool(store.create, record)


@router.get("", response_model=List[StoredPolygon])
def list_polygons(
    store: Annotated[PolygonStore, Depends(get_store)],
    limit: int = Query(MAX_LIST_LIMIT, ge=1),
):
    return store.list_recent(limit)


@router.get("/{polygon_id}", response_model=StoredPolygon)
def get_polygon(polygon_id: int, store: Annotated[PolygonStore, Depends(get_store)]):
    polygon = store.get_by_id(polygon_id)
    if not polygon:
        raise NotFound()
    return polygon


@router.get("/{polygon_id}/image", response_class=Response)
def get_polygon_image(polygon_id: int, store: Annotated[PolygonStore, Depends(get_store)]):
    image = store.get_image_by_id(polygon_id)
    if image is None:
        if not store.exists(polygon_id):
            raise NotFound()
        raise NotFound("Image not found")
    return Response(content=image.data, media_type=image.content_type or DEFAULT_IMAGE_TYPE)
