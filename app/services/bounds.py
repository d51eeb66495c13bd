import math
from typing import Iterable, Optional

from app.schemas.polygon import Bounds, Coordinate


def _finite(v) -> Optional[float]:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def compute_bounds(coords: Optional[Iterable[Coordinate]]) -> Optional[Bounds]:
    """
    Axis-aligned box around the vertices: northeast = (max lat, max lng),
    southwest = (min lat, min lng). None for an empty input or when no vertex
    has finite lat/lng.
    """
    if not coords:
        return None

    min_lat = max_lat = min_lng = max_lng = None
    for c in coords:
        lat, lng = _finite(c.lat), _finite(c.lng)
        if lat is None or lng is None:
            continue
        if min_lat is None:
            min_lat = max_lat = lat
            min_lng = max_lng = lng
            continue
        min_lat, max_lat = min(min_lat, lat), max(max_lat, lat)
        min_lng, max_lng = min(min_lng, lng), max(max_lng, lng)

    if min_lat is None:
        return None
    return Bounds(
        northeast=Coordinate(lat=max_lat, lng=max_lng),
        southwest=Coordinate(lat=min_lat, lng=min_lng),
    )
