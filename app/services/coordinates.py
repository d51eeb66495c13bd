import json
import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from app.core.exceptions import InvalidCoordinate, ValidationError
from app.schemas.polygon import Coordinate

# ---------------- Raw input shapes ----------------
#
# Clients send vertices as {"lat", "lng"}, {"latitude", "longitude"} or [lat, lng].
# Each field is resolved on its own: a mapping may mix both spellings, and a
# key holding null falls through to the next spelling.


@dataclass(frozen=True)
class NamedPair:
    lat: Any
    lng: Any


@dataclass(frozen=True)
class AliasedNamedPair:
    latitude: Any
    longitude: Any


@dataclass(frozen=True)
class PositionalPair:
    first: Any
    second: Any


RawCoordinate = Union[NamedPair, AliasedNamedPair, PositionalPair]


def _first_present(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def classify(raw: Any) -> RawCoordinate:
    if isinstance(raw, Mapping):
        lat = raw.get("lat")
        lng = raw.get("lng")
        if lat is not None and lng is not None:
            return NamedPair(lat, lng)
        latitude = _first_present(lat, raw.get("latitude"))
        longitude = _first_present(lng, raw.get("longitude"))
        if latitude is not None or longitude is not None:
            return AliasedNamedPair(latitude, longitude)
        raise InvalidCoordinate()

    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        if len(raw) < 2:
            raise InvalidCoordinate()
        return PositionalPair(raw[0], raw[1])

    raise InvalidCoordinate()


def to_finite_float(value: Any) -> Optional[float]:
    """Numbers and numeric strings only; bools, blanks, NaN and infinities give None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        # no "1_0" digit grouping
        if not value or "_" in value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        out = float(value)
    except (ValueError, OverflowError):
        return None
    return out if math.isfinite(out) else None


def normalize_coordinate(raw: Any) -> Coordinate:
    shape = classify(raw)
    if isinstance(shape, NamedPair):
        lat, lng = shape.lat, shape.lng
    elif isinstance(shape, AliasedNamedPair):
        lat, lng = shape.latitude, shape.longitude
    else:
        lat, lng = shape.first, shape.second

    lat_f = to_finite_float(lat)
    lng_f = to_finite_float(lng)
    if lat_f is None or lng_f is None:
        raise InvalidCoordinate()
    return Coordinate(lat=lat_f, lng=lng_f)


def normalize_coordinates(items: Sequence[Any]) -> List[Coordinate]:
    return [normalize_coordinate(c) for c in items]


def parse_coordinates_field(value: Any) -> List[Coordinate]:
    """
    Turn the raw `coordinates` request field into canonical vertices.

    Accepts a JSON-encoded array (multipart/urlencoded forms) or an already
    decoded list (JSON bodies). Raises ValidationError with a short message
    for every rejected shape.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("coordinates are required (array of {lat,lng})")

    if isinstance(value, str):
        try:
            items = json.loads(value)
        except ValueError:
            raise ValidationError("coordinates must be a valid JSON array")
    elif isinstance(value, list):
        items = value
    else:
        raise ValidationError("coordinates must be array")

    if not isinstance(items, list) or len(items) < 1:
        raise ValidationError("coordinates must be a non-empty array")

    return normalize_coordinates(items)
