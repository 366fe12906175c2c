"""Decoding of routing engine route shapes (encoded polylines)."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import polyline as polyline_codec

from .models import Coordinate

logger = logging.getLogger(__name__)

# Valhalla encodes shapes with six decimal digits
SHAPE_PRECISION = 6


def decode_shape(encoded: str | None, precision: int = SHAPE_PRECISION) -> list[Coordinate]:
    """Decode an encoded polyline into coordinates. Empty or undecodable input gives ``[]``."""
    if not encoded or not isinstance(encoded, str):
        return []
    try:
        pairs = polyline_codec.decode(encoded, precision)
    except (IndexError, ValueError, TypeError) as exc:
        logger.warning("Could not decode shape of length %d: %s", len(encoded), exc)
        return []
    return [Coordinate(lat=lat, lng=lng) for lat, lng in pairs]


def parse_directions_geometry(trip_response: dict[str, Any]) -> list[Coordinate]:
    """Concatenate the decoded shapes of every leg of a directions response."""
    coordinates: list[Coordinate] = []
    for leg in trip_response["trip"]["legs"]:
        coordinates.extend(decode_shape(leg.get("shape")))
    return coordinates


def to_height_request(route: Sequence[Coordinate]) -> dict[str, Any]:
    """Body for the routing engine's height service for the given route."""
    return {
        "range": len(route) > 1,
        "shape": [{"lat": c.lat, "lon": c.lng} for c in route],
        "id": "valhalla_height",
    }
