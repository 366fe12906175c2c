"""KMZ/KML route reader: returns the LineString vertices of a route.

KMZ is a ZIP archive containing KML. KML coordinates are always WGS84
in ``longitude,latitude[,altitude]`` order.
"""

from __future__ import annotations

import io
import logging
import zipfile
import xml.etree.ElementTree as ET
from typing import BinaryIO

from .models import Coordinate

logger = logging.getLogger(__name__)

KML_NS = "{http://www.opengis.net/kml/2.2}"


def read_route_kmz(file: str | bytes | BinaryIO) -> list[Coordinate]:
    """Read a KMZ (or plain KML) route and return its vertices in order."""
    route, _ = read_route_kmz_with_altitude(file)
    return route


def read_route_kmz_with_altitude(
    file: str | bytes | BinaryIO,
) -> tuple[list[Coordinate], list[float | None]]:
    """Like :func:`read_route_kmz`, also returning each vertex's altitude (or ``None``).

    Raises:
        ValueError: if the document has no LineString, or a KMZ has no KML entry.
    """
    data = _read_bytes(file)

    if _is_zip(data):
        kml_text = _extract_kml_from_kmz(data)
    else:
        kml_text = data.decode("utf-8", errors="replace")

    root = ET.fromstring(kml_text)
    route: list[Coordinate] = []
    altitudes: list[float | None] = []
    for elem in root.iter(f"{KML_NS}LineString"):
        coords_elem = elem.find(f"{KML_NS}coordinates")
        if coords_elem is None or not coords_elem.text:
            continue
        for coordinate, altitude in _parse_coordinates_text(coords_elem.text):
            route.append(coordinate)
            altitudes.append(altitude)

    if not route:
        raise ValueError("No LineString route found in KML document")

    logger.debug("Read %d route vertices from KML", len(route))
    return route, altitudes


def _read_bytes(file: str | bytes | BinaryIO) -> bytes:
    if isinstance(file, bytes):
        return file
    if isinstance(file, str):
        with open(file, "rb") as f:
            return f.read()
    return file.read()


def _is_zip(data: bytes) -> bool:
    return data[:4] == b"PK\x03\x04"


def _extract_kml_from_kmz(data: bytes) -> str:
    """Return ``doc.kml`` from the archive, or else its first ``.kml`` entry."""
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        names = [n for n in zf.namelist() if n.lower().endswith(".kml")]
        if not names:
            raise ValueError("No .kml file found in KMZ archive")
        preferred = [n for n in names if n.lower() == "doc.kml"]
        return zf.read((preferred or names)[0]).decode("utf-8", errors="replace")


def _parse_coordinates_text(text: str) -> list[tuple[Coordinate, float | None]]:
    """Parse ``lon,lat[,alt] lon,lat[,alt] ...``; malformed tuples are skipped."""
    parsed = []
    for token in text.split():
        parts = token.split(",")
        if len(parts) < 2:
            continue
        altitude = float(parts[2]) if len(parts) >= 3 and parts[2] else None
        parsed.append((Coordinate(lat=float(parts[1]), lng=float(parts[0])), altitude))
    return parsed
