"""Shapefile route reader with CRS detection and reprojection to WGS84."""

from __future__ import annotations

import logging
from pathlib import Path

import shapefile
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from .models import Coordinate

logger = logging.getLogger(__name__)

LINE_SHAPE_TYPES = ("POLYLINE", "POLYLINEZ", "POLYLINEM", "ARC", "ARCZ", "ARCM")


def detect_crs(prj_path: Path) -> CRS | None:
    """Parse the CRS from a ``.prj`` file; ``None`` if missing or unreadable."""
    if not prj_path.exists():
        return None
    wkt = prj_path.read_text()
    if not wkt.strip():
        return None
    try:
        return CRS.from_wkt(wkt)
    except CRSError:
        logger.warning("Ignoring unparseable projection file %s", prj_path)
        return None


def read_route_shapefile(shp_path: str | Path) -> list[Coordinate]:
    """Read the vertices of a line shapefile as WGS84 coordinates.

    Every part of every record is appended in file order. Projected data is
    transformed to lon/lat using the companion ``.prj``; without one the
    coordinates are assumed to already be lon/lat.

    Raises:
        ValueError: for point or polygon shapefiles.
    """
    shp_path = Path(shp_path)
    xy: list[tuple[float, float]] = []
    with shapefile.Reader(str(shp_path)) as sf:
        shape_type = sf.shapeTypeName.upper()
        if shape_type not in LINE_SHAPE_TYPES:
            raise ValueError(f"Unsupported shape type: {sf.shapeTypeName}. Only line shapes describe a route.")
        for shape in sf.shapes():
            xy.extend((x, y) for x, y in shape.points)

    crs = detect_crs(shp_path.with_suffix(".prj"))
    if xy and crs is not None and not crs.is_geographic:
        transformer = Transformer.from_crs(crs, "EPSG:4326", always_xy=True)
        lons, lats = transformer.transform([p[0] for p in xy], [p[1] for p in xy])
        xy = list(zip(lons, lats))

    logger.debug("Read %d route vertices from %s", len(xy), shp_path.name)
    return [Coordinate(lat=y, lng=x) for x, y in xy]
