"""Great-circle primitives over ``(lng, lat)`` points.

All three operations go through a :class:`pyproj.Geod`. The default model is a
sphere with the mean Earth radius, which is what web-mapping geometry code
commonly assumes; any pyproj ellipsoid name can be swapped in with
:func:`make_geod`.
"""

from __future__ import annotations

from pyproj import Geod

MEAN_EARTH_RADIUS_M = 6371008.8

LngLat = tuple[float, float]


def make_geod(ellps: str | None = None) -> Geod:
    """Return a ``Geod`` for the named ellipsoid, or the mean-radius sphere."""
    if ellps is None:
        return Geod(a=MEAN_EARTH_RADIUS_M, f=0.0)
    return Geod(ellps=ellps)


_DEFAULT_GEOD = make_geod()


def distance(a: LngLat, b: LngLat, geod: Geod | None = None) -> float:
    """Geodesic distance in meters between two ``(lng, lat)`` points."""
    g = geod if geod is not None else _DEFAULT_GEOD
    _, _, dist = g.inv(a[0], a[1], b[0], b[1])
    return float(dist)


def bearing(a: LngLat, b: LngLat, geod: Geod | None = None) -> float:
    """Initial bearing from ``a`` towards ``b`` in degrees, in (-180, 180]."""
    g = geod if geod is not None else _DEFAULT_GEOD
    az, _, _ = g.inv(a[0], a[1], b[0], b[1])
    return float(az)


def destination(origin: LngLat, distance_m: float, bearing_deg: float, geod: Geod | None = None) -> LngLat:
    """Point reached from ``origin`` after ``distance_m`` meters along ``bearing_deg``."""
    g = geod if geod is not None else _DEFAULT_GEOD
    lng, lat, _ = g.fwd(origin[0], origin[1], bearing_deg, distance_m)
    return float(lng), float(lat)
