"""Distance markers and nearest-sample lookup along route polylines."""

from .config import Settings, load_settings
from .geocoding import NominatimGeocoder, PhotonGeocoder, select_geocoder
from .heightgraph import STEEPNESS_COLORS, build_heightgraph_data, steepness_class
from .kml_reader import read_route_kmz, read_route_kmz_with_altitude
from .locator import find_nearest_by_distance, find_nearest_in_profile, samples_from_geometry
from .markers import cumulative_distances, place_markers, route_length
from .models import (
    Coordinate,
    DistanceMarker,
    DistanceSample,
    GeocodeResult,
    LineStringGeometry,
    ProfileCollection,
    ProfileFeature,
)
from .reader import read_route_shapefile
from .shape import decode_shape, parse_directions_geometry, to_height_request

__all__ = [
    "Coordinate",
    "DistanceMarker",
    "DistanceSample",
    "GeocodeResult",
    "LineStringGeometry",
    "NominatimGeocoder",
    "PhotonGeocoder",
    "ProfileCollection",
    "ProfileFeature",
    "STEEPNESS_COLORS",
    "Settings",
    "build_heightgraph_data",
    "cumulative_distances",
    "decode_shape",
    "find_nearest_by_distance",
    "find_nearest_in_profile",
    "load_settings",
    "parse_directions_geometry",
    "place_markers",
    "read_route_kmz",
    "read_route_kmz_with_altitude",
    "read_route_shapefile",
    "route_length",
    "samples_from_geometry",
    "select_geocoder",
    "steepness_class",
    "to_height_request",
]
