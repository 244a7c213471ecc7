"""Geographic ⇄ local plate coordinates.

Local coordinates are millimetres on the print plate, x = east and
y = north, relative to the map centre.  The projection is the same
equirectangular approximation used for picking the map area: a fixed
111320 m per degree of latitude, with longitude shrunk by the cosine of
the centre latitude.
"""

import math

from .constants import METRES_PER_DEGREE
from .models import LocalPoint


def _metres_per_degree_lng(center_lat: float) -> float:
    return METRES_PER_DEGREE * math.cos(math.radians(center_lat))


def lat_lng_to_local(lat: float, lng: float, center_lat: float,
                     center_lng: float, scale_factor: float) -> LocalPoint:
    """Convert a lat/lng to plate millimetres around ``(center_lat, center_lng)``.

    ``scale_factor`` is millimetres of plate per metre on the ground.
    """
    x_metres = (lng - center_lng) * _metres_per_degree_lng(center_lat)
    y_metres = (lat - center_lat) * METRES_PER_DEGREE
    return LocalPoint(x_metres * scale_factor, y_metres * scale_factor)


def local_to_lat_lng(x: float, y: float, center_lat: float,
                     center_lng: float, scale_factor: float) -> tuple:
    """Inverse of :func:`lat_lng_to_local`. Returns ``(lat, lng)``."""
    x_metres = x / scale_factor
    y_metres = y / scale_factor
    lat = center_lat + y_metres / METRES_PER_DEGREE
    lng = center_lng + x_metres / _metres_per_degree_lng(center_lat)
    return lat, lng


def compute_scale_factor(radius_metres: float, plate_width_mm: float) -> float:
    """Scale that maps the map diameter (2 × radius) onto the plate width."""
    return plate_width_mm / (2 * radius_metres)


def bbox_from_center(lat: float, lng: float, radius_metres: float) -> dict:
    """Bounding box (south, west, north, east) of a radius around a point."""
    lat_delta = radius_metres / METRES_PER_DEGREE
    lng_delta = radius_metres / _metres_per_degree_lng(lat)
    return {
        'south': lat - lat_delta,
        'west': lng - lng_delta,
        'north': lat + lat_delta,
        'east': lng + lng_delta,
    }
