#!/usr/bin/env python3
"""
Point-in-polygon tests for geo-fences.

The test is planar: latitude and longitude are treated as Cartesian
coordinates. That is fine for fences spanning a city or a region, but
polygons that cross the antimeridian or enclose a pole give wrong answers.
"""

from typing import Any, Dict, List
import logging

from shapely import wkt
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from .geometry import LatLng, Point, Polygon

logger = logging.getLogger(__name__)


def within(point: LatLng, polygon: Polygon) -> bool:
    """
    Check whether the coordinate falls within the polygon.

    Uses the crossing-number rule with half-open edges: an edge is counted when
    exactly one of its ends lies strictly north of the point and the edge
    crosses the point's latitude strictly east of it. Points on the southern or
    western boundary of a fence therefore count as inside, points on the
    northern or eastern boundary as outside.

    Args:
        point: The coordinate to test
        polygon: Vertices of the fence in order; closing it is optional

    Returns:
        True if the point lies inside the polygon. Always False for fewer than
        three vertices.
    """
    if len(polygon) < 3:
        return False

    lat, lon = point.latitude, point.longitude
    inside = False
    prev = polygon[-1]
    for curr in polygon:
        if (curr.latitude > lat) != (prev.latitude > lat):
            crossing = curr.longitude + (lat - curr.latitude) * (
                prev.longitude - curr.longitude
            ) / (prev.latitude - curr.latitude)
            if lon < crossing:
                inside = not inside
        prev = curr
    return inside


def _exterior_points(geometry: BaseGeometry) -> List[Point]:
    """Convert the exterior ring of a Shapely polygon to Points."""
    if geometry.geom_type != "Polygon":
        raise ValueError(f"Expected a Polygon geometry, got {geometry.geom_type}")

    # Shapely rings are closed and ordered (x=longitude, y=latitude)
    coords = list(geometry.exterior.coords)[:-1]
    logger.debug(f"Parsed polygon with {len(coords)} vertices")
    return [Point(latitude=y, longitude=x) for x, y, *_ in coords]


def polygon_from_wkt(text: str) -> List[Point]:
    """
    Parse a WKT polygon into a list of Points.

    Args:
        text: WKT such as "POLYGON ((lon lat, lon lat, ...))"

    Returns:
        The exterior ring without its closing duplicate. Holes are ignored.

    Raises:
        ValueError: If the text is not valid WKT or not a polygon
    """
    try:
        geometry = wkt.loads(text)
    except Exception as e:
        raise ValueError(f"Invalid WKT polygon: {e}") from e
    return _exterior_points(geometry)


def polygon_from_geojson(obj: Dict[str, Any]) -> List[Point]:
    """
    Parse a GeoJSON polygon geometry (or a Feature wrapping one) into Points.

    Raises:
        ValueError: If the object is not a GeoJSON polygon
    """
    if isinstance(obj, dict) and obj.get("type") == "Feature":
        obj = obj.get("geometry")
    try:
        geometry = shape(obj)
    except Exception as e:
        raise ValueError(f"Invalid GeoJSON polygon: {e}") from e
    return _exterior_points(geometry)
