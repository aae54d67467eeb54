#!/usr/bin/env python3
"""
Spherical mean of a set of coordinates.
"""

from typing import Iterable
import math

from .geometry import LatLng, Point


def centroid(points: Iterable[LatLng]) -> Point:
    """
    Compute the centroid of the given coordinates.

    Each coordinate is converted to a unit vector, the vectors are averaged and
    the mean vector is converted back to latitude and longitude. Unlike an
    arithmetic mean of the degrees this does not break for points on either
    side of the antimeridian.

    Args:
        points: Coordinates to average; any objects with latitude and longitude

    Returns:
        The centroid. Point() for no input; for a single input its own
        latitude and longitude, untouched by the trigonometry.
    """
    points = list(points)
    if not points:
        return Point()
    if len(points) == 1:
        return Point(latitude=points[0].latitude, longitude=points[0].longitude)

    x = y = z = 0.0
    for p in points:
        lat = math.radians(p.latitude)
        lon = math.radians(p.longitude)
        x += math.cos(lat) * math.cos(lon)
        y += math.cos(lat) * math.sin(lon)
        z += math.sin(lat)

    x /= len(points)
    y /= len(points)
    z /= len(points)

    lon = math.atan2(y, x)
    lat = math.atan2(z, math.hypot(x, y))

    return Point(latitude=math.degrees(lat), longitude=math.degrees(lon))
