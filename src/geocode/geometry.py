#!/usr/bin/env python3
"""
Coordinate value types shared by the geodesic, centroid, clustering and
polygon modules.
"""

from typing import NamedTuple, Protocol, Sequence, TypeVar


class LatLng(Protocol):
    """Anything exposing a latitude and longitude in decimal degrees."""

    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


P = TypeVar("P", bound=LatLng)


class Point(NamedTuple):
    """Represents a geographic coordinate with an optional accuracy value."""

    latitude: float = 0.0
    longitude: float = 0.0
    accuracy: float = 0.0


class Distance(NamedTuple):
    """Geodesic distance between two coordinates."""

    distance: float  # meters
    azimuth: float  # radians, initial bearing; 0.0 when unknown


# Closed ring of coordinates; the closing duplicate vertex is optional.
Polygon = Sequence[LatLng]
