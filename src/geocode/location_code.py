#!/usr/bin/env python3
"""
Open Location Code ("plus code") conversion.

Encoding and validation are delegated to Google's openlocationcode package.
A decoded code is an area; it is reported as the centroid of that area with
the code length as its accuracy.
"""

import logging

from openlocationcode import openlocationcode as olc

from .spherical import centroid
from .geometry import Point

logger = logging.getLogger(__name__)

DEFAULT_CODE_LENGTH = 10


class LocationCodeError(ValueError):
    """Raised when a string cannot be decoded as an Open Location Code."""


def to_location_code(
    latitude: float, longitude: float, code_length: int = DEFAULT_CODE_LENGTH
) -> str:
    """
    Convert the geo-coordinate to its Open Location Code representation.

    Args:
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
        code_length: Number of significant digits (default 10, roughly 14 m)

    Returns:
        The Open Location Code, e.g. "8FVC2222+22"
    """
    return olc.encode(latitude, longitude, code_length)


def from_location_code(code: str) -> Point:
    """
    Decode an Open Location Code to a representative geo-coordinate.

    Args:
        code: A full Open Location Code

    Returns:
        Centroid of the decoded area, with the code length as accuracy

    Raises:
        LocationCodeError: If the code is invalid or a shortened code
    """
    code = code.strip()
    if not olc.isValid(code) or not olc.isFull(code):
        logger.debug(f"Rejected location code {code!r}")
        raise LocationCodeError("Invalid code")

    area = olc.decode(code)
    corners = [
        Point(latitude=area.latitudeLo, longitude=area.longitudeLo),
        Point(latitude=area.latitudeHi, longitude=area.longitudeHi),
    ]
    centre = centroid(corners)
    return Point(
        latitude=centre.latitude,
        longitude=centre.longitude,
        accuracy=float(area.codeLength),
    )
