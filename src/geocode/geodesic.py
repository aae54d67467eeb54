#!/usr/bin/env python3
"""
Geodesic distance and azimuth between two coordinates.

Uses Vincenty's inverse formula on the WGS-84 ellipsoid. Nearly antipodal
pairs can keep the iteration from converging; those fall back to the
haversine great-circle distance with an unknown (zero) azimuth.
"""

import logging
import math

from .geometry import Distance, LatLng

logger = logging.getLogger(__name__)

# WGS-84 ellipsoid
EQUATORIAL_RADIUS = 6378137.0
FLATTENING = 1 / 298.257223563
POLAR_RADIUS = (1 - FLATTENING) * EQUATORIAL_RADIUS

# Sphere used by the haversine fallback
HAVERSINE_RADIUS = 6372797.56085

CONVERGENCE_TOLERANCE = 1e-12
MAX_ITERATIONS = 1000


def haversine_distance(lhs: LatLng, rhs: LatLng) -> float:
    """
    Calculate the great-circle distance between two coordinates.

    Args:
        lhs: First coordinate
        rhs: Second coordinate

    Returns:
        Distance in meters
    """
    lat1, lon1 = math.radians(lhs.latitude), math.radians(lhs.longitude)
    lat2, lon2 = math.radians(rhs.latitude), math.radians(rhs.longitude)

    a = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    )
    return 2 * math.asin(min(1.0, math.sqrt(a))) * HAVERSINE_RADIUS


def distance(lhs: LatLng, rhs: LatLng) -> Distance:
    """
    Compute the geodesic distance between two coordinates using Vincenty's formula.

    Args:
        lhs: The point from which distance is computed
        rhs: The point to which distance is computed

    Returns:
        Distance with the length in meters and the initial bearing from lhs
        toward rhs in radians (clockwise from north, range -pi to pi). The
        azimuth is 0.0 for coincident points and when the haversine fallback
        was used.
    """
    u1 = math.atan((1 - FLATTENING) * math.tan(math.radians(lhs.latitude)))
    u2 = math.atan((1 - FLATTENING) * math.tan(math.radians(rhs.latitude)))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    lon = math.radians(rhs.longitude) - math.radians(lhs.longitude)
    lam = lon

    for _ in range(MAX_ITERATIONS):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.sqrt(
            (cos_u2 * sin_lam) ** 2
            + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0:
            # Coincident points
            return Distance(distance=0.0, azimuth=0.0)

        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha**2
        if cos_sq_alpha == 0:
            cos2sigma = 0.0  # equatorial line
        else:
            cos2sigma = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha
        c = FLATTENING / 16 * cos_sq_alpha * (4 + FLATTENING * (4 - 3 * cos_sq_alpha))

        lam_pre = lam
        lam = lon + (1 - c) * FLATTENING * sin_alpha * (
            sigma
            + c * sin_sigma * (cos2sigma + c * cos_sigma * (2 * cos2sigma**2 - 1))
        )
        if abs(lam - lam_pre) <= CONVERGENCE_TOLERANCE:
            break
    else:
        logger.debug(
            f"Vincenty did not converge after {MAX_ITERATIONS} iterations for "
            f"({lhs.latitude}, {lhs.longitude}) -> ({rhs.latitude}, {rhs.longitude}); "
            f"using haversine distance"
        )
        return Distance(distance=haversine_distance(lhs, rhs), azimuth=0.0)

    usq = cos_sq_alpha * (EQUATORIAL_RADIUS**2 - POLAR_RADIUS**2) / POLAR_RADIUS**2
    a = 1 + usq / 16384 * (4096 + usq * (-768 + usq * (320 - 175 * usq)))
    b = usq / 1024 * (256 + usq * (-128 + usq * (74 - 47 * usq)))
    delta_sigma = (
        b
        * sin_sigma
        * (
            cos2sigma
            + 0.25
            * b
            * (
                cos_sigma * (-1 + 2 * cos2sigma**2)
                - (1 / 6)
                * b
                * cos2sigma
                * (-3 + 4 * sin_sigma**2)
                * (-3 + 4 * cos2sigma**2)
            )
        )
    )

    # Recompute from the converged lambda
    sin_lam, cos_lam = math.sin(lam), math.cos(lam)
    azimuth = math.atan2(cos_u2 * sin_lam, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam)

    return Distance(
        distance=POLAR_RADIUS * a * (sigma - delta_sigma),
        azimuth=azimuth,
    )
