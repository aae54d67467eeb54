#!/usr/bin/env python3
"""
Geocode - geodesic distance, centroids, clustering and geo-fences for
geographic coordinates.

This package provides the core geometric functions together with Open
Location Code conversion, positionstack address lookups and an interactive
shell.
"""
import importlib.metadata

__version__ = importlib.metadata.version("geocode")

# Import main functions for public API
from .geometry import Distance, LatLng, Point, Polygon
from .geodesic import distance, haversine_distance
from .spherical import centroid
from .kmeans import Cluster, EmptyClusterPolicy, cluster
from .polygon import within

__all__ = [
    "Cluster",
    "Distance",
    "EmptyClusterPolicy",
    "LatLng",
    "Point",
    "Polygon",
    "centroid",
    "cluster",
    "distance",
    "haversine_distance",
    "within",
]
