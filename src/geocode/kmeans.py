#!/usr/bin/env python3
"""
K-means clustering of geographic coordinates.

Points are assigned by geodesic distance and centroids are updated with the
spherical mean, so clusters behave on the ellipsoid rather than on a flat
latitude/longitude grid. The clusterer is generic: callers pass their own
objects and get the very same objects back in each cluster.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, Sequence
import logging
import math
import random

from .spherical import centroid
from .geodesic import distance
from .geometry import P, Point

logger = logging.getLogger(__name__)


class EmptyClusterPolicy(Enum):
    """What to do with a centroid that attracted no points in a round."""

    KEEP = "keep"  # leave the centroid where it was
    RESEED = "reseed"  # move it onto a randomly drawn input point

    def __str__(self) -> str:
        return self.value


@dataclass
class Cluster(Generic[P]):
    """A centroid and the input points closest to it.

    ``points`` holds references to the caller's own objects, in input order.
    """

    centroid: Point
    points: List[P] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)


def _seed_centroids(
    points: Sequence[P], num_clusters: int, rng: random.Random
) -> List[Point]:
    """Draw initial centroids from the input, with replacement."""
    n = len(points)
    seeds = []
    for _ in range(num_clusters):
        p = points[rng.randrange(n)]
        seeds.append(Point(latitude=p.latitude, longitude=p.longitude))
    return seeds


def _nearest_centroid(point: P, centroids: List[Point]) -> int:
    """Index of the first centroid at minimum geodesic distance from point."""
    nearest = 0
    min_dist = math.inf
    for i, c in enumerate(centroids):
        dist = distance(c, point).distance
        if dist < min_dist:
            min_dist = dist
            nearest = i
    return nearest


def _assign(points: Sequence[P], centroids: List[Point]) -> List[List[P]]:
    """Group the points by their nearest centroid."""
    members: List[List[P]] = [[] for _ in centroids]
    for p in points:
        members[_nearest_centroid(p, centroids)].append(p)
    return members


def cluster(
    points: Sequence[P],
    rounds: int,
    num_clusters: int,
    rng: Optional[random.Random] = None,
    tolerance: Optional[float] = None,
    empty_policy: EmptyClusterPolicy = EmptyClusterPolicy.KEEP,
) -> List[Cluster[P]]:
    """
    Apply k-means clustering to group the coordinates around num_clusters centroids.

    Args:
        points: The coordinates to cluster; any objects with latitude and longitude
        rounds: Number of assignment/update rounds to run
        num_clusters: Number of clusters; clamped to the number of points
        rng: Random source used to pick the initial centroids. Anything with a
             random.Random compatible randrange() works. A fresh generator is
             created when omitted.
        tolerance: Optional early stop: once no centroid moves more than this
                   many meters in a round, the remaining rounds are skipped
        empty_policy: How to treat a centroid that attracted no points

    Returns:
        Exactly min(num_clusters, len(points)) clusters, sorted in descending
        order of member count. Clusters of equal size keep their centroid order.
        Which points end up together depends on the seeds: an isolated outlier
        gets a cluster of its own only when a seed lands close enough to it.

    Raises:
        ValueError: If rounds is negative or num_clusters is less than one
    """
    if rounds < 0:
        raise ValueError(f"Number of rounds must not be negative, got {rounds}")
    if num_clusters < 1:
        raise ValueError(f"Number of clusters must be at least 1, got {num_clusters}")

    if not points:
        return []
    if len(points) == 1:
        only = points[0]
        return [
            Cluster(
                centroid=Point(latitude=only.latitude, longitude=only.longitude),
                points=[only],
            )
        ]

    if rng is None:
        rng = random.Random()

    num_clusters = min(num_clusters, len(points))
    centroids = _seed_centroids(points, num_clusters, rng)
    members = _assign(points, centroids)

    for i in range(rounds):
        if i > 0:
            members = _assign(points, centroids)

        # Update; members stay those the new centroids were computed from
        moved = 0.0
        for idx, group in enumerate(members):
            if group:
                updated = centroid(group)
            elif empty_policy == EmptyClusterPolicy.RESEED:
                seed = points[rng.randrange(len(points))]
                updated = Point(latitude=seed.latitude, longitude=seed.longitude)
                logger.debug(f"Round {i}: reseeded empty cluster {idx}")
            else:
                continue
            moved = max(moved, distance(centroids[idx], updated).distance)
            centroids[idx] = updated

        logger.debug(f"Round {i}: largest centroid shift {moved:.3f} m")
        if tolerance is not None and moved <= tolerance:
            logger.debug(f"Centroids settled after {i + 1} of {rounds} rounds")
            break

    clusters = [
        Cluster(centroid=c, points=group) for c, group in zip(centroids, members)
    ]
    clusters.sort(key=len, reverse=True)

    logger.debug(
        f"Clustered {len(points)} points into {len(clusters)} clusters "
        f"of sizes {[len(c) for c in clusters]}"
    )
    return clusters
