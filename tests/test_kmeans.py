import random
from dataclasses import dataclass
from unittest.mock import patch

import pytest
from geocode.geometry import Point
from geocode.kmeans import Cluster, EmptyClusterPolicy, cluster
import geocode.kmeans


class FixedIndices:
    """Stand-in random source handing out predetermined indices."""

    def __init__(self, *indices):
        self.indices = list(indices)

    def randrange(self, n):
        index = self.indices.pop(0)
        assert 0 <= index < n
        return index


@dataclass(frozen=True)
class Place:
    latitude: float
    longitude: float
    text: str


DENSE = [
    (41.9461021, -87.6977005),
    (41.9215927, -87.6953278),
    (41.9121971, -87.6807251),
    (41.8827209, -87.6352386),
    (41.8839951, -87.6347198),
    (41.8830872, -87.6359787),
    (41.883255, -87.6354523),
    (41.8830147, -87.6354752),
    (41.881218, -87.6351395),
    (41.8841934, -87.6364594),
    (41.8837547, -87.6352844),
    (41.8826141, -87.6353912),
    (41.8827934, -87.6357727),
    (41.8830872, -87.6352005),
    (41.8839989, -87.632843),
    (41.8855286, -87.6347198),
    (41.8848267, -87.6368179),
    (41.943203, -87.7009201),
]

# Chicago area points plus one far outlier on Hudson Bay
CHICAGO = [Point(lat, lon) for lat, lon in DENSE] + [
    Point(41.8781136, -87.6297982),
    Point(41.8916, -87.6079),
]
OUTLIER = Point(63.8066559, -83.6791916)


def test_cluster_empty_input():
    assert cluster([], 32, 3) == []


def test_cluster_single_point():
    p = Place(41.8827209, -87.6352386, "only")
    clusters = cluster([p], 32, 3)
    assert len(clusters) == 1
    assert clusters[0].centroid.latitude == p.latitude
    assert clusters[0].centroid.longitude == p.longitude
    assert len(clusters[0].points) == 1
    assert clusters[0].points[0] is p


def test_cluster_chicago_with_outlier():
    # Seeds are random, so only seed-independent properties hold here; whether
    # the outlier ends up alone depends on the draw (see the fixed-seed test below)
    points = CHICAGO + [OUTLIER]
    clusters = cluster(points, 32, 3)
    assert len(clusters) > 1
    assert len(clusters[0].points) > 2
    assert sum(len(c) for c in clusters) == len(points)


def test_cluster_isolates_outlier():
    points = CHICAGO + [OUTLIER]
    # Seeds: north side, downtown, and the outlier
    clusters = cluster(points, 32, 3, rng=FixedIndices(0, 3, len(points) - 1))

    assert len(clusters) == 3
    assert len(clusters[0].points) > 2
    assert len(clusters[-1].points) == 1
    assert clusters[-1].points[0] is OUTLIER
    assert clusters[-1].centroid == Point(OUTLIER.latitude, OUTLIER.longitude)


def test_cluster_custom_type_keeps_payload():
    points = [
        Place(63.8066559, -83.6791916, "Far"),
        *[Place(lat, lon, "Dense") for lat, lon in DENSE[:3]],
        Place(60.244442, -149.6915436, "Far"),
        *[Place(lat, lon, "Dense") for lat, lon in DENSE[3:]],
    ]
    clusters = cluster(points, 32, 3, rng=FixedIndices(1, 0, 4))

    assert len(clusters) > 1
    assert len(clusters[0].points) > 2
    for p in clusters[0].points:
        assert p.text == "Dense"
    for p in clusters[-1].points:
        assert p.text == "Far"

    # Members are the caller's objects, not copies
    ids = {id(p) for c in clusters for p in c.points}
    assert ids == {id(p) for p in points}


def test_cluster_members_keep_input_order():
    points = CHICAGO + [OUTLIER]
    clusters = cluster(points, 8, 2, rng=random.Random(7))
    for c in clusters:
        positions = [points.index(p) for p in c.points]
        assert positions == sorted(positions)


def test_cluster_count_is_clamped_to_point_count():
    points = [Point(41.88, -87.63), Point(41.95, -87.70), Point(42.5, -88.0)]
    clusters = cluster(points, 4, 10, rng=random.Random(1))
    assert len(clusters) == 3
    assert sum(len(c) for c in clusters) == 3


def test_cluster_sorted_by_density():
    clusters = cluster(CHICAGO + [OUTLIER], 16, 3, rng=random.Random(42))
    sizes = [len(c) for c in clusters]
    assert sizes == sorted(sizes, reverse=True)


def test_cluster_with_seeded_rng_is_reproducible():
    first = cluster(CHICAGO + [OUTLIER], 16, 3, rng=random.Random(1234))
    second = cluster(CHICAGO + [OUTLIER], 16, 3, rng=random.Random(1234))
    assert [c.centroid for c in first] == [c.centroid for c in second]
    assert [c.points for c in first] == [c.points for c in second]


def test_cluster_zero_rounds_assigns_to_seeds():
    points = [Point(41.88, -87.63), Point(41.881, -87.631), Point(45.0, -80.0)]
    clusters = cluster(points, 0, 2, rng=FixedIndices(0, 2))

    assert [len(c) for c in clusters] == [2, 1]
    assert clusters[0].centroid == Point(41.88, -87.63)
    assert clusters[0].points == points[:2]
    assert clusters[1].centroid == Point(45.0, -80.0)
    assert clusters[1].points == points[2:]


def test_empty_cluster_keeps_its_centroid():
    points = [Point(41.88, -87.63), Point(41.881, -87.631), Point(45.0, -80.0)]
    # Both seeds on the first point: every tie goes to cluster 0
    clusters = cluster(points, 1, 2, rng=FixedIndices(0, 0))

    assert [len(c) for c in clusters] == [3, 0]
    assert clusters[1].centroid == Point(41.88, -87.63)


def test_empty_cluster_recovers_in_later_rounds():
    points = [Point(41.88, -87.63), Point(41.881, -87.631), Point(45.0, -80.0)]
    clusters = cluster(points, 2, 2, rng=FixedIndices(0, 0))

    assert [len(c) for c in clusters] == [2, 1]
    assert clusters[0].points == points[:2]
    assert clusters[1].points == points[2:]


def test_empty_cluster_reseed_policy():
    points = [Point(41.88, -87.63), Point(41.881, -87.631), Point(45.0, -80.0)]
    clusters = cluster(
        points,
        1,
        2,
        rng=FixedIndices(0, 0, 2),
        empty_policy=EmptyClusterPolicy.RESEED,
    )

    assert [len(c) for c in clusters] == [3, 0]
    assert clusters[1].centroid == Point(45.0, -80.0)


def test_cluster_stops_early_within_tolerance():
    points = CHICAGO + [OUTLIER]
    with patch.object(
        geocode.kmeans, "_assign", wraps=geocode.kmeans._assign
    ) as assign:
        clusters = cluster(
            points, 1000, 2, rng=FixedIndices(3, len(points) - 1), tolerance=0.0
        )

    # Seed assignment plus the round that confirmed nothing moved
    assert assign.call_count == 2
    assert clusters[-1].points == [OUTLIER]


def test_cluster_rejects_invalid_arguments():
    with pytest.raises(ValueError):
        cluster(CHICAGO, 32, 0)
    with pytest.raises(ValueError):
        cluster(CHICAGO, -1, 3)


def test_cluster_len():
    c = Cluster(centroid=Point(), points=[Point(1.0, 2.0), Point(3.0, 4.0)])
    assert len(c) == 2
