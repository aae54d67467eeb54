import pytest
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from geocode.geometry import Point
from geocode.polygon import polygon_from_geojson, polygon_from_wkt, within

SQUARE = [Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)]

# An L: the north-east quarter (latitude 5-10, longitude 5-10) is cut out
L_SHAPE = [
    Point(0, 0),
    Point(0, 10),
    Point(5, 10),
    Point(5, 5),
    Point(10, 5),
    Point(10, 0),
]

TRIANGLE = [Point(0, 0), Point(10, 5), Point(0, 10)]


def test_point_inside_square():
    assert within(Point(5, 5), SQUARE)
    assert within(Point(0.5, 9.5), SQUARE)


def test_point_outside_square():
    assert not within(Point(15, 5), SQUARE)
    assert not within(Point(5, -1), SQUARE)
    assert not within(Point(-0.001, 5), SQUARE)


def test_concave_polygon():
    assert within(Point(7, 2), L_SHAPE)
    assert within(Point(2, 7), L_SHAPE)
    assert not within(Point(7, 7), L_SHAPE)


def test_triangle():
    assert within(Point(3, 5), TRIANGLE)
    assert not within(Point(8, 1), TRIANGLE)
    assert not within(Point(8, 9), TRIANGLE)


@pytest.mark.parametrize("point", [Point(5, 0), Point(0, 5), Point(0, 0)])
def test_southern_and_western_boundary_is_inside(point):
    assert within(point, SQUARE)


@pytest.mark.parametrize("point", [Point(5, 10), Point(10, 5), Point(10, 10)])
def test_northern_and_eastern_boundary_is_outside(point):
    assert not within(point, SQUARE)


def test_degenerate_polygon_contains_nothing():
    assert not within(Point(0, 0), [])
    assert not within(Point(0, 0), [Point(0, 0)])
    assert not within(Point(0, 5), [Point(0, 0), Point(0, 10)])


def test_closed_ring_gives_same_result():
    closed = SQUARE + [SQUARE[0]]
    for point in [Point(5, 5), Point(15, 5), Point(5, 0), Point(10, 5)]:
        assert within(point, closed) == within(point, SQUARE)


def test_accepts_any_point_like_vertices():
    class Vertex:
        def __init__(self, latitude, longitude):
            self.latitude = latitude
            self.longitude = longitude

    fence = [Vertex(p.latitude, p.longitude) for p in SQUARE]
    assert within(Vertex(5, 5), fence)


def test_agrees_with_shapely_off_the_boundary():
    # Shapely works in (x=longitude, y=latitude)
    reference = ShapelyPolygon([(p.longitude, p.latitude) for p in L_SHAPE])
    for i in range(-2, 13):
        for j in range(-2, 13):
            lat, lon = i + 0.5, j + 0.5
            expected = reference.contains(ShapelyPoint(lon, lat))
            assert within(Point(lat, lon), L_SHAPE) == expected, (lat, lon)


def test_polygon_from_wkt():
    polygon = polygon_from_wkt(
        "POLYGON ((-87.7 41.8, -87.6 41.8, -87.6 41.9, -87.7 41.9, -87.7 41.8))"
    )
    assert polygon == [
        Point(41.8, -87.7),
        Point(41.8, -87.6),
        Point(41.9, -87.6),
        Point(41.9, -87.7),
    ]
    assert within(Point(41.85, -87.65), polygon)
    assert not within(Point(41.95, -87.65), polygon)


def test_polygon_from_wkt_rejects_bad_input():
    with pytest.raises(ValueError):
        polygon_from_wkt("not a polygon")
    with pytest.raises(ValueError, match="Expected a Polygon"):
        polygon_from_wkt("POINT (1 2)")


def test_polygon_from_geojson():
    geometry = {
        "type": "Polygon",
        "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]],
    }
    expected = [Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)]
    assert polygon_from_geojson(geometry) == expected
    feature = {"type": "Feature", "properties": {}, "geometry": geometry}
    assert polygon_from_geojson(feature) == expected


def test_polygon_from_geojson_rejects_bad_input():
    with pytest.raises(ValueError, match="Expected a Polygon"):
        polygon_from_geojson({"type": "Point", "coordinates": [1, 2]})
    with pytest.raises(ValueError):
        polygon_from_geojson({"type": "Polygon"})
