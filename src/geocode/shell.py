#!/usr/bin/env python3
"""
Interactive command shell over the geocode functions.

Each command takes a single argument, mostly JSON, and prints its result as
JSON. Input errors are reported in red and the shell keeps running.
"""

from typing import Any, Callable, List, Optional, TextIO
import cmd
import functools
import json
import logging

from gpxpy import gpx

from .address import AddressLookupError, forward_geocode, reverse_geocode
from .spherical import centroid
from .kmeans import Cluster, cluster
from .config import GeocodeConfig
from .geodesic import distance
from .file_utils import generate_output_filename, load_gpx_points
from .geometry import Point
from .location_code import LocationCodeError, from_location_code, to_location_code
from .polygon import polygon_from_geojson, polygon_from_wkt, within
from .visualization import create_cluster_map

logger = logging.getLogger(__name__)

RED = 1
BLUE = 4
NC = -1

BOLD = "\033[1m"
ITALIC = "\033[3m"
RESET = "\033[0m"


def set_colour(font: int) -> str:
    """ANSI escape selecting a foreground colour; NC resets."""
    return f"\033[{font + 30 if font >= 0 else 0}m"


HELP_TEXT = [
    ("address", "Geo-coordinates JSON array",
     "Look up the postal address for a geo-coordinate.  Eg. address [41.9215927, -87.695327]"),
    ("centroid", "Geo-coordinates JSON array",
     "Compute the centroid for geo-coordinates JSON arrays.  "
     "Eg. centroid [[41.9461021, -87.6977005], [41.9215927, -87.6953278], [41.8827209, -87.6352386]]"),
    ("cluster", "Geo-coordinates JSON array or GPX file",
     "Group geo-coordinates into clusters around centroids.  "
     "Eg. cluster [[41.9461021, -87.6977005], [41.8827209, -87.6352386], [63.8066559, -83.6791916]]"),
    ("coordinates", "Postal address",
     "Look up the geo-coordinates for the postal address.  "
     "Eg. coordinates 565 5 Ave, Manhattan, New York, NY, USA"),
    ("distance", "Geo-coordinates JSON array of 2 points",
     "Compute the geodesic distance between two points.  "
     "Eg. distance [[51.752021,-1.257726], [51.507351, -0.127758]]"),
    ("encode", "Geo-coordinates JSON array",
     "Encode the geo-coordinate as a open location code.  Eg. encode [47.0000625, 8.0000625]"),
    ("decode", "Open location code",
     "Decode the open location code as a geo-coordinate.  Eg. decode 8FVC2222+22"),
    ("within", "JSON object with point and polygon",
     "Check whether a point lies inside a polygon given as coordinates or WKT.  "
     'Eg. within {"point": [5, 5], "polygon": [[0, 0], [0, 10], [10, 10], [10, 0]]}'),
]


class CommandError(Exception):
    """Invalid command input; message is shown in red, detail after it."""

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message)
        self.message = message
        self.detail = detail


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_json(value: str) -> Any:
    """Parse a command argument as JSON."""
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise CommandError("JSON parse error: ", str(e))


def parse_point(value: Any) -> Point:
    """Convert a [latitude, longitude] JSON array to a Point."""
    if not isinstance(value, list):
        raise CommandError("Value is not an array", f" ({json.dumps(value)}).")
    if len(value) != 2 or not all(_is_number(v) for v in value):
        raise CommandError(
            "Value is not an geo-coordinate point", f" ({json.dumps(value)})."
        )
    return Point(latitude=float(value[0]), longitude=float(value[1]))


def parse_points(value: Any, minimum: int = 1) -> List[Point]:
    """Convert a JSON array of [latitude, longitude] arrays to Points."""
    if not isinstance(value, list):
        raise CommandError("Value is not an array", f" ({json.dumps(value)}).")
    if len(value) < minimum:
        raise CommandError(
            f"Value is not an array of at least {minimum} geo-coordinate points",
            f" ({json.dumps(value)}).",
        )
    points = []
    for p in value:
        if not (isinstance(p, list) and len(p) == 2 and all(_is_number(v) for v in p)):
            raise CommandError(
                "Value is not an array of geo-coordinate points", f" ({json.dumps(p)})."
            )
        points.append(Point(latitude=float(p[0]), longitude=float(p[1])))
    return points


def _reports_errors(func: Callable[["GeocodeShell", str], None]):
    """Print CommandErrors raised by a command instead of leaving the shell."""

    @functools.wraps(func)
    def wrapper(self: "GeocodeShell", arg: str) -> None:
        arg = arg.strip()
        try:
            if not arg:
                raise CommandError("Cannot parse value from ", self.lastcmd)
            func(self, arg)
        except CommandError as e:
            logger.debug(f"{func.__name__} failed: {e.message}{e.detail}")
            self._error(e.message, e.detail)

    return wrapper


class GeocodeShell(cmd.Cmd):
    """Read-eval-print loop for geocode commands."""

    intro = (
        "Enter commands followed by <ENTER>\n"
        f"Enter {BOLD}help{RESET} for help about commands\n"
        f"Enter {BOLD}exit{RESET} or {BOLD}quit{RESET} to exit shell"
    )
    prompt = "geocode> "

    def __init__(self, config: Optional[GeocodeConfig] = None, stdout: Optional[TextIO] = None):
        super().__init__(stdout=stdout)
        self.config = config or GeocodeConfig()

    def _print(self, text: str) -> None:
        self.stdout.write(text + "\n")

    def _error(self, message: str, detail: str = "") -> None:
        self._print(f"{set_colour(RED)}{message}{set_colour(NC)}{detail}")

    def _require_api_key(self) -> str:
        if not self.config.api_key:
            raise CommandError(
                "POSITION_STACK_KEY environment variable not set.",
                "  Please set to the key for accessing positionstack service.",
            )
        return self.config.api_key

    # Loop control

    def emptyline(self) -> bool:
        return False

    def default(self, line: str) -> None:
        self._print(f"Unknown command {line.split()[0]}")

    def do_help(self, arg: str) -> None:
        self._print(f"{BOLD}Available commands{RESET}")
        for name, argument, description in HELP_TEXT:
            self._print(f"  {BOLD}{name}{RESET} {ITALIC}<{argument}>{RESET} - {description}")

    def do_exit(self, arg: str) -> bool:
        self._print("Bye")
        return True

    do_quit = do_exit
    do_EOF = do_exit

    # Commands

    @_reports_errors
    def do_distance(self, arg: str) -> None:
        points = parse_points(parse_json(arg), minimum=2)
        if len(points) != 2:
            raise CommandError(
                "Value is not an array of two geo-coordinate points", f" ({arg})."
            )
        result = distance(points[0], points[1])
        self._print(f"{result.distance} {set_colour(BLUE)}metres{set_colour(NC)}")

    @_reports_errors
    def do_centroid(self, arg: str) -> None:
        centre = centroid(parse_points(parse_json(arg), minimum=2))
        self._print(json.dumps([centre.latitude, centre.longitude]))

    @_reports_errors
    def do_cluster(self, arg: str) -> None:
        source = None
        if arg.lower().endswith(".gpx"):
            source = arg
            try:
                points = load_gpx_points(arg)
            except (OSError, gpx.GPXException) as e:
                raise CommandError("Cannot read GPX file ", f"({arg}). {e}")
        else:
            points = parse_points(parse_json(arg))

        clusters = cluster(
            points, self.config.cluster_rounds, self.config.cluster_count
        )
        self._print(json.dumps([_cluster_to_json(c) for c in clusters]))

        if self.config.map_output or self.config.write_map:
            try:
                filename = self.config.map_output or generate_output_filename(
                    source or "geocode"
                )
                create_cluster_map(clusters, filename)
            except (RuntimeError, ValueError, OSError) as e:
                raise CommandError("Failed to create map ", str(e))
            self._print(f"Map saved to {filename}")

    @_reports_errors
    def do_within(self, arg: str) -> None:
        request = parse_json(arg)
        if not isinstance(request, dict) or "point" not in request or "polygon" not in request:
            raise CommandError(
                "Value is not an object with point and polygon", f" ({arg})."
            )

        point = parse_point(request["point"])
        shape = request["polygon"]
        try:
            if isinstance(shape, str):
                polygon = polygon_from_wkt(shape)
            elif isinstance(shape, dict):
                polygon = polygon_from_geojson(shape)
            else:
                polygon = parse_points(shape, minimum=3)
        except ValueError as e:
            raise CommandError("Invalid polygon ", str(e))

        self._print(json.dumps(within(point, polygon)))

    @_reports_errors
    def do_encode(self, arg: str) -> None:
        point = parse_point(parse_json(arg))
        code = to_location_code(point.latitude, point.longitude)
        if not code:
            raise CommandError("Cannot encode geo-coordinate", f" ({arg}).")
        self._print(code)

    @_reports_errors
    def do_decode(self, arg: str) -> None:
        try:
            point = from_location_code(arg)
        except LocationCodeError:
            raise CommandError("Cannot decode open location code", f" ({arg}).")
        self._print(json.dumps([point.latitude, point.longitude]))

    @_reports_errors
    def do_address(self, arg: str) -> None:
        key = self._require_api_key()
        point = parse_point(parse_json(arg))
        try:
            result = reverse_geocode(
                point.latitude, point.longitude, key, timeout=self.config.timeout
            )
        except AddressLookupError as e:
            raise CommandError(
                "Error looking up geo-coordinates for", f" ({arg}).\n{e.reason}."
            )
        self._print(json.dumps(result.to_dict()))

    @_reports_errors
    def do_coordinates(self, arg: str) -> None:
        key = self._require_api_key()
        try:
            point = forward_geocode(arg, key, timeout=self.config.timeout)
        except AddressLookupError as e:
            raise CommandError(
                "Cannot lookup coordinates for address", f" ({arg}).\n{e.reason}."
            )
        self._print(json.dumps({"latitude": point.latitude, "longitude": point.longitude}))


def _cluster_to_json(c: Cluster) -> dict:
    return {
        "centroid": [c.centroid.latitude, c.centroid.longitude],
        "size": len(c),
        "points": [[p.latitude, p.longitude] for p in c.points],
    }
