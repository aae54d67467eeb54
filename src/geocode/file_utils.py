#!/usr/bin/env python3
"""
File helpers: reading points from GPX files and naming map output files.
"""

from typing import List, TextIO, Union
import os
import logging
import gpxpy
import gpxpy.gpx

logger = logging.getLogger(__name__)

GPXPoint = Union[gpxpy.gpx.GPXWaypoint, gpxpy.gpx.GPXTrackPoint, gpxpy.gpx.GPXRoutePoint]


def parse_gpx_points(file_input: TextIO) -> List[GPXPoint]:
    """
    Collect every point of a GPX document: waypoints, then track points, then
    route points.

    The gpxpy objects are returned as they are, so names, times and
    elevations stay attached when the points are clustered.

    Raises:
        gpxpy.gpx.GPXException: If the GPX data is malformed
    """
    gpx_data = gpxpy.parse(file_input)

    points: List[GPXPoint] = list(gpx_data.waypoints)
    for track in gpx_data.tracks:
        for segment in track.segments:
            points.extend(segment.points)
    for route in gpx_data.routes:
        points.extend(route.points)

    logger.debug(
        f"Parsed {len(points)} points ({len(gpx_data.waypoints)} waypoints) from GPX data"
    )
    return points


def load_gpx_points(filename: str) -> List[GPXPoint]:
    """
    Load all points from a GPX file.

    Raises:
        FileNotFoundError: If file doesn't exist.
        PermissionError: If file can't be read.
        gpxpy.gpx.GPXException: If GPX file is malformed.
    """
    logger.debug(f"Reading GPX file: {filename}")
    with open(filename, "r", encoding="utf-8") as f:
        return parse_gpx_points(f)


def generate_output_filename(input_filename: str) -> str:
    """
    Generates an output HTML filename for a cluster map and reserves it by
    creating an empty file.

    Strategy:
    1. If input ends with .gpx (case-insensitive), drop it
    2. Append " clusters.html"
    3. If file exists, try " clusters (1).html", " clusters (2).html", etc.
    4. Stop at 180 attempts

    Args:
        input_filename: Path to the input GPX file

    Returns:
        Output filename that has been created as an empty file

    Raises:
        RuntimeError: If no available filename found after 180 attempts
        ValueError: If a file cannot be created (permissions, invalid name)
    """
    input_dir = os.path.dirname(input_filename)
    input_base = os.path.basename(input_filename)

    if input_base.lower().endswith(".gpx"):
        base_name = input_base[:-4]
    else:
        base_name = input_base

    base_output = base_name + " clusters"
    candidates = [base_output + ".html"] + [
        f"{base_output} ({i}).html" for i in range(1, 181)
    ]

    for name in candidates:
        candidate = os.path.join(input_dir, name)
        try:
            with open(candidate, "x"):
                pass
            return candidate
        except FileExistsError:
            continue
        except OSError as e:
            logger.error(f"Cannot create file {candidate}: {e}")
            raise ValueError(f"Cannot create file: {e}")

    logger.error(
        "Could not find an available filename after 180 attempts. "
        "Please clean up your output directory or specify --map-output explicitly."
    )
    raise RuntimeError("No available filename found after 180 attempts")
