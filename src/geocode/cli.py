#!/usr/bin/env python3
"""
Geocode shell entry point.

Starts an interactive shell for distance, centroid, clustering, geo-fence,
Open Location Code and address lookups. A command given on the command line
is run once instead.

Requirements:
    pip install requests shapely gpxpy folium openlocationcode

"""

from typing import Optional, Sequence
import argparse
import logging
import os
import sys

from . import __version__
from .config import GeocodeConfig
from .shell import GeocodeShell

# Configure logging
logger = logging.getLogger("geocode")

LOG_FILE_NAME = "geocode-shell.log"


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Geo-coordinate distance, clustering and lookup shell",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        type=str,
        nargs="*",
        help="Run a single shell command and exit, e.g. decode 8FVC2222+22",
    )
    parser.add_argument(
        "--clusters",
        type=int,
        default=3,
        help="Number of clusters for the cluster command (default: 3)",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=32,
        help="Number of k-means rounds for the cluster command (default: 32)",
    )
    parser.add_argument(
        "--map",
        action="store_true",
        help="Save an HTML map of each clustering next to its input",
    )
    parser.add_argument(
        "--map-output",
        type=str,
        default=None,
        help="Save an HTML map of each clustering to this file",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=30,
        help="Timeout for positionstack requests in seconds (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help=f"Also write the log to {LOG_FILE_NAME} in this directory",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"geocode {__version__}",
    )
    return parser


def create_config(args: argparse.Namespace) -> GeocodeConfig:
    """Build the shell configuration from arguments and the environment."""
    if args.clusters < 1:
        raise ValueError(f"Number of clusters must be at least 1, got {args.clusters}")
    if args.rounds < 0:
        raise ValueError(f"Number of rounds must not be negative, got {args.rounds}")

    return GeocodeConfig(
        api_key=os.environ.get("POSITION_STACK_KEY"),
        timeout=args.timeout,
        cluster_count=args.clusters,
        cluster_rounds=args.rounds,
        map_output=args.map_output,
        write_map=args.map,
        log_level=args.log_level,
        log_dir=args.log_dir,
    )


def setup_logging(config: GeocodeConfig) -> None:
    """Setup logging configuration."""
    level = getattr(logging, config.log_level)

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    # Create console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    if config.log_dir:
        file_handler = logging.FileHandler(
            os.path.join(config.log_dir, LOG_FILE_NAME), encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Suppress overly verbose third-party logging
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Parses command-line arguments and runs the shell, or a single command.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = create_config(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        setup_logging(config)
    except OSError as e:
        print(f"Cannot open log file in {config.log_dir}: {e}", file=sys.stderr)
        sys.exit(1)

    if config.api_key is None:
        logger.debug("POSITION_STACK_KEY not set; address lookups are disabled")

    shell = GeocodeShell(config)
    if args.command:
        shell.onecmd(" ".join(args.command))
        return

    try:
        shell.cmdloop()
    except KeyboardInterrupt:
        print("\nBye")


if __name__ == "__main__":
    main()
