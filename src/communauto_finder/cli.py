"""Command line interface for Communauto car searches."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime

from communauto_finder.adapters.config import AppConfig
from communauto_finder.application.services import new_result_channel
from communauto_finder.domain.models import Coordinate, SearchResult, VehicleType
from communauto_finder.finder import search_flex_car_task, search_station_car_task

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _parse_datetime(value: str) -> datetime:
    """Parse a local ISO date-time such as 2026-10-19T18:00."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date-time '{value}': {e}") from e


def _parse_vehicle_type(value: str) -> VehicleType:
    try:
        return VehicleType[value.upper().replace("-", "_")]
    except KeyError as e:
        choices = ", ".join(t.name.lower().replace("_", "-") for t in VehicleType)
        raise argparse.ArgumentTypeError(f"unknown vehicle type '{value}' ({choices})") from e


def _add_location_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--city", type=int, help="Communauto city id (e.g. 59 for Montréal)")
    parser.add_argument("--lat", type=float, help="Latitude of the search center")
    parser.add_argument("--lon", type=float, help="Longitude of the search center")
    parser.add_argument("--margin", type=float, help="Search margin in kilometers")
    parser.add_argument(
        "--timeout", type=float, help="Cancel the search after this many seconds"
    )
    parser.add_argument("--max-polls", type=int, help="Give up after this many empty polls")
    parser.add_argument("--config", help="Path to a TOML configuration file")
    parser.add_argument("--json", action="store_true", help="Output as JSON")


def setup_argparse() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="communauto-finder",
        description="Wait until a Communauto car is available nearby",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Wait for a free-floating car within 1 km
  communauto-finder flex --city 59 --lat 45.50 --lon -73.57 --margin 1

  # Wait for a station car for tonight, give up after 10 minutes
  communauto-finder station --city 59 --lat 45.50 --lon -73.57 \\
      --start 2026-10-19T18:00 --end 2026-10-19T22:00 --timeout 600
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Kind of car to search for")

    flex_parser = subparsers.add_parser("flex", help="Search free-floating cars")
    _add_location_arguments(flex_parser)

    station_parser = subparsers.add_parser("station", help="Search station cars")
    _add_location_arguments(station_parser)
    station_parser.add_argument(
        "--start", type=_parse_datetime, required=True, help="Reservation start (local time)"
    )
    station_parser.add_argument(
        "--end", type=_parse_datetime, required=True, help="Reservation end (local time)"
    )
    station_parser.add_argument(
        "--vehicle-type",
        type=_parse_vehicle_type,
        default=VehicleType.ALL_TYPES,
        help="Restrict to one vehicle type (default: all types)",
    )

    return parser


def build_config(args: argparse.Namespace) -> AppConfig:
    """Merge environment, TOML file and command line flags."""
    config = AppConfig()
    if args.config:
        config.config_file = args.config
    config.load_toml()

    if args.city is not None:
        config.city_id = args.city
    if args.lat is not None:
        config.latitude = args.lat
    if args.lon is not None:
        config.longitude = args.lon
    if args.margin is not None:
        config.margin_km = args.margin
    if args.max_polls is not None:
        if args.max_polls < 1:
            raise ValueError("--max-polls must be at least 1")
        config.max_polls = args.max_polls

    if config.city_id is None or config.latitude is None or config.longitude is None:
        raise ValueError("city, latitude and longitude are required (flags, env or config file)")
    return config


async def _await_result(
    task: asyncio.Task[SearchResult],
    cancel_event: asyncio.Event,
    timeout: float | None,
) -> SearchResult:
    """Wait for the search, cancelling it once timeout elapses."""
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
    except TimeoutError:
        logger.info(f"No car found within {timeout}s, cancelling search")
        cancel_event.set()
        return await task


async def run_command(args: argparse.Namespace, config: AppConfig) -> SearchResult:
    """Run the search described by parsed arguments."""
    coordinate = Coordinate(latitude=config.latitude, longitude=config.longitude)
    result_channel = new_result_channel()
    cancel_event = asyncio.Event()

    if args.command == "flex":
        task = search_flex_car_task(
            config.city_id,
            coordinate,
            config.margin_km,
            result_channel,
            cancel_event,
            config=config,
        )
    else:
        task = search_station_car_task(
            config.city_id,
            coordinate,
            config.margin_km,
            args.start,
            args.end,
            result_channel,
            cancel_event,
            args.vehicle_type,
            config=config,
        )

    await _await_result(task, cancel_event, args.timeout)
    return result_channel.get_nowait()


def format_result(command: str, result: SearchResult) -> str:
    """Render a result for humans."""
    if not result.is_found:
        reason = f": {result.reason}" if result.reason else ""
        return f"No car found ({result.status}{reason})"
    if command == "flex":
        return f"Closest available vehicle: {result.value}"
    return f"{result.value} station(s) with an available car"


async def main() -> None:
    """Main CLI entry point."""
    parser = setup_argparse()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = build_config(args)
        _configure_logging(config.log_level)
        result = await run_command(args, config)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print(format_result(args.command, result))

    sys.exit(0 if result.is_found else 1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
