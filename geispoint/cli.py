"""Command-line interface for GeisPoint lookups.

Builds a :class:`~geispoint.service.GeisPointService` from an optional JSON
options file and environment settings, runs a single lookup and prints the
result as JSON.

Usage
-----
    geispoint regions --country SK
    geispoint cities --region 19
    geispoint --config geispoint.json point CZ-12345
    geispoint search --zip 11000
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel

from .adapters.geispoint import GeisPointClient
from .adapters.soap import SoapTransport
from .config.models import EnvSettings, ServiceConfig
from .errors import GeisPointError
from .observability import setup_logging
from .service import GeisPointService


def _build_service(config_path: Optional[Path], settings: EnvSettings) -> GeisPointService:
    """Create the service from a JSON options file and environment settings.

    Parameters
    ----------
    config_path: Optional[Path]
        Filesystem path to a JSON file with service options, if any.
    settings: EnvSettings
        Transport settings (endpoint, namespace, timeout).
    """
    config = ServiceConfig.load(config_path) if config_path else ServiceConfig()
    transport = SoapTransport(
        settings.endpoint, settings.namespace, settings.timeout_seconds
    )
    return GeisPointService(config, client=GeisPointClient(transport))


def _run(args: argparse.Namespace, service: GeisPointService) -> Any:
    if args.command == "regions":
        return service.get_regions(args.country)
    if args.command == "cities":
        return service.get_cities(args.country, args.region)
    if args.command == "point":
        return service.get_point_detail(args.gpid)
    return service.search_points(args.zip, args.city, args.gpid)


def _to_json(result: Any) -> str:
    if isinstance(result, BaseModel):
        data: Any = result.model_dump(mode="json")
    else:
        data = [item.model_dump(mode="json") for item in result]
    return json.dumps(data, ensure_ascii=False, indent=2)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GeisPoint lookup CLI")
    parser.add_argument("--config", help="Path to JSON service options")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    regions = sub.add_parser("regions", help="List regions of a country")
    regions.add_argument("--country", help="Country code (default from options)")

    cities = sub.add_parser("cities", help="List cities of a region")
    cities.add_argument("--country", help="Country code (default from options)")
    cities.add_argument("--region", type=int, help="Region id (default from options)")

    point = sub.add_parser("point", help="Show details of one GeisPoint")
    point.add_argument("gpid", help="GeisPoint id")

    search = sub.add_parser("search", help="Search GeisPoints")
    search.add_argument("--zip", help="Postal code")
    search.add_argument("--city", help="City name")
    search.add_argument("--gpid", help="GeisPoint id")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entrypoint: run one lookup and print its JSON result."""
    args = _parser().parse_args(argv)

    settings = EnvSettings()
    env_level = settings.log_level.upper()
    effective_level = args.log_level or ("DEBUG" if args.verbose > 0 else env_level)
    setup_logging(effective_level)

    try:
        with _build_service(
            Path(args.config) if args.config else None, settings
        ) as service:
            result = _run(args, service)
    except GeisPointError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)
    print(_to_json(result))


if __name__ == "__main__":
    main()
