"""CLI entry point: print the sky snapshot for a time and place as JSON.

    uv run skyorrery --when "2024-04-08 13:17" --tz America/Chicago --lat 32.78 --lng -96.80
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from skyorrery.compute import (  # noqa: E402
    InvalidInputError,
    default_engine,
    parse_local_time,
)
from skyorrery.models import Observer  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="skyorrery",
        description="Compute body positions and phenomena for a time and place.",
    )
    p.add_argument("--when", required=True, help='Local time, "YYYY-MM-DD HH:MM".')
    p.add_argument("--tz", default="UTC", help="IANA timezone of --when (default UTC).")
    p.add_argument("--lat", type=float, required=True, help="Latitude, degrees north.")
    p.add_argument("--lng", type=float, required=True, help="Longitude, degrees east.")
    p.add_argument("--elevation", type=float, default=0.0, help="Elevation in meters.")
    p.add_argument(
        "--overlays",
        action="store_true",
        help="Also include the ecliptic line and RA/Dec grid (alt/az segments).",
    )
    p.add_argument("--indent", type=int, default=2, help="JSON indent (default 2).")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        instant = parse_local_time(args.when, args.tz)
    except InvalidInputError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    observer = Observer(lat=args.lat, lng=args.lng, elevation_m=args.elevation)
    engine = default_engine()
    result = engine.compute(instant, observer)
    payload = {"instant": instant.isoformat(), **result.to_dict()}

    if args.overlays:
        try:
            lines = engine.overlays(instant, observer)
        except InvalidInputError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        payload["overlays"] = [
            {
                "name": line.name,
                "segments": [[[p.alt_deg, p.az_deg] for p in seg] for seg in line.segments],
            }
            for line in lines
        ]

    print(json.dumps(payload, indent=args.indent, ensure_ascii=False))
    return 0 if not result.is_empty else 1


if __name__ == "__main__":
    sys.exit(main())
