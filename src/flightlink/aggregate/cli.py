"""CLI for flight search and lookup."""

import argparse
import logging
import sys
from datetime import date

from flightlink.aggregate.models import flights_to_dataframe
from flightlink.aggregate.service import build_service


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Search flights across configured providers, falling back to local data"
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--query",
        "-q",
        help="Flight number, airline or city (e.g. AA100, Delta, Paris)",
    )
    group.add_argument(
        "--flight",
        "-f",
        help="Look up a single flight by number (e.g. UA555)",
    )
    parser.add_argument(
        "--date",
        "-d",
        help="Flight date for --flight (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Write results to CSV file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    flight_date = None
    if args.date:
        if not args.flight:
            print("Error: --date is only valid with --flight", file=sys.stderr)
            sys.exit(1)
        try:
            flight_date = date.fromisoformat(args.date)
        except ValueError:
            print(f"Error: Invalid date format: {args.date}", file=sys.stderr)
            sys.exit(1)

    service = build_service()
    if args.flight:
        flight = service.get_flight(args.flight, flight_date)
        flights = [flight] if flight else []
    else:
        flights = service.search(args.query)

    if service.last_error_message:
        print(f"Provider unavailable: {service.last_error_message}", file=sys.stderr)

    df = flights_to_dataframe(flights)
    if df.empty:
        print("No flights found.", file=sys.stderr)
    else:
        print(df.to_string(index=False))

    if args.output and not df.empty:
        df.to_csv(args.output, index=False)
        print(f"\nWrote {len(df)} rows to {args.output}", file=sys.stderr)


if __name__ == "__main__":
    main()
