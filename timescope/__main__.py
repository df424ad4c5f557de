"""
TimeScope entry point.

Usage:
    python -m timescope
    python -m timescope --days 730 --points 200000 --peers 2
    python -m timescope --loglevel DEBUG --log-console
"""

import sys
import argparse
from datetime import datetime, timezone


def _parse_date(text: str) -> datetime:
    value = datetime.fromisoformat(text)
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def main():
    """Main entry point for TimeScope."""
    parser = argparse.ArgumentParser(
        description="TimeScope - zoom, pan and minimap navigation over large time series"
    )
    parser.add_argument(
        "--days",
        type=float,
        default=365.0,
        help="Length of the generated data domain in days (default: 365)"
    )
    parser.add_argument(
        "--points",
        type=int,
        default=50_000,
        help="Number of generated records (default: 50000)"
    )
    parser.add_argument(
        "--peers",
        type=int,
        default=1,
        help="Number of synchronized charts sharing one viewport (default: 1)"
    )
    parser.add_argument(
        "--start",
        type=_parse_date,
        default=None,
        help="Domain start as ISO date (default: 2024-01-01)"
    )
    parser.add_argument(
        "--no-boundaries",
        action="store_true",
        help="Allow panning and zooming past the data domain"
    )
    parser.add_argument(
        "-l", "--loglevel",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING). DEBUG writes to /tmp/timescope_debug.log"
    )
    parser.add_argument(
        "--logfile",
        default="/tmp/timescope_debug.log",
        help="Log file path (default: /tmp/timescope_debug.log)"
    )
    parser.add_argument(
        "--log-console",
        action="store_true",
        help="Also log to console (stderr)"
    )

    args = parser.parse_args()

    # Setup logging before importing anything else
    from .logging import setup_logging
    setup_logging(
        level=args.loglevel,
        log_file=args.logfile,
        console=args.log_console
    )

    from .core.config import ViewportConfig
    from .core.errors import ConfigurationError

    try:
        overrides = {'enforce_boundaries': False} if args.no_boundaries else {}
        config = ViewportConfig.from_settings(**overrides)
    except ConfigurationError as e:
        print(f"Invalid viewport settings: {e}", file=sys.stderr)
        sys.exit(2)

    # Import here to avoid slow startup for --help
    from .gui.app import run_app

    sys.exit(run_app(
        days=args.days,
        points=args.points,
        peers=args.peers,
        start=args.start,
        config=config,
    ))


if __name__ == "__main__":
    main()
