"""Command-line utility that resolves a window phrase and prints the result."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from app.deps import get_app_state
from app.services.window_service import describe, parse_phrase, resolve_phrase
from app.utils.time_windows import humanize_duration
from core.errors import WindowError

TIME_FORMAT = "%Y-%m-%d, %H:%M:%S"

USAGE_EXAMPLES = """examples:
  window "from yesterday to 12 Apr 2022"
  window --timezone America/Denver "within 30 days"
"""


def _format(instant) -> str:
    if instant is None:
        return "(open)"
    nanos = instant.microsecond * 1000 + instant.nanosecond
    zone = instant.tzname() or ""
    return f"{instant.strftime(TIME_FORMAT)}.{nanos:09d} {zone}".rstrip()


def cmd_resolve(args: argparse.Namespace) -> None:
    """Resolve the phrase and print either the slide or both bounds."""
    window, reference = resolve_phrase(args.phrase, at=args.at, timezone=args.timezone)
    if args.json:
        print(json.dumps(describe(args.phrase, window, reference), indent=2))
        return

    if args.timezone:
        print(f"Using time zone {args.timezone} ({reference.tzname()})")
    print(f"Window resolved at:\t{_format(reference)}")
    if window.is_sliding():
        print(f"You defined a sliding window of {humanize_duration(window.slide())}")
        return
    start, end = window.bounds()
    print(f"Left Bound:\t\t{_format(start)}")
    print(f"Right Bound:\t\t{_format(end)}")


def cmd_parse(args: argparse.Namespace) -> None:
    """Print the unresolved Specification as JSON."""
    spec = parse_phrase(args.phrase)
    print(json.dumps({"phrase": args.phrase, **spec.to_dict()}, indent=2))


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="window",
        description="Resolve a natural-language time window.",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("phrase", help='Window phrase, e.g. "next year within 3 days and 2 hours"')
    parser.add_argument("--timezone", help="IANA time zone such as America/Los_Angeles")
    parser.add_argument("--at", help="Reference instant (defaults to now)")
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")
    parser.add_argument("--spec", action="store_true", help="Only print the parsed specification")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log grammar backtracking")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point invoked via `python -m cli.window_cli ...`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    get_app_state()  # ensure initialization
    handler = cmd_parse if args.spec else cmd_resolve
    try:
        handler(args)
    except (WindowError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
