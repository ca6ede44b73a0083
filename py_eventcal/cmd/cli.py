"""Recurrence and ICS export command-line tool."""

import argparse
import json
import logging
import sys
from pathlib import Path

logger = logging.getLogger("py_eventcal.cli")


def _load_json(path: str):
    if path == "-":
        return json.load(sys.stdin)
    with Path(path).open(encoding="utf-8") as f:
        return json.load(f)


def _cmd_occurrences(args: argparse.Namespace) -> int:
    from py_eventcal.config import ExportConfig
    from py_eventcal.recurrence import RecurrenceSpec, compute_occurrence_instants, compute_occurrences

    spec = RecurrenceSpec(
        rrule=args.rrule,
        dtstart=args.dtstart,
        dtstart_tzid=args.tzid,
        rdate=args.rdate,
        exdate=args.exdate,
        max_count=args.max_count or ExportConfig.from_env().max_occurrences,
    )
    logger.debug(f"Expanding {spec.rrule!r} from {spec.dtstart} ({spec.dtstart_tzid or 'floating'})")

    if args.utc:
        for instant in compute_occurrence_instants(spec):
            print(instant.strftime("%Y-%m-%dT%H:%M:%SZ"))
    else:
        for occurrence in compute_occurrences(spec):
            print(occurrence)
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    from py_eventcal.recurrence import parse_rrule

    parse_rrule(args.rrule)
    print("valid")
    return 0


def _cmd_event(args: argparse.Namespace) -> int:
    from py_eventcal.ics import serialize_event

    result = serialize_event(_load_json(args.file), calendar_name=args.calendar_name)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    sys.stdout.write(result.value)
    return 0


def _cmd_calendar(args: argparse.Namespace) -> int:
    from py_eventcal.ics import serialize_calendar

    data = _load_json(args.file)
    if not isinstance(data, dict):
        print("Error: calendar file must be an object with 'metadata' and 'events'", file=sys.stderr)
        return 1

    result = serialize_calendar(data.get("events") or [], data.get("metadata"))
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    sys.stdout.write(result.value)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-eventcal",
        description="Recurring event expansion and iCalendar export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Next 5 occurrences of a weekly meeting, across the March DST change
  py-eventcal occurrences --rrule "FREQ=WEEKLY;BYDAY=MO" \\
      --dtstart 2026-03-02T10:00:00 --tzid America/New_York --max-count 5

  # Check an RRULE
  py-eventcal validate "FREQ=MONTHLY;BYDAY=MO;BYSETPOS=-1"

  # Export an event or a calendar from JSON
  py-eventcal event event.json > event.ics
  py-eventcal calendar calendar.json > calendar.ics

Calendar files look like {"metadata": {"name": ...}, "events": [...]}.
Use "-" as FILE to read from stdin.
        """,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging (logs generated ICS line by line)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    occurrences = subparsers.add_parser("occurrences", help="expand a recurrence rule")
    occurrences.add_argument("--rrule", required=True, help="RRULE value, with or without 'RRULE:'")
    occurrences.add_argument("--dtstart", required=True, help="local start, e.g. 2026-03-02T10:00:00")
    occurrences.add_argument("--tzid", help="IANA timezone of dtstart (default: floating)")
    occurrences.add_argument("--rdate", action="append", default=[], help="additional date (repeatable)")
    occurrences.add_argument("--exdate", action="append", default=[], help="excluded date (repeatable)")
    occurrences.add_argument(
        "--max-count",
        type=int,
        help="maximum occurrences to print (default: EVENTCAL_MAX_OCCURRENCES or 10)",
    )
    occurrences.add_argument("--utc", action="store_true", help="print UTC instants instead of local times")
    occurrences.set_defaults(func=_cmd_occurrences)

    validate = subparsers.add_parser("validate", help="check an RRULE")
    validate.add_argument("rrule", help="RRULE value")
    validate.set_defaults(func=_cmd_validate)

    event = subparsers.add_parser("event", help="export one event as ICS")
    event.add_argument("file", help="JSON event file, or - for stdin")
    event.add_argument("--calendar-name", help="calendar the event belongs to")
    event.set_defaults(func=_cmd_event)

    calendar = subparsers.add_parser("calendar", help="export a calendar feed as ICS")
    calendar.add_argument("file", help="JSON calendar file, or - for stdin")
    calendar.set_defaults(func=_cmd_calendar)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for py-eventcal."""
    args = build_parser().parse_args(argv)

    # Setup debug logging if requested
    if args.debug:
        from py_eventcal.debug import setup_debug_logging
        setup_debug_logging()

    from py_eventcal.internal.errors import CalendarError

    try:
        return args.func(args)
    except (CalendarError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
