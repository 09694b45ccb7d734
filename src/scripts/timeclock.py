#!/usr/bin/env python3
"""
Clock in and out, fix up the last event, and print reports.

Usage:
    python src/scripts/timeclock.py in 9:36am :Project:Sub Did a thing.
    python src/scripts/timeclock.py note Did a different thing.
    python src/scripts/timeclock.py report 2023-07-01 2023-08-01 :Project:... --format weekly

The time log is read and sorted on every run, and rewritten in full
after any command that changes it.
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.codetree import build_code_tree
from core.config import (
    ALL_CODES,
    DEFAULT_REPORT,
    EXIT_ERROR,
    EXIT_REPORTS,
    ConfigError,
    load_config,
)
from core.logfile import load_codes, load_timelog, save_codes, save_timelog
from core.timelog import TimeLog
from models.events import Event, format_time
from services.clock import ClockError, parse_line, parse_report_request
from services.reports import RENDERERS, build_report, create_weekly_excel_report

EDIT_COMMANDS = {"time", "code", "desc", "note"}


def warn_missing(event: Event):
    if not event.code:
        print("No time code found, use 'code' to specify one.", file=sys.stderr)
    if not event.desc:
        print("No description found, use 'note' to specify one.", file=sys.stderr)


def last_event(log: TimeLog) -> Event:
    if not log:
        raise ClockError("No events found.")
    return log[-1]


# =============================================================================
# COMMANDS
# =============================================================================


def clock_in(log: TimeLog, words: list[str], codes: list[str]) -> Event:
    """Append a new event built from the command line."""
    at, code, desc = parse_line(words, codes)
    old = log[-1] if log else None

    if old is not None and at < old.at:
        raise ClockError(
            f"Given time ({format_time(at)}) is before previous event time ({format_time(old.at)})."
        )

    event = Event(at=at, code=code, desc=desc)
    log.append(event)

    if old is not None:
        print(f"{old}\n == {(event.at - old.at).total_seconds() / 3600:.1f}h ==>")
    print(event)
    warn_missing(event)
    return event


def test_line(words: list[str], codes: list[str]) -> Event:
    """Show the event a command line would create, without saving it."""
    if not words:
        raise ClockError("Not enough arguments.")
    at, code, desc = parse_line(words, codes)
    event = Event(at=at, code=code, desc=desc)
    print(event)
    warn_missing(event)
    return event


def edit_last(log: TimeLog, field: str, words: list[str], codes: list[str], codefile: Path | None = None):
    """
    Change the time, code or description of the last event.

    A code that is not yet known is appended to the code file.
    """
    last = last_event(log)

    if field == "time":
        last.at, _, _ = parse_line(words, [])
        print(f"Changed last event time to: {format_time(last.at)}")
    elif field == "code":
        last.code = " ".join(words)
        if last.code not in codes:
            codes.append(last.code)
            if codefile is not None:
                save_codes(codefile, codes)
        print(f"Changed last event time code to: {last.code}")
    else:
        last.desc = " ".join(words)
        print(f"Changed last event description to: {last.desc}")


def report(log: TimeLog, words: list[str], codes: list[str], report_format: str, excel: Path | None = None) -> str:
    """Render a report for the range and codes named on the command line."""
    begin, end, found = parse_report_request(words, codes)

    if found:
        print(f"Timecodes: {', '.join(found)}", file=sys.stderr)
    else:
        print(f"No timecodes provided, using '{ALL_CODES}'", file=sys.stderr)

    data = build_report(log, begin, end, found, build_code_tree(codes))
    if not data.periods:
        print("No periods in given time range.", file=sys.stderr)
        return ""

    output = RENDERERS[report_format](data)
    if excel is not None:
        try:
            create_weekly_excel_report(data, excel)
        except OSError as e:
            raise ConfigError(f"Error writing Excel report: {e}", EXIT_REPORTS) from e
    return output


# =============================================================================
# MAIN
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Keep a plain text time log and report on it")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("in", help="Create a new event. Needs a time; ':code' picks a code.")
    p.add_argument("words", nargs="+")
    p = sub.add_parser("test", help="Show the event 'in' would create, without writing it.")
    p.add_argument("words", nargs="*")
    p = sub.add_parser("time", help="Edit the last event's time.")
    p.add_argument("words", nargs="+")
    p = sub.add_parser("code", help="Edit the last event's code. Codes may not contain spaces!")
    p.add_argument("words", nargs="+")
    p = sub.add_parser("desc", aliases=["note"], help="Edit the last event's description.")
    p.add_argument("words", nargs="*")
    sub.add_parser("status", help="Print the last event.")
    sub.add_parser("info", help="List all known codes.")

    p = sub.add_parser(
        "report",
        help="Print a report from a start time (and optional end time). "
        "Codes: 'empty' for blank codes, 'all' for any code, 'X:...' for X and its children.",
    )
    p.add_argument("words", nargs="+")
    p.add_argument("--format", choices=sorted(RENDERERS), default=DEFAULT_REPORT)
    p.add_argument(
        "--excel",
        type=Path,
        help="Also write the weekly report to this .xlsx file (relative to the reports directory)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    command = "desc" if args.command == "note" else args.command

    try:
        config = load_config()
        codefile = Path(config["codefile"])
        codes = load_codes(codefile)
        logfile = Path(config["logfile"])
        log = load_timelog(logfile)

        if command == "report":
            excel = args.excel
            if excel is not None and not excel.is_absolute():
                excel = Path(config["reportsdir"]) / excel
            print(report(log, args.words, codes, args.format, excel), end="")
            return 0
        if command == "info":
            last_event(log)
            print("\n".join(codes))
            return 0
        if command == "status":
            print(last_event(log))
            return 0
        if command == "test":
            test_line(args.words, codes)
            return 0

        if command in EDIT_COMMANDS:
            edit_last(log, command, args.words, codes, codefile)
        else:
            clock_in(log, args.words, codes)

        save_timelog(logfile, log)
        return 0

    except ConfigError as e:
        print(e, file=sys.stderr)
        return e.exit_code
    except (ClockError, OSError) as e:
        print(e, file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
