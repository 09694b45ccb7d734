#!/usr/bin/env python3
"""
Create a weekly Excel report from the configured time log.

Reads the time log and code file named in config.ini, takes every period
from the Monday of the as-of week through the end of the as-of day, and
writes an .xlsx workbook.

Usage:
    python src/scripts/create_weekly_report.py --date 2023-07-06 --code Project:...
"""

import argparse
import sys
import traceback
from datetime import date, datetime, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.codetree import build_code_tree
from core.config import OUTPUT_DIR, ConfigError, load_config
from core.logfile import load_codes, load_timelog
from core.timelog import local_time
from services.reports import build_report, create_weekly_excel_report, render_weekly


# =============================================================================
# DATE UTILITIES
# =============================================================================


def get_weekly_date_range(as_of_date_str: str | None) -> tuple[date, date]:
    """
    Calculate date range for weekly report.

    Args:
        as_of_date_str: Optional date string (YYYY-MM-DD). Uses today if None.

    Returns:
        Tuple of (monday_of_week, as_of_date)
    """
    if as_of_date_str:
        as_of = datetime.strptime(as_of_date_str, "%Y-%m-%d").date()
    else:
        as_of = date.today()

    monday = as_of - timedelta(days=as_of.weekday())
    return monday, as_of


def report_name(as_of: date) -> str:
    """Example: timeclock_weekly_report_2023_07_06"""
    return f"timeclock_weekly_report_{as_of.strftime('%Y_%m_%d')}"


# =============================================================================
# MAIN
# =============================================================================


def main(as_of_date_str: str | None = None, codes: list[str] | None = None) -> Path | None:
    """Main entry point."""
    try:
        # 1. Calculate date range
        start_date, end_date = get_weekly_date_range(as_of_date_str)
        print(f"Generating report for {start_date} to {end_date}")

        # 2. Load the log and the known codes
        config = load_config()
        known_codes = load_codes(Path(config["codefile"]))
        log = load_timelog(Path(config["logfile"]))
        print(f"Loaded {len(log)} events, {len(known_codes)} codes")

        # 3. Periods from Monday 00:00 up to midnight after the as-of day.
        # Between is exclusive, so start a minute early.
        begin = local_time(start_date.year, start_date.month, start_date.day) - timedelta(minutes=1)
        after = end_date + timedelta(days=1)
        end = local_time(after.year, after.month, after.day)
        report = build_report(log, begin, end, codes or [], build_code_tree(known_codes))

        if not report.periods:
            print("No periods in given time range.")
            return None

        print(render_weekly(report), end="")

        # 4. Write the workbook
        output_dir = OUTPUT_DIR / "reports" / "weekly"
        output_path = output_dir / f"{report_name(end_date)}.xlsx"
        create_weekly_excel_report(report, output_path)

        print("\nDone!")
        return output_path

    except ConfigError as e:
        print(f"\nError: {e}")
        sys.exit(e.exit_code)
    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate weekly time report")
    parser.add_argument(
        "--date",
        help="As-of date (YYYY-MM-DD). Reports from Monday of that week to this date. Defaults to today.",
    )
    parser.add_argument(
        "--code",
        action="append",
        help="Code to include ('empty', 'all', 'X' or 'X:...'). May be repeated. Defaults to 'all'.",
    )
    args = parser.parse_args()

    main(args.date, args.code)
