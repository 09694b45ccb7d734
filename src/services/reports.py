"""
Report assembly and rendering: plain text and Excel formats.
"""

import sys
from collections.abc import Callable
from datetime import datetime, timedelta
from io import BytesIO
from operator import attrgetter
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.codetree import (
    filter_in_periods,
    filter_in_subtree,
    filter_out_periods,
    filter_out_subtree,
    find_node,
)
from core.config import (
    ALL_CODES,
    DETAIL_HEADERS,
    EMPTY_CODE,
    SUBTREE_SUFFIX,
    SUMMARY_HEADERS,
)
from core.timelog import TimeLog
from models.events import CodeTreeNode, Period, ReportData, WeekBucket, format_time
from services.weeks import aggregate_weeks, running_totals


def hours(d: timedelta) -> float:
    return d.total_seconds() / 3600


def format_hours(d: timedelta) -> str:
    """Format a duration as hours with one decimal, blank when zero."""
    return f"{hours(d):.1f}" if d else ""


# =============================================================================
# REPORT ASSEMBLY
# =============================================================================


def select_periods(periods: list[Period], codes: list[str], tree: CodeTreeNode) -> list[Period]:
    """
    Pick periods by report codes, in the order given.

    'empty' selects blank-coded periods, 'all' every period with a code,
    'X:...' X and its children, anything else exactly that code. A period
    is selected at most once. The result is sorted by begin.
    """
    remaining = list(periods)
    selected: list[Period] = []

    for code in codes:
        if code == EMPTY_CODE:
            selected += filter_in_periods(remaining, "")
            remaining = filter_out_periods(remaining, "")
        elif code == ALL_CODES:
            selected += filter_out_periods(remaining, "")
            remaining = filter_in_periods(remaining, "")
        elif code.endswith(SUBTREE_SUFFIX):
            base = code.removesuffix(SUBTREE_SUFFIX)
            if find_node(tree, base) is None:
                continue
            selected += filter_in_subtree(remaining, base, tree)
            remaining = filter_out_subtree(remaining, base, tree)
        else:
            selected += filter_in_periods(remaining, code)
            remaining = filter_out_periods(remaining, code)

    selected.sort(key=attrgetter("begin"))
    return selected


def build_report(
    log: TimeLog,
    begin: datetime,
    end: datetime | None,
    codes: list[str],
    tree: CodeTreeNode,
) -> ReportData:
    """Everything needed to render a report for a time range and code filter."""
    events = log.after(begin) if end is None else log.between(begin, end)
    periods = select_periods(events.periods(), codes or [ALL_CODES], tree)
    return ReportData(
        begin=begin,
        end=end,
        periods=periods,
        totals=running_totals(periods),
        weeks=aggregate_weeks(periods),
    )


# =============================================================================
# TEXT REPORTS
# =============================================================================


def describe_range(report: ReportData) -> str:
    if report.end is None:
        return f"Periods after: {format_time(report.begin)}"
    return f"Periods between: {format_time(report.begin)} - {format_time(report.end)}"


def render_default(report: ReportData) -> str:
    """Every period on its own line, then total hours per code."""
    lines = [describe_range(report), ""]
    lines += [str(p) for p in report.periods]
    lines.append("")

    width = max((len(code) for code in report.totals), default=0)
    for code, total in sorted(report.totals.items()):
        lines.append(f"[{code:>{width}}] {hours(total):6.1f}h")
    lines.append(f"{'Total':>{width + 2}} {hours(sum(report.totals.values(), timedelta(0))):6.1f}h")

    return "\n".join(lines) + "\n"


def week_rows(week: WeekBucket) -> list[list[str]]:
    """Rows of code, Mon..Sun, Total for one week, with a daily totals row."""
    rows = []
    for code in sorted(week.totals):
        rows.append([code or "-"] + [format_hours(d) for d in week.totals[code]])
    rows.append(["Total"] + [format_hours(d) for d in week.daily])
    return rows


def render_weekly(report: ReportData) -> str:
    """A code by weekday grid of hours for each ISO week."""
    lines = [describe_range(report)]

    for week in report.weeks:
        rows = [SUMMARY_HEADERS] + week_rows(week)
        widths = [max(len(row[i]) for row in rows) for i in range(len(SUMMARY_HEADERS))]

        lines += ["", week.label]
        for row in rows:
            cells = [row[0].ljust(widths[0])] + [c.rjust(w) for c, w in zip(row[1:], widths[1:])]
            lines.append("  ".join(cells).rstrip())

    return "\n".join(lines) + "\n"


RENDERERS: dict[str, Callable[[ReportData], str]] = {
    "default": render_default,
    "weekly": render_weekly,
}


# =============================================================================
# EXCEL REPORTS
# =============================================================================


def write_excel_summary_sheet(ws, weeks: list[WeekBucket]):
    """
    Write the Weekly Summary sheet.

    One block per week: a bold week label row, a bold header row, one row
    per code (hours Mon..Sun and total), a daily totals row, then a blank
    spacer row.
    """
    row_idx = 1
    for week in weeks:
        ws.cell(row=row_idx, column=1, value=week.label).font = Font(bold=True)
        row_idx += 1

        for col_idx, header in enumerate(SUMMARY_HEADERS, start=1):
            ws.cell(row=row_idx, column=col_idx, value=header).font = Font(bold=True)
        row_idx += 1

        for code in sorted(week.totals):
            ws.cell(row=row_idx, column=1, value=code)
            for col_idx, d in enumerate(week.totals[code], start=2):
                if d:
                    ws.cell(row=row_idx, column=col_idx, value=round(hours(d), 2))
            row_idx += 1

        ws.cell(row=row_idx, column=1, value="Total").font = Font(bold=True)
        for col_idx, d in enumerate(week.daily, start=2):
            ws.cell(row=row_idx, column=col_idx, value=round(hours(d), 2)).font = Font(bold=True)
        row_idx += 2

    ws.column_dimensions[get_column_letter(1)].width = 30


def write_excel_detail_sheet(ws, periods: list[Period]):
    """Write the Period Detail sheet: one row per period."""
    for col_idx, header in enumerate(DETAIL_HEADERS, start=1):
        ws.cell(row=1, column=col_idx, value=header).font = Font(bold=True)

    for row_idx, period in enumerate(periods, start=2):
        row_data = [
            format_time(period.begin),
            format_time(period.end),
            round(period.hours, 2),
            period.code,
            period.desc,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def create_weekly_workbook(report: ReportData) -> Workbook:
    """
    Build the weekly report workbook.

    Sheet 1: "Weekly Summary" - codes by weekday, per ISO week
    Sheet 2: "Period Detail" - every period in the report
    """
    wb = Workbook()

    ws_summary = wb.active
    ws_summary.title = "Weekly Summary"
    write_excel_summary_sheet(ws_summary, report.weeks)

    ws_detail = wb.create_sheet(title="Period Detail")
    write_excel_detail_sheet(ws_detail, report.periods)

    return wb


def create_weekly_excel_report(report: ReportData, output_path: Path):
    """Save the weekly report workbook to `output_path`."""
    wb = create_weekly_workbook(report)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}", file=sys.stderr)


def create_weekly_excel_bytes(report: ReportData) -> bytes:
    """The weekly report workbook as .xlsx bytes."""
    buffer = BytesIO()
    create_weekly_workbook(report).save(buffer)
    return buffer.getvalue()
