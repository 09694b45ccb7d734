"""Weekly report endpoint."""

import asyncio
import time
from datetime import datetime, timedelta
from typing import Annotated, Literal

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import Response

from api.dependencies import api_error, verify_api_key
from api.logging import RequestLog, log_request
from api.models.responses import (
    CodeHours,
    ErrorCodes,
    WeeklyReportResponse,
    WeekSummary,
)
from core import config
from core.codetree import build_code_tree
from core.timelog import TimeLogError, local_time, parse_timelog
from models.events import ReportData
from services.reports import build_report, create_weekly_excel_bytes, hours

router = APIRouter(prefix="/v1")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def parse_range_date(date_str: str | None, field: str) -> datetime | None:
    """Parse a YYYY-MM-DD form field to local midnight."""
    if not date_str:
        return None
    try:
        d = datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            f"Invalid {field} format",
            ErrorCodes.INVALID_REQUEST,
            ["Expected format: YYYY-MM-DD"],
        )
    return local_time(d.year, d.month, d.day)


def parse_codes_field(codes: str | None) -> list[str]:
    """Split the comma separated codes field."""
    if not codes:
        return []
    return [c.strip() for c in codes.split(",") if c.strip()]


def to_response(report: ReportData, events: int) -> WeeklyReportResponse:
    """Convert report data to the JSON response model (durations as hours)."""
    weeks = [
        WeekSummary(
            year=week.year,
            week=week.number,
            label=week.label,
            periods=len(week.periods),
            codes=[
                CodeHours(code=code, hours=[round(hours(d), 2) for d in week.totals[code]])
                for code in sorted(week.totals)
            ],
            daily=[round(hours(d), 2) for d in week.daily],
        )
        for week in report.weeks
    ]
    totals = {code: round(hours(d), 2) for code, d in sorted(report.totals.items())}
    return WeeklyReportResponse(
        begin=report.begin.isoformat() if report.begin else None,
        end=report.end.isoformat() if report.end else None,
        events=events,
        periods=len(report.periods),
        total_hours=round(sum(totals.values()), 2),
        totals=totals,
        weeks=weeks,
    )


def _process_in_thread(
    content: str,
    begin: datetime | None,
    end: datetime | None,
    codes: list[str],
) -> tuple[ReportData, int]:
    """
    Parse the uploaded log and build the report.

    With no begin, the report starts just before the first event. The
    code tree is built from the codes used in the log itself.
    """
    log = parse_timelog(content)
    log.sort()
    if begin is None:
        begin = log[0].at - timedelta(minutes=1) if log else local_time(1970, 1, 2)
    report = build_report(log, begin, end, codes, build_code_tree(log.codes()))
    return report, len(log)


@router.post("/reports/weekly")
async def weekly_report_endpoint(
    request: Request,
    file: Annotated[UploadFile, File(description="Plain text time log")],
    begin: Annotated[str | None, Form(description="Report start date (YYYY-MM-DD)")] = None,
    end: Annotated[str | None, Form(description="Report end date (YYYY-MM-DD)")] = None,
    codes: Annotated[str | None, Form(description="Comma separated codes ('all', 'empty', 'X', 'X:...')")] = None,
    output: Annotated[Literal["json", "xlsx"], Form(description="Response format")] = "json",
    _api_key: str = Depends(verify_api_key),
):
    """
    Build a weekly report from an uploaded time log.

    Returns the report as JSON, or as an Excel workbook.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/reports/weekly",
        method="POST",
        client_ip=get_client_ip(request),
        file_name=file.filename,
        range_begin=begin,
        range_end=end,
        codes=codes,
        output=output,
    )

    try:
        raw = await file.read()
        request_log.file_size_bytes = len(raw)

        if len(raw) > config.MAX_UPLOAD_SIZE_BYTES:
            raise api_error(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"File exceeds maximum size of {config.MAX_UPLOAD_SIZE_MB} MB",
                ErrorCodes.FILE_TOO_LARGE,
                [f"File size: {len(raw) / (1024 * 1024):.1f} MB"],
            )

        try:
            content = raw.decode("utf-8").replace("\r\n", "\n")
        except UnicodeDecodeError:
            raise api_error(
                status.HTTP_400_BAD_REQUEST,
                "Time log is not valid UTF-8 text",
                ErrorCodes.INVALID_REQUEST,
            )

        range_begin = parse_range_date(begin, "begin")
        range_end = parse_range_date(end, "end")

        report, event_count = await asyncio.to_thread(
            _process_in_thread,
            content,
            range_begin,
            range_end,
            parse_codes_field(codes),
        )

        if not report.periods:
            raise api_error(
                status.HTTP_404_NOT_FOUND,
                "No periods in given time range",
                ErrorCodes.NO_PERIODS,
            )

        body = to_response(report, event_count)

        request_log.status_code = 200
        request_log.periods_reported = body.periods
        request_log.total_hours = body.total_hours
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        if output == "xlsx":
            filename = f"timeclock_weekly_report_{report.weeks[-1].label}.xlsx"
            return Response(
                content=create_weekly_excel_bytes(report),
                media_type=XLSX_MEDIA_TYPE,
                headers={"Content-Disposition": f'attachment; filename="{filename}"'},
            )
        return body

    except HTTPException as e:
        request_log.status_code = e.status_code
        if isinstance(e.detail, dict):
            request_log.error_code = e.detail.get("code")
            request_log.error_message = e.detail.get("error")
            for detail in e.detail.get("details", []):
                request_log.details.append(("validation_error", detail))
        else:
            request_log.error_message = str(e.detail)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        raise

    except TimeLogError as e:
        request_log.status_code = 422
        request_log.error_code = ErrorCodes.PARSE_ERROR
        request_log.error_message = str(e)
        request_log.details.append(("parse_error", f"line {e.line}"))
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise api_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Time log could not be parsed",
            ErrorCodes.PARSE_ERROR,
            [str(e)],
        )

    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            ErrorCodes.INTERNAL_ERROR,
        )

    finally:
        # Always log the request
        try:
            log_request(request_log)
        except Exception as e:
            # Don't fail the request if logging fails
            print(f"Request log write failed: {e}")
