"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    request_log_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class CodeHours(BaseModel):
    """Hours for one code in one week, Mon..Sun then the week total."""

    code: str
    hours: list[float]


class WeekSummary(BaseModel):
    """One ISO week of a weekly report."""

    year: int
    week: int
    label: str  # e.g. "2023-W27"
    periods: int
    codes: list[CodeHours]
    daily: list[float]  # Mon..Sun then the week total, all codes


class WeeklyReportResponse(BaseModel):
    """Weekly report for an uploaded time log."""

    begin: str | None
    end: str | None
    events: int
    periods: int
    total_hours: float
    totals: dict[str, float]
    weeks: list[WeekSummary]


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    PARSE_ERROR = "PARSE_ERROR"
    NO_PERIODS = "NO_PERIODS"
    INTERNAL_ERROR = "INTERNAL_ERROR"
