"""API Pydantic models."""

from .responses import (
    CodeHours,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    WeeklyReportResponse,
    WeekSummary,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "CodeHours",
    "WeekSummary",
    "WeeklyReportResponse",
]
