"""FastAPI dependencies and shared error helpers."""

import secrets

from fastapi import Header, HTTPException, status

from api.models.responses import ErrorCodes
from core import config


def api_error(status_code: int, error: str, code: str, details: list[str] | None = None) -> HTTPException:
    """Build an HTTPException carrying the standard error body."""
    return HTTPException(
        status_code=status_code,
        detail={"error": error, "code": code, "details": details or []},
    )


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Check the X-API-Key header against TIMECLOCK_API_KEY.

    Raises:
        HTTPException: 500 if no key is configured, 401 if the key is wrong
    """
    expected = config.TIMECLOCK_API_KEY
    if not expected:
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "API key not configured on server",
            ErrorCodes.INTERNAL_ERROR,
        )

    # Constant-time comparison
    if not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise api_error(
            status.HTTP_401_UNAUTHORIZED,
            "Invalid or missing API key",
            ErrorCodes.UNAUTHORIZED,
        )

    return x_api_key
