"""SQLite request logging for the API."""

import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from core import config

DETAIL_TYPES = ("parse_error", "validation_error", "warning")


@dataclass
class RequestLog:
    """Captured request/response data for one report request."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    file_size_bytes: int | None = None
    file_name: str | None = None
    range_begin: str | None = None
    range_end: str | None = None
    codes: str | None = None
    output: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    periods_reported: int | None = None
    total_hours: float | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)


def create_request_tables(conn: sqlite3.Connection):
    """Create the request log tables if they don't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS api_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT UNIQUE NOT NULL,
            timestamp TEXT NOT NULL,
            endpoint TEXT NOT NULL,
            method TEXT NOT NULL,
            client_ip TEXT,
            file_size_bytes INTEGER,
            file_name TEXT,
            range_begin TEXT,
            range_end TEXT,
            codes TEXT,
            output TEXT,
            status_code INTEGER NOT NULL,
            error_code TEXT,
            error_message TEXT,
            processing_time_ms INTEGER NOT NULL,
            periods_reported INTEGER,
            total_hours REAL
        )
    """)
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS api_request_details (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT NOT NULL,
            detail_type TEXT NOT NULL CHECK(detail_type IN {DETAIL_TYPES!r}),
            message TEXT NOT NULL,
            FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
        )
    """)
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)"
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)"
    )
    conn.commit()


def log_request(log: RequestLog, db_path: Path | None = None) -> None:
    """Write a request log row, and its details, to the SQLite database."""
    conn = sqlite3.connect(db_path or config.DB_PATH)
    try:
        cursor = conn.cursor()

        cursor.execute(
            """
            INSERT INTO api_requests (
                request_id, timestamp, endpoint, method, client_ip,
                file_size_bytes, file_name, range_begin, range_end, codes, output,
                status_code, error_code, error_message, processing_time_ms,
                periods_reported, total_hours
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                log.request_id,
                log.timestamp,
                log.endpoint,
                log.method,
                log.client_ip,
                log.file_size_bytes,
                log.file_name,
                log.range_begin,
                log.range_end,
                log.codes,
                log.output,
                log.status_code,
                log.error_code,
                log.error_message,
                log.processing_time_ms,
                log.periods_reported,
                log.total_hours,
            ),
        )

        for detail_type, message in log.details:
            cursor.execute(
                """
                INSERT INTO api_request_details (request_id, detail_type, message)
                VALUES (?, ?, ?)
            """,
                (log.request_id, detail_type, message),
            )

        conn.commit()
    finally:
        conn.close()
