"""FastAPI application entry point."""

import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import health_router, reports_router
from core import config


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    if not config.DB_PATH.exists():
        warnings.warn(f"Request log database not found at {config.DB_PATH}")
    if not config.TIMECLOCK_API_KEY:
        warnings.warn("TIMECLOCK_API_KEY is not set, report requests will be refused")

    yield


app = FastAPI(
    title="Timeclock Report API",
    description="REST API for building weekly reports from plain text time logs",
    version=config.API_VERSION,
    debug=config.API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if config.API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


app.include_router(health_router)
app.include_router(reports_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.API_DEBUG,
    )
