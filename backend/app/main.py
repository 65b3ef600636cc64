"""
FastAPI application entry point for Speech Review.
Configures the application, middleware, routes, static dataset files, and error handlers.
"""

from typing import Dict, AsyncGenerator
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

from app.config import get_settings
from app.db.database import init_db
from app.routers import reviews
from app.utils.logger import setup_logging, set_correlation_id, get_correlation_id
from app.utils.metadata_reader import MetadataReadError

# Initialize settings and logging
settings = get_settings()
logger = setup_logging(settings.log_level, settings.log_format)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Starting Speech Review API",
                version=settings.app_version,
                dataset_path=settings.dataset_path)

    try:
        init_db()
        logger.info("Database initialization completed")
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        raise

    yield

    logger.info("Shutting down Speech Review API")


app = FastAPI(
    title="Speech Review API",
    description="Review and correct transcripts of an audio dataset",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next) -> Response:
    """Add correlation ID to all requests for tracing."""
    correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

    logger.info("Request started",
                method=request.method,
                url=str(request.url),
                client_ip=request.client.host if request.client else "unknown")

    response = await call_next(request)

    response.headers["X-Correlation-ID"] = correlation_id

    logger.info("Request completed",
                method=request.method,
                url=str(request.url),
                status_code=response.status_code)

    return response


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build the JSON error envelope shared by all handlers."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "correlation_id": get_correlation_id() or set_correlation_id()
            }
        }
    )


@app.exception_handler(MetadataReadError)
async def metadata_read_exception_handler(request: Request, exc: MetadataReadError) -> JSONResponse:
    """Handle unreadable dataset metadata."""
    logger.error("Dataset metadata unavailable", error=str(exc), url=str(request.url))
    return error_response(500, "DATASET_UNAVAILABLE", "The dataset metadata file could not be read")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    logger.error("Unhandled exception",
                 error=str(exc),
                 error_type=type(exc).__name__,
                 url=str(request.url))
    return error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")


# Include routers
app.include_router(reviews.router)

# Raw dataset files (metadata.tsv, wavs/...)
app.mount(
    settings.static_prefix,
    StaticFiles(directory=settings.dataset_path, check_dir=False),
    name="static",
)


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "speech-review-api",
        "version": settings.app_version
    }


@app.get("/")
async def root() -> Dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "Speech Review API",
        "version": settings.app_version,
        "description": "Review and correct transcripts of an audio dataset",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower()
    )
