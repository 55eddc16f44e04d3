"""
Label Service - FastAPI application.

Serves the label session API under /api/v1 plus health and index routes.
"""

import os
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from label_service import __version__
from label_service.config import settings
from label_service.logger import get_logger
from label_service.models.common import ErrorResponse
from label_service.routes.label_routes import router as label_router

logger = get_logger(__name__)


def export_dir_status() -> dict:
    """Where exports go and whether the service can write there."""
    export_dir = settings.export_dir.resolve()
    return {
        "path": str(export_dir),
        "exists": export_dir.is_dir(),
        "writable": export_dir.is_dir() and os.access(export_dir, os.W_OK)
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.export_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Label Service starting", extra={
        "version": __version__,
        "environment": settings.environment,
        "export_dir": export_dir_status(),
        "page_format": settings.page_format,
        "raster_scale": settings.raster_scale
    })

    yield

    logger.info("Label Service shutting down")


app = FastAPI(
    title="Label Service",
    description="Handling-unit label rendering, QR payloads and print-ready PDF export",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    """Log and wrap anything the routes did not handle."""
    request_id = str(uuid4())
    logger.error("Unhandled exception", extra={
        "request_id": request_id,
        "path": request.url.path,
        "method": request.method,
        "error_type": type(exc).__name__,
        "error": str(exc)
    }, exc_info=True)

    body = ErrorResponse(
        error_code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        details={"error": str(exc)} if settings.is_development else None,
        request_id=request_id
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(mode="json")
    )


@app.get("/health")
async def health_check():
    """Liveness plus export directory state."""
    return {
        "status": "healthy",
        "version": __version__,
        "environment": settings.environment,
        "export_dir": export_dir_status()
    }


@app.get("/")
async def root():
    return {
        "service": "Label Service",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "api": "/api/v1/labels/session"
    }


app.include_router(label_router, prefix="/api/v1", tags=["labels"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "label_service.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level
    )
