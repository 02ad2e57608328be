"""
Main FastAPI application
"""

import time

import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from vidtube.core.config import settings
from vidtube.core.error_handlers import register_error_handlers
from vidtube.core.logging_config import request_logger, setup_logging
from vidtube.db.database import create_tables
from vidtube.api.routes import api_router

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting VidTube API...", environment=settings.ENVIRONMENT, media_backend=settings.MEDIA_BACKEND)
    try:
        if settings.AUTO_CREATE_TABLES:
            await create_tables()
        logger.info("VidTube API started successfully!")
    except Exception as e:
        logger.error("Failed to start application", error=str(e))
        raise

    yield

    logger.info("Shutting down VidTube API...")


# Create FastAPI application
app = FastAPI(
    title="VidTube Backend API",
    description="Video sharing platform API: channels, videos, comments, likes, playlists and tweets",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Parse CORS_ORIGINS environment variable, preserving order
cors_origins = list(dict.fromkeys(
    origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()
))
logger.info("CORS origins configured", cors_origins=cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    request_logger.log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        response_time=time.perf_counter() - started,
        ip_address=request.client.host if request.client else "",
        user_agent=request.headers.get("user-agent", ""),
    )
    return response


# Register error handlers
register_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "VidTube Backend API",
        "version": "1.0.0",
        "docs": "/api/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "vidtube.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
    )
