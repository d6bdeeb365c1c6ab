"""Photo Memories - photo album API with slideshow video generation."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from memories_api.config import settings
from memories_api.core.errors import InvalidOptions, SlideshowError
from memories_api.routers import (
    video_router,
    photos_router,
    health_router,
)
from memories_api.services.encoder import ffmpeg_available

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.version}")
    if not ffmpeg_available(settings.ffmpeg_binary):
        logger.warning(f"FFmpeg not found ({settings.ffmpeg_binary}); video generation will fail")

    yield

    # Shutdown
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Personal photo album with slideshow video generation",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SlideshowError)
async def slideshow_error_handler(request: Request, exc: SlideshowError):
    """Render pipeline failures as {error, detail} with the matching status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: [{exc.kind}] {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or out-of-range request bodies are invalid options (400)."""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=InvalidOptions.status_code,
        content=InvalidOptions(problems or "Invalid request").to_dict(),
    )


# Include routers
app.include_router(health_router)
app.include_router(video_router, prefix="/api/v1")
app.include_router(photos_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "memories_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
