"""Health and system status API router."""

import time
from fastapi import APIRouter

from memories_api.schemas.responses import HealthResponse
from memories_api.services.encoder import ffmpeg_available
from memories_api.config import settings

router = APIRouter(tags=["system"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
def health_check():
    """Basic health check; degraded when FFmpeg is missing."""
    available = ffmpeg_available(settings.ffmpeg_binary)

    return HealthResponse(
        status="healthy" if available else "degraded",
        version=settings.version,
        ffmpeg_available=available,
        uptime_seconds=time.time() - _start_time
    )
