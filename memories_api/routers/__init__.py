"""API routers."""

from .video import router as video_router
from .photos import router as photos_router
from .health import router as health_router

__all__ = [
    "video_router",
    "photos_router",
    "health_router",
]
