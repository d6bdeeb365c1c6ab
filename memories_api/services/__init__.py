"""Business logic services."""

from .artifacts import ArtifactManager, ArtifactScope, ArtifactState
from .encoder import FFmpegEncoder
from .photo_library import PhotoLibrary
from .slideshow_service import SlideshowService, SlideshowVideo

__all__ = [
    "ArtifactManager",
    "ArtifactScope",
    "ArtifactState",
    "FFmpegEncoder",
    "PhotoLibrary",
    "SlideshowService",
    "SlideshowVideo",
]
