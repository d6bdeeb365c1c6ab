"""Abstract base classes for the pipeline's external collaborators."""

from .base_photo_store import BasePhotoStore, PhotoRecord, PhotoMetadata
from .base_encoder import BaseEncoder, EncodeResult

__all__ = [
    # Base classes
    "BasePhotoStore",
    "BaseEncoder",
    # Data classes
    "PhotoRecord",
    "PhotoMetadata",
    "EncodeResult",
]
