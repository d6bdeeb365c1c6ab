"""Pydantic schemas for API requests and responses."""

from .requests import (
    PhotoUploadMetadata,
    SortBy,
    TransitionKind,
    VideoRequest,
)
from .responses import (
    ErrorResponse,
    PhotoMetadataResponse,
    PhotoResponse,
    HealthResponse,
)

__all__ = [
    # Requests
    "PhotoUploadMetadata",
    "SortBy",
    "TransitionKind",
    "VideoRequest",
    # Responses
    "ErrorResponse",
    "PhotoMetadataResponse",
    "PhotoResponse",
    "HealthResponse",
]
