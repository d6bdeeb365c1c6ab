"""Response schemas for the API."""

from typing import List, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""
    error: str
    detail: str
    exit_code: Optional[int] = None


class PhotoMetadataResponse(BaseModel):
    tags: List[str] = []
    uploadDate: str
    description: Optional[str] = None
    event: Optional[str] = None
    location: Optional[str] = None
    captionText: Optional[str] = None


class PhotoResponse(BaseModel):
    """A photo as listed in the gallery."""
    id: int
    userId: str
    filename: str
    metadata: PhotoMetadataResponse


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    ffmpeg_available: bool
    uptime_seconds: float
