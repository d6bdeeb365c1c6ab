"""Request schemas for the API."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

MIN_PHOTOS = 2
MIN_DURATION = 1.0
MAX_DURATION = 10.0


class SortBy(str, Enum):
    """How the selected photos are ordered in the video."""
    UPLOAD_DATE = "uploadDate"
    EVENT = "event"
    CUSTOM = "custom"


class TransitionKind(str, Enum):
    """Visual style applied between photos."""
    FADE = "fade"
    SLIDE = "slide"
    ZOOM = "zoom"


class VideoRequest(BaseModel):
    """Slideshow generation options, as sent by the gallery's video dialog."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    photo_ids: List[int] = Field(..., alias="photoIds", min_length=MIN_PHOTOS)
    sort_by: SortBy = Field(default=SortBy.UPLOAD_DATE, alias="sortBy")
    transition: TransitionKind = TransitionKind.FADE
    duration: float = Field(default=3.0, ge=MIN_DURATION, le=MAX_DURATION)  # seconds per photo
    captions: bool = True
    title: Optional[str] = Field(default=None, max_length=200)
    music: Optional[str] = None  # accepted for compatibility, not used by the encoder


class PhotoUploadMetadata(BaseModel):
    """The ``metadata`` JSON field sent with an uploaded photo.

    The upload date is stamped by the server; a client-supplied one is ignored.
    """
    model_config = ConfigDict(populate_by_name=True)

    tags: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    event: Optional[str] = None
    location: Optional[str] = None
    caption_text: Optional[str] = Field(default=None, alias="captionText")
