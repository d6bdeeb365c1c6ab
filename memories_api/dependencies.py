"""FastAPI dependency injection."""

import logging
from fastapi import Depends, Header
from functools import lru_cache
from typing import Optional

from memories_api.config import settings
from memories_api.core.abstractions import BaseEncoder, BasePhotoStore
from memories_api.core.errors import Unauthenticated
from memories_api.stores import SupabasePhotoStore
from memories_api.services import ArtifactManager, FFmpegEncoder, PhotoLibrary, SlideshowService

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client():
    """Get the shared Supabase client."""
    from supabase import create_client

    key = settings.supabase_service_role_key or settings.supabase_anon_key
    return create_client(settings.supabase_url, key)


# Store singleton
@lru_cache()
def get_photo_store() -> BasePhotoStore:
    """Get the photo store instance."""
    return SupabasePhotoStore(
        storage_dir=settings.photo_storage_dir,
        client=get_supabase_client(),
    )


@lru_cache()
def get_encoder() -> BaseEncoder:
    """Get the slideshow encoder."""
    return FFmpegEncoder(
        binary=settings.ffmpeg_binary,
        width=settings.video_width,
        height=settings.video_height,
        fps=settings.video_fps,
        preset=settings.video_preset,
        crf=settings.video_crf,
        font_file=settings.caption_font_file,
        font_size=settings.caption_font_size,
    )


@lru_cache()
def get_artifact_manager() -> ArtifactManager:
    """Get the temp artifact manager."""
    return ArtifactManager(settings.video_temp_dir)


# Service dependencies
def get_slideshow_service(
    store: BasePhotoStore = Depends(get_photo_store),
    encoder: BaseEncoder = Depends(get_encoder),
    artifacts: ArtifactManager = Depends(get_artifact_manager),
) -> SlideshowService:
    """Get slideshow service instance."""
    return SlideshowService(store, encoder, artifacts)


def get_photo_library(
    store: BasePhotoStore = Depends(get_photo_store),
) -> PhotoLibrary:
    """Get photo library instance."""
    return PhotoLibrary(store, settings.photo_storage_dir)


# Auth dependency
async def get_current_user_id(
    authorization: Optional[str] = Header(None)
) -> str:
    """
    Extract user ID from authorization header.

    The bearer token is a Supabase session JWT, validated against Supabase auth.
    """
    if not authorization:
        raise Unauthenticated("Authorization header required")

    if not authorization.startswith("Bearer "):
        raise Unauthenticated("Invalid authorization format")

    token = authorization[7:]

    try:
        user = get_supabase_client().auth.get_user(token)
    except Exception as e:
        logger.info(f"Token validation failed: {e}")
        raise Unauthenticated("Invalid token") from e

    if user and user.user:
        return user.user.id

    raise Unauthenticated("Invalid token")
