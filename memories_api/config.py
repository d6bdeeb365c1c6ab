"""Application configuration."""

import tempfile
from pathlib import Path
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App info
    app_name: str = "Photo Memories"
    version: str = "0.1.0"
    debug: bool = False

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: Optional[str] = None

    # Storage
    photo_storage_dir: str = "./uploads"
    video_temp_dir: str = str(Path(tempfile.gettempdir()) / "photo-memories-videos")

    # Encoder settings
    ffmpeg_binary: str = "ffmpeg"
    video_width: int = 1280
    video_height: int = 720
    video_fps: int = 30
    video_preset: str = "medium"  # libx264 preset
    video_crf: int = 23  # lower = better quality, larger file
    caption_font_file: Optional[str] = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
    caption_font_size: int = 36

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
