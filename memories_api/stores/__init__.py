"""Photo storage implementations."""

from .supabase_store import SupabasePhotoStore

__all__ = ["SupabasePhotoStore"]
