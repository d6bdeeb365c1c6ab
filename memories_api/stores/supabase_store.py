"""Supabase-backed photo store."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from memories_api.core.abstractions import BasePhotoStore, PhotoMetadata, PhotoRecord
from memories_api.core.errors import DataIntegrity

logger = logging.getLogger(__name__)

PHOTO_COLUMNS = "id, user_id, filename, metadata"

# Optional free-text metadata fields: json key -> PhotoMetadata attribute
TEXT_FIELDS = {
    "description": "description",
    "event": "event",
    "location": "location",
    "captionText": "caption_text",
}


class SupabasePhotoStore(BasePhotoStore):
    """Reads and writes the ``photos`` table; files live under ``storage_dir``."""

    TABLE = "photos"

    def __init__(self, storage_dir: Union[str, Path], client):
        self._storage_dir = Path(storage_dir).resolve()
        self._client = client

    @property
    def store_name(self) -> str:
        return "supabase"

    def _photo_path(self, photo_id: int, filename: str) -> Path:
        path = (self._storage_dir / filename).resolve()
        if not path.is_relative_to(self._storage_dir):
            raise DataIntegrity(f"Photo {photo_id} points outside the photo storage directory")
        return path

    def _row_to_record(self, row: dict) -> PhotoRecord:
        """Map a ``photos`` row (camelCase metadata json) to a PhotoRecord."""
        photo_id = row.get("id")
        metadata = row.get("metadata")
        filename = row.get("filename")
        if not isinstance(metadata, dict) or not isinstance(filename, str) or not filename:
            raise DataIntegrity(f"Photo {photo_id} has malformed stored data")

        tags = metadata.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise DataIntegrity(f"Photo {photo_id} has malformed tags")

        upload_date = metadata.get("uploadDate", "")
        if not isinstance(upload_date, str):
            raise DataIntegrity(f"Photo {photo_id} has a malformed uploadDate")

        text = {}
        for key, attr in TEXT_FIELDS.items():
            value = metadata.get(key)
            if value is not None and not isinstance(value, str):
                raise DataIntegrity(f"Photo {photo_id} has a malformed {key}")
            text[attr] = value

        return PhotoRecord(
            id=int(photo_id),
            user_id=str(row.get("user_id")),
            filename=filename,
            path=self._photo_path(photo_id, filename),
            metadata=PhotoMetadata(
                upload_date=upload_date,
                tags=frozenset(tags),
                **text,
            ),
        )

    def get_photo(self, photo_id: int) -> Optional[PhotoRecord]:
        """Fetch a single photo by id."""
        result = (
            self._client.table(self.TABLE)
            .select(PHOTO_COLUMNS)
            .eq("id", photo_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return self._row_to_record(result.data[0])

    def list_photos_for_user(self, user_id: str) -> List[PhotoRecord]:
        """Fetch all photos owned by a user, oldest first."""
        result = (
            self._client.table(self.TABLE)
            .select(PHOTO_COLUMNS)
            .eq("user_id", user_id)
            .order("id")
            .execute()
        )
        return [self._row_to_record(row) for row in (result.data or [])]

    def create_photo(self, user_id: str, filename: str, metadata: PhotoMetadata) -> PhotoRecord:
        """Insert a photo row and return the stored record."""
        stored = {"tags": sorted(metadata.tags), "uploadDate": metadata.upload_date}
        for key, attr in TEXT_FIELDS.items():
            value = getattr(metadata, attr)
            if value is not None:
                stored[key] = value

        result = (
            self._client.table(self.TABLE)
            .insert({"user_id": user_id, "filename": filename, "metadata": stored})
            .execute()
        )
        if not result.data:
            raise DataIntegrity(f"Insert of photo {filename} returned no row")

        record = self._row_to_record(result.data[0])
        logger.info(f"Stored photo {record.id} for user {user_id}")
        return record
