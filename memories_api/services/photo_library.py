"""A user's photo library: upload, browse by tag, fetch files."""

import logging
import secrets
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Union

from pydantic import ValidationError

from memories_api.core.abstractions import BasePhotoStore, PhotoMetadata, PhotoRecord
from memories_api.core.errors import InvalidOptions, NotFound, Unauthenticated
from memories_api.schemas.requests import PhotoUploadMetadata

logger = logging.getLogger(__name__)

MAX_SUFFIX_LENGTH = 5  # ".jpeg", ".heic"


def upload_timestamp() -> str:
    """Current UTC time in the stored format, e.g. 2024-05-01T10:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalise_tags(tags: Iterable[str]) -> frozenset:
    return frozenset(t.strip() for t in tags if t and t.strip())


def matches_any_tag(photo: PhotoRecord, wanted: Iterable[str]) -> bool:
    """Case-insensitive: true when the photo carries at least one wanted tag."""
    photo_tags = {t.lower() for t in photo.metadata.tags}
    return any(t.lower() in photo_tags for t in wanted)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _stored_name(original_name: Optional[str]) -> str:
    """Random file name, keeping a short alphanumeric extension for decoders."""
    suffix = Path(original_name or "").suffix.lower()
    if not (1 < len(suffix) <= MAX_SUFFIX_LENGTH and suffix[1:].isalnum()):
        suffix = ""
    return secrets.token_hex(16) + suffix


class PhotoLibrary:
    """Photo uploads and gallery reads for the signed-in user."""

    def __init__(self, store: BasePhotoStore, storage_dir: Union[str, Path]):
        self._store = store
        self._storage_dir = Path(storage_dir)

    def list_photos(self, user_id: Optional[str], tags: Optional[List[str]] = None) -> List[PhotoRecord]:
        """List the user's photos, optionally only those with any of ``tags``."""
        if not user_id:
            raise Unauthenticated("Authenticated user required")
        photos = self._store.list_photos_for_user(user_id)
        wanted = normalise_tags(tags or [])
        if wanted:
            photos = [p for p in photos if matches_any_tag(p, wanted)]
        return photos

    def get_photo_file(self, user_id: str, photo_id: int) -> Path:
        """Path of one of the user's photo files.

        Other users' photos look the same as missing ones.
        """
        photo = self._store.get_photo(photo_id)
        if photo is None or photo.user_id != user_id or not photo.path.is_file():
            raise NotFound(f"Photo {photo_id} not found")
        return photo.path

    def upload(
        self,
        user_id: Optional[str],
        source: BinaryIO,
        original_name: Optional[str],
        metadata_json: str,
    ) -> PhotoRecord:
        """Save an uploaded file and record it with the given metadata."""
        if not user_id:
            raise Unauthenticated("Authenticated user required")

        try:
            fields = PhotoUploadMetadata.model_validate_json(metadata_json)
        except ValidationError as e:
            raise InvalidOptions(f"Invalid photo metadata: {e.errors()[0].get('msg')}") from e

        metadata = PhotoMetadata(
            upload_date=upload_timestamp(),
            tags=normalise_tags(fields.tags),
            description=_blank_to_none(fields.description),
            event=_blank_to_none(fields.event),
            location=_blank_to_none(fields.location),
            caption_text=_blank_to_none(fields.caption_text),
        )

        self._storage_dir.mkdir(parents=True, exist_ok=True)
        filename = _stored_name(original_name)
        path = self._storage_dir / filename
        with open(path, 'wb') as f:
            shutil.copyfileobj(source, f)

        try:
            photo = self._store.create_photo(user_id, filename, metadata)
        except Exception:
            # Do not leave an orphaned file behind a failed insert
            path.unlink(missing_ok=True)
            raise

        logger.info(f"User {user_id} uploaded photo {photo.id} ({path.stat().st_size} bytes)")
        return photo
