"""Abstract base class for photo persistence backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional


@dataclass(frozen=True)
class PhotoMetadata:
    """User-supplied metadata stored alongside a photo."""
    upload_date: str  # ISO-8601, as stored
    tags: FrozenSet[str] = field(default_factory=frozenset)
    description: Optional[str] = None
    event: Optional[str] = None
    location: Optional[str] = None
    caption_text: Optional[str] = None


@dataclass(frozen=True)
class PhotoRecord:
    """A stored photo. Owned by the persistence layer; read-only here."""
    id: int
    user_id: str
    filename: str
    path: Path
    metadata: PhotoMetadata


class BasePhotoStore(ABC):
    """Abstract base class for photo storage (Supabase, in-memory for tests, etc.)."""

    @property
    @abstractmethod
    def store_name(self) -> str:
        """Return the store identifier."""
        pass

    @abstractmethod
    def get_photo(self, photo_id: int) -> Optional[PhotoRecord]:
        """Return the photo with this id, or None when it does not exist."""
        pass

    @abstractmethod
    def list_photos_for_user(self, user_id: str) -> List[PhotoRecord]:
        """Return every photo owned by ``user_id``."""
        pass

    @abstractmethod
    def create_photo(self, user_id: str, filename: str, metadata: PhotoMetadata) -> PhotoRecord:
        """Persist a new photo whose file is already saved as ``filename``."""
        pass
