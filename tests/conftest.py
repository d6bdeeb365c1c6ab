"""Shared test fixtures."""

import os

os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from memories_api.core.abstractions import (
    BaseEncoder,
    BasePhotoStore,
    EncodeResult,
    PhotoMetadata,
    PhotoRecord,
)
from memories_api.services import ArtifactManager, SlideshowService

OWNER = "user-1"
OTHER_USER = "user-2"


def make_photo(
    photo_dir: Path,
    photo_id: int,
    user_id: str = OWNER,
    upload_date: str = "2024-05-01T10:00:00.000Z",
    event: Optional[str] = None,
    caption_text: Optional[str] = None,
    filename: Optional[str] = None,
) -> PhotoRecord:
    filename = filename or f"photo-{photo_id}.jpg"
    path = photo_dir / filename
    path.write_bytes(b"\xff\xd8fake-jpeg-" + str(photo_id).encode())
    return PhotoRecord(
        id=photo_id,
        user_id=user_id,
        filename=filename,
        path=path,
        metadata=PhotoMetadata(
            upload_date=upload_date,
            tags=frozenset({"family"}),
            event=event,
            caption_text=caption_text,
        ),
    )


def leftover_artifacts(temp_dir: Path) -> List[Path]:
    if not temp_dir.exists():
        return []
    return sorted(temp_dir.iterdir())


@dataclass
class InMemoryPhotoStore(BasePhotoStore):
    """In-memory photo store for tests."""

    photos: Dict[int, PhotoRecord] = field(default_factory=dict)
    lookups: List[int] = field(default_factory=list)
    storage_dir: Path = field(default_factory=Path)

    @property
    def store_name(self) -> str:
        return "memory"

    def add(self, photo: PhotoRecord) -> PhotoRecord:
        self.photos[photo.id] = photo
        return photo

    def get_photo(self, photo_id: int) -> Optional[PhotoRecord]:
        self.lookups.append(photo_id)
        return self.photos.get(photo_id)

    def list_photos_for_user(self, user_id: str) -> List[PhotoRecord]:
        return [p for p in self.photos.values() if p.user_id == user_id]

    def create_photo(self, user_id: str, filename: str, metadata: PhotoMetadata) -> PhotoRecord:
        photo_id = max(self.photos, default=0) + 1
        return self.add(PhotoRecord(
            id=photo_id,
            user_id=user_id,
            filename=filename,
            path=self.storage_dir / filename,
            metadata=metadata,
        ))


@dataclass
class EncodeCall:
    timeline: object
    manifest_path: Path
    manifest: str
    output_path: Path


@dataclass
class RecordingEncoder(BaseEncoder):
    """Encoder double that records calls instead of launching FFmpeg."""

    payload: bytes = b"\x00\x00\x00\x18ftypmp42fake-video"
    error: Optional[Exception] = None
    write_partial: bool = False
    calls: List[EncodeCall] = field(default_factory=list)

    @property
    def encoder_name(self) -> str:
        return "recording"

    def encode(self, timeline, manifest_path: Path, output_path: Path) -> EncodeResult:
        self.calls.append(EncodeCall(
            timeline=timeline,
            manifest_path=manifest_path,
            manifest=manifest_path.read_text(),
            output_path=output_path,
        ))
        if self.write_partial:
            output_path.write_bytes(b"partial")
        if self.error is not None:
            raise self.error
        if self.payload:
            output_path.write_bytes(self.payload)
        return EncodeResult(
            output_path=output_path,
            duration_seconds=timeline.total_duration,
            command=["recording"],
        )


@pytest.fixture
def photo_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path / "videos"


@pytest.fixture
def store(photo_dir: Path) -> InMemoryPhotoStore:
    store = InMemoryPhotoStore(storage_dir=photo_dir)
    store.add(make_photo(photo_dir, 1, upload_date="2024-05-03T09:00:00Z", event="Wedding"))
    store.add(make_photo(photo_dir, 2, upload_date="2024-05-01T09:00:00Z", event="Beach", caption_text="Sunset"))
    store.add(make_photo(photo_dir, 3, upload_date="2024-05-02T09:00:00Z"))
    store.add(make_photo(photo_dir, 5, upload_date="2024-06-01T12:00:00Z", caption_text="First steps"))
    store.add(make_photo(photo_dir, 7, upload_date="2024-04-01T12:00:00Z"))
    store.add(make_photo(photo_dir, 9, user_id=OTHER_USER))
    return store


@pytest.fixture
def encoder() -> RecordingEncoder:
    return RecordingEncoder()


@pytest.fixture
def artifacts(temp_dir: Path) -> ArtifactManager:
    return ArtifactManager(temp_dir)


@pytest.fixture
def service(
    store: InMemoryPhotoStore,
    encoder: RecordingEncoder,
    artifacts: ArtifactManager,
) -> SlideshowService:
    return SlideshowService(store, encoder, artifacts)
