"""Photo gallery API router."""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse

from memories_api.core.abstractions import PhotoRecord
from memories_api.core.errors import InvalidOptions
from memories_api.dependencies import get_current_user_id, get_photo_library
from memories_api.schemas.responses import ErrorResponse, PhotoMetadataResponse, PhotoResponse
from memories_api.services import PhotoLibrary

router = APIRouter(prefix="/photos", tags=["photos"])


def _to_response(photo: PhotoRecord) -> PhotoResponse:
    meta = photo.metadata
    return PhotoResponse(
        id=photo.id,
        userId=photo.user_id,
        filename=photo.filename,
        metadata=PhotoMetadataResponse(
            tags=sorted(meta.tags),
            uploadDate=meta.upload_date,
            description=meta.description,
            event=meta.event,
            location=meta.location,
            captionText=meta.caption_text,
        ),
    )


@router.post(
    "",
    response_model=PhotoResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
def upload_photo(
    photo: UploadFile = File(..., description="Image file"),
    metadata: str = Form(..., description="JSON: tags, description, event, location, captionText"),
    user_id: str = Depends(get_current_user_id),
    library: PhotoLibrary = Depends(get_photo_library),
):
    """Upload a photo with its metadata. The upload date is set by the server."""
    if not photo.content_type or not photo.content_type.startswith("image/"):
        raise InvalidOptions("File must be an image")
    record = library.upload(user_id, photo.file, photo.filename, metadata)
    return _to_response(record)


@router.get("", response_model=List[PhotoResponse])
def list_photos(
    tags: Optional[List[str]] = Query(None, description="Only photos with any of these tags"),
    user_id: str = Depends(get_current_user_id),
    library: PhotoLibrary = Depends(get_photo_library),
):
    """List the current user's photos."""
    return [_to_response(p) for p in library.list_photos(user_id, tags)]


@router.get("/{photo_id}", response_class=FileResponse)
def get_photo(
    photo_id: int,
    user_id: str = Depends(get_current_user_id),
    library: PhotoLibrary = Depends(get_photo_library),
):
    """Serve a photo file."""
    return FileResponse(library.get_photo_file(user_id, photo_id))
