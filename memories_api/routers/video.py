"""Slideshow video API router."""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from memories_api.dependencies import get_current_user_id, get_slideshow_service
from memories_api.schemas.requests import VideoRequest
from memories_api.schemas.responses import ErrorResponse
from memories_api.services import SlideshowService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["video"])

ERROR_RESPONSES = {
    status: {"model": ErrorResponse}
    for status in (400, 401, 403, 404, 500)
}


@router.post(
    "/generate-video",
    response_class=StreamingResponse,
    responses={200: {"content": {"video/mp4": {}}}, **ERROR_RESPONSES},
)
def generate_video(
    request: VideoRequest,
    user_id: str = Depends(get_current_user_id),
    service: SlideshowService = Depends(get_slideshow_service),
):
    """
    Generate a slideshow video from the selected photos.

    Blocks until the encoder finishes, then streams the MP4. The temp files
    are removed once the body has been sent (or the client goes away).
    """
    video = service.generate(user_id, request)

    return StreamingResponse(
        video.iter_bytes(),
        media_type="video/mp4",
        headers={
            "Content-Disposition": f'attachment; filename="{video.filename}"',
            "Content-Length": str(video.size_bytes),
        },
        background=BackgroundTask(video.close),
    )
