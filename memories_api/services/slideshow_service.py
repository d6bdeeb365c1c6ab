"""Slideshow video generation.

Runs one request end to end: resolve the photos, order them, plan the
timeline, then encode inside a request-scoped set of temp files. Nothing is
written to disk until the plan is complete, and the temp files are removed
after delivery or on any failure.
"""

import logging
from contextlib import ExitStack
from typing import Iterator, Optional

from memories_api.core.abstractions import BaseEncoder, BasePhotoStore
from memories_api.schemas.requests import VideoRequest
from memories_api.services.artifacts import ArtifactManager, ArtifactScope
from memories_api.services.encoder import render_manifest
from memories_api.services.ordering import order_photos
from memories_api.services.photo_resolver import resolve_photos
from memories_api.services.timeline import ResolvedTimeline, plan_timeline

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
DEFAULT_FILENAME = "memory.mp4"


class SlideshowVideo:
    """A finished video that still owns its temp files.

    Iterating ``iter_bytes`` streams the file and cleans up when the stream
    ends, fails or is abandoned. ``close`` does the same without streaming.
    """

    def __init__(
        self,
        scope: ArtifactScope,
        timeline: ResolvedTimeline,
        size_bytes: int,
        filename: str = DEFAULT_FILENAME,
    ):
        self._scope = scope
        self.timeline = timeline
        self.size_bytes = size_bytes
        self.filename = filename

    @property
    def path(self):
        return self._scope.output_path

    @property
    def duration_seconds(self) -> float:
        return self.timeline.total_duration

    @property
    def closed(self) -> bool:
        return self._scope.closed

    def iter_bytes(self, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        try:
            with open(self._scope.output_path, 'rb') as f:
                while chunk := f.read(chunk_size):
                    yield chunk
            self._scope.mark_delivered()
        finally:
            self._scope.close()

    def read_bytes(self) -> bytes:
        return b''.join(self.iter_bytes())

    def close(self) -> None:
        self._scope.close()


class SlideshowService:
    """Generates slideshow videos from a user's photos."""

    def __init__(
        self,
        store: BasePhotoStore,
        encoder: BaseEncoder,
        artifacts: ArtifactManager,
    ):
        self._store = store
        self._encoder = encoder
        self._artifacts = artifacts

    def plan(self, user_id: Optional[str], request: VideoRequest) -> ResolvedTimeline:
        """Resolve, order and plan. Performs no I/O besides store reads."""
        photos = resolve_photos(self._store, request.photo_ids, user_id)
        ordered = order_photos(photos, request.sort_by)
        return plan_timeline(
            ordered,
            duration=request.duration,
            transition=request.transition,
            captions=request.captions,
            title=request.title,
        )

    def generate(self, user_id: Optional[str], request: VideoRequest) -> SlideshowVideo:
        """Produce the video for ``request``.

        Raises a SlideshowError subclass on failure; by then every temp file
        of this request has been removed.
        """
        timeline = self.plan(user_id, request)

        with ExitStack() as stack:
            scope = stack.enter_context(self._artifacts.open_scope())
            logger.info(
                f'Generating slideshow {scope.token} for user {user_id}: '
                f'{len(timeline.segments)} photos, sort={request.sort_by.value}, '
                f'transition={request.transition.value}, duration={request.duration:g}s'
            )

            scope.write_manifest(render_manifest(timeline))
            self._encoder.encode(timeline, scope.manifest_path, scope.output_path)
            size = scope.mark_encoded()
            logger.info(f'Slideshow {scope.token} encoded: {size} bytes, {timeline.total_duration:.1f}s')

            # The returned video owns the scope from here on
            stack.pop_all()

        return SlideshowVideo(scope, timeline, size)
