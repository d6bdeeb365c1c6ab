"""Resolve requested photo ids to stored records, enforcing ownership."""

import logging
from typing import List, Optional, Sequence

from memories_api.core.abstractions import BasePhotoStore, PhotoRecord
from memories_api.core.errors import Forbidden, NotFound, Unauthenticated

logger = logging.getLogger(__name__)


def resolve_photos(
    store: BasePhotoStore,
    photo_ids: Sequence[int],
    user_id: Optional[str],
) -> List[PhotoRecord]:
    """Fetch each photo in request order.

    Raises NotFound for a missing id and Forbidden for a photo owned by
    someone else. Either aborts the whole request.
    """
    if not user_id:
        raise Unauthenticated("Authenticated user required")

    photos = []
    for photo_id in photo_ids:
        photo = store.get_photo(photo_id)
        if photo is None:
            raise NotFound(f"Photo {photo_id} not found")
        if photo.user_id != user_id:
            logger.warning(f"User {user_id} requested photo {photo_id} owned by another user")
            raise Forbidden(f"Photo {photo_id} does not belong to the current user")
        photos.append(photo)

    return photos
