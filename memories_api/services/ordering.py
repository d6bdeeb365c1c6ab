"""Ordering strategies for slideshow photos."""

from datetime import datetime, timezone
from typing import List

from memories_api.core.abstractions import PhotoRecord
from memories_api.core.errors import DataIntegrity
from memories_api.schemas.requests import SortBy


def parse_upload_date(photo: PhotoRecord) -> datetime:
    """Parse a stored ISO-8601 upload date. Naive values are taken as UTC."""
    raw = photo.metadata.upload_date
    try:
        # Stored dates come from JS toISOString(), which ends in 'Z'
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError) as e:
        raise DataIntegrity(
            f"Photo {photo.id} has a malformed upload date: {raw!r}"
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def order_photos(photos: List[PhotoRecord], sort_by: SortBy) -> List[PhotoRecord]:
    """Return the photos reordered for the slideshow.

    Both sorts are stable, so equal keys keep the caller's order. ``custom``
    keeps the order the ids were requested in.
    """
    if sort_by == SortBy.UPLOAD_DATE:
        return sorted(photos, key=parse_upload_date)
    if sort_by == SortBy.EVENT:
        return sorted(photos, key=lambda p: p.metadata.event or "")
    return list(photos)
