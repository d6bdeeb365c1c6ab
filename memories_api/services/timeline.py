"""Timeline planning for slideshow videos.

Turns an ordered list of photos plus style options into timed segments.
The planner never touches files; it only describes what the encoder should
produce, so the same inputs always yield the same plan.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from memories_api.core.abstractions import PhotoRecord
from memories_api.core.errors import InvalidOptions
from memories_api.schemas.requests import (
    MAX_DURATION,
    MIN_DURATION,
    MIN_PHOTOS,
    TransitionKind,
)

TRANSITION_DURATION = 1.0  # seconds
FADE_DURATION = 1.0  # seconds, for the opening fade-in and closing fade-out

# Zoom factor each segment ramps towards without reaching
ZOOM_CEILING = 1.2


@dataclass(frozen=True)
class TransitionSpec:
    """Effect applied as a segment enters over the previous one."""
    kind: TransitionKind
    duration: float = TRANSITION_DURATION


@dataclass(frozen=True)
class FadeSpec:
    start: float
    duration: float = FADE_DURATION


@dataclass(frozen=True)
class ZoomRamp:
    """Linear zoom: factor = 1 + rate * t, for t inside the segment."""
    rate: float  # zoom factor gained per second
    ceiling: float = ZOOM_CEILING


@dataclass(frozen=True)
class Segment:
    """One photo's timed slot in the video."""
    photo: PhotoRecord
    start_offset: float
    duration: float
    caption: Optional[str] = None
    transition_in: Optional[TransitionSpec] = None
    zoom: Optional[ZoomRamp] = None

    @property
    def end_offset(self) -> float:
        return self.start_offset + self.duration


@dataclass(frozen=True)
class ResolvedTimeline:
    """The full plan handed to the encoder."""
    segments: Tuple[Segment, ...]
    transition: TransitionKind
    fade_in: Optional[FadeSpec] = None
    fade_out: Optional[FadeSpec] = None
    title: Optional[str] = None

    @property
    def total_duration(self) -> float:
        return self.segments[-1].end_offset if self.segments else 0.0


def plan_timeline(
    photos: List[PhotoRecord],
    duration: float,
    transition: TransitionKind,
    captions: bool,
    title: Optional[str] = None,
) -> ResolvedTimeline:
    """Build the segment plan.

    Each segment after the first starts TRANSITION_DURATION before the
    previous one ends, so consecutive photos overlap during the transition.
    """
    if not MIN_DURATION <= duration <= MAX_DURATION:
        raise InvalidOptions(
            f"Duration must be between {MIN_DURATION:g} and {MAX_DURATION:g} seconds, got {duration:g}"
        )
    if len(photos) < MIN_PHOTOS:
        raise InvalidOptions(f"At least {MIN_PHOTOS} photos are required, got {len(photos)}")

    try:
        transition = TransitionKind(transition)
    except ValueError as e:
        raise InvalidOptions(f"Unknown transition: {transition!r}") from e

    zoom = None
    if transition == TransitionKind.ZOOM:
        zoom = ZoomRamp(rate=(ZOOM_CEILING - 1.0) / duration)

    segments = []
    elapsed = 0.0
    for i, photo in enumerate(photos):
        caption = photo.metadata.caption_text if captions else None
        segments.append(Segment(
            photo=photo,
            start_offset=elapsed - TRANSITION_DURATION * i,
            duration=duration,
            caption=caption or None,
            transition_in=TransitionSpec(kind=transition) if i > 0 else None,
            zoom=zoom,
        ))
        elapsed += duration

    fade_in = fade_out = None
    if transition == TransitionKind.FADE:
        last = segments[-1]
        fade_in = FadeSpec(start=0.0)
        # Begins (duration - 1)s into the last segment: one second before the end
        fade_out = FadeSpec(start=last.start_offset + last.duration - FADE_DURATION)

    return ResolvedTimeline(
        segments=tuple(segments),
        transition=transition,
        fade_in=fade_in,
        fade_out=fade_out,
        title=title or None,
    )
