"""Abstract base class for slideshow encoders."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from memories_api.services.timeline import ResolvedTimeline


@dataclass
class EncodeResult:
    """Outcome of a successful encode."""
    output_path: Path
    duration_seconds: float
    command: List[str]


class BaseEncoder(ABC):
    """Turns a planned timeline into a video file.

    Implementations read the ordered manifest already written at
    ``manifest_path`` and must leave the finished video at ``output_path``.
    Failures are raised as ``ProcessSpawnFailure`` or ``ProcessExitFailure``.
    """

    @property
    @abstractmethod
    def encoder_name(self) -> str:
        """Return the encoder identifier."""
        pass

    @abstractmethod
    def encode(
        self,
        timeline: "ResolvedTimeline",
        manifest_path: Path,
        output_path: Path,
    ) -> EncodeResult:
        """Encode the timeline, blocking until the encoder exits."""
        pass
