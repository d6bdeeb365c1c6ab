"""Request-scoped temporary files for slideshow generation.

Each request gets its own manifest and output file with random names in a
shared temp directory. An ArtifactScope owns both files and removes them when
it is closed, whatever happened before.
"""

import logging
import secrets
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from memories_api.core.errors import CleanupFailure, OutputMissing

logger = logging.getLogger(__name__)

TOKEN_BYTES = 16


class ArtifactState(str, Enum):
    """Lifecycle of one request's artifacts."""
    CREATED = "created"
    POPULATED = "populated"  # manifest written
    ENCODED = "encoded"  # output verified
    DELIVERED = "delivered"  # bytes sent to the caller
    CLEANED = "cleaned"


_TRANSITIONS = {
    ArtifactState.CREATED: {ArtifactState.POPULATED},
    ArtifactState.POPULATED: {ArtifactState.ENCODED},
    ArtifactState.ENCODED: {ArtifactState.DELIVERED},
    ArtifactState.DELIVERED: set(),
    ArtifactState.CLEANED: set(),
}


class ArtifactScope:
    """Manifest + output pair owned by a single request."""

    def __init__(self, directory: Path, token: str):
        self.token = token
        self.manifest_path = directory / f'{token}.txt'
        self.output_path = directory / f'{token}.mp4'
        self.state = ArtifactState.CREATED
        self.failed = False

    def __enter__(self) -> "ArtifactScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close(failed=exc_type is not None)

    @property
    def closed(self) -> bool:
        return self.state == ArtifactState.CLEANED

    def _advance(self, state: ArtifactState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f'Artifact {self.token}: cannot go from {self.state.value} to {state.value}')
        logger.debug(f'Artifact {self.token}: {self.state.value} -> {state.value}')
        self.state = state

    def write_manifest(self, content: str) -> Path:
        """Write the encoder manifest. CREATED -> POPULATED."""
        self.manifest_path.write_text(content, encoding='utf-8')
        self._advance(ArtifactState.POPULATED)
        return self.manifest_path

    def mark_encoded(self) -> int:
        """Verify the encoder left a non-empty output. POPULATED -> ENCODED.

        Returns the output size in bytes.
        """
        try:
            size = self.output_path.stat().st_size
        except FileNotFoundError:
            size = 0
        if size == 0:
            raise OutputMissing(f'Encoder exited cleanly but produced no output at {self.output_path.name}')
        self._advance(ArtifactState.ENCODED)
        return size

    def mark_delivered(self) -> None:
        self._advance(ArtifactState.DELIVERED)

    def close(self, failed: bool = False) -> None:
        """Remove both files. Safe to call more than once; never raises."""
        if self.closed:
            return
        self.failed = failed or self.state != ArtifactState.DELIVERED
        for path in (self.manifest_path, self.output_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                err = CleanupFailure(f'Could not remove {path}: {e}')
                logger.warning(f'[{err.kind}] {err.message}')
        logger.debug(f'Artifact {self.token}: {self.state.value} -> cleaned (failed={self.failed})')
        self.state = ArtifactState.CLEANED


class ArtifactManager:
    """Allocates artifact scopes inside a dedicated temp directory."""

    def __init__(self, temp_dir: Union[str, Path]):
        self._temp_dir = Path(temp_dir)

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    def open_scope(self, token: Optional[str] = None) -> ArtifactScope:
        """Create a scope with fresh random file names."""
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        return ArtifactScope(self._temp_dir, token or secrets.token_hex(TOKEN_BYTES))
