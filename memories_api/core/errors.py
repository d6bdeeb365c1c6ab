"""Failure kinds surfaced by the slideshow pipeline.

Every error carries a machine-readable ``kind`` and the HTTP status the API
layer answers with, so a caller always receives exactly one distinguishable
outcome.
"""

from typing import Optional


class SlideshowError(Exception):
    """Base class for pipeline failures."""

    kind = "pipeline_failure"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


class Unauthenticated(SlideshowError):
    kind = "unauthenticated"
    status_code = 401


class Forbidden(SlideshowError):
    """A requested photo belongs to another user."""
    kind = "forbidden"
    status_code = 403


class InvalidOptions(SlideshowError):
    kind = "invalid_options"
    status_code = 400


class NotFound(SlideshowError):
    kind = "not_found"
    status_code = 404


class DataIntegrity(SlideshowError):
    """Stored photo data is corrupt (bad timestamp, bad metadata, bad path)."""
    kind = "data_integrity"
    status_code = 500


class ProcessSpawnFailure(SlideshowError):
    """The encoder executable is missing or could not be launched."""
    kind = "process_spawn_failure"
    status_code = 500


class ProcessExitFailure(SlideshowError):
    """The encoder exited with a non-zero status."""
    kind = "process_exit_failure"
    status_code = 500

    def __init__(self, message: str, exit_code: int, stderr: Optional[str] = None):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["exit_code"] = self.exit_code
        return data


class OutputMissing(SlideshowError):
    """The encoder reported success but produced no output."""
    kind = "output_missing"
    status_code = 500


class CleanupFailure(SlideshowError):
    """A temporary artifact could not be removed. Logged, never raised to callers."""
    kind = "cleanup_failure"
    status_code = 500
