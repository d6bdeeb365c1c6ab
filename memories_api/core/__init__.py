"""Core module - error taxonomy and collaborator abstractions."""

from .errors import (
    SlideshowError,
    Unauthenticated,
    Forbidden,
    InvalidOptions,
    NotFound,
    DataIntegrity,
    ProcessSpawnFailure,
    ProcessExitFailure,
    OutputMissing,
    CleanupFailure,
)

__all__ = [
    "SlideshowError",
    "Unauthenticated",
    "Forbidden",
    "InvalidOptions",
    "NotFound",
    "DataIntegrity",
    "ProcessSpawnFailure",
    "ProcessExitFailure",
    "OutputMissing",
    "CleanupFailure",
]
