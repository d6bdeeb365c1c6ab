"""Tests for request-scoped temp artifacts."""

import logging
import re
from pathlib import Path

import pytest

from memories_api.core.errors import OutputMissing
from memories_api.services.artifacts import ArtifactManager, ArtifactState


def test_open_scope_creates_directory_and_unique_names(temp_dir) -> None:
    manager = ArtifactManager(temp_dir)

    scopes = [manager.open_scope() for _ in range(50)]

    assert temp_dir.is_dir()
    tokens = {s.token for s in scopes}
    assert len(tokens) == 50
    for scope in scopes:
        assert re.fullmatch(r"[0-9a-f]{32}", scope.token)
        assert scope.manifest_path.parent == temp_dir
        assert scope.output_path.name == f"{scope.token}.mp4"
        assert scope.state == ArtifactState.CREATED
    # Allocating names writes nothing
    assert list(temp_dir.iterdir()) == []


def test_full_lifecycle_removes_files(temp_dir) -> None:
    scope = ArtifactManager(temp_dir).open_scope()

    scope.write_manifest("file '/a.jpg'\n")
    assert scope.state == ArtifactState.POPULATED
    scope.output_path.write_bytes(b"video")
    assert scope.mark_encoded() == 5
    scope.mark_delivered()
    scope.close()

    assert scope.state == ArtifactState.CLEANED
    assert scope.failed is False
    assert list(temp_dir.iterdir()) == []


def test_context_exit_on_error_cleans_and_flags_failure(temp_dir) -> None:
    manager = ArtifactManager(temp_dir)

    with pytest.raises(ValueError):
        with manager.open_scope() as scope:
            scope.write_manifest("x")
            scope.output_path.write_bytes(b"partial")
            raise ValueError("boom")

    assert scope.closed
    assert scope.failed is True
    assert list(temp_dir.iterdir()) == []


def test_mark_encoded_requires_non_empty_output(temp_dir) -> None:
    scope = ArtifactManager(temp_dir).open_scope()
    scope.write_manifest("x")

    with pytest.raises(OutputMissing):
        scope.mark_encoded()

    scope.output_path.write_bytes(b"")
    with pytest.raises(OutputMissing):
        scope.mark_encoded()
    assert scope.state == ArtifactState.POPULATED


def test_illegal_transition_raises(temp_dir) -> None:
    scope = ArtifactManager(temp_dir).open_scope()

    with pytest.raises(RuntimeError):
        scope.mark_delivered()


def test_close_is_idempotent(temp_dir) -> None:
    scope = ArtifactManager(temp_dir).open_scope()
    scope.write_manifest("x")

    scope.close()
    scope.close()

    assert scope.closed
    assert list(temp_dir.iterdir()) == []


def test_cleanup_errors_are_logged_not_raised(temp_dir, monkeypatch, caplog) -> None:
    scope = ArtifactManager(temp_dir).open_scope()
    scope.write_manifest("x")

    def broken_unlink(self, missing_ok=False):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(Path, "unlink", broken_unlink)

    with caplog.at_level(logging.WARNING, logger="memories_api.services.artifacts"):
        scope.close(failed=True)

    assert scope.closed
    assert "cleanup_failure" in caplog.text
    assert "read-only filesystem" in caplog.text
