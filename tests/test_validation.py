"""
Tests for Validation Utilities
==============================
"""

import pytest
from pathlib import Path

from citenotes.utils.validation import (
    is_safe_path,
    validate_document_path,
    validate_path,
)


@pytest.mark.unit
class TestIsSafePath:
    """Tests for is_safe_path function."""

    def test_safe_path_returns_true(self):
        """Normal paths should be considered safe."""
        assert is_safe_path("/tmp/test.txt") is True
        assert is_safe_path("./relative/path") is True
        assert is_safe_path("simple.txt") is True

    def test_path_traversal_returns_false(self):
        """Paths with .. should be detected as unsafe."""
        assert is_safe_path("../etc/passwd") is False
        assert is_safe_path("data/../../../etc/passwd") is False

    def test_path_with_base_dir(self, tmp_path):
        """Path under base directory should be safe."""
        subdir = tmp_path / "subdir"
        subdir.mkdir()

        assert is_safe_path(subdir, base_dir=tmp_path) is True
        assert is_safe_path(Path("/etc"), base_dir=tmp_path) is False


@pytest.mark.unit
class TestValidatePath:
    """Tests for validate_path function."""

    def test_empty_path_raises(self):
        """Empty path should raise ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_path("")

    def test_nonexistent_path_raises_when_must_exist(self, tmp_path):
        """Non-existent path should raise when must_exist=True."""
        with pytest.raises(FileNotFoundError):
            validate_path(tmp_path / "missing", must_exist=True)

    def test_directory_rejected_as_file(self, tmp_path):
        with pytest.raises(ValueError, match="not a file"):
            validate_path(tmp_path, must_be_file=True)

    def test_file_rejected_as_directory(self, tmp_path):
        path = tmp_path / "f.txt"
        path.write_text("x")
        with pytest.raises(ValueError, match="not a directory"):
            validate_path(path, must_be_dir=True)


@pytest.mark.unit
class TestValidateDocumentPath:
    def test_existing_file(self, tmp_path):
        path = tmp_path / "doc.txt"
        path.write_text("x")
        assert validate_document_path(path) == path

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            validate_document_path(tmp_path / "nope.txt")
