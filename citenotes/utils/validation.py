"""
Validation Utilities
====================
Path checks for documents and cache directories handed to the CLI.
"""

from pathlib import Path
from typing import Optional, Union

from loguru import logger


def is_safe_path(path: Union[str, Path], base_dir: Optional[Union[str, Path]] = None) -> bool:
    """
    Check if a path is free of traversal segments and, when ``base_dir`` is
    given, resolves under it.
    """
    try:
        if ".." in Path(path).parts:
            logger.warning(f"Potential path traversal detected: {path}")
            return False

        if base_dir:
            try:
                Path(path).resolve().relative_to(Path(base_dir).resolve())
            except ValueError:
                logger.warning(f"Path {path} is not under base directory {base_dir}")
                return False

        return True

    except (OSError, ValueError) as e:
        logger.warning(f"Path validation error for {path}: {e}")
        return False


def validate_path(
    path: Union[str, Path],
    must_exist: bool = False,
    must_be_file: bool = False,
    must_be_dir: bool = False,
    base_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Validate a file path.

    Raises:
        ValueError: If path fails validation
        FileNotFoundError: If path must exist but doesn't
    """
    if not path:
        raise ValueError("Path cannot be empty")

    path_obj = Path(path)

    if not is_safe_path(path_obj, base_dir):
        raise ValueError(f"Path validation failed: {path}")

    if must_exist and not path_obj.exists():
        raise FileNotFoundError(f"Path does not exist: {path}")

    if must_be_file and path_obj.exists() and not path_obj.is_file():
        raise ValueError(f"Path is not a file: {path}")

    if must_be_dir and path_obj.exists() and not path_obj.is_dir():
        raise ValueError(f"Path is not a directory: {path}")

    return path_obj


def validate_document_path(path: Union[str, Path]) -> Path:
    """Validate a document to render: it must exist and be a regular file."""
    return validate_path(path, must_exist=True, must_be_file=True)
