"""
Schema Validation Utilities
===========================
JSON Schema loading and validation helpers.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

RENDER_CACHE_ENTRY_SCHEMA = "render_cache_entry.schema.json"


@lru_cache(maxsize=8)
def _load_schema(schema_filename: str) -> Dict[str, Any]:
    """Load a schema JSON file from citenotes/schemas.

    Raises:
        FileNotFoundError: When schema file is missing.
        ValueError: When schema file is not valid JSON or not a JSON object.
    """
    schemas_dir = Path(__file__).resolve().parent.parent / "schemas"
    schema_path = (schemas_dir / schema_filename).resolve()
    if not schema_path.is_relative_to(schemas_dir.resolve()):
        raise ValueError(f"Schema path escapes schemas directory: {schema_filename}")
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_filename}")

    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Failed to load schema {schema_filename}: {e}")

    if not isinstance(schema, dict):
        raise ValueError(f"Schema {schema_filename} must be a JSON object")
    return schema


def validate_against_schema(payload: Any, schema_filename: str) -> None:
    """Validate payload against a JSON Schema.

    Raises:
        ValueError: When payload fails validation.
    """
    validator = Draft202012Validator(_load_schema(schema_filename))

    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    if not errors:
        return

    error: ValidationError = errors[0]
    path = "/".join(str(p) for p in error.path)
    prefix = f"Validation failed at '{path}': " if path else "Validation failed: "
    raise ValueError(prefix + error.message)


def validate_render_cache_entry(entry: Dict[str, Any]) -> None:
    """Validate a file render-cache entry, including expiry ordering."""
    validate_against_schema(entry, RENDER_CACHE_ENTRY_SCHEMA)
    if entry["expires_at"] < entry["stored_at"]:
        raise ValueError("Validation failed at 'expires_at': must be >= stored_at")


def is_valid_render_cache_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    try:
        validate_render_cache_entry(entry)
        return True
    except ValueError:
        return False
