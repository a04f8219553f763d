"""
Utility Functions
=================
Path validation and JSON Schema helpers.
"""

from .validation import (
    is_safe_path,
    validate_document_path,
    validate_path,
)

from .schema_validation import (
    is_valid_render_cache_entry,
    validate_against_schema,
    validate_render_cache_entry,
)

__all__ = [
    "is_safe_path",
    "validate_document_path",
    "validate_path",

    "is_valid_render_cache_entry",
    "validate_against_schema",
    "validate_render_cache_entry",
]
