"""
Tests for Schema Validation Utilities
=====================================
"""

import pytest

from citenotes.utils.schema_validation import (
    is_valid_render_cache_entry,
    validate_against_schema,
    validate_render_cache_entry,
)


def _valid_entry():
    return {
        "schema_version": "1.0",
        "key": "citenotes:citeref:0123456789abcdef0123456789abcdef:7",
        "blob": '{"version": 1, "text": "<ol></ol>"}',
        "stored_at": 1000.0,
        "expires_at": 87400.0,
    }


@pytest.mark.unit
def test_validate_render_cache_entry_accepts_valid_payload():
    validate_render_cache_entry(_valid_entry())
    assert is_valid_render_cache_entry(_valid_entry())


@pytest.mark.unit
def test_validate_render_cache_entry_rejects_missing_required_field():
    entry = _valid_entry()
    entry.pop("blob")
    with pytest.raises(ValueError, match="blob"):
        validate_render_cache_entry(entry)


@pytest.mark.unit
def test_validate_render_cache_entry_rejects_unknown_schema_version():
    entry = _valid_entry()
    entry["schema_version"] = "2.0"
    with pytest.raises(ValueError, match="schema_version"):
        validate_render_cache_entry(entry)


@pytest.mark.unit
def test_validate_render_cache_entry_rejects_extra_fields():
    entry = _valid_entry()
    entry["extra"] = True
    assert not is_valid_render_cache_entry(entry)


@pytest.mark.unit
def test_validate_render_cache_entry_rejects_expiry_before_store():
    entry = _valid_entry()
    entry["expires_at"] = 10.0
    with pytest.raises(ValueError, match="expires_at"):
        validate_render_cache_entry(entry)


@pytest.mark.unit
def test_is_valid_render_cache_entry_rejects_non_dict():
    assert not is_valid_render_cache_entry(["not", "a", "dict"])
    assert not is_valid_render_cache_entry(None)


@pytest.mark.unit
def test_validate_against_schema_rejects_unknown_schema_name():
    with pytest.raises(FileNotFoundError):
        validate_against_schema({}, "does_not_exist.schema.json")
