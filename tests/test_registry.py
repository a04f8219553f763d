"""
Tests for the Citation Registry and Region State
================================================
"""

import pytest

from citenotes.citations.errors import CiteError, CiteErrorKind
from citenotes.citations.region import RegionMode, RegionState
from citenotes.citations.registry import CitationRegistry
from citenotes.citations.stack import DEFAULT_GROUP


@pytest.mark.unit
class TestRegionState:
    """Tests for the region state machine."""

    def test_full_cycle(self):
        region = RegionState()
        assert not region.active

        region.start()
        assert region.mode is RegionMode.RUNNING
        assert region.active and not region.defining

        region.begin_definitions("notes")
        assert region.defining
        assert region.group == "notes"

        region.end_definitions()
        assert region.mode is RegionMode.RUNNING

        region.finish()
        assert region.mode is RegionMode.IDLE

    def test_start_twice_raises(self):
        region = RegionState()
        region.start()
        with pytest.raises(RuntimeError, match="already active"):
            region.start()

    def test_definitions_require_running_region(self):
        with pytest.raises(RuntimeError, match="Cannot define"):
            RegionState().begin_definitions(DEFAULT_GROUP)

    def test_take_errors_empties_buffer(self):
        region = RegionState()
        region.record_error(CiteError.of(CiteErrorKind.UNNAMED_IN_REGION))
        region.record_error(CiteError.of(CiteErrorKind.UNKNOWN_KEY_IN_REGION, "b"))

        errors = region.take_errors()
        assert [e.kind for e in errors] == [
            CiteErrorKind.UNNAMED_IN_REGION,
            CiteErrorKind.UNKNOWN_KEY_IN_REGION,
        ]
        assert region.take_errors() == []


@pytest.mark.unit
class TestCitationRegistry:
    """Tests for clearing and cloning."""

    def test_clear_resets_state(self):
        registry = CitationRegistry()
        registry.stack.record("a", "k", DEFAULT_GROUP)
        registry.call_count = 3

        assert registry.clear() is True
        assert registry.call_count == 0
        assert not registry.has_calls()
        assert list(registry.stack.pending_groups()) == []

    def test_clear_deferred_while_marker_in_flight(self):
        registry = CitationRegistry()
        registry.stack.record("a", "k", DEFAULT_GROUP)
        registry.in_cite = True

        assert registry.clear() is False
        assert registry.stack.lookup(DEFAULT_GROUP, "k") is not None

    def test_clear_deferred_while_region_active(self):
        registry = CitationRegistry()
        registry.call_count = 1
        registry.region.start()

        assert registry.busy
        assert registry.clear() is False
        assert registry.call_count == 1

    def test_clone_is_idle_and_empty(self):
        registry = CitationRegistry()
        registry.stack.record("a", "k", DEFAULT_GROUP)
        registry.call_count = 2
        registry.in_cite = True
        registry.region.start()
        registry.region.begin_definitions("notes")

        clone = registry.clone()

        assert not clone.busy
        assert clone.region.mode is RegionMode.IDLE
        assert clone.call_count == 0
        assert list(clone.stack.pending_groups()) == []

    def test_clone_is_independent(self):
        registry = CitationRegistry()
        registry.stack.record("a", "k", DEFAULT_GROUP)

        clone = registry.clone()
        clone.stack.record("b", "other", DEFAULT_GROUP)

        assert registry.stack.lookup(DEFAULT_GROUP, "other") is None
        assert registry.stack.lookup(DEFAULT_GROUP, "k").text == "a"
