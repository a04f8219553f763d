"""
Tests for the Occurrence Stack
==============================
Recording order, display numbering, re-use counting and continuations.
"""

import pytest

from citenotes.citations.stack import (
    DEFAULT_GROUP,
    AnonymousEntry,
    ContinuationEntry,
    NamedEntry,
    OccurrenceStack,
)


@pytest.fixture
def stack():
    return OccurrenceStack()


@pytest.mark.unit
class TestRecordNamed:
    """Named entries are created once and counted on re-use."""

    def test_first_use_creates_entry(self, stack):
        token = stack.record("A", "x", DEFAULT_GROUP)

        entry = stack.lookup(DEFAULT_GROUP, "x")
        assert isinstance(entry, NamedEntry)
        assert entry.text == "A"
        assert entry.count == 0
        assert token.key == "x"
        assert token.label == 1
        assert token.occurrence == "1-0"
        assert token.subkey == "-1"

    def test_reuse_increments_count_and_keeps_label(self, stack):
        tokens = [stack.record("A", "x", DEFAULT_GROUP) for _ in range(3)]

        assert [t.occurrence for t in tokens] == ["1-0", "1-1", "1-2"]
        assert {t.label for t in tokens} == {1}
        assert stack.lookup(DEFAULT_GROUP, "x").count == 2
        assert len(stack.get(DEFAULT_GROUP)) == 1

    def test_first_text_wins(self, stack):
        stack.record("A", "x", DEFAULT_GROUP)
        stack.record("A2", "x", DEFAULT_GROUP)
        assert stack.lookup(DEFAULT_GROUP, "x").text == "A"

    def test_later_text_backfills_missing_text(self, stack):
        stack.record(None, "y", DEFAULT_GROUP)
        stack.record("Y text", "y", DEFAULT_GROUP)
        stack.record("other", "y", DEFAULT_GROUP)

        entry = stack.lookup(DEFAULT_GROUP, "y")
        assert entry.text == "Y text"
        assert entry.count == 2


@pytest.mark.unit
class TestRecordAnonymous:
    """Anonymous entries are never shared."""

    def test_identical_text_makes_two_entries(self, stack):
        first = stack.record("same", None, DEFAULT_GROUP)
        second = stack.record("same", None, DEFAULT_GROUP)

        entries = stack.get(DEFAULT_GROUP).entries
        assert len(entries) == 2
        assert all(isinstance(e, AnonymousEntry) for e in entries)
        assert (first.key, second.key) == ("1", "2")
        assert (first.label, second.label) == (1, 2)
        assert first.occurrence is None

    def test_display_numbers_shared_with_named_entries(self, stack):
        named = stack.record("N", "x", DEFAULT_GROUP)
        anon = stack.record("A", None, DEFAULT_GROUP)
        other = stack.record("O", "y", DEFAULT_GROUP)
        again = stack.record(None, "x", DEFAULT_GROUP)

        assert [named.label, anon.label, other.label, again.label] == [1, 2, 3, 1]


@pytest.mark.unit
class TestGroupsAndOrder:
    def test_groups_number_independently(self, stack):
        stack.record("a", None, DEFAULT_GROUP)
        note = stack.record("n", None, "notes")
        assert note.label == 1
        assert note.group == "notes"

    def test_insertion_order_is_global_and_monotonic(self, stack):
        stack.record("a", None, DEFAULT_GROUP)
        stack.record("n", "k", "notes")
        stack.record("b", None, DEFAULT_GROUP)

        orders = [e.order for e in stack.get(DEFAULT_GROUP).entries]
        assert orders == [1, 3]
        assert stack.lookup("notes", "k").order == 2
        assert stack.order_counter == 3

    def test_pending_groups_in_first_use_order(self, stack):
        stack.record("n", None, "notes")
        stack.record("a", None, DEFAULT_GROUP)
        assert list(stack.pending_groups()) == ["notes", DEFAULT_GROUP]

        stack.drop("notes")
        assert list(stack.pending_groups()) == [DEFAULT_GROUP]
        assert not stack.has_group("notes")

    def test_clear_resets_everything(self, stack):
        stack.record("a", "k", DEFAULT_GROUP)
        stack.clear()
        assert list(stack.pending_groups()) == []
        assert stack.order_counter == 0
        assert stack.record("b", None, DEFAULT_GROUP).key == "1"


@pytest.mark.unit
class TestContinuations:
    """Text attached with follow= to another entry."""

    def test_follow_existing_appends_text(self, stack):
        stack.record("First", "a", DEFAULT_GROUP)
        token = stack.record("more", None, DEFAULT_GROUP, follow="a")

        assert token is None
        assert stack.lookup(DEFAULT_GROUP, "a").text == "First more"
        assert len(stack.get(DEFAULT_GROUP)) == 1

    def test_follow_missing_clusters_at_head_in_arrival_order(self, stack):
        stack.record("X", "x", DEFAULT_GROUP)
        stack.record("part y", None, DEFAULT_GROUP, follow="y")
        stack.record("part z", None, DEFAULT_GROUP, follow="z")

        entries = stack.get(DEFAULT_GROUP).entries
        assert isinstance(entries[0], ContinuationEntry)
        assert isinstance(entries[1], ContinuationEntry)
        assert [entries[0].follow_of, entries[1].follow_of] == ["y", "z"]
        assert isinstance(entries[2], NamedEntry)

    def test_continuation_does_not_consume_display_number(self, stack):
        stack.record("part", None, DEFAULT_GROUP, follow="later")
        token = stack.record("Main", "later", DEFAULT_GROUP)
        assert token.label == 1
        assert token.occurrence == "2-0"


@pytest.mark.unit
class TestDefine:
    def test_define_overwrites_existing_entry(self, stack):
        stack.record(None, "a", DEFAULT_GROUP)
        assert stack.define(DEFAULT_GROUP, "a", "Defined") is True
        assert stack.lookup(DEFAULT_GROUP, "a").text == "Defined"

    def test_define_unknown_key_fails(self, stack):
        stack.record(None, "a", DEFAULT_GROUP)
        assert stack.define(DEFAULT_GROUP, "b", "x") is False
        assert stack.define("notes", "a", "x") is False
