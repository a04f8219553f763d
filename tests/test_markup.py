"""
Tests for the Tag Host
======================
Attribute parsing, hook dispatch, lifecycle hooks and half-parsed fragments.
"""

import pytest

from citenotes.citations.markup import TagHost, parse_attributes


def _echo(body, attrs, host):
    return f"[{body}|{','.join(f'{k}={v}' for k, v in sorted(attrs.items()))}]"


@pytest.fixture
def host():
    host = TagHost(page_id="3")
    host.set_hook("x", _echo)
    return host


@pytest.mark.unit
class TestParseAttributes:
    def test_quoting_styles(self):
        attrs = parse_attributes(' name="a b" group=\'g\' follow=x FLAG')
        assert attrs == {"name": "a b", "group": "g", "follow": "x", "flag": ""}

    def test_character_references_decoded(self):
        assert parse_attributes(' name="&quot;q&quot;"') == {"name": '"q"'}

    def test_empty(self):
        assert parse_attributes("") == {}
        assert parse_attributes(None) == {}


@pytest.mark.unit
class TestDispatch:
    """Tests for recursive_parse."""

    def test_paired_and_self_closing_tags(self, host):
        out = host.recursive_parse('a<x k="1">body</x>b<x/>c')
        assert out == "a[body|k=1]b[None|]c"

    def test_tag_names_case_insensitive(self, host):
        assert host.recursive_parse("<X>y</X>") == "[y|]"

    def test_unclosed_tag_left_as_text(self, host):
        assert host.recursive_parse("a <x> b") == "a <x> b"

    def test_body_ends_at_first_closing_tag(self, host):
        assert host.recursive_parse("<x>1</x><x>2</x>") == "[1|][2|]"

    def test_longer_tag_names_win(self):
        host = TagHost()
        host.set_hook("ref", lambda body, attrs, h: "R")
        host.set_hook("references", lambda body, attrs, h: "L")
        assert host.recursive_parse("<ref>a</ref><references/>") == "RL"

    def test_no_hooks_returns_text(self):
        assert TagHost().recursive_parse("<x>y</x>") == "<x>y</x>"


@pytest.mark.unit
class TestLifecycle:
    def test_render_runs_clear_then_after_render_hooks(self, host):
        calls = []
        host.on_clear_state("t", lambda h: calls.append("clear"))
        host.on_after_render("t", lambda h, text: calls.append("after") or text + "!")

        assert host.render("<x>a</x>") == "[a|]!"
        assert calls == ["clear", "after"]

    def test_clone_copies_hooks_and_runs_clone_hooks(self, host):
        seen = []
        host.on_clone("t", lambda twin: seen.append(twin))

        twin = host.clone(page_id="9")

        assert seen == [twin]
        assert twin.page_id == "9"
        assert host.page_id == "3"
        assert twin.recursive_parse("<x>a</x>") == "[a|]"

    def test_clone_keeps_preview_flag(self):
        host = TagHost(section_preview=True)
        assert host.clone().is_section_preview()


@pytest.mark.unit
class TestHalfParsed:
    def test_round_trip(self, host):
        blob = host.serialize_half_parsed("<ol>é</ol>")
        assert host.is_valid_half_parsed(blob)
        assert host.unserialize_half_parsed(blob) == "<ol>é</ol>"

    @pytest.mark.parametrize("blob", [
        "not json",
        '{"version": 2, "text": "x"}',
        '{"version": 1}',
        '["version", 1]',
        None,
    ])
    def test_invalid_fragments(self, host, blob):
        assert not host.is_valid_half_parsed(blob)
