"""Minimal tag host.

``TagHost`` finds extension tags (``<ref>``, ``<references>`` and anything
else registered with ``set_hook``) in text and replaces each one with the
output of its hook, in document order. It is the host parser the citation
engine runs against in the CLI and in tests; it does not parse any other
markup.

Recognized forms::

    <name attr="v" ...>body</name>
    <name attr="v" ... />

A tag with neither a closing tag nor ``/>`` is left as literal text. Bodies
end at the first matching closing tag.
"""

from __future__ import annotations

import html
import json
import re
from typing import Callable, Dict, Mapping, Optional

from loguru import logger

HALF_PARSED_VERSION = 1

TagHook = Callable[[Optional[str], Mapping[str, str], "TagHost"], str]

_ATTR_RE = re.compile(
    r"""([A-Za-z_:][\w:.-]*)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>/]+)))?"""
)


def parse_attributes(raw: str) -> Dict[str, str]:
    """Parse ``name="v" other='w' bare=x flag`` into a dict (names lowercased)."""
    attrs: Dict[str, str] = {}
    for match in _ATTR_RE.finditer(raw or ""):
        name = match.group(1).lower()
        value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        attrs[name] = html.unescape(value)
    return attrs


class TagHost:
    """A document parser that dispatches extension tags to hooks.

    Args:
        page_id: Identifier of the document being rendered; part of render
            cache keys.
        section_preview: Partial preview mode; error lists are suppressed.
    """

    def __init__(self, page_id: str = "0", *, section_preview: bool = False):
        self._page_id = str(page_id)
        self.section_preview = section_preview
        self._hooks: Dict[str, TagHook] = {}
        self._clear_state_hooks: Dict[str, Callable[["TagHost"], object]] = {}
        self._after_render_hooks: Dict[str, Callable[["TagHost", str], str]] = {}
        self._clone_hooks: Dict[str, Callable[["TagHost"], object]] = {}
        self._pattern: Optional[re.Pattern] = None

    # ---- registration ----------------------------------------------------

    def set_hook(self, tag: str, hook: TagHook) -> None:
        self._hooks[tag.lower()] = hook
        self._pattern = None

    def on_clear_state(self, name: str, hook: Callable[["TagHost"], object]) -> None:
        self._clear_state_hooks[name] = hook

    def on_after_render(self, name: str, hook: Callable[["TagHost", str], str]) -> None:
        self._after_render_hooks[name] = hook

    def on_clone(self, name: str, hook: Callable[["TagHost"], object]) -> None:
        self._clone_hooks[name] = hook

    def _tag_pattern(self) -> re.Pattern:
        if self._pattern is None:
            names = "|".join(re.escape(tag) for tag in sorted(self._hooks, key=len, reverse=True))
            self._pattern = re.compile(
                rf"<(?P<tag>{names})(?P<attrs>(?:\s[^<>]*?)?)"
                rf"(?:/>|>(?P<body>.*?)</(?P=tag)\s*>)",
                re.IGNORECASE | re.DOTALL,
            )
        return self._pattern

    # ---- parsing ---------------------------------------------------------

    @property
    def page_id(self) -> str:
        return self._page_id

    def is_section_preview(self) -> bool:
        return self.section_preview

    def recursive_parse(self, text: str) -> str:
        """Replace every registered tag in ``text`` with its hook output."""
        if not self._hooks or not text:
            return text

        def _dispatch(match: re.Match) -> str:
            hook = self._hooks[match.group("tag").lower()]
            return hook(match.group("body"), parse_attributes(match.group("attrs")), self)

        return self._tag_pattern().sub(_dispatch, text)

    def clear_state(self) -> None:
        for hook in self._clear_state_hooks.values():
            hook(self)

    def render(self, text: str) -> str:
        """Render a whole document: clear state, parse, run after-render hooks."""
        self.clear_state()
        out = self.recursive_parse(text)
        for hook in self._after_render_hooks.values():
            out = hook(self, out)
        return out

    def clone(self, page_id: Optional[str] = None) -> "TagHost":
        """A host for an independent render; clone hooks install fresh state on it."""
        twin = TagHost(self._page_id if page_id is None else page_id,
                       section_preview=self.section_preview)
        twin._hooks = dict(self._hooks)
        for hook in self._clone_hooks.values():
            hook(twin)
        logger.debug(f"Cloned tag host for page {twin.page_id}")
        return twin

    # ---- half-parsed fragments ------------------------------------------

    def serialize_half_parsed(self, text: str) -> str:
        return json.dumps({"version": HALF_PARSED_VERSION, "text": text}, ensure_ascii=False)

    def unserialize_half_parsed(self, blob: str) -> str:
        return json.loads(blob)["text"]

    def is_valid_half_parsed(self, blob: str) -> bool:
        try:
            data = json.loads(blob)
        except (TypeError, ValueError):
            return False
        return (
            isinstance(data, dict)
            and data.get("version") == HALF_PARSED_VERSION
            and isinstance(data.get("text"), str)
        )
