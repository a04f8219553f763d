"""
Reference List Renderer
=======================
Formats the collected entries of one group into a reference list.

Entry formats:
- continuation: a back-reference-only paragraph pointing at the followed key
- anonymous: one back-link, numbered by insertion order
- named, used once: one back-link in the non-nested form
- named, used n > 1 times: one back-link per occurrence labelled 1.0, 1.1 ...

The assembled list is reparsed by the host once and may be memoized in a
render cache keyed by content hash and page id.
"""

from __future__ import annotations

from typing import Optional, Union

from loguru import logger

from citenotes.citations.cache import make_cache_key
from citenotes.citations.errors import CiteContractError, CiteError, CiteErrorKind, RenderMode
from citenotes.citations.interfaces import HostParser, MessageProvider, RenderCache
from citenotes.citations.labels import LabelTables
from citenotes.citations.stack import (
    AnonymousEntry,
    ContinuationEntry,
    Entry,
    NamedEntry,
    OccurrenceStack,
)
from citenotes.tracing import init_tracing, safe_set_span_attributes


class ReferenceListRenderer:
    def __init__(
        self,
        messages: MessageProvider,
        labels: LabelTables,
        *,
        cache: Optional[RenderCache] = None,
        cache_enabled: bool = False,
        cache_ttl: int = 86400,
        cache_prefix: str = "citenotes",
    ):
        self.messages = messages
        self.labels = labels
        self.cache = cache
        self.cache_enabled = cache_enabled and cache is not None
        self.cache_ttl = cache_ttl
        self.cache_prefix = cache_prefix
        self.tracer = init_tracing()

    # ---- ids -------------------------------------------------------------

    def _with_num(self, key: object, num: Optional[object]) -> str:
        if num is None:
            return str(key)
        return self.messages.message("cite_reference_link_key_with_num", str(key), str(num))

    def ref_key(self, key: object, num: Optional[object] = None) -> str:
        """Id of an inline marker; the target of a back-link."""
        prefix = self.messages.message("cite_reference_link_prefix")
        suffix = self.messages.message("cite_reference_link_suffix")
        return f"{prefix}{self._with_num(key, num)}{suffix}"

    def references_key(self, key: object, num: Optional[object] = None) -> str:
        """Id of a list entry; the target of an inline marker."""
        prefix = self.messages.message("cite_references_link_prefix")
        suffix = self.messages.message("cite_references_link_suffix")
        return f"{prefix}{self._with_num(key, num)}{suffix}"

    # ---- errors ----------------------------------------------------------

    def error(self, error: CiteError, parser: Optional[HostParser] = None) -> str:
        body = self.messages.message(error.kind.message_key, *error.params)
        text = self.messages.message("cite_error", body)
        out = f'<strong class="error mw-ext-cite-error">{text}</strong>'
        if error.render_mode is RenderMode.PARSE and parser is not None:
            out = parser.recursive_parse(out)
        return out

    def _label_text(self, label: Union[str, CiteError]) -> str:
        if isinstance(label, CiteError):
            return self.error(label)
        return label

    # ---- entries ---------------------------------------------------------

    def reference_text(self, key: object, text: Optional[str]) -> str:
        if not text:
            return self.error(
                CiteError.of(CiteErrorKind.MISSING_REFERENCE_TEXT, key, parse=False)
            )
        return self.messages.message("cite_reference_text", text.rstrip("\n"))

    def list_to_text(self, items: list) -> str:
        """Join back-links; the last separator may differ from the others."""
        if len(items) == 1:
            return str(items[0])
        sep = self.messages.message("cite_references_link_many_sep")
        last = self.messages.message("cite_references_link_many_and")
        return sep.join(items[:-1]) + last + items[-1]

    def format_entry(self, entry: Entry) -> str:
        if isinstance(entry, ContinuationEntry):
            return self.messages.message(
                "cite_references_no_link",
                self.references_key(entry.follow_of),
                self.reference_text(entry.order, entry.text),
            )

        if isinstance(entry, AnonymousEntry):
            return self.messages.message(
                "cite_references_link_one",
                self.references_key(entry.order),
                self.ref_key(entry.order),
                self.reference_text(entry.order, entry.text),
            )

        if not isinstance(entry, NamedEntry):
            raise CiteContractError(f"Unknown entry type: {type(entry).__name__}")

        text = self.reference_text(entry.key, entry.text)
        anchor = self.references_key(f"{entry.key}-{entry.order}")

        # A name used once is formatted like an anonymous entry; "1. 1.0 text"
        # would be noise.
        if entry.count == 0:
            return self.messages.message(
                "cite_references_link_one",
                anchor,
                self.ref_key(entry.key, f"{entry.order}-0"),
                text,
            )

        links = []
        for i in range(entry.count + 1):
            links.append(self.messages.message(
                "cite_references_link_many_format",
                self.ref_key(entry.key, f"{entry.order}-{i}"),
                self.labels.numeric_backlink(entry.number, i, entry.count),
                self._label_text(self.labels.backlink(i)),
            ))
        return self.messages.message(
            "cite_references_link_many", anchor, self.list_to_text(links), text
        )

    # ---- lists -----------------------------------------------------------

    def render(self, stack: OccurrenceStack, group: str, parser: HostParser) -> str:
        """Render ``group`` and drop it from ``stack``.

        Returns an empty string when the group has nothing pending.
        """
        refs = stack.get(group)
        if refs is None or not refs.entries:
            return ""

        with self.tracer.start_as_current_span("cite.references") as span:
            items = [self.format_entry(entry) for entry in refs.entries]
            prefix = self.messages.message("cite_references_prefix")
            suffix = self.messages.message("cite_references_suffix")
            # Newlines around the items keep the prefix and suffix on their own lines.
            parser_input = prefix + "\n" + "\n".join(items) + "\n" + suffix

            cache_key = make_cache_key(self.cache_prefix, parser_input, parser.page_id)
            data = self.cache.get(cache_key) if self.cache_enabled else None

            cache_hit = bool(data) and parser.is_valid_half_parsed(data)
            if cache_hit:
                out = parser.unserialize_half_parsed(data)
                logger.debug(f"Reference list cache hit for group '{group}'")
            else:
                out = parser.recursive_parse(parser_input).rstrip("\n")
                if self.cache_enabled:
                    self.cache.set(cache_key, parser.serialize_half_parsed(out), self.cache_ttl)

            safe_set_span_attributes(span, {
                "cite.group": group,
                "cite.entries": len(items),
                "cite.cache_hit": cache_hit,
            })

        stack.drop(group)
        return out
