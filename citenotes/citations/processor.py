"""
Citation Processor
==================
Entry points the host parser calls for citation markers (``ref``) and
reference regions (``references``), plus the document lifecycle hooks.

Usage:
    host = TagHost(page_id="42")
    processor = CiteProcessor()
    processor.install(host)
    html = host.render(document_text)

All user errors are rendered inline; a failing marker never stops later
markers or regions from being processed.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from loguru import logger

from citenotes.config import CITE
from citenotes.citations.errors import CiteContractError, CiteError, CiteErrorKind
from citenotes.citations.interfaces import HostParser, IdSanitizer, MessageProvider, RenderCache
from citenotes.citations.keys import is_numeric_key, resolve_key_attributes
from citenotes.citations.labels import LabelTables
from citenotes.citations.messages import MessageCatalog
from citenotes.citations.registry import CitationRegistry
from citenotes.citations.render import ReferenceListRenderer
from citenotes.citations.sanitizer import AnchorIdSanitizer
from citenotes.citations.stack import DEFAULT_GROUP, RenderToken

MARKER_TAG = "ref"
REGION_TAG = "references"

# Comments and balanced tag pairs are removed before looking for an
# unterminated marker, so <nowiki><ref></nowiki> style content passes.
_BALANCED_SPAN_RE = re.compile(r"<([^ ]+?).*?>.*?</\1 *>|<!--.*?-->")
_OPEN_MARKER_RE = re.compile(r"<ref\b[^<]*?>", re.I)


def contains_unterminated_marker(text: str) -> bool:
    return bool(_OPEN_MARKER_RE.search(_BALANCED_SPAN_RE.sub("", text)))


@dataclass(frozen=True)
class ProcessorOptions:
    """Per-processor switches; defaults come from ``citenotes.config.CITE``."""

    allow_groups: bool = CITE.ALLOW_GROUPS
    cache_references: bool = CITE.CACHE_REFERENCES
    cache_ttl: int = CITE.CACHE_TTL_SECONDS
    cache_prefix: str = CITE.CACHE_KEY_PREFIX
    auto_render_default_group: bool = CITE.AUTO_RENDER_DEFAULT_GROUP

    @classmethod
    def from_context(cls, context: Dict[str, Any]) -> "ProcessorOptions":
        raw = context.get("citations")
        if not isinstance(raw, dict):
            return cls()

        defaults = cls()
        ttl = raw.get("cache_ttl", defaults.cache_ttl)
        if not isinstance(ttl, int) or isinstance(ttl, bool) or ttl <= 0:
            ttl = defaults.cache_ttl
        prefix = raw.get("cache_prefix", defaults.cache_prefix)
        if not isinstance(prefix, str) or not prefix:
            prefix = defaults.cache_prefix

        return cls(
            allow_groups=bool(raw.get("allow_groups", defaults.allow_groups)),
            cache_references=bool(raw.get("cache_references", defaults.cache_references)),
            cache_ttl=ttl,
            cache_prefix=prefix,
            auto_render_default_group=bool(
                raw.get("auto_render_default_group", defaults.auto_render_default_group)
            ),
        )


class CiteProcessor:
    """Owns one ``CitationRegistry`` and the collaborators used to render it."""

    def __init__(
        self,
        options: Optional[ProcessorOptions] = None,
        *,
        messages: Optional[MessageProvider] = None,
        sanitizer: Optional[IdSanitizer] = None,
        cache: Optional[RenderCache] = None,
    ):
        self.options = options or ProcessorOptions()
        self.messages = messages or MessageCatalog()
        self.sanitizer = sanitizer or AnchorIdSanitizer()
        self.cache = cache
        self.registry = CitationRegistry()
        self.labels = LabelTables(self.messages)
        self.renderer = ReferenceListRenderer(
            self.messages,
            self.labels,
            cache=cache,
            cache_enabled=self.options.cache_references,
            cache_ttl=self.options.cache_ttl,
            cache_prefix=self.options.cache_prefix,
        )

    # ---- host wiring -----------------------------------------------------

    def install(self, host: Any) -> "CiteProcessor":
        """Register tag hooks and lifecycle hooks on a ``TagHost``-like host."""
        host.set_hook(MARKER_TAG, self.ref)
        host.set_hook(REGION_TAG, self.references)
        host.on_clear_state("cite", self.clear_state)
        host.on_after_render("cite", self.check_unclosed_groups)
        host.on_clone("cite", self.clone_state)
        return self

    # ---- markers ---------------------------------------------------------

    def ref(self, text: Optional[str], attrs: Mapping[str, str], parser: HostParser) -> str:
        """Handle one citation marker. ``text`` is None for self-closing markers."""
        if self.registry.in_cite:
            if text is None:
                return html.escape("<ref />")
            return html.escape(f"<ref>{text}</ref>")

        self.registry.call_count += 1
        self.registry.in_cite = True
        try:
            return self._guarded_ref(text, attrs, parser)
        finally:
            self.registry.in_cite = False

    def _guarded_ref(self, text: Optional[str], attrs: Mapping[str, str], parser: HostParser) -> str:
        if text is not None and not isinstance(text, str):
            raise CiteContractError(f"Invalid marker text: {text!r}")

        region = self.registry.region

        resolved = resolve_key_attributes(
            attrs, allow_groups=self.options.allow_groups, sanitizer=self.sanitizer
        )
        if isinstance(resolved, CiteError):
            return self._report(resolved, parser)

        key, follow = resolved.key, resolved.follow
        group = resolved.group
        if group is None:
            group = region.group if region.defining else DEFAULT_GROUP

        if is_numeric_key(key) or is_numeric_key(follow):
            return self._report(CiteError.of(CiteErrorKind.NUMERIC_KEY_FORBIDDEN), parser)

        if region.defining:
            self._define_in_region(text, key, group)
            return ""

        if text == "":
            # <ref name="x"></ref> is a re-use of x, like <ref name="x" />
            if key is None:
                return self.renderer.error(CiteError.of(CiteErrorKind.EMPTY_CONTENT_NO_KEY), parser)
            text = None

        if text is None and key is None:
            return self.renderer.error(CiteError.of(CiteErrorKind.MISSING_CONTENT_AND_KEY), parser)

        if text is not None and contains_unterminated_marker(text):
            return self.renderer.error(CiteError.of(CiteErrorKind.UNTERMINATED_NESTED_MARKER), parser)

        token = self.registry.stack.record(text, key, group, follow)
        if token is None:
            return ""
        return self.link_ref(token, parser)

    def _report(self, error: CiteError, parser: HostParser) -> str:
        """Inline error, or a buffered one while defining inside a region."""
        if self.registry.region.defining:
            self.registry.region.record_error(error)
            return ""
        return self.renderer.error(error, parser)

    def _define_in_region(self, text: Optional[str], key: Optional[str], group: str) -> None:
        region = self.registry.region
        stack = self.registry.stack

        if group != region.group:
            region.record_error(CiteError.of(CiteErrorKind.GROUP_MISMATCH, html.escape(group)))
        elif not text:
            region.record_error(CiteError.of(CiteErrorKind.MISSING_KEY_IN_REGION, key))
        elif not stack.has_group(group):
            region.record_error(CiteError.of(CiteErrorKind.MISSING_GROUP_IN_REGION, html.escape(group)))
        elif key is None:
            region.record_error(CiteError.of(CiteErrorKind.UNNAMED_IN_REGION))
        elif not stack.define(group, key, text):
            region.record_error(CiteError.of(CiteErrorKind.UNKNOWN_KEY_IN_REGION, key))
        else:
            logger.debug(f"Defined text for '{key}' in group '{group}' inside region")

    def link_ref(self, token: RenderToken, parser: HostParser) -> str:
        """Inline link for one marker occurrence."""
        fallback = self.messages.format_number(token.label)
        if token.group != DEFAULT_GROUP:
            fallback = f"{token.group} {fallback}"

        label = self.labels.link(token.label, token.group, fallback)
        if isinstance(label, CiteError):
            label = self.renderer.error(label)

        return parser.recursive_parse(self.messages.message(
            "cite_reference_link",
            self.renderer.ref_key(token.key, token.occurrence),
            self.renderer.references_key(f"{token.key}{token.subkey}"),
            label,
        ))

    # ---- regions ---------------------------------------------------------

    def references(self, text: Optional[str], attrs: Mapping[str, str], parser: HostParser) -> str:
        """Handle one reference region. ``text`` is None for self-closing regions."""
        if self.registry.busy:
            if text is None:
                return html.escape("<references/>")
            return html.escape(f"<references>{text}</references>")

        self.registry.call_count += 1
        self.registry.region.start()
        try:
            return self._guarded_references(text, attrs, parser)
        finally:
            self.registry.region.finish()

    def _guarded_references(
        self, text: Optional[str], attrs: Mapping[str, str], parser: HostParser
    ) -> str:
        region = self.registry.region
        attrs = dict(attrs)
        group = DEFAULT_GROUP

        if "group" in attrs:
            if not self.options.allow_groups:
                return self.renderer.error(CiteError.of(CiteErrorKind.GROUPS_DISABLED), parser)
            group = attrs.pop("group")

        if text:
            region.begin_definitions(group)
            try:
                parser.recursive_parse(text)
            finally:
                region.end_definitions()

        if attrs:
            kind = (
                CiteErrorKind.INVALID_REGION_ATTRIBUTES_GROUP
                if self.options.allow_groups
                else CiteErrorKind.INVALID_REGION_ATTRIBUTES
            )
            return self.renderer.error(CiteError.of(kind), parser)

        out = self.renderer.render(self.registry.stack, group, parser)
        if parser.is_section_preview():
            return out

        errors = region.take_errors()
        if errors:
            out += "\n" + "<br />\n".join(self.renderer.error(e, parser) for e in errors)
        return out

    # ---- lifecycle -------------------------------------------------------

    def clear_state(self, *_: Any) -> bool:
        return self.registry.clear()

    def clone_state(self, host: Any = None) -> "CiteProcessor":
        """Independent processor for a parallel render, reset to idle and empty."""
        clone = CiteProcessor(
            self.options, messages=self.messages, sanitizer=self.sanitizer, cache=self.cache
        )
        clone.registry = self.registry.clone()
        if host is not None:
            clone.install(host)
        return clone

    def check_unclosed_groups(self, parser: HostParser, text: str) -> str:
        """Append a report for every group whose markers were never rendered."""
        if parser.is_section_preview():
            return text

        for group in list(self.registry.stack.pending_groups()):
            if group == DEFAULT_GROUP and self.options.auto_render_default_group:
                text += self.renderer.render(self.registry.stack, group, parser)
            else:
                logger.warning(f"Citations in group '{group}' were never rendered")
                if group == DEFAULT_GROUP:
                    error = CiteError.of(CiteErrorKind.MISSING_DEFAULT_REFERENCE_REGION)
                else:
                    error = CiteError.of(CiteErrorKind.MISSING_REFERENCE_REGION, html.escape(group))
                text += "\n<br />" + self.renderer.error(error, parser)
        return text

    def has_calls(self) -> bool:
        return self.registry.has_calls()
