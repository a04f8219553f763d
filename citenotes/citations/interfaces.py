"""Collaborator contracts consumed by the citation engine.

The engine never parses markup, localizes text or stores cache entries
itself; hosts plug in objects satisfying these protocols.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class HostParser(Protocol):
    """The document parser that discovers markers and invokes the engine."""

    def recursive_parse(self, text: str) -> str:
        """Resolve markers and regions nested in ``text``."""
        ...

    def is_section_preview(self) -> bool:
        ...

    @property
    def page_id(self) -> str:
        ...

    def serialize_half_parsed(self, text: str) -> str:
        ...

    def unserialize_half_parsed(self, blob: str) -> str:
        ...

    def is_valid_half_parsed(self, blob: str) -> bool:
        ...


@runtime_checkable
class MessageProvider(Protocol):
    """Localized message templates and number formatting."""

    def message(self, key: str, *args: str) -> str:
        ...

    def exists(self, key: str) -> bool:
        ...

    def format_number(self, value: object) -> str:
        ...


@runtime_checkable
class IdSanitizer(Protocol):
    def escape_id(self, raw: str, mode: str = "noninitial") -> str:
        ...


@runtime_checkable
class RenderCache(Protocol):
    """Key/value store for rendered reference lists."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, blob: str, ttl_seconds: int) -> None:
        ...
