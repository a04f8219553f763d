"""Marker attribute resolution.

A citation marker accepts at most a ``name`` (the dedup key), a ``follow``
(the key this marker continues) and a ``group``. This module turns the raw
attribute mapping into a normalized ``ResolvedKey`` or a ``CiteError``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from citenotes.citations.errors import CiteError, CiteErrorKind
from citenotes.citations.interfaces import IdSanitizer
from citenotes.citations.sanitizer import AnchorIdSanitizer

KNOWN_ATTRIBUTES = ("name", "follow", "group")
MAX_ATTRIBUTES = 2

_NUMERIC_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class ResolvedKey:
    key: Optional[str] = None
    group: Optional[str] = None
    follow: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.key is None and self.follow is None


def is_numeric_key(value: Optional[str]) -> bool:
    """Bare integers are rejected as names; they collide with anonymous ids."""
    return value is not None and bool(_NUMERIC_RE.match(value))


def resolve_key_attributes(
    attrs: Mapping[str, str],
    *,
    allow_groups: bool,
    sanitizer: Optional[IdSanitizer] = None,
) -> Union[ResolvedKey, CiteError]:
    """Resolve a marker's attribute set.

    ``group`` with groups disabled is reported first; then more than two
    attributes, or ``name`` together with ``follow``, is a conflict; any
    remaining unknown attribute is unrecognized. Names that sanitize to the
    empty string are treated as absent.
    """
    if not attrs:
        return ResolvedKey()

    if "group" in attrs and not allow_groups:
        return CiteError.of(CiteErrorKind.GROUPS_DISABLED)

    if len(attrs) > MAX_ATTRIBUTES or ("name" in attrs and "follow" in attrs):
        return CiteError.of(CiteErrorKind.CONFLICTING_KEY_AND_FOLLOW)

    unknown = [name for name in attrs if name not in KNOWN_ATTRIBUTES]
    if unknown:
        return CiteError.of(CiteErrorKind.UNRECOGNIZED_ATTRIBUTE, unknown[0])

    sanitizer = sanitizer or AnchorIdSanitizer()
    key = sanitizer.escape_id(attrs["name"], "noninitial") if "name" in attrs else None
    follow = sanitizer.escape_id(attrs["follow"], "noninitial") if "follow" in attrs else None

    return ResolvedKey(
        key=key or None,
        group=attrs.get("group"),
        follow=follow or None,
    )
