"""Label generation for citation links and back-links.

Numeric back-link labels look like ``1.0``, ``1.1`` ... and are zero padded
so that ``1.09`` sorts before ``1.10``. Custom labels come from whitespace
separated message templates, one table for back-links and one per group for
the citation's visible link.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Union

from citenotes.citations.errors import CiteError, CiteErrorKind
from citenotes.citations.interfaces import MessageProvider

BACKLINK_LABELS_MESSAGE = "cite_references_link_many_format_backlink_labels"
LINK_LABEL_MESSAGE_PREFIX = "cite_link_label_group-"

_LABEL_SPLIT_RE = re.compile(r"[\n\t ]+")


def split_labels(text: str) -> List[str]:
    """Split a label template on spaces, tabs and newlines."""
    return [token for token in _LABEL_SPLIT_RE.split(text.strip()) if token]


def numeric_backlink_label(base: int, offset: int, maximum: int) -> str:
    """Return ``base.offset`` with ``offset`` padded to the width of ``maximum``.

    >>> numeric_backlink_label(1, 2, 10)
    '1.02'
    """
    width = len(str(maximum))
    return f"{base}.{str(offset).zfill(width)}"


def link_label_message(group: str) -> str:
    return f"{LINK_LABEL_MESSAGE_PREFIX}{group}"


class LabelTables:
    """Lazily built label tables.

    Tables are read from the message provider on first use and kept for the
    lifetime of the owning processor; registry clears do not reset them.
    """

    def __init__(self, messages: MessageProvider):
        self.messages = messages
        self._backlink_labels: Optional[List[str]] = None
        # group -> token list, or None when the group has no label message
        self._link_labels: Dict[str, Optional[List[str]]] = {}

    def numeric_backlink(self, base: int, offset: int, maximum: int) -> str:
        return self.messages.format_number(numeric_backlink_label(base, offset, maximum))

    def backlink(self, offset: int) -> Union[str, CiteError]:
        if self._backlink_labels is None:
            self._backlink_labels = split_labels(self.messages.message(BACKLINK_LABELS_MESSAGE))
        if 0 <= offset < len(self._backlink_labels):
            return self._backlink_labels[offset]
        return CiteError.of(CiteErrorKind.BACKLINK_LABEL_EXHAUSTED, parse=False)

    def link(self, number: int, group: str, fallback: str) -> Union[str, CiteError]:
        """Visible label for the ``number``-th (1-based) citation in ``group``.

        Groups without a label message use ``fallback``.
        """
        if group not in self._link_labels:
            message = link_label_message(group)
            text = self.messages.message(message) if self.messages.exists(message) else ""
            self._link_labels[group] = split_labels(text) or None

        labels = self._link_labels[group]
        if labels is None:
            return fallback
        if 1 <= number <= len(labels):
            return labels[number - 1]
        return CiteError.of(
            CiteErrorKind.LINK_LABEL_EXHAUSTED,
            group,
            link_label_message(group),
            parse=False,
        )
