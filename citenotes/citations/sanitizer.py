"""Default id sanitizer.

Turns a user supplied marker name into a string that is safe to use inside an
HTML ``id`` attribute and a fragment link.
"""

from __future__ import annotations

import html
import re
from urllib.parse import quote

_WHITESPACE_RE = re.compile(r"[\s_]+")


class AnchorIdSanitizer:
    """Legacy dot-encoded anchor ids.

    ``"Smith 2020: p. 4"`` becomes ``"Smith_2020:_p._4"``; characters outside
    the unreserved set are percent-encoded with ``.`` in place of ``%``.
    In ``"initial"`` mode an id that does not start with a letter gets an
    ``x`` prefix; ``"noninitial"`` ids are used as id suffixes and keep
    their first character.
    """

    def escape_id(self, raw: str, mode: str = "noninitial") -> str:
        text = _WHITESPACE_RE.sub("_", html.unescape(raw).strip())
        encoded = quote(text, safe=":").replace("%", ".")
        if mode != "noninitial" and not re.match(r"[A-Za-z]", encoded):
            encoded = "x" + encoded
        return encoded


def escape_id(raw: str, mode: str = "noninitial") -> str:
    return AnchorIdSanitizer().escape_id(raw, mode)
