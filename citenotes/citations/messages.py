"""Default message catalog.

English templates for every string the engine emits. Templates use ``$1``,
``$2`` ... placeholders. Hosts can pass ``overrides`` to localize or restyle
the output, and a ``digits`` table to transform numerals.
"""

from __future__ import annotations

import re
import string
from typing import Dict, Mapping, Optional

from loguru import logger

_PLACEHOLDER_RE = re.compile(r"\$(\d+)")
_NUMBER_RE = re.compile(r"^(-?)(\d+)(\.\d+)?$")


def _alpha_labels(letters: str) -> str:
    singles = list(letters)
    doubles = [a + b for a in letters for b in letters]
    return " ".join(singles + doubles)


_REF_TAG = "<code>&lt;ref&gt;</code>"
_REFERENCES_TAG = "<code>&lt;references&gt;</code>"

DEFAULT_MESSAGES: Dict[str, str] = {
    # Marker and list markup
    "cite_reference_link": '<sup id="$1" class="reference"><a href="#$2">[$3]</a></sup>',
    "cite_references_link_one": '<li id="$1"><span class="mw-cite-backlink"><a href="#$2">↑</a></span> $3</li>',
    "cite_references_link_many": '<li id="$1"><span class="mw-cite-backlink">↑ $2</span> $3</li>',
    "cite_references_link_many_format": '<a href="#$1"><sup>$2</sup></a>',
    "cite_references_link_many_format_backlink_labels": _alpha_labels(string.ascii_lowercase),
    "cite_references_link_many_sep": " ",
    "cite_references_link_many_and": " ",
    "cite_references_no_link": '<p id="$1">$2</p>',
    "cite_references_prefix": '<ol class="references">',
    "cite_references_suffix": "</ol>",
    "cite_reference_link_key_with_num": "$1_$2",
    "cite_reference_link_prefix": "cite_ref-",
    "cite_reference_link_suffix": "",
    "cite_references_link_prefix": "cite_note-",
    "cite_references_link_suffix": "",
    "cite_reference_text": '<span class="reference-text">$1</span>\n',
    # Group link labels
    "cite_link_label_group-lower-alpha": _alpha_labels(string.ascii_lowercase),
    "cite_link_label_group-upper-alpha": _alpha_labels(string.ascii_uppercase),
    "cite_link_label_group-lower-roman": (
        "i ii iii iv v vi vii viii ix x xi xii xiii xiv xv xvi xvii xviii xix xx"
    ),
    "cite_link_label_group-upper-roman": (
        "I II III IV V VI VII VIII IX X XI XII XIII XIV XV XVI XVII XVIII XIX XX"
    ),
    "cite_link_label_group-lower-greek": "α β γ δ ε ζ η θ ι κ λ μ ν ξ ο π ρ σ τ υ φ χ ψ ω",
    # Errors
    "cite_error": "Cite error: $1",
    "cite_error_ref_no_input": f"Invalid {_REF_TAG} tag; refs with no name must have content",
    "cite_error_ref_no_key": f"Invalid {_REF_TAG} tag; refs with no content must have a name",
    "cite_error_ref_too_many_keys": f"Invalid {_REF_TAG} tag; invalid names, e.g. too many",
    "cite_error_ref_numeric_key": (
        f"Invalid {_REF_TAG} tag; name cannot be a simple integer. Use a descriptive title"
    ),
    "cite_error_ref_groups_disabled": (
        f"Invalid {_REF_TAG} tag; the <code>group</code> attribute is not enabled on this site"
    ),
    "cite_error_ref_unknown_attribute": (
        f'Invalid {_REF_TAG} tag; unrecognized attribute "$1"'
    ),
    "cite_error_included_ref": "Closing &lt;/ref&gt; missing for &lt;ref&gt; tag",
    "cite_error_references_invalid_parameters": (
        f"Invalid {_REFERENCES_TAG} tag; no parameters are allowed. "
        "Use <code>&lt;references /&gt;</code>"
    ),
    "cite_error_references_invalid_parameters_group": (
        f'Invalid {_REFERENCES_TAG} tag; parameter "group" is allowed only. '
        "Use <code>&lt;references /&gt;</code>, or "
        '<code>&lt;references group="..." /&gt;</code>'
    ),
    "cite_error_references_no_backlink_label": (
        "Ran out of custom backlink labels. Define more in the "
        '"cite_references_link_many_format_backlink_labels" message.'
    ),
    "cite_error_no_link_label_group": (
        'Ran out of custom link labels for group "$1". Define more in the "$2" message.'
    ),
    "cite_error_references_no_text": (
        f"Invalid {_REF_TAG} tag; no text was provided for refs named <code>$1</code>"
    ),
    "cite_error_refs_without_references": (
        f"{_REF_TAG} tags exist, but no <code>&lt;references /&gt;</code> tag was found"
    ),
    "cite_error_group_refs_without_references": (
        f'{_REF_TAG} tags exist for a group named "$1", but no corresponding '
        '<code>&lt;references group="$1"/&gt;</code> tag was found'
    ),
    "cite_error_references_group_mismatch": (
        f'{_REF_TAG} tag in {_REFERENCES_TAG} has conflicting group attribute "$1".'
    ),
    "cite_error_references_missing_group": (
        f'{_REF_TAG} tag defined in {_REFERENCES_TAG} has group attribute "$1" '
        "which does not appear in prior text."
    ),
    "cite_error_references_missing_key": (
        f'{_REF_TAG} tag with name "$1" defined in {_REFERENCES_TAG} is not used in prior text.'
    ),
    "cite_error_references_no_key": (
        f"{_REF_TAG} tag defined in {_REFERENCES_TAG} has no name attribute."
    ),
    "cite_error_empty_references_define": (
        f'{_REF_TAG} tag defined in {_REFERENCES_TAG} with name "$1" has no content.'
    ),
}


class MessageCatalog:
    """Template lookup, placeholder substitution and numeral formatting.

    Args:
        overrides: Message templates replacing or extending the defaults.
            A value of ``None`` removes a default message.
        digits: Optional mapping of ASCII digits to localized numerals.
        group_separator: Thousands separator for integer parts.
        decimal_separator: Replacement for the ``.`` between integer and
            fraction parts.
    """

    def __init__(
        self,
        overrides: Optional[Mapping[str, Optional[str]]] = None,
        *,
        digits: Optional[Mapping[str, str]] = None,
        group_separator: str = ",",
        decimal_separator: str = ".",
    ):
        self._messages: Dict[str, str] = dict(DEFAULT_MESSAGES)
        for key, value in (overrides or {}).items():
            if value is None:
                self._messages.pop(key, None)
            else:
                self._messages[key] = value
        self._digits = dict(digits or {})
        self._group_separator = group_separator
        self._decimal_separator = decimal_separator

    def exists(self, key: str) -> bool:
        return key in self._messages

    def message(self, key: str, *args: str) -> str:
        template = self._messages.get(key)
        if template is None:
            logger.warning(f"Missing message template: {key}")
            return f"<{key}>"

        def _substitute(match: re.Match) -> str:
            index = int(match.group(1)) - 1
            if 0 <= index < len(args):
                return str(args[index])
            return match.group(0)

        return _PLACEHOLDER_RE.sub(_substitute, template)

    def format_number(self, value: object) -> str:
        """Format ``value`` (an int or a ``"1.05"`` style string) for display."""
        text = str(value)
        match = _NUMBER_RE.match(text)
        if match is None:
            return text

        sign, integer, fraction = match.group(1), match.group(2), match.group(3) or ""
        if self._group_separator and len(integer) > 3:
            head = len(integer) % 3 or 3
            parts = [integer[:head]] + [integer[i:i + 3] for i in range(head, len(integer), 3)]
            integer = self._group_separator.join(parts)
        if fraction:
            fraction = self._decimal_separator + fraction[1:]

        formatted = sign + integer + fraction
        if self._digits:
            formatted = "".join(self._digits.get(ch, ch) for ch in formatted)
        return formatted
