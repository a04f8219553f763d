"""Citation error records.

Every user-facing failure is a ``CiteError`` value that is rendered inline
through the message catalog; none of them abort document processing.
``CiteContractError`` is the exception for internal contract violations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class CiteContractError(TypeError):
    """Raised when the engine receives structurally impossible input."""


class RenderMode(str, Enum):
    """Whether a formatted error is reparsed by the host or inserted as-is."""

    PARSE = "parse"
    NOPARSE = "noparse"


class CiteErrorKind(str, Enum):
    """Error kinds and the message key each one renders with."""

    EMPTY_CONTENT_NO_KEY = "cite_error_ref_no_input"
    MISSING_CONTENT_AND_KEY = "cite_error_ref_no_key"
    CONFLICTING_KEY_AND_FOLLOW = "cite_error_ref_too_many_keys"
    NUMERIC_KEY_FORBIDDEN = "cite_error_ref_numeric_key"
    UNTERMINATED_NESTED_MARKER = "cite_error_included_ref"
    GROUPS_DISABLED = "cite_error_ref_groups_disabled"
    UNRECOGNIZED_ATTRIBUTE = "cite_error_ref_unknown_attribute"
    GROUP_MISMATCH = "cite_error_references_group_mismatch"
    MISSING_GROUP_IN_REGION = "cite_error_references_missing_group"
    UNNAMED_IN_REGION = "cite_error_references_no_key"
    UNKNOWN_KEY_IN_REGION = "cite_error_references_missing_key"
    MISSING_KEY_IN_REGION = "cite_error_empty_references_define"
    MISSING_REFERENCE_TEXT = "cite_error_references_no_text"
    BACKLINK_LABEL_EXHAUSTED = "cite_error_references_no_backlink_label"
    LINK_LABEL_EXHAUSTED = "cite_error_no_link_label_group"
    MISSING_REFERENCE_REGION = "cite_error_group_refs_without_references"
    MISSING_DEFAULT_REFERENCE_REGION = "cite_error_refs_without_references"
    INVALID_REGION_ATTRIBUTES = "cite_error_references_invalid_parameters"
    INVALID_REGION_ATTRIBUTES_GROUP = "cite_error_references_invalid_parameters_group"

    @property
    def message_key(self) -> str:
        return self.value


@dataclass(frozen=True)
class CiteError:
    """A structured, recoverable citation error."""

    kind: CiteErrorKind
    params: Tuple[str, ...] = ()
    render_mode: RenderMode = RenderMode.PARSE

    @classmethod
    def of(cls, kind: CiteErrorKind, *params: object, parse: bool = True) -> "CiteError":
        return cls(
            kind=kind,
            params=tuple("" if p is None else str(p) for p in params),
            render_mode=RenderMode.PARSE if parse else RenderMode.NOPARSE,
        )
