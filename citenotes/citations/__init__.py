"""Citations package.

Footnote registry, numbering and reference-list rendering for <ref> and
<references> markup.
"""

from .errors import (
    CiteContractError,
    CiteError,
    CiteErrorKind,
    RenderMode,
)

from .stack import (
    DEFAULT_GROUP,
    AnonymousEntry,
    ContinuationEntry,
    NamedEntry,
    OccurrenceStack,
    RenderToken,
)

from .region import RegionMode, RegionState
from .registry import CitationRegistry

from .keys import ResolvedKey, resolve_key_attributes
from .labels import LabelTables, numeric_backlink_label, split_labels
from .messages import MessageCatalog
from .sanitizer import AnchorIdSanitizer, escape_id

from .cache import FileRenderCache, MemoryRenderCache, make_cache_key
from .render import ReferenceListRenderer
from .processor import CiteProcessor, ProcessorOptions
from .markup import TagHost, parse_attributes

__all__ = [
    "CiteContractError",
    "CiteError",
    "CiteErrorKind",
    "RenderMode",

    "DEFAULT_GROUP",
    "AnonymousEntry",
    "ContinuationEntry",
    "NamedEntry",
    "OccurrenceStack",
    "RenderToken",

    "RegionMode",
    "RegionState",
    "CitationRegistry",

    "ResolvedKey",
    "resolve_key_attributes",
    "LabelTables",
    "numeric_backlink_label",
    "split_labels",
    "MessageCatalog",
    "AnchorIdSanitizer",
    "escape_id",

    "FileRenderCache",
    "MemoryRenderCache",
    "make_cache_key",
    "ReferenceListRenderer",
    "CiteProcessor",
    "ProcessorOptions",
    "TagHost",
    "parse_attributes",
]
