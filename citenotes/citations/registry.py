"""Citation registry state and lifecycle.

One ``CitationRegistry`` serves one document render. It is cleared between
unrelated renders (the clear is skipped while a marker or region call is in
flight) and cloned, then reset, when an independent render needs its own
state.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from loguru import logger

from citenotes.citations.region import RegionState
from citenotes.citations.stack import OccurrenceStack


@dataclass
class CitationRegistry:
    stack: OccurrenceStack = field(default_factory=OccurrenceStack)
    region: RegionState = field(default_factory=RegionState)
    call_count: int = 0
    in_cite: bool = False

    @property
    def busy(self) -> bool:
        """True while a marker or region call is being processed."""
        return self.in_cite or self.region.active

    def clear(self) -> bool:
        """Reset per-document state.

        Returns False, leaving state untouched, when a call is in flight; the
        caller retries once that call has completed.
        """
        if self.busy:
            logger.debug("Registry clear deferred: call in flight")
            return False

        self.stack.clear()
        self.call_count = 0
        self.region.errors = []
        return True

    def clone(self) -> "CitationRegistry":
        """Return an independent, idle, cleared copy."""
        duplicate = copy.deepcopy(self)
        duplicate.in_cite = False
        duplicate.region = RegionState()
        duplicate.clear()
        return duplicate

    def has_calls(self) -> bool:
        return self.call_count > 0
