"""Reference-region state machine.

IDLE -> RUNNING when a region call starts, RUNNING -> DEFINING while the
region body is reparsed, DEFINING -> RUNNING when the body is done, and
RUNNING -> IDLE when the region call returns (always, even on error).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from loguru import logger

from citenotes.citations.errors import CiteError
from citenotes.citations.stack import DEFAULT_GROUP


class RegionMode(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DEFINING = "defining"


@dataclass
class RegionState:
    mode: RegionMode = RegionMode.IDLE
    group: str = DEFAULT_GROUP
    errors: List[CiteError] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.mode is not RegionMode.IDLE

    @property
    def defining(self) -> bool:
        return self.mode is RegionMode.DEFINING

    def start(self) -> None:
        if self.active:
            raise RuntimeError(f"Region already active ({self.mode.value})")
        self.mode = RegionMode.RUNNING

    def begin_definitions(self, group: str) -> None:
        if self.mode is not RegionMode.RUNNING:
            raise RuntimeError(f"Cannot define entries from state {self.mode.value}")
        self.group = group
        self.mode = RegionMode.DEFINING
        logger.debug(f"Defining entries inside region for group '{group}'")

    def end_definitions(self) -> None:
        self.mode = RegionMode.RUNNING

    def finish(self) -> None:
        self.mode = RegionMode.IDLE

    def record_error(self, error: CiteError) -> None:
        logger.warning(f"Region definition error: {error.kind.name} {list(error.params)}")
        self.errors.append(error)

    def take_errors(self) -> List[CiteError]:
        errors, self.errors = self.errors, []
        return errors
