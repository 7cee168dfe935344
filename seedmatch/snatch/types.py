"""Typed outcomes for snatching a .torrent file from a tracker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from seedmatch.metafile import Metafile


class SnatchError(str, Enum):
    """Closed set of reasons a snatch can fail."""

    ABORTED = "ABORTED"
    RATE_LIMITED = "RATE_LIMITED"
    MAGNET_LINK = "MAGNET_LINK"
    INVALID_CONTENTS = "INVALID_CONTENTS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass(frozen=True)
class SnatchResult:
    """Either a decoded metafile or exactly one SnatchError."""

    metafile: Optional[Metafile] = None
    error: Optional[SnatchError] = None

    def __post_init__(self) -> None:
        if (self.metafile is None) == (self.error is None):
            raise ValueError("SnatchResult needs exactly one of metafile or error")

    @classmethod
    def ok(cls, metafile: Metafile) -> "SnatchResult":
        return cls(metafile=metafile)

    @classmethod
    def err(cls, error: SnatchError) -> "SnatchResult":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self.metafile is not None

    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> Metafile:
        if self.metafile is None:
            raise ValueError(f"snatch failed with {self.error.value}")
        return self.metafile
