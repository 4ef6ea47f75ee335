"""A bounded log of garbage-collection runs."""

from __future__ import annotations

import dataclasses
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

CAPACITY = 128
"""Number of most recent entries the log keeps."""


class TriggerReason(IntEnum):
    """Why a collection was started."""

    NONE = 0
    USER = 1
    THRESHOLD = 2


@dataclass
class GCLogEntry:
    """Statistics recorded for one collection."""

    triggered_addr: int = 0
    trigger_reason: TriggerReason = TriggerReason.NONE
    used_bytes_before: int = 0
    used_bytes_after: int = 0
    duration_msec: float = 0.0
    total_collections: int = 0


class GCLog:
    """Ring buffer holding the most recent collection entries, oldest first."""

    def __init__(self) -> None:
        self._entries: deque[GCLogEntry] = deque(maxlen=CAPACITY)

    def push(self, entry: GCLogEntry) -> None:
        """Append a copy of ``entry``, dropping the oldest when full."""
        self._entries.append(dataclasses.replace(entry))

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> GCLogEntry:
        if not 0 <= index < len(self._entries):
            raise IndexError(f"log entry index out of range: {index}")
        return self._entries[index]

    def __iter__(self) -> Iterator[GCLogEntry]:
        return iter(self._entries)

    def clear(self) -> None:
        self._entries.clear()