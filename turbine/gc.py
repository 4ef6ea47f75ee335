"""Heap accounting and a mark-and-sweep collector for runtime objects."""

from __future__ import annotations

import itertools
import time
from enum import IntEnum
from typing import Iterable, Iterator, Optional

from turbine.gclog import GCLog, GCLogEntry, TriggerReason

INIT_THRESHOLD_MULT = 1.5
INIT_THRESHOLD_BYTES = 1 * 1024 * 1024
MAX_THRESHOLD_BYTES = 128 * 1024 * 1024

OBJECT_SIZE = 24
"""Bytes charged to the heap for the header of every runtime object."""

_next_id = itertools.count(1)


class ObjectKind(IntEnum):
    """Kinds of heap objects."""

    NIL = 0
    STRING = 1
    VEC = 2
    MAP = 3
    SET = 4
    STACK = 5
    QUEUE = 6
    STRUCT = 7


class _RequestMode(IntEnum):
    NONE = 0
    AT_SAFEPOINT = 1
    FORCE_NOW = 2


class _Mark(IntEnum):
    WHITE = 0
    GRAY = 1
    BLACK = 2


class RuntimeObject:
    """Base class of every object the collector manages."""

    def __init__(self, heap: Optional["GarbageCollector"], kind: ObjectKind) -> None:
        if heap is not None:
            heap.alloc(OBJECT_SIZE)
        self.heap = heap
        self.kind = ObjectKind(kind)
        self.id = next(_next_id)
        self.mark = _Mark.WHITE

    def references(self) -> Iterable[Optional["RuntimeObject"]]:
        """Objects directly reachable from this one."""
        return ()

    def describe(self) -> str:
        """A one-line summary of the object."""
        if self.kind == ObjectKind.NIL:
            return "[nil] => nil"
        return f"[{self.kind.name.lower():>6}]"

    def release(self) -> None:
        """Return the object's storage to its heap."""
        if self.heap is not None:
            self.heap.free(OBJECT_SIZE)


def object_id(obj: Optional[RuntimeObject]) -> int:
    """Return the id of ``obj``, or 0 for no object."""
    return 0 if obj is None else obj.id


def format_bytes(nbytes: int) -> str:
    """Format a byte count with a binary unit."""
    if nbytes >= 1024 * 1024 * 1024:
        return f"{nbytes / (1024 * 1024 * 1024):.2f} GB   "
    if nbytes >= 1024 * 1024:
        return f"{nbytes / (1024 * 1024):.2f} MB   "
    if nbytes >= 1024:
        return f"{nbytes / 1024:.2f} KB   "
    return f"{nbytes} bytes"


class GarbageCollector:
    """Tracks heap usage and frees objects unreachable from given roots."""

    def __init__(self) -> None:
        self.used_bytes = 0
        self.threshold_bytes = INIT_THRESHOLD_BYTES
        self.max_threshold_bytes = MAX_THRESHOLD_BYTES
        self.threshold_multiplier = INIT_THRESHOLD_MULT
        self.set_threshold_multiplier(INIT_THRESHOLD_MULT)
        self.request_mode = _RequestMode.NONE
        self.trigger_reason = TriggerReason.NONE
        self.total_collections = 0
        self.log = GCLog()
        self._objects: list[RuntimeObject] = []

    # memory
    def _check_threshold(self) -> None:
        if self.used_bytes >= self.threshold_bytes:
            self.request_collect()
            self.trigger_reason = TriggerReason.THRESHOLD

    def alloc(self, nbytes: int) -> None:
        """Charge ``nbytes`` to the heap, requesting a collection past the threshold."""
        self._check_threshold()
        self.used_bytes += nbytes

    def realloc(self, old_size: int, new_size: int) -> None:
        """Change a charged block from ``old_size`` to ``new_size`` bytes."""
        self.used_bytes += new_size - old_size

    def free(self, nbytes: int) -> None:
        """Return ``nbytes`` to the heap."""
        if nbytes > self.used_bytes:
            raise ValueError(f"freeing {nbytes} bytes with only {self.used_bytes} in use")
        self.used_bytes -= nbytes

    # objects
    def register(self, obj: RuntimeObject) -> None:
        """Place ``obj`` under the collector's management."""
        self._objects.append(obj)

    def is_object_alive(self, obj_id: int) -> bool:
        return any(obj.id == obj_id for obj in self._objects)

    def objects(self) -> Iterator[RuntimeObject]:
        """Managed objects, most recently registered first."""
        return reversed(self._objects)

    def format_objects(self) -> str:
        lines = []
        for obj in self.objects():
            if obj.kind == ObjectKind.NIL:
                lines.append(obj.describe())
            else:
                lines.append(f"[{obj.id:6}] {obj.describe()}")
        return "\n".join(lines)

    # collection
    def request_collect(self) -> None:
        self.request_mode = _RequestMode.AT_SAFEPOINT
        self.trigger_reason = TriggerReason.USER

    def force_collect(self) -> None:
        self.request_mode = _RequestMode.FORCE_NOW
        self.trigger_reason = TriggerReason.USER

    def is_requested(self) -> bool:
        return self.request_mode != _RequestMode.NONE

    def is_forced(self) -> bool:
        return self.request_mode == _RequestMode.FORCE_NOW

    def _mark_from(self, roots: Iterable[Optional[RuntimeObject]]) -> None:
        pending = [obj for obj in roots if obj is not None]
        while pending:
            obj = pending.pop()
            if obj.mark == _Mark.BLACK:
                continue
            obj.mark = _Mark.BLACK
            pending.extend(ref for ref in obj.references() if ref is not None)

    def collect(self, roots: Iterable[Optional[RuntimeObject]], inst_addr: int) -> GCLogEntry:
        """Free every object not reachable from ``roots`` and log the run."""
        if inst_addr < 0:
            raise ValueError(f"negative instruction address: {inst_addr}")
        if self.trigger_reason == TriggerReason.NONE:
            raise RuntimeError("collection was never requested")

        entry = GCLogEntry(
            triggered_addr=inst_addr,
            trigger_reason=TriggerReason(self.trigger_reason),
            used_bytes_before=self.used_bytes,
        )
        start = time.perf_counter()

        for obj in self._objects:
            obj.mark = _Mark.WHITE
        self._mark_from(roots)

        survivors = []
        for obj in self._objects:
            if obj.mark == _Mark.WHITE:
                obj.release()
            else:
                survivors.append(obj)
        self._objects = survivors

        end = time.perf_counter()

        self.threshold_bytes = min(
            int(self.threshold_bytes * self.threshold_multiplier), self.max_threshold_bytes
        )
        self.total_collections += 1
        self.request_mode = _RequestMode.NONE

        entry.total_collections = self.total_collections
        entry.used_bytes_after = self.used_bytes
        entry.duration_msec = (end - start) * 1000.0
        self.log.push(entry)
        return entry

    # stats
    def format_stats(self) -> str:
        usage = self.used_bytes / self.threshold_bytes if self.threshold_bytes > 0 else 0.0
        return "\n".join(
            [
                "GC status:",
                f"  * usage:      {format_bytes(self.used_bytes):>16}",
                f"  * threshold:  {format_bytes(self.threshold_bytes):>16}",
                f"  * percentage: {usage * 100:10.2f} %",
            ]
        )

    def set_threshold_multiplier(self, multiplier: float) -> None:
        """Set the threshold growth factor, clamped to [1, 3]."""
        self.threshold_multiplier = float(min(3.0, max(1.0, multiplier)))

    def clear(self) -> None:
        """Release every managed object and empty the log."""
        for obj in reversed(self._objects):
            obj.release()
        self._objects = []
        self.log.clear()