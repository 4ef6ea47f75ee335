"""Heap-managed growable vectors."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from turbine.gc import GarbageCollector, ObjectKind, RuntimeObject
from turbine.values import ValueVec, is_ref_type


class RuntimeVec(RuntimeObject):
    """A vector of values of one type."""

    def __init__(self, heap: Optional[GarbageCollector], val_type: int, length: int) -> None:
        super().__init__(heap, ObjectKind.VEC)
        self.val_type = val_type
        self._values = ValueVec(heap)
        self._values.resize(length)
        if heap is not None:
            heap.register(self)

    @property
    def capacity(self) -> int:
        return self._values.capacity

    def _check(self, index: int) -> None:
        if not self.is_valid_index(index):
            raise IndexError(f"vec index out of range: {index}")

    def get(self, index: int) -> Any:
        self._check(index)
        return self._values.get(index)

    def set(self, index: int, value: Any) -> None:
        self._check(index)
        self._values.set(index, value)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self)

    def resize(self, new_len: int) -> None:
        self._values.resize(new_len)

    def push(self, value: Any) -> None:
        self._values.push(value)

    def clear(self) -> None:
        self._values.resize(0)

    def references(self) -> Iterable[Optional[RuntimeObject]]:
        if is_ref_type(self.val_type):
            return list(self._values)
        return ()

    def describe(self) -> str:
        return f"[{'vec':>6}] => len: {len(self)}, cap: {self.capacity}"

    def release(self) -> None:
        self._values.free()
        super().release()