"""Heap-managed LIFO stacks."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from turbine.gc import GarbageCollector, ObjectKind, RuntimeObject
from turbine.values import ZERO_VALUE, ValueVec, is_ref_type


class RuntimeStack(RuntimeObject):
    """A last-in first-out stack of values of one type."""

    def __init__(self, heap: Optional[GarbageCollector], val_type: int, length: int = 0) -> None:
        super().__init__(heap, ObjectKind.STACK)
        self.val_type = val_type
        self._values = ValueVec(heap)
        if heap is not None:
            heap.register(self)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def is_empty(self) -> bool:
        return self._values.is_empty()

    def top(self) -> Any:
        """The most recently pushed value, or ZERO_VALUE when empty."""
        if self.is_empty():
            return ZERO_VALUE
        return self._values.get(len(self._values) - 1)

    def push(self, value: Any) -> None:
        self._values.push(value)

    def pop(self) -> Any:
        """Remove and return the top value, or ZERO_VALUE when empty."""
        if self.is_empty():
            return ZERO_VALUE
        value = self.top()
        self._values.resize(len(self._values) - 1)
        return value

    def get(self, index: int) -> Any:
        """Value at ``index`` counted from the bottom; ZERO_VALUE when out of range."""
        return self._values.get(index)

    def references(self) -> Iterable[Optional[RuntimeObject]]:
        if is_ref_type(self.val_type):
            return list(self._values)
        return ()

    def describe(self) -> str:
        return f"[{'stack':>6}] => len: {len(self)}"

    def release(self) -> None:
        self._values.free()
        super().release()