"""Heap-managed FIFO queues."""

from __future__ import annotations

from collections import deque
from typing import Any, Iterable, Optional

from turbine.gc import GarbageCollector, ObjectKind, RuntimeObject
from turbine.values import VALUE_SIZE, ZERO_VALUE, is_ref_type

_MIN_CAP = 8


class RuntimeQueue(RuntimeObject):
    """A first-in first-out queue of values of one type."""

    def __init__(self, heap: Optional[GarbageCollector], val_type: int, length: int = 0) -> None:
        super().__init__(heap, ObjectKind.QUEUE)
        self.val_type = val_type
        self._items: deque[Any] = deque()
        self._cap = 0
        if heap is not None:
            heap.register(self)

    @property
    def capacity(self) -> int:
        return self._cap

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def front(self) -> Any:
        """The oldest value, or ZERO_VALUE when empty."""
        return self._items[0] if self._items else ZERO_VALUE

    def _expand(self) -> None:
        new_cap = _MIN_CAP if self._cap < _MIN_CAP else self._cap * 2
        if self.heap is not None:
            self.heap.alloc(new_cap * VALUE_SIZE)
            if self._cap:
                self.heap.free(self._cap * VALUE_SIZE)
        self._cap = new_cap

    def push(self, value: Any) -> None:
        if len(self._items) == self._cap:
            self._expand()
        self._items.append(value)

    def pop(self) -> Any:
        """Remove and return the oldest value, or ZERO_VALUE when empty."""
        if not self._items:
            return ZERO_VALUE
        return self._items.popleft()

    def get(self, index: int) -> Any:
        """Value at ``index`` counted from the front."""
        if not 0 <= index < len(self._items):
            raise IndexError(f"queue index out of range: {index}")
        return self._items[index]

    def references(self) -> Iterable[Optional[RuntimeObject]]:
        if is_ref_type(self.val_type):
            return list(self._items)
        return ()

    def describe(self) -> str:
        return f"[{'queue':>6}] => len: {len(self)}"

    def release(self) -> None:
        if self.heap is not None and self._cap:
            self.heap.free(self._cap * VALUE_SIZE)
        self._items.clear()
        self._cap = 0
        super().release()