"""Runtime value types, growable value vectors and value comparison."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Any, Callable, Iterator, Optional, Protocol

VALUE_SIZE = 8
"""Size in bytes of one runtime value slot, used for heap accounting."""

ZERO_VALUE = 0
"""The value a freshly allocated slot holds: integer zero, float zero, no object."""

_MIN_CAP = 8


class ValueType(IntEnum):
    """Type tags of runtime values."""

    NIL = 0
    INT = 1
    FLOAT = 2
    STRING = 3
    VEC = 4
    MAP = 5
    SET = 6
    STACK = 7
    QUEUE = 8
    STRUCT = 9


_REF_TYPES = frozenset(
    {
        ValueType.STRING,
        ValueType.VEC,
        ValueType.MAP,
        ValueType.SET,
        ValueType.STACK,
        ValueType.QUEUE,
        ValueType.STRUCT,
    }
)


def is_ref_type(val_type: int) -> bool:
    """Return True if values of this type refer to heap objects."""
    return val_type in _REF_TYPES


class _Heap(Protocol):
    def realloc(self, old_size: int, new_size: int) -> Any: ...

    def free(self, nbytes: int) -> Any: ...


class ValueVec:
    """A growable sequence of runtime values whose storage is charged to a heap."""

    def __init__(self, heap: Optional[_Heap] = None) -> None:
        self._heap = heap
        self._items: list[Any] = []
        self._cap = 0

    @property
    def capacity(self) -> int:
        """Number of slots currently reserved on the heap."""
        return self._cap

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"ValueVec({self._items!r})"

    def is_empty(self) -> bool:
        return not self._items

    def get(self, index: int) -> Any:
        """Return the value at ``index``, or ZERO_VALUE when out of range."""
        if 0 <= index < len(self._items):
            return self._items[index]
        return ZERO_VALUE

    def set(self, index: int, value: Any) -> None:
        """Store ``value`` at ``index``; out-of-range indices are ignored."""
        if 0 <= index < len(self._items):
            self._items[index] = value

    def _reserve(self, new_cap: int) -> None:
        if self._heap is not None:
            self._heap.realloc(self._cap * VALUE_SIZE, new_cap * VALUE_SIZE)
        self._cap = new_cap

    def resize(self, new_len: int) -> None:
        """Set the length, filling new slots with ZERO_VALUE."""
        if new_len < 0:
            raise ValueError(f"negative length: {new_len}")
        if new_len > self._cap:
            new_cap = max(self._cap, _MIN_CAP)
            while new_cap < new_len:
                new_cap *= 2
            self._reserve(new_cap)
        current = len(self._items)
        if new_len < current:
            del self._items[new_len:]
        else:
            self._items.extend([ZERO_VALUE] * (new_len - current))

    def push(self, value: Any) -> None:
        """Append ``value``, doubling the capacity when full."""
        if len(self._items) == self._cap:
            self._reserve(_MIN_CAP if self._cap < _MIN_CAP else 2 * self._cap)
        self._items.append(value)

    def free(self) -> None:
        """Release all storage and return to the empty state."""
        if self._cap and self._heap is not None:
            self._heap.free(self._cap * VALUE_SIZE)
        self._items.clear()
        self._cap = 0


CompareFunction = Callable[[Any, Any], int]


def _compare_int(a: int, b: int) -> int:
    return (a > b) - (a < b)


def _float_bits(x: float) -> int:
    return struct.unpack("<q", struct.pack("<d", float(x)))[0]


def _compare_float(a: float, b: float) -> int:
    # Floats are ordered by their 64-bit patterns read as signed integers.
    return _compare_int(_float_bits(a), _float_bits(b))


def _compare_string(a: Any, b: Any) -> int:
    return a.compare(b)


def get_compare_function(val_type: int) -> CompareFunction:
    """Return a three-way comparison function for values of ``val_type``."""
    if val_type == ValueType.INT:
        return _compare_int
    if val_type == ValueType.FLOAT:
        return _compare_float
    if val_type == ValueType.STRING:
        return _compare_string
    raise ValueError(f"unsupported type for comparison: {int(val_type)}")