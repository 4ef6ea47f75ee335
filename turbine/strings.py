"""Heap-managed immutable strings."""

from __future__ import annotations

from typing import Optional

from turbine.gc import GarbageCollector, ObjectKind, RuntimeObject


class RuntimeString(RuntimeObject):
    """An immutable string whose bytes are charged to the heap."""

    def __init__(self, heap: Optional[GarbageCollector], text: str) -> None:
        data = text.encode("utf-8")
        if heap is not None:
            heap.alloc(len(data) + 1)
        super().__init__(heap, ObjectKind.STRING)
        self.text = text
        self._data = data
        if heap is not None:
            heap.register(self)

    def __len__(self) -> int:
        """Length in bytes of the UTF-8 encoding."""
        return len(self._data)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"RuntimeString({self.text!r})"

    def compare(self, other: "RuntimeString") -> int:
        """Three-way byte-wise comparison with another string."""
        return self.compare_text(other.text)

    def compare_text(self, text: str) -> int:
        """Three-way byte-wise comparison with a plain text."""
        other = text.encode("utf-8")
        return (self._data > other) - (self._data < other)

    def describe(self) -> str:
        return f'[string] => len: {len(self)} "{self.text}"'

    def release(self) -> None:
        if self.heap is not None:
            self.heap.free(len(self._data) + 1)
        super().release()


def concat_strings(
    heap: Optional[GarbageCollector], a: RuntimeString, b: RuntimeString
) -> RuntimeString:
    """Return a new string holding ``a`` followed by ``b``."""
    return RuntimeString(heap, a.text + b.text)