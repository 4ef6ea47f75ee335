"""Heap-managed struct instances."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from turbine.gc import GarbageCollector, ObjectKind, RuntimeObject
from turbine.values import ValueVec, is_ref_type


class RuntimeStruct(RuntimeObject):
    """An instance of a struct type with a fixed number of fields.

    ``field_types`` gives the value type of each field; without it, every
    field that holds a runtime object counts as a reference.
    """

    def __init__(
        self,
        heap: Optional[GarbageCollector],
        struct_id: int,
        field_count: int,
        field_types: Optional[Sequence[int]] = None,
    ) -> None:
        if field_types is not None and len(field_types) != field_count:
            raise ValueError(
                f"expected {field_count} field types, got {len(field_types)}"
            )
        super().__init__(heap, ObjectKind.STRUCT)
        self.struct_id = struct_id
        self.field_types = None if field_types is None else tuple(field_types)
        self._fields = ValueVec(heap)
        self._fields.resize(field_count)
        if heap is not None:
            heap.register(self)

    def field_count(self) -> int:
        return len(self._fields)

    def _check(self, field_index: int) -> None:
        if not 0 <= field_index < len(self._fields):
            raise IndexError(f"field index out of range: {field_index}")

    def get(self, field_index: int) -> Any:
        self._check(field_index)
        return self._fields.get(field_index)

    def set(self, field_index: int, value: Any) -> None:
        self._check(field_index)
        self._fields.set(field_index, value)

    def references(self) -> Iterable[Optional[RuntimeObject]]:
        if self.field_types is None:
            return [value for value in self._fields if isinstance(value, RuntimeObject)]
        return [
            value
            for value, val_type in zip(self._fields, self.field_types)
            if is_ref_type(val_type)
        ]

    def describe(self) -> str:
        return f"[{'struct':>6}] => fields: {self.field_count()}"

    def release(self) -> None:
        self._fields.free()
        super().release()