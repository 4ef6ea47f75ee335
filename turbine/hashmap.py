"""Heap-managed hash maps from strings to values, iterated in insertion order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from turbine.gc import GarbageCollector, ObjectKind, RuntimeObject
from turbine.strings import RuntimeString
from turbine.values import VALUE_SIZE, ZERO_VALUE, is_ref_type

MAX_LOAD_FACTOR = 70
"""Percentage of filled slots at which the table grows before inserting."""

MIN_PRIME_INDEX = 5

ENTRY_SIZE = 4 * VALUE_SIZE
"""Bytes charged to the heap for each map entry."""

POWER_OF_TWO_PRIMES = (
    1,
    2,
    3,
    7,
    13,
    31,
    61,
    127,
    251,
    509,
    1021,
    2039,
    4093,
    8179,
    16381,
    32749,
    65521,
    131071,
    262139,
    524287,
    1048573,
    2097143,
    4194301,
    8388593,
    16777199,
    33554393,
    67108859,
    134217689,
    268435399,
    536870909,
    1073741789,
    2147483647,
)
"""Largest prime below each power of two, indexed by the exponent."""

_MASK64 = (1 << 64) - 1
_MAX_PRIME_INDEX = len(POWER_OF_TWO_PRIMES) - 1


def fnv_hash(data: bytes) -> int:
    """64-bit FNV-1a hash of ``data``."""
    h = 0xCBF29CE484222325
    for byte in data:
        h ^= byte
        h = (h * 0x100000001B3) & _MASK64
    return h


def simple_hash(data: bytes) -> int:
    """64-bit polynomial hash with multiplier 31."""
    h = 0
    for byte in data:
        h = (31 * h + byte) & _MASK64
    return h


def _next_prime_index(index: int) -> int:
    return MIN_PRIME_INDEX if index < MIN_PRIME_INDEX else index + 1


def _get_prime(index: int) -> int:
    return POWER_OF_TWO_PRIMES[min(max(index, 0), _MAX_PRIME_INDEX)]


@dataclass
class MapEntry:
    """One key and its value."""

    key: RuntimeString
    value: Any


class RuntimeMap(RuntimeObject):
    """A chained hash table keyed by runtime strings."""

    def __init__(self, heap: Optional[GarbageCollector], val_type: int, length: int = 0) -> None:
        super().__init__(heap, ObjectKind.MAP)
        self.val_type = val_type
        self._buckets: list[list[MapEntry]] = []
        self._prime_index = 0
        self._entries: list[MapEntry] = []

        if length > 0:
            init_cap = 2 * length
            idx = _next_prime_index(0)
            while _get_prime(idx) < init_cap and idx < _MAX_PRIME_INDEX:
                idx = _next_prime_index(idx)
            self._resize(idx)

        if heap is not None:
            heap.register(self)

    @property
    def capacity(self) -> int:
        """Number of buckets in the table."""
        return len(self._buckets)

    @property
    def prime_index(self) -> int:
        return self._prime_index

    def _resize(self, prime_index: int) -> None:
        cap = _get_prime(prime_index)
        if self.heap is not None:
            self.heap.alloc(cap * VALUE_SIZE)
        self._buckets = [[] for _ in range(cap)]
        self._prime_index = prime_index

    def _bucket_of(self, key: RuntimeString) -> list[MapEntry]:
        h = fnv_hash(key.text.encode("utf-8")) % len(self._buckets)
        return self._buckets[h]

    def _rehash(self) -> None:
        old_buckets = self._buckets
        old_cap = len(old_buckets)
        self._resize(_next_prime_index(self._prime_index))
        for chain in old_buckets:
            for entry in chain:
                self._bucket_of(entry.key).insert(0, entry)
        if self.heap is not None:
            self.heap.free(old_cap * VALUE_SIZE)

    def _lookup(self, key: Optional[RuntimeString]) -> Optional[MapEntry]:
        if key is None or not self._buckets:
            return None
        return next(
            (entry for entry in self._bucket_of(key) if entry.key.compare(key) == 0),
            None,
        )

    def get(self, key: Optional[RuntimeString]) -> Any:
        """Value stored under ``key``, or ZERO_VALUE when absent."""
        entry = self._lookup(key)
        return ZERO_VALUE if entry is None else entry.value

    def set(self, key: Optional[RuntimeString], value: Any) -> None:
        """Store ``value`` under ``key``; a missing key is ignored."""
        if key is None:
            return

        if not self._buckets:
            self._resize(_next_prime_index(0))
        elif 100.0 * len(self._entries) / len(self._buckets) >= MAX_LOAD_FACTOR:
            self._rehash()

        chain = self._bucket_of(key)
        for entry in chain:
            if entry.key.compare(key) == 0:
                entry.value = value
                return

        if self.heap is not None:
            self.heap.alloc(ENTRY_SIZE)
        entry = MapEntry(key, value)
        chain.insert(0, entry)
        self._entries.append(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RuntimeString]:
        """Keys in insertion order."""
        return (entry.key for entry in self._entries)

    def items(self) -> Iterator[tuple[RuntimeString, Any]]:
        """Key and value pairs in insertion order."""
        return ((entry.key, entry.value) for entry in self._entries)

    def references(self) -> Iterable[Optional[RuntimeObject]]:
        if is_ref_type(self.val_type):
            return [entry.value for entry in self._entries]
        return ()

    def describe(self) -> str:
        return f"[{'map':>6}] => len: {len(self)}, cap: {self.capacity}"

    def release(self) -> None:
        if self.heap is not None:
            if self._entries:
                self.heap.free(len(self._entries) * ENTRY_SIZE)
            if self._buckets:
                self.heap.free(len(self._buckets) * VALUE_SIZE)
        self._entries = []
        self._buckets = []
        self._prime_index = 0
        super().release()