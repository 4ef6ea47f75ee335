import random

import pytest

from turbine.gc import GarbageCollector
from turbine.hashmap import (
    POWER_OF_TWO_PRIMES,
    RuntimeMap,
    fnv_hash,
    simple_hash,
)
from turbine.strings import RuntimeString
from turbine.values import ValueType


@pytest.fixture
def heap():
    return GarbageCollector()


def key(heap, text):
    return RuntimeString(heap, text)


def test_fnv_hash_of_empty_is_offset_basis():
    assert fnv_hash(b"") == 0xCBF29CE484222325


def test_fnv_hash_known_vector():
    assert fnv_hash(b"a") == 0xAF63DC4C8601EC8C


def test_hashes_fit_in_64_bits():
    rng = random.Random(7)
    for _ in range(50):
        data = bytes(rng.randrange(256) for _ in range(rng.randrange(1, 40)))
        assert 0 <= fnv_hash(data) < 2**64
        assert 0 <= simple_hash(data) < 2**64


def test_simple_hash_small_inputs():
    assert simple_hash(b"") == 0
    assert simple_hash(b"a") == ord("a")


def test_new_empty_map(heap):
    m = RuntimeMap(heap, ValueType.INT, 0)
    assert len(m) == 0
    assert m.capacity == 0
    assert m.get(key(heap, "missing")) == 0


def test_initial_capacity_from_length(heap):
    assert RuntimeMap(heap, ValueType.INT, 10).capacity == 31
    assert RuntimeMap(heap, ValueType.INT, 20).capacity == 61


def test_capacity_is_from_prime_table(heap):
    for length in (1, 5, 50, 300):
        m = RuntimeMap(heap, ValueType.INT, length)
        assert m.capacity in POWER_OF_TWO_PRIMES
        assert m.capacity >= 2 * length


def test_set_and_get_round_trip(heap):
    m = RuntimeMap(heap, ValueType.INT, 0)
    m.set(key(heap, "foo"), 11)
    m.set(key(heap, "bar"), 22)
    assert m.get(key(heap, "foo")) == 11
    assert m.get(key(heap, "bar")) == 22
    assert m.get(key(heap, "baz")) == 0
    assert len(m) == 2


def test_overwrite_keeps_length(heap):
    m = RuntimeMap(heap, ValueType.INT, 0)
    m.set(key(heap, "foo"), 1)
    m.set(key(heap, "foo"), 2)
    assert len(m) == 1
    assert m.get(key(heap, "foo")) == 2


def test_none_key_is_ignored(heap):
    m = RuntimeMap(heap, ValueType.INT, 0)
    m.set(None, 5)
    assert len(m) == 0
    assert m.get(None) == 0


def test_rehash_at_load_factor(heap):
    m = RuntimeMap(heap, ValueType.INT, 0)
    for i in range(22):
        m.set(key(heap, f"k{i}"), i)
    assert m.capacity == 31
    m.set(key(heap, "k22"), 22)
    assert m.capacity == 61
    assert len(m) == 23


def test_insertion_order_survives_rehash(heap):
    m = RuntimeMap(heap, ValueType.INT, 0)
    names = [f"name{i}" for i in range(200)]
    for i, name in enumerate(names):
        m.set(key(heap, name), i)
    assert [k.text for k in m] == names
    assert [v for _, v in m.items()] == list(range(200))
    for i, name in enumerate(names):
        assert m.get(key(heap, name)) == i


def test_references_only_for_ref_values(heap):
    ints = RuntimeMap(heap, ValueType.INT, 0)
    ints.set(key(heap, "a"), 1)
    assert list(ints.references()) == []

    strs = RuntimeMap(heap, ValueType.STRING, 0)
    v = RuntimeString(heap, "value")
    strs.set(key(heap, "a"), v)
    assert list(strs.references()) == [v]


def test_describe(heap):
    m = RuntimeMap(heap, ValueType.INT, 0)
    m.set(key(heap, "a"), 1)
    assert m.describe() == "[   map] => len: 1, cap: 31"


def test_release_returns_all_bytes(heap):
    keys = [key(heap, f"k{i}") for i in range(40)]
    before = heap.used_bytes
    m = RuntimeMap(heap, ValueType.INT, 0)
    for i, k in enumerate(keys):
        m.set(k, i)
    assert heap.used_bytes > before
    m.release()
    assert heap.used_bytes == before
    assert len(m) == 0


def test_collect_keeps_values_reachable(heap):
    m = RuntimeMap(heap, ValueType.STRING, 0)
    kept = RuntimeString(heap, "kept")
    m.set(key(heap, "x"), kept)
    garbage = RuntimeString(heap, "garbage")
    heap.request_collect()
    heap.collect([m], 0)
    assert heap.is_object_alive(m.id)
    assert heap.is_object_alive(kept.id)
    assert not heap.is_object_alive(garbage.id)


def test_map_without_heap(heap):
    m = RuntimeMap(None, ValueType.INT, 0)
    m.set(RuntimeString(None, "a"), 3)
    assert m.get(RuntimeString(None, "a")) == 3