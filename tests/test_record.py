import pytest

from turbine.gc import GarbageCollector
from turbine.record import RuntimeStruct
from turbine.strings import RuntimeString
from turbine.values import ZERO_VALUE, ValueType


def test_fields_start_zeroed():
    s = RuntimeStruct(None, 0, 2)
    assert s.field_count() == 2
    assert s.get(0) == ZERO_VALUE
    assert s.get(1) == ZERO_VALUE


def test_set_get_round_trip():
    s = RuntimeStruct(None, 3, 2)
    s.set(0, 2)
    s.set(1, 3)
    assert s.get(0) + s.get(1) == 5
    assert s.struct_id == 3


@pytest.mark.parametrize("index", [-1, 2])
def test_out_of_range_raises(index):
    s = RuntimeStruct(None, 0, 2)
    with pytest.raises(IndexError):
        s.get(index)
    with pytest.raises(IndexError):
        s.set(index, 1)


def test_field_types_length_mismatch():
    with pytest.raises(ValueError):
        RuntimeStruct(None, 0, 2, [ValueType.INT])


def test_references_follow_field_types():
    gc = GarbageCollector()
    name = RuntimeString(gc, "point")
    s = RuntimeStruct(gc, 0, 2, [ValueType.INT, ValueType.STRING])
    s.set(0, 7)
    s.set(1, name)
    assert list(s.references()) == [name]
    gc.request_collect()
    gc.collect([s], 0)
    assert gc.is_object_alive(name.id)
    gc.request_collect()
    gc.collect([], 0)
    assert not gc.is_object_alive(name.id)
    assert gc.used_bytes == 0


def test_references_without_field_types():
    name = RuntimeString(None, "a")
    s = RuntimeStruct(None, 0, 2)
    s.set(0, 11)
    s.set(1, name)
    assert list(s.references()) == [name]


def test_describe():
    s = RuntimeStruct(None, 0, 2)
    assert s.describe() == "[struct] => fields: 2"