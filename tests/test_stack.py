from turbine.gc import GarbageCollector
from turbine.stack import RuntimeStack
from turbine.strings import RuntimeString
from turbine.values import ZERO_VALUE, ValueType


def test_push_pop_is_lifo():
    s = RuntimeStack(None, ValueType.INT, 0)
    for value in (11, 22, 33):
        s.push(value)
    assert len(s) == 3
    assert s.top() == 33
    assert [s.pop(), s.pop(), s.pop()] == [33, 22, 11]
    assert s.is_empty()


def test_empty_stack_yields_zero():
    s = RuntimeStack(None, ValueType.INT, 0)
    assert s.top() == ZERO_VALUE
    assert s.pop() == ZERO_VALUE
    assert len(s) == 0


def test_get_from_bottom():
    s = RuntimeStack(None, ValueType.INT, 0)
    s.push(5)
    s.push(6)
    assert s.get(0) == 5
    assert s.get(1) == 6
    assert s.get(2) == ZERO_VALUE
    assert s.get(-1) == ZERO_VALUE


def test_many_pushes_keep_order():
    s = RuntimeStack(None, ValueType.INT, 0)
    values = list(range(50))
    for v in values:
        s.push(v)
    assert list(s) == values
    assert [s.pop() for _ in values] == values[::-1]


def test_references_and_collection():
    gc = GarbageCollector()
    st = RuntimeStack(gc, ValueType.STRING, 0)
    word = RuntimeString(gc, "w")
    st.push(word)
    assert list(st.references()) == [word]
    gc.request_collect()
    gc.collect([st], 0)
    assert gc.is_object_alive(word.id)
    st.pop()
    gc.request_collect()
    gc.collect([st], 0)
    assert not gc.is_object_alive(word.id)
    gc.request_collect()
    gc.collect([], 0)
    assert gc.used_bytes == 0


def test_describe():
    s = RuntimeStack(None, ValueType.INT, 0)
    s.push(1)
    assert s.describe() == "[ stack] => len: 1"