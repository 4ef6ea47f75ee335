import pytest

from turbine.gclog import CAPACITY, GCLog, GCLogEntry, TriggerReason


def test_default_entry_has_no_reason():
    entry = GCLogEntry()
    assert entry.trigger_reason == TriggerReason.NONE
    assert entry.total_collections == 0


def test_empty_log():
    log = GCLog()
    assert len(log) == 0
    assert list(log) == []
    with pytest.raises(IndexError):
        log[0]


def test_push_and_get():
    log = GCLog()
    entry = GCLogEntry(
        triggered_addr=42,
        trigger_reason=TriggerReason.THRESHOLD,
        used_bytes_before=2048,
        used_bytes_after=512,
        duration_msec=1.5,
        total_collections=1,
    )
    log.push(entry)
    assert len(log) == 1
    assert log[0] == entry


def test_push_stores_a_copy():
    log = GCLog()
    entry = GCLogEntry(total_collections=1)
    log.push(entry)
    entry.total_collections = 99
    assert log[0].total_collections == 1


def test_negative_index_raises():
    log = GCLog()
    log.push(GCLogEntry(total_collections=5))
    with pytest.raises(IndexError):
        log[-1]
    assert len(log) == 1
    assert log[0].total_collections == 5


def test_iteration_oldest_first():
    log = GCLog()
    for i in range(10):
        log.push(GCLogEntry(total_collections=i))
    assert [e.total_collections for e in log] == list(range(10))


def test_overflow_keeps_most_recent():
    log = GCLog()
    total = CAPACITY + 72
    for i in range(total):
        log.push(GCLogEntry(total_collections=i))
    assert len(log) == CAPACITY
    assert log[0].total_collections == total - CAPACITY
    assert log[CAPACITY - 1].total_collections == total - 1
    with pytest.raises(IndexError):
        log[CAPACITY]


def test_clear():
    log = GCLog()
    log.push(GCLogEntry(trigger_reason=TriggerReason.USER))
    log.clear()
    assert len(log) == 0
    with pytest.raises(IndexError):
        log[0]