# turbine

The runtime core of the Turbine scripting language. It provides the
garbage-collected heap, the value containers that scripts work with, and
the call-frame stack.

## Install

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Modules

- `turbine.values` defines `ValueType`, the type tags of runtime values, and
  `ValueVec`, a growable value array whose capacity is charged to a heap.
  `ValueVec.get` returns `0` when the index is out of range. `ValueVec.set`
  ignores an out-of-range index. The module also has `is_ref_type`, which is
  true for the object types (string, vec, map, set, stack, queue, struct).
  It also has `get_compare_function`, which returns three-way comparisons
  for `INT`, `FLOAT` and `STRING` and raises `ValueError` for any other type.
- `turbine.gc` defines `GarbageCollector`, `RuntimeObject`, `ObjectKind`,
  `object_id` and `format_bytes`.
  - The collector keeps count of the bytes in use. Once usage reaches the
    threshold (1 MB at the start), the next allocation requests a collection.
    `request_collect()` asks for a collection at a safepoint and
    `force_collect()` asks for one at once. `is_requested()` and
    `is_forced()` report these requests.
  - `collect(roots, inst_addr)` marks everything reachable from `roots`,
    frees the other objects and returns the `GCLogEntry` for the run. After
    that the threshold grows by the multiplier, capped at 128 MB. The
    multiplier is 1.5 by default and `set_threshold_multiplier` clamps it to
    the range 1 to 3.
  - `collect` raises `RuntimeError` if no collection was requested, and
    `ValueError` for a negative address.
  - `format_objects()` and `format_stats()` return text reports.
    `clear()` frees every object and empties the log.
- `turbine.gclog` defines `GCLog`, which holds the last 128 `GCLogEntry`
  records with the oldest first, and `TriggerReason`.
- `turbine.callstack` defines `Call` frames, the `CallStack` and
  `format_call`. Popping an empty stack raises `IndexError`.
- The heap objects, all subclasses of `RuntimeObject`, register themselves
  with the collector they are given:
  - `RuntimeString` (`turbine.strings`) is an immutable string. It compares
    byte-wise, and `concat_strings` joins two of them.
  - `RuntimeVec` (`turbine.vec`) is a vector. `get` and `set` raise
    `IndexError` when the index is out of range.
  - `RuntimeStruct` (`turbine.record`) has a fixed number of fields, with an
    optional value type for each field.
  - `RuntimeStack` (`turbine.stack`): `top` and `pop` return `0` when the
    stack is empty.
  - `RuntimeQueue` (`turbine.fifo`): `front` and `pop` return `0` when the
    queue is empty, and `get` raises `IndexError`.
  - `RuntimeMap` (`turbine.hashmap`) is a chained hash table keyed by
    `RuntimeString`. It is sized by primes, hashed with FNV-1a and iterated
    in insertion order. `get` returns `0` for a missing key.
  - `RuntimeSet` (`turbine.avlset`) is an ordered set kept in an AVL tree.
    It iterates in ascending order.

## Example

    from turbine.gc import GarbageCollector
    from turbine.strings import RuntimeString
    from turbine.values import ValueType
    from turbine.vec import RuntimeVec

    gc = GarbageCollector()
    names = RuntimeVec(gc, ValueType.STRING, 0)
    names.push(RuntimeString(gc, "hello"))
    RuntimeString(gc, "garbage")

    gc.request_collect()
    gc.collect([names], 1)
    print(gc.format_objects())
    print(gc.format_stats())

After the collection only the vector and the string it holds are still
alive. The unreferenced `"garbage"` string has been freed, and its bytes no
longer count towards heap usage.

## What this package does not do

The package holds no parser, no compiler and no bytecode interpreter. It
also has no command-line program. It cannot read or run Turbine script
files. The caller supplies the roots for each collection and decides when
to call `collect`.