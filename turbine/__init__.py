"""Runtime core for the Turbine scripting language: heap, collector, containers and call stack."""

__version__ = "0.2.1"

__all__ = [
    "avlset",
    "callstack",
    "fifo",
    "gc",
    "gclog",
    "hashmap",
    "record",
    "stack",
    "strings",
    "values",
    "vec",
]