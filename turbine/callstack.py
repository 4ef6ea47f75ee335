"""Call frames and the call stack of the virtual machine."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Iterator


@dataclass
class Call:
    """One active function call."""

    func_index: int = 0
    argc: int = 0
    retval_reg: int = 0
    return_ip: int = 0
    return_bp: int = 0
    return_sp: int = 0
    current_bp: int = 0
    current_sp: int = 0
    callsite_ip: int = 0


class CallStack:
    """A stack of call frames; index 0 is the outermost call."""

    def __init__(self) -> None:
        self._calls: list[Call] = []

    def push(self, call: Call) -> None:
        """Push a copy of ``call``."""
        self._calls.append(dataclasses.replace(call))

    def pop(self) -> Call:
        """Remove and return the innermost call."""
        if not self._calls:
            raise IndexError("pop from empty call stack")
        return self._calls.pop()

    def is_empty(self) -> bool:
        return not self._calls

    def __len__(self) -> int:
        return len(self._calls)

    def __getitem__(self, index: int) -> Call:
        if not 0 <= index < len(self._calls):
            raise IndexError(f"call index out of range: {index}")
        return self._calls[index]

    def __iter__(self) -> Iterator[Call]:
        return iter(self._calls)

    def clear(self) -> None:
        self._calls.clear()


_FIELDS = (
    "func_index",
    "argc",
    "retval_reg",
    "return_ip",
    "return_bp",
    "return_sp",
    "current_bp",
    "current_sp",
    "callsite_ip",
)


def format_call(call: Call) -> str:
    """Return a multi-line description of a call frame."""
    return "\n".join(f"{name + ':':<13}{getattr(call, name)}" for name in _FIELDS)