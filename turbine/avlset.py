"""Heap-managed ordered sets kept in an AVL tree."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from turbine.gc import GarbageCollector, ObjectKind, RuntimeObject
from turbine.values import VALUE_SIZE, get_compare_function, is_ref_type

NODE_SIZE = 5 * VALUE_SIZE
"""Bytes charged to the heap for each tree node."""


class _Node:
    __slots__ = ("value", "left", "right", "height")

    def __init__(self, value: Any) -> None:
        self.value = value
        self.left: Optional[_Node] = None
        self.right: Optional[_Node] = None
        self.height = 1


def _height(node: Optional[_Node]) -> int:
    return node.height if node is not None else 0


def _balance_factor(node: Optional[_Node]) -> int:
    return _height(node.left) - _height(node.right) if node is not None else 0


def _update_height(node: _Node) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _rotate_left(pivot: _Node) -> _Node:
    right = pivot.right
    assert right is not None
    pivot.right = right.left
    right.left = pivot
    _update_height(pivot)
    _update_height(right)
    return right


def _rotate_right(pivot: _Node) -> _Node:
    left = pivot.left
    assert left is not None
    pivot.left = left.right
    left.right = pivot
    _update_height(pivot)
    _update_height(left)
    return left


def _min_node(node: _Node) -> _Node:
    while node.left is not None:
        node = node.left
    return node


class RuntimeSet(RuntimeObject):
    """An ordered set of values of one comparable type."""

    def __init__(self, heap: Optional[GarbageCollector], val_type: int, length: int = 0) -> None:
        compare = get_compare_function(val_type)
        super().__init__(heap, ObjectKind.SET)
        self.val_type = val_type
        self._compare = compare
        self._root: Optional[_Node] = None
        self._len = 0
        if heap is not None:
            heap.register(self)

    def __len__(self) -> int:
        return self._len

    def contains(self, value: Any) -> bool:
        node = self._root
        while node is not None:
            cmp = self._compare(node.value, value)
            if cmp > 0:
                node = node.left
            elif cmp < 0:
                node = node.right
            else:
                return True
        return False

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    def _new_node(self, value: Any) -> _Node:
        if self.heap is not None:
            self.heap.alloc(NODE_SIZE)
        self._len += 1
        return _Node(value)

    def _free_node(self) -> None:
        if self.heap is not None:
            self.heap.free(NODE_SIZE)
        self._len -= 1

    def _insert(self, node: Optional[_Node], value: Any) -> _Node:
        if node is None:
            return self._new_node(value)

        cmp = self._compare(node.value, value)
        if cmp > 0:
            node.left = self._insert(node.left, value)
        elif cmp < 0:
            node.right = self._insert(node.right, value)
        else:
            return node

        _update_height(node)
        bf = _balance_factor(node)

        if bf > 1 and self._compare(node.left.value, value) > 0:
            return _rotate_right(node)
        if bf < -1 and self._compare(node.right.value, value) < 0:
            return _rotate_left(node)
        if bf > 1 and self._compare(node.left.value, value) < 0:
            node.left = _rotate_left(node.left)
            return _rotate_right(node)
        if bf < -1 and self._compare(node.right.value, value) > 0:
            node.right = _rotate_right(node.right)
            return _rotate_left(node)
        return node

    def _remove(self, node: Optional[_Node], value: Any) -> Optional[_Node]:
        if node is None:
            return None

        cmp = self._compare(node.value, value)
        if cmp > 0:
            node.left = self._remove(node.left, value)
        elif cmp < 0:
            node.right = self._remove(node.right, value)
        else:
            if node.left is None:
                self._free_node()
                return node.right
            if node.right is None:
                self._free_node()
                return node.left
            successor = _min_node(node.right)
            node.value = successor.value
            node.right = self._remove(node.right, successor.value)

        _update_height(node)
        bf = _balance_factor(node)

        if bf > 1 and _balance_factor(node.left) >= 0:
            return _rotate_right(node)
        if bf < -1 and _balance_factor(node.right) <= 0:
            return _rotate_left(node)
        if bf > 1 and _balance_factor(node.left) < 0:
            node.left = _rotate_left(node.left)
            return _rotate_right(node)
        if bf < -1 and _balance_factor(node.right) > 0:
            node.right = _rotate_right(node.right)
            return _rotate_left(node)
        return node

    def add(self, value: Any) -> bool:
        """Insert ``value``; return True if it was not already present."""
        old_len = self._len
        self._root = self._insert(self._root, value)
        return self._len == old_len + 1

    def remove(self, value: Any) -> bool:
        """Remove ``value``; return True if it was present."""
        old_len = self._len
        self._root = self._remove(self._root, value)
        return self._len == old_len - 1

    def __iter__(self) -> Iterator[Any]:
        """Values in ascending order."""
        pending: list[_Node] = []
        node = self._root
        while pending or node is not None:
            while node is not None:
                pending.append(node)
                node = node.left
            node = pending.pop()
            yield node.value
            node = node.right

    def height(self) -> int:
        """Height of the tree; 0 when empty."""
        return _height(self._root)

    def format_tree(self) -> str:
        """Pre-order listing of the tree, indented two spaces per level."""
        lines: list[str] = []
        pending: list[tuple[_Node, int]] = [(self._root, 0)] if self._root else []
        while pending:
            node, depth = pending.pop()
            lines.append(f"{' ' * (depth * 2)}{node.value}")
            if node.right is not None:
                pending.append((node.right, depth + 1))
            if node.left is not None:
                pending.append((node.left, depth + 1))
        return "\n".join(lines)

    def references(self) -> Iterable[Optional[RuntimeObject]]:
        if is_ref_type(self.val_type):
            return list(self)
        return ()

    def describe(self) -> str:
        return f"[{'set':>6}] => len: {len(self)}"

    def release(self) -> None:
        if self.heap is not None and self._len:
            self.heap.free(self._len * NODE_SIZE)
        self._root = None
        self._len = 0
        super().release()