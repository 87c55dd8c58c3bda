"""
specrt Shared Cells

A SharedCell holds one logical value. Clones of a cell share the same
backing storage, so cloning and reading are O(1). Every mutation goes
through ``mutate``, which first forks a private copy of the storage if any
other cell still shares it. Other cells never observe the change.

    a = SharedCell({"x": 1})
    b = a.clone()                          # shares storage with a
    a.mutate(lambda d: d.update(x=2))      # a forks, b still sees {"x": 1}

The private copy is shallow, except that persistent elements (nested maps,
lists and sets) are cloned rather than aliased, so mutating a nested value
inside ``mutate`` only touches this cell's copy (see ``share``).

A cell is not a concurrency primitive: there is no locking, and it is meant
for one logical owner at a time.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")
R = TypeVar("R")


class _Storage:
    """Backing storage plus the number of cells that reference it."""
    __slots__ = ("value", "owners")

    def __init__(self, value: Any) -> None:
        self.value = value
        self.owners = 1


class SharedCell(Generic[V]):
    """Copy-on-write holder of a single logical value."""

    __slots__ = ("_storage",)

    def __init__(self, value: V) -> None:
        self._storage = _Storage(value)

    @classmethod
    def _attach(cls, storage: _Storage) -> SharedCell[V]:
        cell = cls.__new__(cls)
        storage.owners += 1
        cell._storage = storage
        return cell

    def read(self, f: Callable[[V], R]) -> R:
        """Call `f` on the current value without copying it.

        `f` must not mutate its argument.
        """
        return f(self._storage.value)

    def mutate(self, f: Callable[[V], R]) -> R:
        """Call `f` on an exclusively owned value and return its result."""
        storage = self._storage
        if storage.owners > 1:
            logger.debug(
                "forking %s storage shared by %d cells",
                type(storage.value).__name__, storage.owners,
            )
            storage.owners -= 1
            self._storage = _Storage(_detach(storage.value))
        return f(self._storage.value)

    def get(self) -> V:
        """A private copy of the current value, safe to mutate freely."""
        return _detach(self._storage.value)

    def clone(self) -> SharedCell[V]:
        """A new cell with the same logical value, sharing storage."""
        return type(self)._attach(self._storage)

    @property
    def shared(self) -> bool:
        """Whether another live cell currently shares this cell's storage."""
        return self._storage.owners > 1

    def __copy__(self) -> SharedCell[V]:
        return self.clone()

    def __deepcopy__(self, memo: dict) -> SharedCell[V]:
        return self.clone()

    def __del__(self) -> None:
        storage = getattr(self, "_storage", None)
        if storage is not None:
            storage.owners -= 1

    def __repr__(self) -> str:
        return f"<SharedCell {self._storage.value!r} owners={self._storage.owners}>"


class SharedValue:
    """Base for value types backed by a SharedCell.

    Subclasses keep their state in ``self._cell``; cloning a SharedValue is
    cloning its cell.
    """

    __slots__ = ("_cell",)

    _cell: SharedCell

    @classmethod
    def _from_cell(cls, cell: SharedCell) -> Any:
        obj = cls.__new__(cls)
        obj._cell = cell
        return obj

    def clone(self):
        return type(self)._from_cell(self._cell.clone())

    def __copy__(self):
        return self.clone()

    def __deepcopy__(self, memo: dict):
        return self.clone()


def share(value: Any) -> Any:
    """Hand out `value` with value semantics.

    Persistent values are cloned so that later in-place mutation by either
    holder stays private. Everything else is returned as is and is assumed
    to be immutable (ints, strings, bytes, tuples, enums, frozen dataclasses).
    """
    if isinstance(value, SharedValue):
        return value.clone()
    return value


def _detach(value: Any) -> Any:
    """Shallow copy whose persistent elements are clones rather than aliases."""
    if isinstance(value, dict):
        return {k: share(v) for k, v in value.items()}
    if isinstance(value, list):
        return [share(x) for x in value]
    if isinstance(value, set):
        return {share(x) for x in value}
    return copy.copy(value)
