"""
specrt Persistent Containers

PersistentMap, PersistentList and PersistentSet have value semantics: an
assignment ``b = a.clone()`` (or ``copy.copy(a)``) gives an independent
logical value, and mutating one never affects the other. Storage is shared
internally through a SharedCell and only copied when a shared value is
first mutated.

Every mutating operation is a ``mutate`` closure over the underlying Python
collection; every reading operation is a ``read`` closure. Persistent
elements are cloned on the way in and on the way out, so an element can
never be mutated in place while it is stored.

Iteration (``keys()``, ``values()``, ``items()``, ``iter()``) is an eager
snapshot: the elements are copied out when the iterator is created and
later mutation of the container is never observed through it.

Contract violations (absent key in ``index_at``, list index outside
``[0, len)``) raise ``ContractViolation`` subclasses; expected absence is
reported as ``None``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, Hashable, Iterable, Iterator, Optional, TypeVar, Union

from specrt.cell import SharedCell, SharedValue, share
from specrt.errors import IndexOutOfBounds, MissingEntry
from specrt.result import Err, Ok

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
T = TypeVar("T")

_MISSING = object()


@dataclass(frozen=True)
class Conflict:
    """Reported by ``try_insert`` when the key is already bound."""
    key: Any


# ============================================================================
# PersistentMap
# ============================================================================

class PersistentMap(SharedValue, Generic[K, V]):
    """A copy-on-write mapping with value semantics.

    Usage:
        m = PersistentMap()
        m.try_insert("a", 1)        # Ok(None)
        m.try_insert("a", 2)        # Err(Conflict("a")), m unchanged
        m.insert("a", 2)            # 1
        m.remove("a")               # 2
    """

    __slots__ = ()

    def __init__(self, entries: Union[Mapping, Iterable[tuple[Any, Any]], None] = None) -> None:
        data: dict = {}
        if entries is not None:
            if isinstance(entries, (Mapping, PersistentMap)):
                entries = entries.items()
            for k, v in entries:
                data[share(k)] = share(v)
        self._cell = SharedCell(data)

    def get(self, key: K) -> Optional[V]:
        return share(self._cell.read(lambda m: m.get(key)))

    def index_at(self, key: K) -> V:
        """The value bound to `key`, which must exist by construction."""
        found = self._cell.read(lambda m: m.get(key, _MISSING))
        if found is _MISSING:
            raise MissingEntry(key)
        return share(found)

    def contains_key(self, key: K) -> bool:
        return self._cell.read(lambda m: key in m)

    def insert(self, key: K, value: V) -> Optional[V]:
        """Bind `key` to `value`; returns the value it replaced, if any."""
        key, value = share(key), share(value)

        def _insert(m: dict) -> Optional[V]:
            old = m.get(key)
            m[key] = value
            return old

        return share(self._cell.mutate(_insert))

    def try_insert(self, key: K, value: V) -> Union[Ok, Err]:
        """Bind `key` only if it is unbound. Never overwrites."""
        if self.contains_key(key):
            return Err(Conflict(key))
        self.insert(key, value)
        return Ok(None)

    def remove(self, key: K) -> Optional[V]:
        if not self.contains_key(key):
            return None
        return share(self._cell.mutate(lambda m: m.pop(key)))

    # TODO: make keys/values/items lazy once a mutation-visibility rule for
    # live iterators is settled; today they are eager snapshots.
    def keys(self) -> Iterator[K]:
        return iter(self._cell.read(lambda m: [share(k) for k in m]))

    def values(self) -> Iterator[V]:
        return iter(self._cell.read(lambda m: [share(v) for v in m.values()]))

    def items(self) -> Iterator[tuple[K, V]]:
        return iter(self._cell.read(lambda m: [(share(k), share(v)) for k, v in m.items()]))

    def len(self) -> int:
        return self._cell.read(len)

    def __len__(self) -> int:
        return self.len()

    def __contains__(self, key: object) -> bool:
        return self.contains_key(key)

    def __iter__(self) -> Iterator[K]:
        return self.keys()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersistentMap):
            return NotImplemented
        return self._cell.read(lambda a: other._cell.read(lambda b: a == b))

    def __hash__(self) -> int:
        return self._cell.read(lambda m: hash(frozenset(m.items())))

    def __repr__(self) -> str:
        return self._cell.read(lambda m: f"PersistentMap({m!r})")


# ============================================================================
# PersistentList
# ============================================================================

def _check_index(index: int, length: int, operation: str) -> None:
    if not isinstance(index, int):
        raise TypeError(f"list indices must be int, not {type(index).__name__}")
    if not 0 <= index < length:
        raise IndexOutOfBounds(index, length, operation)


class PersistentList(SharedValue, Generic[T]):
    """A copy-on-write sequence indexed by non-negative ints."""

    __slots__ = ()

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._cell = SharedCell([share(x) for x in items])

    def index_at(self, index: int) -> T:
        """The element at `index`; `index` must be in ``[0, len)``."""
        def _at(items: list) -> T:
            _check_index(index, len(items), "PersistentList.index_at")
            return items[index]

        return share(self._cell.read(_at))

    def get(self, index: int) -> Optional[T]:
        def _get(items: list) -> Optional[T]:
            if 0 <= index < len(items):
                return items[index]
            return None

        return share(self._cell.read(_get))

    def set(self, index: int, value: T) -> None:
        """Overwrite the element at `index`; `index` must be in ``[0, len)``."""
        self._cell.read(lambda items: _check_index(index, len(items), "PersistentList.set"))
        value = share(value)

        def _set(items: list) -> None:
            items[index] = value

        self._cell.mutate(_set)

    def push(self, value: T) -> None:
        value = share(value)
        self._cell.mutate(lambda items: items.append(value))

    def pop(self) -> Optional[T]:
        if self.len() == 0:
            return None
        return share(self._cell.mutate(lambda items: items.pop()))

    def first(self) -> Optional[T]:
        return self.get(0)

    def last(self) -> Optional[T]:
        return share(self._cell.read(lambda items: items[-1] if items else None))

    def reverse(self) -> None:
        self._cell.mutate(lambda items: items.reverse())

    def contains(self, value: object) -> bool:
        return self._cell.read(lambda items: value in items)

    def subslice(self, start: int, length: int) -> PersistentList[T]:
        """A new list of `length` elements starting at `start`.

        Both ends must lie inside the list.
        """
        def _slice(items: list) -> list:
            if length < 0 or start < 0 or start + length > len(items):
                raise IndexOutOfBounds(start + length, len(items), "PersistentList.subslice")
            return items[start:start + length]

        return PersistentList(self._cell.read(_slice))

    def concat(self, other: PersistentList[T]) -> PersistentList[T]:
        """A new list holding this list's elements followed by `other`'s."""
        return PersistentList(self._cell.read(lambda a: other._cell.read(lambda b: a + b)))

    def iter(self) -> Iterator[T]:
        return iter(self._cell.read(lambda items: [share(x) for x in items]))

    def len(self) -> int:
        return self._cell.read(len)

    def __len__(self) -> int:
        return self.len()

    def __getitem__(self, index: int) -> T:
        return self.index_at(index)

    def __setitem__(self, index: int, value: T) -> None:
        self.set(index, value)

    def __contains__(self, value: object) -> bool:
        return self.contains(value)

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def __add__(self, other: PersistentList[T]) -> PersistentList[T]:
        if not isinstance(other, PersistentList):
            return NotImplemented
        return self.concat(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersistentList):
            return NotImplemented
        return self._cell.read(lambda a: other._cell.read(lambda b: a == b))

    def __hash__(self) -> int:
        return self._cell.read(lambda items: hash(tuple(items)))

    def __repr__(self) -> str:
        return self._cell.read(lambda items: f"PersistentList({items!r})")


# ============================================================================
# PersistentSet
# ============================================================================

class PersistentSet(SharedValue, Generic[T]):
    """A copy-on-write set with value semantics."""

    __slots__ = ()

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._cell = SharedCell({share(x) for x in items})

    def contains(self, value: object) -> bool:
        return self._cell.read(lambda s: value in s)

    def insert(self, value: T) -> bool:
        """Add `value`; True if it was not already a member."""
        if self.contains(value):
            return False
        value = share(value)
        self._cell.mutate(lambda s: s.add(value))
        return True

    def remove(self, value: T) -> bool:
        """Remove `value`; True if it was a member."""
        if not self.contains(value):
            return False
        self._cell.mutate(lambda s: s.discard(value))
        return True

    def union(self, other: PersistentSet[T]) -> PersistentSet[T]:
        return PersistentSet(self._cell.read(lambda a: other._cell.read(lambda b: a | b)))

    def is_subset(self, other: PersistentSet[T]) -> bool:
        return self._cell.read(lambda a: other._cell.read(lambda b: a <= b))

    def iter(self) -> Iterator[T]:
        return iter(self._cell.read(lambda s: [share(x) for x in s]))

    def len(self) -> int:
        return self._cell.read(len)

    def __len__(self) -> int:
        return self.len()

    def __contains__(self, value: object) -> bool:
        return self.contains(value)

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersistentSet):
            return NotImplemented
        return self._cell.read(lambda a: other._cell.read(lambda b: a == b))

    def __hash__(self) -> int:
        return self._cell.read(lambda s: hash(frozenset(s)))

    def __repr__(self) -> str:
        return self._cell.read(lambda s: f"PersistentSet({s!r})")


# ============================================================================
# Construction helpers
# ============================================================================

def map_of(*pairs: tuple[K, V]) -> PersistentMap[K, V]:
    """``map_of((k1, v1), (k2, v2))``"""
    return PersistentMap(pairs)


def list_of(*items: T) -> PersistentList[T]:
    """``list_of(a, b, c)``"""
    return PersistentList(items)


def repeat(item: T, count: int) -> PersistentList[T]:
    """A list of `count` independent copies of `item`."""
    if count < 0:
        raise ValueError(f"repeat count cannot be negative: {count}")
    return PersistentList(item for _ in range(count))


def set_of(*items: T) -> PersistentSet[T]:
    return PersistentSet(items)
