"""
specrt Persistent Container Test Suite

Tests the value-semantics containers:
1. Map laws (insert/get, overwrite, remove, try_insert conflict)
2. Map contract violations and snapshots
3. List indexing, bounds and mutation
4. Set membership
5. Value semantics across clones and nesting
"""

import copy
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from specrt import (
    PersistentMap,
    PersistentList,
    PersistentSet,
    Conflict,
    Ok,
    Err,
    MissingEntry,
    IndexOutOfBounds,
    ContractViolation,
    map_of,
    list_of,
    set_of,
    repeat,
)


def build_heap() -> PersistentMap:
    """A small allocation table: id -> list of bytes."""
    heap = PersistentMap()
    heap.insert(0, list_of(0xDE, 0xAD))
    heap.insert(1, list_of(0xBE, 0xEF))
    return heap


# --- Test 1: Map laws ---

def test_map_scenario():
    m = PersistentMap()
    assert m.try_insert("a", 1) == Ok(None)
    assert dict(m.items()) == {"a": 1}

    assert m.try_insert("a", 2) == Err(Conflict("a"))
    assert dict(m.items()) == {"a": 1}

    assert m.insert("a", 2) == 1
    assert dict(m.items()) == {"a": 2}

    assert m.remove("a") == 2
    assert not m.contains_key("a")


def test_insert_then_get():
    m = PersistentMap()
    assert m.insert("k", "v") is None
    assert m.get("k") == "v"
    assert m.index_at("k") == "v"
    assert m.get("missing") is None


def test_remove_absent_key():
    m = map_of(("a", 1))
    assert m.remove("b") is None
    assert m.len() == 1


def test_construction_forms():
    assert PersistentMap({"a": 1}) == map_of(("a", 1))
    assert PersistentMap([("a", 1), ("b", 2)]).len() == 2
    assert PersistentMap(PersistentMap({"a": 1})) == PersistentMap({"a": 1})


# --- Test 2: Map contracts and snapshots ---

def test_index_at_absent_is_fatal():
    m = PersistentMap()
    with pytest.raises(MissingEntry) as exc:
        m.index_at("nope")
    assert exc.value.key == "nope"


def test_contract_violation_escapes_except_exception():
    m = PersistentMap()
    with pytest.raises(ContractViolation):
        try:
            m.index_at(1)
        except Exception:
            pytest.fail("contract violations must not be ordinary exceptions")


def test_snapshot_length_and_isolation():
    m = map_of(("a", 1), ("b", 2), ("c", 3))
    keys = m.keys()
    values = m.values()
    m.insert("d", 4)
    m.remove("a")

    assert sorted(keys) == ["a", "b", "c"]
    assert sorted(values) == [1, 2, 3]
    assert m.len() == 3


def test_snapshot_is_single_pass():
    m = map_of(("a", 1))
    keys = m.keys()
    assert list(keys) == ["a"]
    assert list(keys) == []


# --- Test 3: Lists ---

def test_list_indexing():
    xs = list_of(10, 20, 30)
    assert xs.index_at(0) == 10
    assert xs[2] == 30
    assert xs.get(3) is None
    assert xs.first() == 10
    assert xs.last() == 30


@pytest.mark.parametrize("index", [3, 4, -1, 2 ** 70])
def test_list_out_of_range_is_fatal(index):
    xs = list_of(1, 2, 3)
    with pytest.raises(IndexOutOfBounds):
        xs.index_at(index)
    with pytest.raises(IndexOutOfBounds):
        xs.set(index, 0)


def test_list_mutation():
    xs = PersistentList()
    assert xs.pop() is None
    xs.push(1)
    xs.push(2)
    xs[0] = 5
    assert list(xs) == [5, 2]
    xs.reverse()
    assert list(xs) == [2, 5]
    assert xs.pop() == 5
    assert xs.len() == 1


def test_list_subslice_and_concat():
    xs = list_of(1, 2, 3, 4)
    assert xs.subslice(1, 2) == list_of(2, 3)
    assert xs.subslice(4, 0) == PersistentList()
    with pytest.raises(IndexOutOfBounds):
        xs.subslice(3, 2)
    assert xs.concat(list_of(5)) == list_of(1, 2, 3, 4, 5)
    assert list_of(1) + list_of(2) == list_of(1, 2)


def test_repeat_makes_independent_elements():
    rows = repeat(list_of(0), 2)
    row = rows.index_at(0)
    row.push(1)
    rows.set(0, row)
    assert rows.index_at(0) == list_of(0, 1)
    assert rows.index_at(1) == list_of(0)


def test_list_iteration_is_snapshot():
    xs = list_of(1, 2)
    it = iter(xs)
    xs.push(3)
    assert list(it) == [1, 2]


# --- Test 4: Sets ---

def test_set_membership():
    s = PersistentSet()
    assert s.insert("x")
    assert not s.insert("x")
    assert "x" in s
    assert s.remove("x")
    assert not s.remove("x")
    assert s.len() == 0


def test_set_union_and_subset():
    a = set_of(1, 2)
    b = set_of(2, 3)
    assert a.union(b) == set_of(1, 2, 3)
    assert a.is_subset(a.union(b))
    assert not a.is_subset(b)


# --- Test 5: Value semantics ---

def test_clone_is_independent():
    a = map_of(("a", 1))
    b = a.clone()
    b.insert("b", 2)
    assert a.len() == 1
    assert b.len() == 2

    c = copy.copy(a)
    c.remove("a")
    assert a.contains_key("a")


def test_get_returns_independent_nested_value():
    heap = build_heap()
    block = heap.index_at(0)
    block.push(0xFF)

    assert heap.index_at(0) == list_of(0xDE, 0xAD)

    heap.insert(0, block)
    assert heap.index_at(0) == list_of(0xDE, 0xAD, 0xFF)


def test_insert_copies_value_in():
    m = PersistentMap()
    block = list_of(1)
    m.insert("k", block)
    block.push(2)
    assert m.index_at("k") == list_of(1)


def test_nested_mutation_after_clone():
    heap = build_heap()
    snapshot = heap.clone()

    block = heap.index_at(1)
    block.set(0, 0x00)
    heap.insert(1, block)

    assert snapshot.index_at(1) == list_of(0xBE, 0xEF)
    assert heap.index_at(1) == list_of(0x00, 0xEF)


def test_persistent_values_as_keys():
    seen = PersistentSet()
    key = list_of(1, 2)
    seen.insert(key)
    key.push(3)
    assert list_of(1, 2) in seen
    assert key not in seen

    m = PersistentMap()
    m.insert(set_of("r", "w"), "rw")
    assert m.get(set_of("w", "r")) == "rw"
