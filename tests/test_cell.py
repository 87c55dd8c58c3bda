"""
specrt SharedCell Test Suite

Tests the copy-on-write primitive:
1. Reads share storage and never copy
2. Mutation of a clone is private to that clone
3. The last owner mutates in place
4. Nested persistent values keep value semantics
"""

import copy
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from specrt import SharedCell, PersistentList
from specrt.cell import share


# --- Test 1: Reads ---

def test_read_returns_closure_result():
    cell = SharedCell([1, 2, 3])
    assert cell.read(len) == 3
    assert cell.read(lambda xs: xs[0]) == 1


def test_clone_shares_storage():
    a = SharedCell({"x": 1})
    b = a.clone()
    assert a.shared and b.shared
    assert a.read(id) == b.read(id)


# --- Test 2: Copy-on-write ---

def test_mutating_clone_leaves_original():
    a = SharedCell({"x": 1})
    b = a.clone()
    old = b.mutate(lambda d: d.pop("x"))

    assert old == 1
    assert a.read(dict) == {"x": 1}
    assert b.read(dict) == {}
    assert a.read(id) != b.read(id)


def test_mutating_original_leaves_clone():
    a = SharedCell([1])
    b = copy.copy(a)
    a.mutate(lambda xs: xs.append(2))
    assert a.read(list) == [1, 2]
    assert b.read(list) == [1]


def test_get_is_private():
    cell = SharedCell([1, 2])
    snapshot = cell.get()
    snapshot.append(3)
    assert cell.read(list) == [1, 2]


# --- Test 3: Exclusive owner ---

def test_sole_owner_mutates_in_place():
    cell = SharedCell([1])
    before = cell.read(id)
    cell.mutate(lambda xs: xs.append(2))
    assert cell.read(id) == before
    assert not cell.shared


def test_fork_releases_old_storage():
    a = SharedCell([1])
    b = a.clone()
    b.mutate(lambda xs: xs.append(2))
    # a is now the only owner of the original storage
    assert not a.shared
    before = a.read(id)
    a.mutate(lambda xs: xs.append(3))
    assert a.read(id) == before


def test_dropped_clone_releases_storage():
    a = SharedCell([1])
    b = a.clone()
    assert a.shared
    del b
    assert not a.shared


# --- Test 4: Nested persistent values ---

def test_share_clones_persistent_values_only():
    inner = PersistentList([1])
    shared = share(inner)
    shared.push(2)
    assert list(inner) == [1]
    assert share(5) == 5
    assert share("s") == "s"


def test_nested_list_in_cell_stays_independent():
    outer = SharedCell([PersistentList([1])])
    copy_of = outer.get()
    copy_of[0].push(99)
    assert list(outer.read(lambda xs: xs[0])) == [1]


def test_nested_mutation_after_fork_stays_private():
    a = SharedCell([PersistentList([1])])
    b = a.clone()
    a.mutate(lambda xs: xs[0].push(2))
    assert list(a.read(lambda xs: xs[0])) == [1, 2]
    assert list(b.read(lambda xs: xs[0])) == [1]

    b.mutate(lambda xs: xs[0].push(3))
    assert list(a.read(lambda xs: xs[0])) == [1, 2]
    assert list(b.read(lambda xs: xs[0])) == [1, 3]
