"""Tests for the line store."""

import pytest

from modaltype.buffer import ByteBuffer
from modaltype.document import LineStore


def test_append_line_keeps_order():
    store = LineStore()
    store.append_line(b"one")
    store.append_line(b"two")
    store.append_line(b"")
    assert store.to_bytes_list() == [b"one", b"two", b""]
    assert len(store) == 3


def test_insert_line_shifts_following_lines_down():
    store = LineStore([b"a", b"b", b"c"])
    line = store.insert_line_at(1)
    assert isinstance(line, ByteBuffer)
    assert store.to_bytes_list() == [b"a", b"", b"b", b"c"]


def test_insert_line_at_end_and_start():
    store = LineStore([b"a"])
    store.insert_line_at(1, b"z")
    store.insert_line_at(0, b"0")
    assert store.to_bytes_list() == [b"0", b"a", b"z"]


def test_delete_line_shifts_following_lines_up():
    store = LineStore([b"a", b"b", b"c"])
    removed = store.delete_line_at(1)
    assert removed == b"b"
    assert store.to_bytes_list() == [b"a", b"c"]


def test_insert_then_delete_same_index_restores_contents():
    original = [b"first", b"second", b"third"]
    for index in range(len(original) + 1):
        store = LineStore(original)
        store.insert_line_at(index)
        assert len(store) == len(original) + 1
        store.delete_line_at(index)
        assert store.to_bytes_list() == original
        assert len(store) == len(original)


def test_delete_last_line_leaves_empty_store():
    store = LineStore([b"only"])
    store.delete_line_at(0)
    assert len(store) == 0
    assert store.to_bytes_list() == []


def test_invalid_indices_raise():
    store = LineStore([b"a"])
    with pytest.raises(IndexError):
        store.insert_line_at(2)
    with pytest.raises(IndexError):
        store.insert_line_at(-1)
    with pytest.raises(IndexError):
        store.delete_line_at(1)
    with pytest.raises(IndexError):
        LineStore().delete_line_at(0)


def test_lines_are_owned_by_the_store():
    source = bytearray(b"text")
    store = LineStore([source])
    source[0:1] = b"n"
    assert store[0] == b"text"
    store[0].append(b"!")
    assert store.line_length(0) == 5
