"""Tests for the growable byte buffer."""

import pytest

from modaltype.buffer import ByteBuffer, BufferGrowthError


class ExplodingBytes:
    """Iterable that runs out of memory halfway through."""

    def __len__(self):
        return 10

    def __iter__(self):
        yield 1
        yield 2
        raise MemoryError


def test_append_grows_by_exact_length():
    buf = ByteBuffer(b"ab")
    buf.append(b"cde")
    assert len(buf) == 5
    assert bytes(buf) == b"abcde"


def test_append_empty_is_noop():
    buf = ByteBuffer(b"ab")
    buf.append(b"")
    assert buf == b"ab"


def test_remove_last_on_empty_buffer_is_noop():
    buf = ByteBuffer()
    buf.remove_last()
    assert len(buf) == 0


def test_remove_last_drops_one_byte():
    buf = ByteBuffer(b"abc")
    buf.remove_last()
    assert buf == b"ab"
    buf.remove_last()
    buf.remove_last()
    buf.remove_last()
    assert buf == b""


def test_reset_then_append_equals_fresh_buffer():
    for content in (b"", b"x", b"hello world", bytes(range(256))):
        buf = ByteBuffer(b"old contents")
        buf.reset()
        buf.append(content)
        assert buf == ByteBuffer(content)
        assert len(buf) == len(content)


def test_reset_keeps_buffer_usable():
    buf = ByteBuffer(b"abc")
    buf.reset()
    buf.reset()
    assert len(buf) == 0
    buf.append(b"z")
    assert buf == b"z"


def test_insert_delete_truncate():
    buf = ByteBuffer(b"ad")
    buf.insert(1, b"bc")
    assert buf == b"abcd"
    buf.delete(0)
    assert buf == b"bcd"
    tail = buf.truncate(1)
    assert tail == b"cd"
    assert buf == b"b"


def test_out_of_range_indices_raise():
    buf = ByteBuffer(b"ab")
    with pytest.raises(IndexError):
        buf.insert(3, b"x")
    with pytest.raises(IndexError):
        buf.delete(2)
    with pytest.raises(IndexError):
        buf.truncate(-1)
    assert buf == b"ab"


def test_growth_failure_is_reported_and_leaves_buffer_unchanged():
    buf = ByteBuffer(b"keep")
    with pytest.raises(BufferGrowthError):
        buf.append(ExplodingBytes())
    assert buf == b"keep"
    assert len(buf) == 4


def test_growth_failure_is_a_memory_error():
    assert issubclass(BufferGrowthError, MemoryError)


def test_release_makes_buffer_unusable():
    buf = ByteBuffer(b"abc")
    buf.release()
    assert buf.released
    with pytest.raises(ValueError):
        buf.append(b"x")
    with pytest.raises(ValueError):
        len(buf)


def test_equality():
    assert ByteBuffer(b"a") == ByteBuffer(b"a")
    assert ByteBuffer(b"a") != ByteBuffer(b"b")
    assert ByteBuffer(b"a") == bytearray(b"a")
    assert ByteBuffer(b"a") != "a"
