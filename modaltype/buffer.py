"""Growable byte buffer used for document lines and screen frames."""

from typing import Optional, Union

BytesLike = Union[bytes, bytearray, memoryview]


class BufferGrowthError(MemoryError):
    """Raised when a buffer cannot grow. The buffer is left unchanged."""


class ByteBuffer:
    """A resizable byte sequence.

    Lines of the document and whole terminal frames are both built from
    this one primitive. Growth only happens through ``append`` and
    ``insert``; shrinking removes single bytes, truncates a tail or resets
    to empty.
    """

    __slots__ = ('_data',)

    def __init__(self, initial: BytesLike = b''):
        self._data: Optional[bytearray] = bytearray(initial)

    @property
    def data(self) -> bytearray:
        if self._data is None:
            raise ValueError("buffer has been released")
        return self._data

    def append(self, data: BytesLike) -> None:
        """Append ``data`` to the end of the buffer.

        Raises:
            BufferGrowthError: if the storage could not grow.
        """
        buf = self.data
        size = len(buf)
        try:
            buf.extend(data)
        except MemoryError as e:
            del buf[size:]
            raise BufferGrowthError(f"cannot grow buffer by {len(data)} bytes") from e

    def insert(self, index: int, data: BytesLike) -> None:
        """Insert ``data`` before byte ``index`` (0 <= index <= len)."""
        buf = self.data
        if not 0 <= index <= len(buf):
            raise IndexError(f"insert index {index} out of range")
        try:
            buf[index:index] = data
        except MemoryError as e:
            raise BufferGrowthError(f"cannot grow buffer by {len(data)} bytes") from e

    def remove_last(self) -> None:
        """Drop the last byte; no-op on an empty buffer."""
        buf = self.data
        if buf:
            del buf[-1]

    def delete(self, index: int) -> None:
        """Remove the byte at ``index``."""
        buf = self.data
        if not 0 <= index < len(buf):
            raise IndexError(f"delete index {index} out of range")
        del buf[index]

    def truncate(self, index: int) -> bytes:
        """Cut the buffer at ``index`` and return the removed tail."""
        buf = self.data
        if not 0 <= index <= len(buf):
            raise IndexError(f"truncate index {index} out of range")
        tail = bytes(buf[index:])
        del buf[index:]
        return tail

    def reset(self) -> None:
        """Empty the buffer, keeping it usable."""
        self.data.clear()

    def release(self) -> None:
        """Drop the storage. The buffer must not be used afterwards."""
        self._data = None

    @property
    def released(self) -> bool:
        return self._data is None

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    def __eq__(self, other):
        if isinstance(other, ByteBuffer):
            return self.data == other.data
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.data == other
        return NotImplemented

    __hash__ = None  # mutable

    def __repr__(self):
        if self._data is None:
            return 'ByteBuffer(<released>)'
        return f'ByteBuffer({bytes(self._data)!r})'
