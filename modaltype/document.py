from dataclasses import dataclass
from typing import Iterable, Iterator

from .buffer import ByteBuffer, BytesLike


@dataclass
class Cursor:
    row: int = 0
    column: int = 0
    # Sticky column remembered across vertical moves
    preferred_column: int = 0

    def move_to(self, row: int, column: int) -> None:
        """Place the cursor and remember the column for vertical moves."""
        self.row = row
        self.column = column
        self.preferred_column = column


class LineStore:
    """Ordered sequence of lines, each an exclusively owned ByteBuffer."""

    def __init__(self, lines: Iterable[BytesLike] = ()):
        self._lines: list[ByteBuffer] = [ByteBuffer(line) for line in lines]

    def insert_line_at(self, index: int, data: BytesLike = b'') -> ByteBuffer:
        """Insert a new line before ``index``; lines at >= index shift down."""
        if not 0 <= index <= len(self._lines):
            raise IndexError(f"cannot insert line at {index} (have {len(self._lines)})")
        line = ByteBuffer(data)
        self._lines.insert(index, line)
        return line

    def delete_line_at(self, index: int) -> ByteBuffer:
        """Remove the line at ``index``; later lines shift up."""
        if not 0 <= index < len(self._lines):
            raise IndexError(f"cannot delete line {index} (have {len(self._lines)})")
        return self._lines.pop(index)

    def append_line(self, data: BytesLike) -> ByteBuffer:
        return self.insert_line_at(len(self._lines), data)

    def line_length(self, index: int) -> int:
        return len(self._lines[index])

    def to_bytes_list(self) -> list[bytes]:
        return [bytes(line) for line in self._lines]

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, index: int) -> ByteBuffer:
        return self._lines[index]

    def __iter__(self) -> Iterator[ByteBuffer]:
        return iter(self._lines)

    def __repr__(self):
        return f'LineStore({self.to_bytes_list()!r})'
